"""Exception hierarchy for the QIF reader.

All reader errors inherit from QifError. Structural problems, unsupported
sections, value conversion failures, split invariant violations and
cancellation each have their own class so callers can tell them apart while
still catching everything with a single base class.
"""

from typing import Any


class QifError(Exception):
    """Base exception for all QIF reader errors.

    Carries the 1-based line number and raw text of the offending line when
    the error is tied to a position in the input.
    """

    error_code: str = "QIF_ERROR"

    def __init__(
        self,
        message: str,
        *,
        line_number: int | None = None,
        line_text: str | None = None,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.line_text = line_text
        if error_code:
            self.error_code = error_code
        self.context = context or {}
        if line_number is not None:
            self.context.setdefault("line_number", line_number)
        if line_text is not None:
            self.context.setdefault("line_text", line_text)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured output."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Structural Errors
# =============================================================================


class QifFormatError(QifError):
    """Base exception for malformed QIF input."""

    error_code = "QIF_FORMAT_ERROR"


class InvalidTokenError(QifFormatError):
    """Raised when a line is not valid at its position in the input."""

    error_code = "INVALID_TOKEN"

    def __init__(self, line_text: str, line_number: int) -> None:
        super().__init__(
            f"Invalid token '{line_text}' at line {line_number}.",
            line_number=line_number,
            line_text=line_text,
        )


# =============================================================================
# Unsupported Features
# =============================================================================


class UnsupportedSectionError(QifError):
    """Raised for recognized section kinds the reader does not implement."""

    error_code = "UNSUPPORTED_SECTION"

    def __init__(self, line_text: str, line_number: int) -> None:
        super().__init__(
            f"Unsupported token '{line_text}' at line {line_number}.",
            line_number=line_number,
            line_text=line_text,
        )


# =============================================================================
# Value Conversion Errors
# =============================================================================


class QifValueError(QifError):
    """Raised when a field value cannot be converted to its expected type."""

    error_code = "INVALID_VALUE"

    def __init__(
        self, value: str, expected: str, line_number: int, line_text: str
    ) -> None:
        super().__init__(
            f"Invalid {expected} '{value}' at line {line_number}.",
            line_number=line_number,
            line_text=line_text,
            context={"value": value, "expected": expected},
        )
        self.value = value
        self.expected = expected


# =============================================================================
# Invariant Violations
# =============================================================================


class SplitTotalMismatchError(QifError):
    """Raised when a transaction's splits do not add up to its amount."""

    error_code = "SPLIT_TOTAL_MISMATCH"

    def __init__(self, amount: str, split_total: str, line_number: int) -> None:
        super().__init__(
            f"Split total does not match transaction amount at line {line_number}.",
            line_number=line_number,
            context={"amount": amount, "split_total": split_total},
        )


# =============================================================================
# Cancellation
# =============================================================================


class ParseCancelledError(QifError):
    """Raised when the caller requests cancellation while reading."""

    error_code = "PARSE_CANCELLED"

    def __init__(self, line_number: int) -> None:
        super().__init__(
            f"Reading cancelled before line {line_number + 1}.",
            line_number=line_number,
        )
