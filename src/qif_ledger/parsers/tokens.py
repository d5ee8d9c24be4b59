"""Line tokens, field codes and section headers of the QIF format."""

from dataclasses import dataclass
from enum import Enum

HEADER_MARKER = "!"
END_OF_ENTRY = "^"


@dataclass(frozen=True)
class QifToken:
    """One line of QIF input.

    Attributes:
        code: Leading field code character ("" at end of input).
        value: Remainder of the line with surrounding whitespace removed.
        text: The raw line as read, without its line terminator.
        end_of_record: True for header lines and at end of input.
        end_of_input: True when there are no more lines.
    """

    code: str = ""
    value: str = ""
    text: str = ""
    end_of_record: bool = False
    end_of_input: bool = False

    @property
    def is_header(self) -> bool:
        return self.code == HEADER_MARKER

    def __str__(self) -> str:
        return self.text


END_OF_INPUT = QifToken(end_of_record=True, end_of_input=True)


def tokenize_line(line: str | None) -> QifToken:
    """Convert a raw line into a token.

    A missing or empty line means the end of the input.
    """
    if line is None:
        return END_OF_INPUT

    text = line.rstrip("\r\n")
    if not text:
        return END_OF_INPUT

    code = text[0]
    return QifToken(
        code=code,
        value=text[1:].strip(),
        text=text,
        end_of_record=code == HEADER_MARKER,
    )


class AccountField(str, Enum):
    NAME = "N"
    TYPE = "T"
    DESCRIPTION = "D"
    CREDIT_LIMIT = "L"
    BALANCE_DATE = "/"
    STATEMENT_BALANCE = "$"
    END_OF_ENTRY = "^"


class CategoryField(str, Enum):
    NAME = "N"
    DESCRIPTION = "D"
    TAX_RELATED = "T"
    INCOME = "I"
    EXPENSE = "E"
    BUDGET_AMOUNT = "B"
    TAX_SCHEDULE = "R"
    END_OF_ENTRY = "^"


class TagField(str, Enum):
    NAME = "N"
    END_OF_ENTRY = "^"


class TransactionField(str, Enum):
    DATE = "D"
    UNKNOWN = "U"
    AMOUNT = "T"
    CLEARED = "C"
    NUMBER = "N"
    PAYEE = "P"
    MEMO = "M"
    ADDRESS = "A"
    CATEGORY = "L"
    SPLIT_CATEGORY = "S"
    SPLIT_MEMO = "E"
    SECURITY_NAME = "Y"
    QUANTITY = "Q"
    PRICE = "I"
    SPLIT_AMOUNT = "$"
    END_OF_ENTRY = "^"


class SectionKind(str, Enum):
    """What a header line introduces."""

    ACCOUNT = "account"
    CATEGORY = "category"
    TAG = "tag"
    TRANSACTION = "transaction"
    IGNORED = "ignored"
    UNSUPPORTED = "unsupported"


# Header values are matched upper-cased
SECTION_HEADERS: dict[str, SectionKind] = {
    "ACCOUNT": SectionKind.ACCOUNT,
    "TYPE:CAT": SectionKind.CATEGORY,
    "TYPE:TAG": SectionKind.TAG,
    "TYPE:BANK": SectionKind.TRANSACTION,
    "TYPE:CASH": SectionKind.TRANSACTION,
    "TYPE:CCARD": SectionKind.TRANSACTION,
    "TYPE:INVST": SectionKind.TRANSACTION,
    "TYPE:OTH A": SectionKind.TRANSACTION,
    "TYPE:OTH L": SectionKind.TRANSACTION,
    "OPTION:ALLXFR": SectionKind.IGNORED,
    "OPTION:AUTOSWITCH": SectionKind.IGNORED,
    "CLEAR:AUTOSWITCH": SectionKind.IGNORED,
    "TYPE:CLASS": SectionKind.UNSUPPORTED,
    "TYPE:MEMORIZED": SectionKind.UNSUPPORTED,
}

GENERIC_TYPE_PREFIX = "TYPE:"


def classify_header(value: str) -> SectionKind | None:
    """Return the section kind a header value introduces, or None if unknown.

    Any ``Type:`` header not listed explicitly is read as a transaction list.
    """
    key = value.upper()
    kind = SECTION_HEADERS.get(key)
    if kind is None and key.startswith(GENERIC_TYPE_PREFIX):
        return SectionKind.TRANSACTION
    return kind
