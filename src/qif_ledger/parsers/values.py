"""Strict conversion of QIF field values.

Unlike the statement parsers that skip rows they cannot read, a QIF value
that does not convert is fatal: every helper raises QifValueError naming
the line instead of returning a default.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from qif_ledger.exceptions import QifValueError
from qif_ledger.parsers.tokens import QifToken

# Quicken writes US month/day order; the year may have 2 or 4 digits
DATE_FORMATS = [
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%m-%d-%y",
]

# A year written after an apostrophe is in the 2000s
APOSTROPHE_CENTURY = 2000

_SHORT_YEAR = re.compile(r"([/-])(\d)$")


def parse_decimal(token: QifToken, line_number: int) -> Decimal:
    """Parse a decimal amount, allowing thousands separators.

    Raises:
        QifValueError: If the value is not a finite number.
    """
    cleaned = token.value.replace(",", "").replace(" ", "")
    try:
        result = Decimal(cleaned)
    except InvalidOperation:
        raise QifValueError(token.value, "number", line_number, token.text) from None

    if not result.is_finite():
        raise QifValueError(token.value, "number", line_number, token.text)
    return result


def parse_date(token: QifToken, line_number: int) -> date:
    """Parse a date value such as ``12/31/2024``, ``1/ 5/24`` or ``2024-12-31``.

    Raises:
        QifValueError: If no supported format matches.
    """
    return _parse_date_text(token.value, token, line_number)


def parse_transaction_date(token: QifToken, line_number: int) -> date:
    """Parse a transaction date, where ``'`` may separate the year.

    Quicken writes years from 2000 on as ``1/ 5'24``, padding a single-digit
    year with a space (``1/ 5' 4``). One or two digits after the apostrophe
    are read as a year in the 2000s.
    """
    month_day, apostrophe, year = token.value.partition("'")
    if not apostrophe:
        return _parse_date_text(token.value, token, line_number)

    year = year.strip()
    if year.isdigit() and len(year) <= 2:
        year = str(APOSTROPHE_CENTURY + int(year))
    return _parse_date_text(f"{month_day}/{year}", token, line_number)


def _parse_date_text(value: str, token: QifToken, line_number: int) -> date:
    # Quicken pads single-digit months, days and years with spaces
    cleaned = _SHORT_YEAR.sub(r"\g<1>0\g<2>", value.replace(" ", ""))
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    raise QifValueError(token.value, "date", line_number, token.text)


def parse_cleared(token: QifToken, line_number: int) -> str:
    """Return the cleared status character (first character of the value).

    Raises:
        QifValueError: If the value is empty.
    """
    if not token.value:
        raise QifValueError(token.value, "cleared status", line_number, token.text)
    return token.value[0]
