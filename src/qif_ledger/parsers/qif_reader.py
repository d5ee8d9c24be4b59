"""Reader for Quicken Interchange Format (QIF) files.

A QIF file is a sequence of sections. Each section starts with a header line
(``!Account``, ``!Type:Bank``, ``!Type:Cat`` ...) and holds records made of
one field per line, each record ending with a ``^`` line:

    !Account
    NSample Checking Account
    TBank
    ^
    !Type:Bank
    D1/15'24
    T-35.50
    PCoffee House
    ^

Transactions attach to the most recently declared account. Transactions
that appear before any account attach to an unnamed account created on
demand.

See https://en.wikipedia.org/wiki/Quicken_Interchange_Format for the format.
"""

import asyncio
import inspect
import os
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from qif_ledger.config import Settings, get_settings
from qif_ledger.domain.document import QifDocument
from qif_ledger.domain.records import Account, Category, Split, Tag, Transaction
from qif_ledger.exceptions import (
    InvalidTokenError,
    QifValueError,
    SplitTotalMismatchError,
    UnsupportedSectionError,
)
from qif_ledger.logging_config import get_logger
from qif_ledger.parsers.line_buffer import LineBuffer, LineSource
from qif_ledger.parsers.tokens import (
    AccountField,
    CategoryField,
    QifToken,
    SectionKind,
    TagField,
    TransactionField,
    classify_header,
)
from qif_ledger.parsers.values import (
    parse_cleared,
    parse_date,
    parse_decimal,
    parse_transaction_date,
)

logger = get_logger(__name__)

FieldT = TypeVar("FieldT", bound=Enum)

# Up to five address lines; a sixth line is the optional message
MAX_ADDRESS_LINES = 5


class ReaderState(str, Enum):
    AWAITING_HEADER = "awaiting_header"
    IN_ACCOUNT_SECTION = "in_account_section"
    IN_CATEGORY_SECTION = "in_category_section"
    IN_TAG_SECTION = "in_tag_section"
    IN_TRANSACTION_SECTION = "in_transaction_section"
    IGNORING = "ignoring"
    DONE = "done"
    FAILED = "failed"


class QifReader:
    """Reads a QIF file into a QifDocument.

    The reader opens and owns the file when given a path. When given an
    already-open text object it borrows it and leaves closing to the caller,
    unless ``owns_source=True`` is passed.

    Example:
        async with QifReader("export.qif") as reader:
            document = await reader.read_document()
    """

    def __init__(
        self,
        source: str | os.PathLike[str] | LineSource,
        *,
        owns_source: bool | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the reader.

        Args:
            source: Path to a QIF file, or an open text source.
            owns_source: Whether closing the reader closes the source.
                Defaults to True for paths and False for open sources.
            settings: Settings used for file decoding. If None, loads from
                environment.

        Raises:
            FileNotFoundError: If a path is given and the file does not exist.
        """
        if isinstance(source, (str, os.PathLike)):
            settings = settings or get_settings()
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"QIF file not found: {source}")
            self._source: Any = open(
                path,
                encoding=settings.file_encoding,
                errors=settings.encoding_errors,
            )
            self._owns_source = True if owns_source is None else owns_source
            self.name = str(path)
        else:
            self._source = source
            self._owns_source = bool(owns_source)
            self.name = getattr(source, "name", "<stream>")

        self._lines = LineBuffer(self._source)
        self._current_account: Account | None = None
        self._state = ReaderState.AWAITING_HEADER
        self._closed = False

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def line_number(self) -> int:
        """Number of the line most recently read."""
        return self._lines.line_number

    @property
    def owns_source(self) -> bool:
        return self._owns_source

    def close(self) -> None:
        """Close the source if this reader opened or was given ownership of it."""
        if self._closed:
            return
        self._closed = True
        if self._owns_source:
            self._source.close()

    async def aclose(self) -> None:
        """Close the source, awaiting the close of async file objects."""
        if self._closed:
            return
        self._closed = True
        if self._owns_source:
            result = self._source.close()
            if inspect.isawaitable(result):
                await result

    def __enter__(self) -> "QifReader":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    async def __aenter__(self) -> "QifReader":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def read_document(
        self, cancel_event: asyncio.Event | None = None
    ) -> QifDocument:
        """Read the whole file.

        Args:
            cancel_event: Optional event checked before every line is read.

        Returns:
            The document holding every account, category and tag read.

        Raises:
            InvalidTokenError: If a line is not valid where it appears.
            UnsupportedSectionError: For class and memorized transaction lists.
            QifValueError: If a number or date cannot be parsed.
            SplitTotalMismatchError: If splits do not add up to their transaction.
            ParseCancelledError: If cancel_event is set while reading.
        """
        self._lines.cancel_event = cancel_event
        document = QifDocument()

        try:
            token = await self._lines.next()
            while not token.end_of_input:
                await self._read_section(token, document)
                self._state = ReaderState.AWAITING_HEADER
                token = await self._lines.next()
        except BaseException:
            self._state = ReaderState.FAILED
            raise

        self._state = ReaderState.DONE
        logger.debug(
            "qif_document_read",
            source=self.name,
            lines=self._lines.line_number - 1,
            accounts=len(document.accounts),
            categories=len(document.categories),
            tags=len(document.tags),
            transactions=document.transaction_count,
        )
        return document

    async def _read_section(self, token: QifToken, document: QifDocument) -> None:
        if not token.is_header:
            raise InvalidTokenError(token.text, self._lines.line_number)

        kind = classify_header(token.value)
        if kind is None:
            raise InvalidTokenError(token.text, self._lines.line_number)
        if kind is SectionKind.UNSUPPORTED:
            raise UnsupportedSectionError(token.text, self._lines.line_number)

        logger.debug(
            "qif_section_started",
            section=kind.value,
            header=token.value,
            line_number=self._lines.line_number,
        )

        if kind is SectionKind.ACCOUNT:
            self._state = ReaderState.IN_ACCOUNT_SECTION
            await self._read_accounts(document)
        elif kind is SectionKind.CATEGORY:
            self._state = ReaderState.IN_CATEGORY_SECTION
            await self._read_categories(document)
        elif kind is SectionKind.TAG:
            self._state = ReaderState.IN_TAG_SECTION
            await self._read_tags(document)
        elif kind is SectionKind.TRANSACTION:
            self._state = ReaderState.IN_TRANSACTION_SECTION
            await self._read_transactions(document)
        else:
            self._state = ReaderState.IGNORING
            await self._skip_section()

    def _field(self, fields: type[FieldT], token: QifToken) -> FieldT:
        """Map a token's code onto the section's field codes."""
        try:
            return fields(token.code)
        except ValueError:
            raise InvalidTokenError(token.text, self._lines.line_number) from None

    async def _skip_section(self) -> None:
        token = await self._lines.next()
        while not token.end_of_record:
            token = await self._lines.next()
        self._lines.push(token)

    async def _read_accounts(self, document: QifDocument) -> None:
        account = Account()
        token = await self._lines.next()

        while not token.end_of_record:
            code = self._field(AccountField, token)
            line = self._lines.line_number

            if code is AccountField.NAME:
                account.name = token.value
            elif code is AccountField.TYPE:
                account.account_type = token.value
            elif code is AccountField.DESCRIPTION:
                account.description = token.value
            elif code is AccountField.CREDIT_LIMIT:
                account.credit_limit = parse_decimal(token, line)
            elif code is AccountField.BALANCE_DATE:
                account.balance_date = parse_date(token, line)
            elif code is AccountField.STATEMENT_BALANCE:
                account.statement_balance = parse_decimal(token, line)
            elif code is AccountField.END_OF_ENTRY:
                document.accounts.append(account)
                self._current_account = account
                account = Account()

            token = await self._lines.next()

        self._lines.push(token)

    async def _read_categories(self, document: QifDocument) -> None:
        category = Category()
        token = await self._lines.next()

        while not token.end_of_record:
            code = self._field(CategoryField, token)

            if code is CategoryField.NAME:
                category.name = token.value
            elif code is CategoryField.DESCRIPTION:
                category.description = token.value
            elif code is CategoryField.TAX_RELATED:
                category.tax_related = True
            elif code is CategoryField.INCOME:
                category.is_income = True
            elif code is CategoryField.EXPENSE:
                category.is_income = False
            elif code is CategoryField.BUDGET_AMOUNT:
                category.budget_amount = parse_decimal(token, self._lines.line_number)
            elif code is CategoryField.TAX_SCHEDULE:
                category.tax_schedule = token.value
            elif code is CategoryField.END_OF_ENTRY:
                document.categories.append(category)
                category = Category()

            token = await self._lines.next()

        self._lines.push(token)

    async def _read_tags(self, document: QifDocument) -> None:
        tag = Tag()
        token = await self._lines.next()

        while not token.end_of_record:
            code = self._field(TagField, token)

            if code is TagField.NAME:
                tag.name = token.value
            elif code is TagField.END_OF_ENTRY:
                document.tags.append(tag)
                tag = Tag()

            token = await self._lines.next()

        self._lines.push(token)

    async def _read_transactions(self, document: QifDocument) -> None:
        transaction = Transaction()
        split = Split()
        address_lines = 0
        token = await self._lines.next()

        while not token.end_of_record:
            code = self._field(TransactionField, token)
            line = self._lines.line_number

            if code is TransactionField.DATE:
                transaction.date = parse_transaction_date(token, line)
            elif code is TransactionField.UNKNOWN:
                transaction.unknown = parse_decimal(token, line)
            elif code is TransactionField.AMOUNT:
                transaction.amount = parse_decimal(token, line)
            elif code is TransactionField.CLEARED:
                transaction.cleared = parse_cleared(token, line)
            elif code is TransactionField.NUMBER:
                transaction.number = token.value
            elif code is TransactionField.PAYEE:
                transaction.payee = token.value
            elif code is TransactionField.MEMO:
                transaction.memo = token.value
            elif code is TransactionField.ADDRESS:
                address_lines += 1
                self._add_address_line(transaction, address_lines, token)
            elif code is TransactionField.CATEGORY:
                transaction.category = token.value
            elif code is TransactionField.SPLIT_CATEGORY:
                split.category = token.value
            elif code is TransactionField.SPLIT_MEMO:
                split.memo = token.value
            elif code is TransactionField.SECURITY_NAME:
                transaction.security_name = token.value
            elif code is TransactionField.QUANTITY:
                transaction.quantity = parse_decimal(token, line)
            elif code is TransactionField.PRICE:
                transaction.price = parse_decimal(token, line)
            elif code is TransactionField.SPLIT_AMOUNT:
                split.amount = parse_decimal(token, line)
                transaction.splits.append(split)
                split = Split()
            elif code is TransactionField.END_OF_ENTRY:
                if not transaction.is_balanced:
                    raise SplitTotalMismatchError(
                        str(transaction.amount), str(transaction.balance), line
                    )
                self._account_for_transactions(document).transactions.append(
                    transaction
                )
                transaction = Transaction()
                split = Split()
                address_lines = 0

            token = await self._lines.next()

        self._lines.push(token)

    def _add_address_line(
        self, transaction: Transaction, count: int, token: QifToken
    ) -> None:
        if count == 1:
            transaction.address = token.value
        elif count <= MAX_ADDRESS_LINES:
            transaction.address = f"{transaction.address}\n{token.value}"
        elif count == MAX_ADDRESS_LINES + 1:
            transaction.message = token.value
        else:
            raise QifValueError(
                token.value, "address line", self._lines.line_number, token.text
            )

    def _account_for_transactions(self, document: QifDocument) -> Account:
        if self._current_account is None:
            self._current_account = Account()
            document.accounts.append(self._current_account)
        return self._current_account


async def read_qif(
    source: str | os.PathLike[str] | LineSource,
    *,
    cancel_event: asyncio.Event | None = None,
    settings: Settings | None = None,
) -> QifDocument:
    """Read a QIF file or open text source into a document."""
    async with QifReader(source, settings=settings) as reader:
        return await reader.read_document(cancel_event=cancel_event)


def load_qif(
    source: str | os.PathLike[str] | LineSource,
    *,
    settings: Settings | None = None,
) -> QifDocument:
    """Synchronous wrapper around read_qif for scripts and the CLI."""
    return asyncio.run(read_qif(source, settings=settings))
