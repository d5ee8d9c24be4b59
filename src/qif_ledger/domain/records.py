"""Records assembled from QIF sections.

Each record type is independent. Accounts own their transactions and
transactions own their splits; nothing holds a reference back to its owner.
"""

import datetime
from dataclasses import dataclass, field
from decimal import Decimal


def _format_amount(amount: Decimal) -> str:
    return f"${amount}"


@dataclass
class Split:
    amount: Decimal = Decimal("0")
    category: str = ""
    memo: str = ""

    def __str__(self) -> str:
        return f"{self.category}, {_format_amount(self.amount)}"


@dataclass
class Transaction:
    date: datetime.date | None = None
    amount: Decimal = Decimal("0")
    cleared: str = " "
    number: str = ""
    payee: str = ""
    memo: str = ""
    address: str = ""
    message: str = ""
    category: str = ""
    security_name: str | None = None
    quantity: Decimal | None = None
    price: Decimal | None = None
    unknown: Decimal | None = None
    splits: list[Split] = field(default_factory=list)

    @property
    def balance(self) -> Decimal:
        """Sum of the split amounts, or the amount when there are no splits."""
        if not self.splits:
            return self.amount
        return sum((split.amount for split in self.splits), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        return self.balance == self.amount

    def __str__(self) -> str:
        when = self.date.strftime("%m/%d/%y") if self.date else "--/--/--"
        return f"{when} {self.payee}, {_format_amount(self.amount)}"


@dataclass
class Account:
    name: str = ""
    account_type: str = ""
    description: str = ""
    credit_limit: Decimal | None = None
    statement_balance: Decimal | None = None
    balance_date: datetime.date | None = None
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def balance(self) -> Decimal:
        return sum((txn.amount for txn in self.transactions), Decimal("0"))

    def __str__(self) -> str:
        return f"{self.name}: {self.balance}"


@dataclass
class Category:
    """A category list entry.

    Quicken treats a category as an expense category unless it is marked as
    income, so ``is_income`` defaults to False.
    """

    name: str = ""
    description: str = ""
    is_income: bool = False
    tax_related: bool = False
    tax_schedule: str = ""
    budget_amount: Decimal | None = None

    @property
    def is_expense(self) -> bool:
        return not self.is_income

    def __str__(self) -> str:
        return self.name


@dataclass
class Tag:
    name: str = ""

    def __str__(self) -> str:
        return self.name
