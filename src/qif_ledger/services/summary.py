"""Summaries of a read QIF document."""

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from qif_ledger.domain.document import QifDocument
from qif_ledger.domain.records import Account

UNNAMED_ACCOUNT = "(unnamed)"
UNCATEGORIZED = "(uncategorized)"


@dataclass
class AccountSummary:
    """Balance figures for one account."""

    name: str
    account_type: str
    transaction_count: int
    balance: Decimal
    statement_balance: Decimal | None = None

    @property
    def statement_difference(self) -> Decimal | None:
        """Statement balance minus the balance of the transactions read."""
        if self.statement_balance is None:
            return None
        return self.statement_balance - self.balance

    def to_dict(self) -> dict[str, Any]:
        difference = self.statement_difference
        return {
            "name": self.name,
            "account_type": self.account_type,
            "transaction_count": self.transaction_count,
            "balance": str(self.balance),
            "statement_balance": (
                str(self.statement_balance)
                if self.statement_balance is not None
                else None
            ),
            "statement_difference": str(difference) if difference is not None else None,
        }


@dataclass
class DocumentSummary:
    accounts: list[AccountSummary] = field(default_factory=list)
    category_count: int = 0
    tag_count: int = 0
    balance: Decimal = Decimal("0")
    category_totals: dict[str, Decimal] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "accounts": [account.to_dict() for account in self.accounts],
            "category_count": self.category_count,
            "tag_count": self.tag_count,
            "balance": str(self.balance),
            "category_totals": {
                name: str(total) for name, total in self.category_totals.items()
            },
        }


def summarize_account(account: Account) -> AccountSummary:
    return AccountSummary(
        name=account.name or UNNAMED_ACCOUNT,
        account_type=account.account_type,
        transaction_count=len(account.transactions),
        balance=account.balance,
        statement_balance=account.statement_balance,
    )


def category_totals(document: QifDocument) -> dict[str, Decimal]:
    """Total amount per category label across all accounts.

    Split transactions contribute each split to its own category; other
    transactions contribute their amount to their category.
    """
    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for account in document.accounts:
        for txn in account.transactions:
            if txn.splits:
                for split in txn.splits:
                    totals[split.category or UNCATEGORIZED] += split.amount
            else:
                totals[txn.category or UNCATEGORIZED] += txn.amount
    return dict(sorted(totals.items()))


def summarize_document(document: QifDocument) -> DocumentSummary:
    """Build the account, category and balance summary for a document."""
    return DocumentSummary(
        accounts=[summarize_account(account) for account in document.accounts],
        category_count=len(document.categories),
        tag_count=len(document.tags),
        balance=document.balance,
        category_totals=category_totals(document),
    )
