from dataclasses import dataclass, field
from decimal import Decimal

from qif_ledger.domain.records import Account, Category, Tag


@dataclass
class QifDocument:
    """Everything read from one QIF file, in input order."""

    accounts: list[Account] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)

    @property
    def balance(self) -> Decimal:
        """Combined balance of all accounts."""
        return sum((account.balance for account in self.accounts), Decimal("0"))

    @property
    def transaction_count(self) -> int:
        return sum(len(account.transactions) for account in self.accounts)

    def find_account(self, name: str) -> Account | None:
        """Return the first account with the given name (case-insensitive)."""
        wanted = name.casefold()
        for account in self.accounts:
            if account.name.casefold() == wanted:
                return account
        return None
