from qif_ledger.domain.document import QifDocument
from qif_ledger.domain.records import Account, Category, Split, Tag, Transaction

__all__ = [
    "Account",
    "Category",
    "QifDocument",
    "Split",
    "Tag",
    "Transaction",
]
