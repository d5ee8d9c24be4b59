from qif_ledger.domain.document import QifDocument
from qif_ledger.domain.records import Account, Category, Split, Tag, Transaction
from qif_ledger.parsers.qif_reader import QifReader, load_qif, read_qif

__all__ = [
    "Account",
    "Category",
    "QifDocument",
    "QifReader",
    "Split",
    "Tag",
    "Transaction",
    "load_qif",
    "read_qif",
]

__version__ = "0.1.0"
