from qif_ledger.services.summary import (
    AccountSummary,
    DocumentSummary,
    category_totals,
    summarize_account,
    summarize_document,
)

__all__ = [
    "AccountSummary",
    "DocumentSummary",
    "category_totals",
    "summarize_account",
    "summarize_document",
]
