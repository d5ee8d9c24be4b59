"""Parsers for Quicken Interchange Format (QIF) files."""

from qif_ledger.parsers.line_buffer import LineBuffer
from qif_ledger.parsers.qif_reader import QifReader, ReaderState, load_qif, read_qif
from qif_ledger.parsers.tokens import QifToken, SectionKind, tokenize_line

__all__ = [
    "LineBuffer",
    "QifReader",
    "QifToken",
    "ReaderState",
    "SectionKind",
    "load_qif",
    "read_qif",
    "tokenize_line",
]
