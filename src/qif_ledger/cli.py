"""Command-line interface for QIF Ledger."""

import argparse
import json
import sys
from pathlib import Path

from qif_ledger import __version__
from qif_ledger.config import LogLevel, get_settings
from qif_ledger.domain.document import QifDocument
from qif_ledger.exceptions import QifError
from qif_ledger.logging_config import LogContext, configure_logging, get_logger
from qif_ledger.parsers.qif_reader import load_qif
from qif_ledger.services.summary import UNNAMED_ACCOUNT, summarize_document

logger = get_logger(__name__)


def _read_document(args: argparse.Namespace) -> QifDocument | None:
    """Read the QIF file named on the command line, printing any error."""
    file_path = Path(args.file)

    if not file_path.exists():
        print(f"Error: File not found: {file_path}")
        return None

    try:
        with LogContext(source=str(file_path), command=args.command):
            return load_qif(file_path)
    except QifError as e:
        logger.debug("qif_read_failed", **e.to_dict())
        print(f"Error: {e.message}")
        return None
    except UnicodeDecodeError as e:
        logger.debug("qif_decode_failed", encoding=e.encoding, position=e.start)
        print(f"Error: Cannot decode {file_path} as {e.encoding}: {e.reason}")
        return None


def cmd_summary(args: argparse.Namespace) -> int:
    """Show accounts, balances and list counts."""
    document = _read_document(args)
    if document is None:
        return 1

    summary = summarize_document(document)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return 0

    print(f"File: {args.file}")
    print(f"Accounts: {len(summary.accounts)}")
    for account in summary.accounts:
        kind = f" [{account.account_type}]" if account.account_type else ""
        line = (
            f"  - {account.name}{kind}: {account.transaction_count} transactions, "
            f"balance {account.balance}"
        )
        if account.statement_balance is not None:
            line += (
                f", statement {account.statement_balance}"
                f" (difference {account.statement_difference})"
            )
        print(line)
    print(f"Categories: {summary.category_count}")
    print(f"Tags: {summary.tag_count}")
    print(f"Balance: {summary.balance}")
    return 0


def cmd_transactions(args: argparse.Namespace) -> int:
    """List transactions and their splits per account."""
    document = _read_document(args)
    if document is None:
        return 1

    accounts = document.accounts
    if args.account:
        account = document.find_account(args.account)
        if account is None:
            print(f"Error: Account not found: {args.account}")
            return 1
        accounts = [account]

    for account in accounts:
        print(f"{account.name or UNNAMED_ACCOUNT}: {account.balance}")
        for txn in account.transactions:
            category = f" [{txn.category}]" if txn.category else ""
            print(f"  {txn}{category}")
            for split in txn.splits:
                print(f"    - {split}")

    return 0


def cmd_categories(args: argparse.Namespace) -> int:
    """List categories with their income/expense and tax flags."""
    document = _read_document(args)
    if document is None:
        return 1

    if not document.categories:
        print("No categories found")
        return 0

    for category in document.categories:
        kind = "income" if category.is_income else "expense"
        tax = f", tax: {category.tax_schedule or 'yes'}" if category.tax_related else ""
        budget = (
            f", budget {category.budget_amount}"
            if category.budget_amount is not None
            else ""
        )
        print(f"  - {category} ({kind}{tax}{budget})")

    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Show version information."""
    print(f"QIF Ledger v{__version__}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="qif",
        description="QIF Ledger - Read Quicken Interchange Format files",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # summary command
    summary_parser = subparsers.add_parser(
        "summary", help="Show accounts, balances and list counts"
    )
    summary_parser.add_argument("file", help="QIF file to read")
    summary_parser.add_argument(
        "--json", action="store_true", help="Print the summary as JSON"
    )
    summary_parser.set_defaults(func=cmd_summary)

    # transactions command
    transactions_parser = subparsers.add_parser(
        "transactions", help="List transactions per account"
    )
    transactions_parser.add_argument("file", help="QIF file to read")
    transactions_parser.add_argument(
        "--account", help="Only list transactions of this account"
    )
    transactions_parser.set_defaults(func=cmd_transactions)

    # categories command
    categories_parser = subparsers.add_parser(
        "categories", help="List the category list"
    )
    categories_parser.add_argument("file", help="QIF file to read")
    categories_parser.set_defaults(func=cmd_categories)

    # version command
    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    if args.verbose:
        settings = settings.model_copy(update={"log_level": LogLevel.DEBUG})
    configure_logging(settings)

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
