"""
Command-line interface for the Expense Tracker.

Usage:
    expense-tracker add --description "Coffee" --amount 3.5 [--date 2024-02-01]
    expense-tracker list [--id 3] [--month 02] [--year 2024]
    expense-tracker summary [--id 3] [--month 02] [--year 2024]
    expense-tracker delete --id 3

Exit codes: 0 on success, 1 for bad input or unknown IDs, 2 when the
storage file can't be read or written.
"""

import argparse
import sys
from decimal import Decimal
from typing import Optional, Sequence

from pydantic import ValidationError

from expense_tracker import __version__
from expense_tracker.audit import configure_logging
from expense_tracker.config import get_settings
from expense_tracker.models.expense import Expense, ExpenseSummary
from expense_tracker.operations import ExpenseTracker, build_filter, create_tracker
from expense_tracker.services.storage import NotFoundError, StorageError
from expense_tracker.validation import ExpenseValidationError


EXIT_OK = 0
EXIT_USER_ERROR = 1
EXIT_STORAGE_ERROR = 2

DESCRIPTION_WIDTH = 20


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expense-tracker",
        description="A simple CLI for tracking expenses.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--file",
        dest="storage_path",
        help="JSON file to use instead of the configured storage path",
    )

    commands = parser.add_subparsers(dest="command", metavar="command")

    add = commands.add_parser("add", help="Add a new expense")
    add.add_argument("-d", "--description", required=True, help="Description of the expense")
    add.add_argument("-a", "--amount", required=True, help="Amount of the expense")
    add.add_argument("--date", help="Date of the expense (YYYY-MM-DD, default: today)")

    for name, text in (("list", "List expenses"), ("summary", "Total of expenses")):
        query = commands.add_parser(name, help=text)
        query.add_argument("-i", "--id", dest="expense_id", metavar="ID", help="Only the expense with this ID")
        query.add_argument("-m", "--month", help="Only expenses in this month (MM)")
        query.add_argument("-y", "--year", help="Only expenses in this year (YYYY)")

    delete = commands.add_parser("delete", help="Delete an expense")
    delete.add_argument("-i", "--id", dest="expense_id", metavar="ID", required=True, help="ID of the expense to delete")

    return parser


def format_amount(amount: Decimal, currency: str = "") -> str:
    """Two decimal places, more when the amount itself has more."""
    places = max(2, -amount.normalize().as_tuple().exponent)
    return f"{currency}{amount:,.{places}f}"


def format_table(expenses: Sequence[Expense], currency: str = "") -> str:
    """Render expenses as a fixed-width table, dates without time."""
    lines = [f"# {'ID':<4} {'Date':<10}   {'Description':<{DESCRIPTION_WIDTH}}  Amount"]
    for expense in expenses:
        lines.append(
            f"# {expense.id:<4} {expense.date.isoformat():<10}   "
            f"{expense.description:<{DESCRIPTION_WIDTH}}  "
            f"{format_amount(expense.amount, currency)}"
        )
    return "\n".join(lines)


def format_summary(summary: ExpenseSummary, currency: str = "") -> str:
    label = summary.filters.period_label()
    prefix = f"Total expenses for {label}" if label else "Total expenses"
    return f"{prefix}: {format_amount(summary.total, currency)}"


def _run_add(tracker: ExpenseTracker, args: argparse.Namespace, currency: str) -> None:
    expense = tracker.add(args.description, args.amount, args.date)
    print(f"Expense added successfully (ID: {expense.id})")


def _run_list(tracker: ExpenseTracker, args: argparse.Namespace, currency: str) -> None:
    expenses = tracker.list_expenses(args.expense_id, args.month, args.year)
    if not expenses:
        filters = build_filter(args.expense_id, args.month, args.year)
        if filters.is_empty:
            print("No expenses recorded yet")
        else:
            print(f"No expenses found for {filters.describe()}")
        return
    print(format_table(expenses, currency))


def _run_summary(tracker: ExpenseTracker, args: argparse.Namespace, currency: str) -> None:
    summary = tracker.summarize(args.expense_id, args.month, args.year)
    if not summary.data_found and not summary.filters.is_empty:
        print(f"No expenses found for {summary.filters.describe()}")
        return
    print(format_summary(summary, currency))


def _run_delete(tracker: ExpenseTracker, args: argparse.Namespace, currency: str) -> None:
    expense = tracker.delete(args.expense_id)
    print(f"Expense deleted successfully (ID: {expense.id})")


_COMMANDS = {
    "add": _run_add,
    "list": _run_list,
    "summary": _run_summary,
    "delete": _run_delete,
}


def _fail(message: str, code: int) -> int:
    print(message, file=sys.stderr)
    return code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Args:
        argv: Command-line arguments (None = use sys.argv)

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        app_settings = get_settings().app
        configure_logging(app_settings.log_level)
        tracker = create_tracker(args.storage_path)
    except ValidationError as e:
        return _fail(f"Configuration error: {e}", EXIT_STORAGE_ERROR)

    try:
        _COMMANDS[args.command](tracker, args, app_settings.currency_symbol)
    except ExpenseValidationError as e:
        return _fail(e.message, EXIT_USER_ERROR)
    except NotFoundError as e:
        return _fail(str(e), EXIT_USER_ERROR)
    except StorageError as e:
        return _fail(f"Storage error: {e}", EXIT_STORAGE_ERROR)

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
