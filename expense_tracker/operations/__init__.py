"""Expense operations package."""

from expense_tracker.operations.tracker import (
    ExpenseTracker,
    build_filter,
    create_tracker,
    next_expense_id,
)

__all__ = ["ExpenseTracker", "build_filter", "create_tracker", "next_expense_id"]
