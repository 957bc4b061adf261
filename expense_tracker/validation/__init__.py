"""Input validation package."""

from expense_tracker.validation.validator import (
    ExpenseValidationError,
    is_numeric,
    is_valid_date,
    parse_amount,
    parse_date,
    parse_id,
    parse_month,
    parse_year,
)

__all__ = [
    "ExpenseValidationError",
    "is_numeric",
    "is_valid_date",
    "parse_amount",
    "parse_date",
    "parse_id",
    "parse_month",
    "parse_year",
]
