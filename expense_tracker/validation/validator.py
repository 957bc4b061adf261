"""
Input Validation

Raw CLI values (strings) are checked here before any operation touches
storage. Two kinds of helpers live in this module:

- Predicates (`is_numeric`, `is_valid_date`) answer yes/no.
- Parsers (`parse_amount`, `parse_date`, ...) return the typed value or
  raise `ExpenseValidationError` with a message fit for the user.

IMPORTANT: Validation NEVER silently fixes issues.
"1.5" is not quietly turned into id 1, and "2023-02-30" is not rolled
over into March.
"""

import math
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INTEGER_PATTERN = re.compile(r"^[+]?\d+$")


class ExpenseValidationError(ValueError):
    """User input failed validation. Nothing was written."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def is_numeric(value: Any) -> bool:
    """True iff the value parses as a number that fits in a JSON file."""
    number = _to_decimal(value)
    return (
        number is not None
        and number.is_finite()
        and math.isfinite(float(number))
    )


def is_valid_date(text: Any) -> bool:
    """
    True iff text is YYYY-MM-DD and names a real calendar day.

    The format check runs first so that lenient parsers never get to
    accept things like '2023-2-3'.
    """
    if not isinstance(text, str) or not ISO_DATE_PATTERN.match(text):
        return False
    year, month, day = (int(part) for part in text.split("-"))
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def parse_amount(value: Any) -> Decimal:
    if not is_numeric(value):
        raise ExpenseValidationError(
            "amount", "Please provide a valid numeric amount"
        )
    return _to_decimal(value)


def parse_date(text: Any) -> date:
    if not is_valid_date(text):
        raise ExpenseValidationError(
            "date", "Please provide a valid date in YYYY-MM-DD format"
        )
    return date.fromisoformat(text)


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def parse_id(value: Any) -> int:
    expense_id = _parse_int(value)
    if expense_id is None or expense_id < 1:
        raise ExpenseValidationError("id", "Please provide a valid numeric ID")
    return expense_id


def parse_month(value: Any) -> int:
    """Accepts '2' as well as '02'."""
    month = _parse_int(value)
    if month is None or not 1 <= month <= 12:
        raise ExpenseValidationError(
            "month", "Please provide a valid month (01-12)"
        )
    return month


def parse_year(value: Any) -> int:
    year = _parse_int(value)
    if year is None or not 1 <= year <= 9999:
        raise ExpenseValidationError(
            "year", "Please provide a valid year (YYYY)"
        )
    return year
