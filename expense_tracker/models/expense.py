"""
Core Data Models for Expense Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Be serializable to the JSON storage file
3. Keep filter and summary semantics in one place

DESIGN DECISION: Amounts are Decimal in memory and JSON numbers on disk.
Summing Decimals keeps totals like 0.10 + 0.20 exact. An amount is held at
the precision a JSON number reads back with (a double), so the record
returned by add is the record that lands in the file.
"""

import calendar
import datetime as dt
import math
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


DEFAULT_DESCRIPTION = "No description"


# =============================================================================
# EXPENSE RECORD
# =============================================================================

class Expense(BaseModel):
    """
    A single expense entry.

    Ids are assigned by the tracker, never by the caller.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: int = Field(
        ...,
        gt=0,
        description="Unique identifier within the collection"
    )
    date: dt.date = Field(
        default_factory=dt.date.today,
        description="Calendar date of the expense"
    )
    description: str = Field(
        default=DEFAULT_DESCRIPTION,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Amount spent; no sign constraint"
    )

    @field_validator("date", mode="before")
    @classmethod
    def truncate_timestamp(cls, v: Any) -> Any:
        """Older files store full ISO timestamps; keep only the date part."""
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @field_validator("description", mode="before")
    @classmethod
    def default_empty_description(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_DESCRIPTION
        return v

    @field_validator("amount")
    @classmethod
    def match_stored_precision(cls, v: Decimal) -> Decimal:
        """Round to the value the JSON file will hold; reject overflow."""
        number = float(v)
        if math.isinf(number):
            raise ValueError("amount is too large to store")
        if number.is_integer():
            return Decimal(int(number))
        return Decimal(repr(number))

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> Union[int, float]:
        """Write amounts as plain JSON numbers."""
        if amount == amount.to_integral_value():
            return int(amount)
        return float(amount)


# =============================================================================
# QUERY MODELS
# =============================================================================

class ExpenseFilter(BaseModel):
    """
    Filters for list and summary operations.

    DESIGN DECISION: Filters compose as an intersection.
    `--month 2 --year 2024` means February 2024, not "February of any
    year, then everything from 2024".
    """

    id: Optional[int] = Field(default=None, gt=0)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1, le=9999)

    @property
    def is_empty(self) -> bool:
        return self.id is None and self.month is None and self.year is None

    def matches(self, expense: Expense) -> bool:
        """Check whether an expense passes every filter that is set."""
        if self.id is not None and expense.id != self.id:
            return False
        if self.month is not None and expense.date.month != self.month:
            return False
        if self.year is not None and expense.date.year != self.year:
            return False
        return True

    def describe(self) -> str:
        """Short description of the filters, e.g. 'month 02 of 2024'."""
        parts = []
        if self.id is not None:
            parts.append(f"ID {self.id}")
        if self.month is not None and self.year is not None:
            parts.append(f"month {self.month:02d} of {self.year}")
        elif self.month is not None:
            parts.append(f"month {self.month:02d}")
        elif self.year is not None:
            parts.append(f"year {self.year}")
        return ", ".join(parts)

    def period_label(self) -> str:
        """Human label used in totals, e.g. 'February' or 'year 2024'.

        An id filter has no period, so it adds nothing to the label.
        """
        parts = []
        if self.month is not None and self.year is not None:
            parts.append(f"{calendar.month_name[self.month]} {self.year}")
        elif self.month is not None:
            parts.append(calendar.month_name[self.month])
        elif self.year is not None:
            parts.append(f"year {self.year}")
        return ", ".join(parts)


class ExpenseSummary(BaseModel):
    """Result of a summary operation."""

    total: Decimal = Field(
        default=Decimal("0"),
        description="Sum of all matching amounts"
    )
    count: int = Field(
        default=0,
        ge=0,
        description="Number of matching expenses"
    )
    filters: ExpenseFilter = Field(default_factory=ExpenseFilter)

    @property
    def data_found(self) -> bool:
        return self.count > 0
