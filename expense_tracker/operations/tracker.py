"""
Expense Operations

DESIGN DECISION: Every operation is one read-validate-mutate-persist
transaction against an explicitly passed storage handle.

- Input is validated before storage is touched.
- Mutations happen on a freshly loaded copy of the collection and are
  written back only if the whole block succeeds.
- Queries never write.

IDs are `max(existing ids) + 1`, so deleting a record never lets a later
add hand out an ID that is already taken.
"""

import datetime as dt
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from pydantic import ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import (
    Expense,
    ExpenseFilter,
    ExpenseSummary,
)
from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    JsonFileExpenseStorage,
    NotFoundError,
    StorageError,
)
from expense_tracker.validation import (
    ExpenseValidationError,
    parse_amount,
    parse_date,
    parse_id,
    parse_month,
    parse_year,
)


def build_filter(
    expense_id: Any = None,
    month: Any = None,
    year: Any = None,
) -> ExpenseFilter:
    """Validate raw filter values. None means "not filtered"."""
    return ExpenseFilter(
        id=parse_id(expense_id) if expense_id is not None else None,
        month=parse_month(month) if month is not None else None,
        year=parse_year(year) if year is not None else None,
    )


def next_expense_id(expenses: list[Expense]) -> int:
    return max((expense.id for expense in expenses), default=0) + 1


class ExpenseTracker:
    """
    Add, list, summarize and delete expenses.

    GUARANTEES:
    - Invalid input never reaches storage
    - A failed operation leaves the stored collection unchanged
    - Filters compose: id, month and year must all match
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger

    @contextmanager
    def _transaction(self) -> Iterator[list[Expense]]:
        expenses = self._storage.load()
        yield expenses
        self._storage.save(expenses)

    @contextmanager
    def _audited(self) -> Iterator[None]:
        """Record failures in the audit log, then let them propagate."""
        try:
            yield
        except ExpenseValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_validation_failed(e.field, e.message)
            raise
        except NotFoundError as e:
            if self._audit_logger:
                self._audit_logger.log_not_found(e.expense_id)
            raise
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_storage_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
            raise

    def add(
        self,
        description: Optional[str],
        amount: Any,
        date: Union[str, dt.date, None] = None,
    ) -> Expense:
        """
        Add a new expense and persist it.

        Args:
            description: Free text; empty means "No description"
            amount: Anything that parses as a finite number
            date: YYYY-MM-DD string or date; defaults to today

        Returns:
            The stored expense, including its new ID
        """
        with self._audited():
            parsed_amount = parse_amount(amount)
            if date is None:
                parsed_date = dt.date.today()
            elif isinstance(date, dt.date):
                parsed_date = date
            else:
                parsed_date = parse_date(date)

            with self._transaction() as expenses:
                try:
                    expense = Expense(
                        id=next_expense_id(expenses),
                        date=parsed_date,
                        description=description,
                        amount=parsed_amount,
                    )
                except ValidationError as e:
                    error = e.errors()[0]
                    field = str(error["loc"][0]) if error["loc"] else "expense"
                    raise ExpenseValidationError(
                        field, f"Invalid {field}: {error['msg']}"
                    ) from e
                expenses.append(expense)

        if self._audit_logger:
            self._audit_logger.log_expense_added(expense)
        return expense

    def _select(
        self,
        filters: ExpenseFilter,
        expenses: list[Expense],
    ) -> list[Expense]:
        if filters.id is not None and not any(e.id == filters.id for e in expenses):
            raise NotFoundError(filters.id)
        return [expense for expense in expenses if filters.matches(expense)]

    def list_expenses(
        self,
        expense_id: Any = None,
        month: Any = None,
        year: Any = None,
    ) -> list[Expense]:
        """
        List expenses matching every given filter, in stored order.

        Raises NotFoundError if an ID filter names an expense that does
        not exist. An empty month/year match is just an empty list.
        """
        with self._audited():
            filters = build_filter(expense_id, month, year)
            matches = self._select(filters, self._storage.load())

        if self._audit_logger:
            self._audit_logger.log_expenses_listed(filters, len(matches))
        return matches

    def summarize(
        self,
        expense_id: Any = None,
        month: Any = None,
        year: Any = None,
    ) -> ExpenseSummary:
        """Total the expenses matching every given filter (all if none)."""
        with self._audited():
            filters = build_filter(expense_id, month, year)
            matches = self._select(filters, self._storage.load())

        summary = ExpenseSummary(
            total=sum((expense.amount for expense in matches), Decimal("0")),
            count=len(matches),
            filters=filters,
        )
        if self._audit_logger:
            self._audit_logger.log_summary_computed(summary)
        return summary

    def delete(self, expense_id: Any) -> Expense:
        """
        Remove one expense by ID and persist.

        Other expenses keep their IDs and order.
        """
        with self._audited():
            target = parse_id(expense_id)
            with self._transaction() as expenses:
                index = next(
                    (i for i, expense in enumerate(expenses) if expense.id == target),
                    None,
                )
                if index is None:
                    raise NotFoundError(target)
                removed = expenses.pop(index)

        if self._audit_logger:
            self._audit_logger.log_expense_deleted(removed)
        return removed


def create_tracker(
    storage_path: Optional[Union[str, Path]] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> ExpenseTracker:
    """
    Wire up a tracker backed by the JSON file storage.

    Args:
        storage_path: Overrides the configured storage path
        audit_logger: Defaults to a fresh AuditLogger
    """
    return ExpenseTracker(
        storage=JsonFileExpenseStorage(storage_path),
        audit_logger=audit_logger or AuditLogger(),
    )
