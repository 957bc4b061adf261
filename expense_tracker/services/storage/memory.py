"""In-memory storage, mainly for tests."""

from typing import Iterable, Optional

from expense_tracker.models.expense import Expense
from expense_tracker.services.storage.interface import ExpenseStorageInterface


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """
    Keeps the collection in a list.

    Copies go in and out so callers can't mutate "stored" state
    without calling save(), same as with a real file.
    """

    def __init__(self, expenses: Optional[Iterable[Expense]] = None):
        self._expenses = [e.model_copy() for e in expenses or []]
        self.save_count = 0

    def load(self) -> list[Expense]:
        return [e.model_copy() for e in self._expenses]

    def save(self, expenses: list[Expense]) -> None:
        self._expenses = [e.model_copy() for e in expenses]
        self.save_count += 1
