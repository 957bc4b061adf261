"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the JSON file format out of the business logic
2. Use in-memory storage for testing
3. Swap in SQLite later without touching the tracker

The interface is intentionally tiny. The whole collection is the unit of
persistence: it is loaded once and written back whole.
"""

from abc import ABC, abstractmethod

from expense_tracker.models.expense import Expense


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self) -> list[Expense]:
        """
        Load the full collection, in stored order.

        Returns:
            All stored expenses; empty if nothing has been stored yet

        Raises:
            ParseError: If stored content exists but is malformed
        """
        pass

    @abstractmethod
    def save(self, expenses: list[Expense]) -> None:
        """
        Replace the stored collection with `expenses`.

        Raises:
            StorageWriteError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""

    def __init__(self, expense_id: int):
        super().__init__(f"No expense found with ID {expense_id}")
        self.expense_id = expense_id


class ParseError(StorageError):
    """Stored content could not be read back as a list of expenses."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass
