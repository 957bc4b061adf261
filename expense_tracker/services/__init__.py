"""Services package."""

from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    JsonFileExpenseStorage,
    NotFoundError,
    ParseError,
    StorageError,
    StorageWriteError,
)

__all__ = [
    "ExpenseStorageInterface",
    "InMemoryExpenseStorage",
    "JsonFileExpenseStorage",
    "NotFoundError",
    "ParseError",
    "StorageError",
    "StorageWriteError",
]
