"""
Storage Services Package

Provides the abstract storage interface and its implementations.
The JSON file backend is the default; the in-memory one backs tests.
"""

from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    NotFoundError,
    ParseError,
    StorageError,
    StorageWriteError,
)
from expense_tracker.services.storage.json_file import JsonFileExpenseStorage
from expense_tracker.services.storage.memory import InMemoryExpenseStorage

__all__ = [
    # Interface
    "ExpenseStorageInterface",
    # Exceptions
    "NotFoundError",
    "ParseError",
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryExpenseStorage",
    "JsonFileExpenseStorage",
]
