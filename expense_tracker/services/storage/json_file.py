"""
JSON File Storage Implementation

DESIGN DECISION: A single human-readable JSON file is the storage backend:
1. Users can open and fix it in any editor
2. No database setup required
3. Trivial to back up or put under version control

TRADEOFFS:
- The whole file is rewritten on every change (fine for personal use)
- No locking; two concurrent invocations race and the last writer wins
- Writes go through a temp file + os.replace, so a crash mid-write
  never leaves a truncated file behind
"""

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.audit.logger import get_logger
from expense_tracker.config import get_settings
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    ParseError,
    StorageError,
    StorageWriteError,
)


_EXPENSE_LIST = TypeAdapter(list[Expense])

logger = get_logger(__name__)


class JsonFileExpenseStorage(ExpenseStorageInterface):
    """
    Stores the expense collection as a JSON array in one file.

    An absent or blank file is an empty collection.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        indent: Optional[int] = None,
    ):
        """
        Initialize file storage.

        Args:
            path: JSON file to use. Defaults to the configured storage path.
            indent: Indentation for written JSON. Defaults to configuration.
        """
        settings = get_settings().storage
        self._path = Path(path) if path is not None else settings.storage_path
        self._indent = indent if indent is not None else settings.json_indent

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Expense]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("storage_missing", path=str(self._path))
            return []
        except UnicodeDecodeError as e:
            raise ParseError(f"{self._path} is not UTF-8 text: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            # JSONDecodeError, or an integer too long to convert
            raise ParseError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise ParseError(
                f"{self._path} must contain a JSON array of expenses, "
                f"found {type(data).__name__}"
            )

        try:
            expenses = _EXPENSE_LIST.validate_python(data)
        except ValidationError as e:
            raise ParseError(
                f"{self._path} contains {e.error_count()} invalid expense field(s)"
            ) from e

        ids = [expense.id for expense in expenses]
        if len(ids) != len(set(ids)):
            raise ParseError(f"{self._path} contains duplicate expense IDs")

        logger.debug("storage_loaded", path=str(self._path), count=len(expenses))
        return expenses

    def save(self, expenses: list[Expense]) -> None:
        try:
            payload = json.dumps(
                _EXPENSE_LIST.dump_python(expenses, mode="json"),
                indent=self._indent,
                ensure_ascii=False,
            ) + "\n"
        except (TypeError, ValueError) as e:
            raise StorageWriteError(f"Could not serialize expenses: {e}") from e

        try:
            self._write_atomic(payload)
        except OSError as e:
            raise StorageWriteError(f"Could not write {self._path}: {e}") from e

        logger.debug("storage_saved", path=str(self._path), count=len(expenses))

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, payload: str) -> None:
        """Write to a sibling temp file, then swap it into place."""
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=directory,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise
