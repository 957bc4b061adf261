import logging
import os
from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.audit.logger import _handler as log_handler
from expense_tracker.config import get_settings
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage import InMemoryExpenseStorage


class RecordingAuditLogger(AuditLogger):
    """Keeps events in a list instead of writing them out."""

    def __init__(self):
        super().__init__()
        self.events = []

    def log(self, event):
        self.events.append(event)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run every test in an empty directory with no tracker env vars."""
    for name in list(os.environ):
        if name.startswith("EXPENSE_TRACKER_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    root_level = logging.getLogger().level
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    logging.getLogger().removeHandler(log_handler)
    logging.getLogger().setLevel(root_level)


@pytest.fixture
def january_february():
    return [
        Expense(id=1, date=date(2024, 1, 15), description="Rent", amount=Decimal("800")),
        Expense(id=2, date=date(2024, 2, 3), description="Coffee", amount=Decimal("3.50")),
        Expense(id=3, date=date(2024, 2, 20), description="Books", amount=Decimal("25.25")),
        Expense(id=4, date=date(2023, 2, 11), description="Gift", amount=Decimal("40")),
    ]


@pytest.fixture
def memory_storage(january_february):
    return InMemoryExpenseStorage(january_february)


@pytest.fixture
def audit_logger():
    return RecordingAuditLogger()
