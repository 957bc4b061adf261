"""
Tests for Expense Tracker

Test strategy:
1. Unit tests for individual components (models, validators, storage)
2. Operation tests against in-memory and file storage
3. CLI tests through main(argv), no subprocesses
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from expense_tracker.models.expense import (
    DEFAULT_DESCRIPTION,
    Expense,
    ExpenseFilter,
    ExpenseSummary,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestExpenseModel:
    """Tests for the Expense record."""

    def test_expense_creation(self):
        """Test Expense model creation."""
        expense = Expense(
            id=1,
            date=date(2024, 2, 1),
            description="Coffee",
            amount=Decimal("3.5"),
        )
        assert expense.id == 1
        assert expense.amount == Decimal("3.5")
        assert expense.date == date(2024, 2, 1)

    def test_date_defaults_to_today(self):
        """Test that a missing date means today."""
        expense = Expense(id=1, amount=Decimal("1"))
        assert expense.date == date.today()

    def test_empty_description_defaults(self):
        """Test that blank descriptions become the default."""
        assert Expense(id=1, amount=1, description="").description == DEFAULT_DESCRIPTION
        assert Expense(id=1, amount=1, description="   ").description == DEFAULT_DESCRIPTION
        assert Expense(id=1, amount=1, description=None).description == DEFAULT_DESCRIPTION

    def test_description_strips_whitespace(self):
        """Test that whitespace is stripped from descriptions."""
        assert Expense(id=1, amount=1, description="  Lunch  ").description == "Lunch"

    def test_id_must_be_positive(self):
        """Test that zero and negative IDs are rejected."""
        with pytest.raises(ValidationError):
            Expense(id=0, amount=1)

    def test_rejects_non_finite_amount(self):
        """Test that NaN and infinity are rejected."""
        with pytest.raises(ValidationError):
            Expense(id=1, amount=Decimal("NaN"))
        with pytest.raises(ValidationError):
            Expense(id=1, amount=float("inf"))

    def test_amount_held_at_stored_precision(self):
        """Test amounts keep the value a JSON number reads back with."""
        assert Expense(id=1, amount=Decimal("0.1000000000000000000001")).amount == Decimal("0.1")
        assert Expense(id=1, amount=Decimal("1e-400")).amount == Decimal("0")
        assert Expense(id=1, amount=Decimal("12.40")).amount == Decimal("12.4")

    def test_rejects_amount_too_large_to_store(self):
        """Test amounts beyond the range of a JSON number are rejected."""
        with pytest.raises(ValidationError, match="too large"):
            Expense(id=1, amount=Decimal("1e5000"))

    def test_long_description_allowed(self):
        """Test that descriptions are not length limited."""
        assert len(Expense(id=1, amount=1, description="a" * 501).description) == 501

    def test_negative_amount_allowed(self):
        """Test that refunds can be recorded as negative amounts."""
        assert Expense(id=1, amount=Decimal("-12.5")).amount == Decimal("-12.5")

    def test_accepts_legacy_timestamp(self):
        """Test that full ISO timestamps from older files keep only the date."""
        expense = Expense(id=1, amount=1, date="2024-03-05T10:11:12.000Z")
        assert expense.date == date(2024, 3, 5)

    def test_accepts_datetime(self):
        """Test that datetime values are narrowed to their date."""
        expense = Expense(id=1, amount=1, date=datetime(2024, 3, 5, 23, 59))
        assert expense.date == date(2024, 3, 5)

    def test_json_dump_writes_numbers(self):
        """Test that amounts are JSON numbers and dates are YYYY-MM-DD."""
        expense = Expense(id=1, date=date(2024, 2, 1), description="Coffee", amount=Decimal("3.5"))
        dumped = expense.model_dump(mode="json")
        assert dumped == {
            "id": 1,
            "date": "2024-02-01",
            "description": "Coffee",
            "amount": 3.5,
        }

    def test_json_dump_whole_amount_is_int(self):
        """Test that whole amounts are written without a fraction."""
        dumped = Expense(id=1, amount=Decimal("5.00")).model_dump(mode="json")
        assert dumped["amount"] == 5
        assert isinstance(dumped["amount"], int)

    def test_python_dump_keeps_decimal(self):
        """Test that only JSON mode converts the amount."""
        assert Expense(id=1, amount=Decimal("5.25")).model_dump()["amount"] == Decimal("5.25")


class TestExpenseFilter:
    """Tests for ExpenseFilter."""

    def test_empty_filter_matches_everything(self, january_february):
        """Test that no filters means every expense matches."""
        filters = ExpenseFilter()
        assert filters.is_empty is True
        assert all(filters.matches(e) for e in january_february)

    def test_month_filter(self, january_february):
        """Test month filter ignores the year."""
        filters = ExpenseFilter(month=2)
        assert [e.id for e in january_february if filters.matches(e)] == [2, 3, 4]

    def test_filters_intersect(self, january_february):
        """Test that month and year must both match."""
        filters = ExpenseFilter(month=2, year=2024)
        assert [e.id for e in january_february if filters.matches(e)] == [2, 3]

    def test_id_filter(self, january_february):
        """Test id filter matches exactly one record."""
        filters = ExpenseFilter(id=3)
        assert [e.id for e in january_february if filters.matches(e)] == [3]

    def test_month_bounds(self):
        """Test month must be 1-12."""
        with pytest.raises(ValidationError):
            ExpenseFilter(month=13)
        with pytest.raises(ValidationError):
            ExpenseFilter(month=0)

    def test_describe(self):
        """Test filter descriptions used in 'not found' messages."""
        assert ExpenseFilter(month=2).describe() == "month 02"
        assert ExpenseFilter(year=2024).describe() == "year 2024"
        assert ExpenseFilter(month=2, year=2024).describe() == "month 02 of 2024"
        assert ExpenseFilter().describe() == ""

    def test_period_label(self):
        """Test labels used in summary totals."""
        assert ExpenseFilter(month=2).period_label() == "February"
        assert ExpenseFilter(year=2024).period_label() == "year 2024"
        assert ExpenseFilter(month=12, year=2023).period_label() == "December 2023"
        assert ExpenseFilter(id=4).period_label() == ""
        assert ExpenseFilter(id=4, year=2024).period_label() == "year 2024"


class TestExpenseSummary:
    """Tests for ExpenseSummary."""

    def test_defaults(self):
        """Test an empty summary."""
        summary = ExpenseSummary()
        assert summary.total == Decimal("0")
        assert summary.count == 0
        assert summary.data_found is False
        assert summary.filters.is_empty

    def test_data_found(self):
        """Test data_found follows count."""
        summary = ExpenseSummary(total=Decimal("3.5"), count=1)
        assert summary.data_found is True


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_is_frozen(self):
        """Test that events can't be changed after creation."""
        event = AuditEvent(event_type=AuditEventType.EXPENSE_ADDED, description="x")
        with pytest.raises(ValidationError):
            event.description = "y"

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_id=7,
            description="Expense deleted",
            details={"amount": "12.50"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_deleted"
        assert log_dict["entity_id"] == 7
        assert log_dict["details"]["amount"] == "12.50"
        assert log_dict["correlation_id"] is None

    def test_audit_event_builder_expense_added(self):
        """Test AuditEventBuilder.expense_added."""
        correlation_id = uuid4()
        expense = Expense(id=3, date=date(2024, 2, 1), description="Coffee", amount=Decimal("3.5"))

        event = AuditEventBuilder.expense_added(expense, correlation_id)

        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.entity_id == 3
        assert event.correlation_id == correlation_id
        assert event.details == {"date": "2024-02-01", "amount": "3.5"}

    def test_audit_event_builder_not_found(self):
        """Test AuditEventBuilder.expense_not_found."""
        event = AuditEventBuilder.expense_not_found(9)
        assert event.severity == AuditSeverity.WARNING
        assert event.description == "No expense found with ID 9"

    def test_audit_event_builder_summary(self):
        """Test summary events carry the filters that were used."""
        event = AuditEventBuilder.summary_computed(
            filters=ExpenseFilter(month=2),
            total=Decimal("28.75"),
            count=2,
        )
        assert event.severity == AuditSeverity.DEBUG
        assert event.details == {"filters": {"month": 2}, "total": "28.75", "count": 2}

    def test_audit_event_builder_storage_error(self):
        """Test storage errors are logged at error severity."""
        event = AuditEventBuilder.storage_error("ParseError", "bad json")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "bad json"
        assert event.details == {}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
