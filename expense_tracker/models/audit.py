"""
Audit Models for Expense Tracker

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every add and delete
2. Debugging information when things go wrong
3. Ability to reconstruct what happened to the storage file

DESIGN DECISION: Audit events are immutable once built.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.expense import Expense, ExpenseFilter


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"

    # Queries
    EXPENSES_LISTED = "expenses_listed"
    SUMMARY_COMPUTED = "summary_computed"

    # Failures
    VALIDATION_FAILED = "validation_failed"
    EXPENSE_NOT_FOUND = "expense_not_found"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """
    model_config = ConfigDict(frozen=True)

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context
    entity_id: Optional[int] = Field(
        default=None,
        description="Expense id this event relates to"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one CLI invocation"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense, correlation_id)
        event = AuditEventBuilder.expense_not_found(7, correlation_id)
    """

    @staticmethod
    def expense_added(
        expense: Expense,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_id=expense.id,
            correlation_id=correlation_id,
            description=f"Expense added: {expense.description}",
            details={
                "date": expense.date.isoformat(),
                "amount": str(expense.amount),
            },
        )

    @staticmethod
    def expense_deleted(
        expense: Expense,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_id=expense.id,
            correlation_id=correlation_id,
            description=f"Expense deleted: {expense.description}",
            details={
                "date": expense.date.isoformat(),
                "amount": str(expense.amount),
            },
        )

    @staticmethod
    def expenses_listed(
        filters: ExpenseFilter,
        result_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_LISTED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Listed {result_count} expenses",
            details={
                "filters": filters.model_dump(exclude_none=True),
                "result_count": result_count,
            },
        )

    @staticmethod
    def summary_computed(
        filters: ExpenseFilter,
        total: Decimal,
        count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_COMPUTED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Summary over {count} expenses",
            details={
                "filters": filters.model_dump(exclude_none=True),
                "total": str(total),
                "count": count,
            },
        )

    @staticmethod
    def validation_failed(
        field: str,
        message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Validation failed for {field}",
            error_message=message,
            details={"field": field},
        )

    @staticmethod
    def expense_not_found(
        expense_id: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"No expense found with ID {expense_id}",
        )

    @staticmethod
    def storage_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Storage error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
