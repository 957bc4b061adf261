"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of every add and delete
2. Debugging capability
3. A record of failed attempts, not just successful ones

The audit logger:
- Writes structured JSON lines through structlog
- Never writes to stdout, which belongs to command output
- Supports correlation IDs to tie together the events of one invocation
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder
from expense_tracker.models.expense import Expense, ExpenseFilter, ExpenseSummary


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def get_logger(name: str):
    """Get a structlog logger that uses the configuration above."""
    return structlog.get_logger(name)


_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter("%(message)s"))


def configure_logging(level: str = "WARNING") -> None:
    """
    Route log output to stderr at the given level.

    structlog renders the message; the stdlib handler only decides
    where it goes and what gets through. Safe to call more than once.
    """
    root = logging.getLogger()
    if _handler not in root.handlers:
        root.addHandler(_handler)
    root.setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    One instance per invocation; every event it emits carries the same
    correlation ID.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        self.correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("expense_tracker.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_expense_added(self, expense: Expense) -> None:
        self.log(AuditEventBuilder.expense_added(expense, self.correlation_id))

    def log_expense_deleted(self, expense: Expense) -> None:
        self.log(AuditEventBuilder.expense_deleted(expense, self.correlation_id))

    def log_expenses_listed(self, filters: ExpenseFilter, result_count: int) -> None:
        self.log(AuditEventBuilder.expenses_listed(
            filters=filters,
            result_count=result_count,
            correlation_id=self.correlation_id,
        ))

    def log_summary_computed(self, summary: ExpenseSummary) -> None:
        self.log(AuditEventBuilder.summary_computed(
            filters=summary.filters,
            total=summary.total,
            count=summary.count,
            correlation_id=self.correlation_id,
        ))

    def log_validation_failed(self, field: str, message: str) -> None:
        self.log(AuditEventBuilder.validation_failed(
            field=field,
            message=message,
            correlation_id=self.correlation_id,
        ))

    def log_not_found(self, expense_id: int) -> None:
        self.log(AuditEventBuilder.expense_not_found(expense_id, self.correlation_id))

    def log_storage_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log a failure to read or write the storage file."""
        self.log(AuditEventBuilder.storage_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=self.correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    The CLI creates one per invocation.
    """
    return uuid4()
