"""
Activity Logger

DESIGN DECISION: Every ledger mutation is logged as a structured event.
This provides:
1. Traceability while debugging a session
2. Visibility into failed snapshot writes
3. Correlation of the events of one session

The activity logger:
- Only writes to the local structured log
- Never raises into the ledger flow
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)
from ledger.models.ledger import MonthKey, Transaction


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


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at ``level``."""
    logging.basicConfig(format="%(message)s", level=level.upper())


class ActivityLogger:
    """Central structured logging for ledger activity."""
    
    def __init__(self, correlation_id: Optional[UUID] = None):
        self._correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("ledger.activity")
    
    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id
    
    def log(self, event: ActivityEvent) -> None:
        """Log an activity event at the level matching its severity."""
        log_dict = event.to_log_dict()
        
        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("ledger_activity", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("ledger_activity", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("ledger_activity", **log_dict)
        else:
            self._logger.info("ledger_activity", **log_dict)
    
    def log_transaction_added(self, month: MonthKey, transaction: Transaction) -> None:
        self.log(ActivityEventBuilder.transaction_added(
            month, transaction, self._correlation_id
        ))
    
    def log_transaction_updated(self, month: MonthKey, transaction: Transaction) -> None:
        self.log(ActivityEventBuilder.transaction_updated(
            month, transaction, self._correlation_id
        ))
    
    def log_transaction_confirmed(self, month: MonthKey, transaction_id: str) -> None:
        self.log(ActivityEventBuilder.transaction_confirmed(
            month, transaction_id, self._correlation_id
        ))
    
    def log_transaction_deleted(self, month: MonthKey, transaction_id: str) -> None:
        self.log(ActivityEventBuilder.transaction_deleted(
            month, transaction_id, self._correlation_id
        ))
    
    def log_transaction_rejected(self, month: MonthKey, issues: list[dict]) -> None:
        self.log(ActivityEventBuilder.transaction_rejected(
            month, issues, self._correlation_id
        ))
    
    def log_transaction_not_found(self, month: MonthKey, transaction_id: str) -> None:
        self.log(ActivityEventBuilder.transaction_not_found(
            month, transaction_id, self._correlation_id
        ))
    
    def log_carry_over_toggled(self, month: MonthKey, enabled: bool) -> None:
        self.log(ActivityEventBuilder.carry_over_toggled(
            month, enabled, self._correlation_id
        ))
    
    def log_save_failed(self, error_message: str) -> None:
        self.log(ActivityEventBuilder.save_failed(error_message, self._correlation_id))
    
    def log_narrative_failed(self, month: MonthKey, error_message: str) -> None:
        self.log(ActivityEventBuilder.narrative_failed(
            month, error_message, self._correlation_id
        ))
    
    def log_simple(
        self,
        event_type: ActivityEventType,
        description: str,
        month: Optional[MonthKey] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Log an event that needs no builder (loads, saves, selections)."""
        self.log(ActivityEvent(
            event_type=event_type,
            month=month,
            correlation_id=self._correlation_id,
            description=description,
            details=details or {},
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.
    
    Use one per ledger session.
    """
    return uuid4()
