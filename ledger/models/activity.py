"""
Activity Models for Monthly Ledger

Every ledger mutation, and every failure around it, is described by an
ActivityEvent and written to the structured log.

DESIGN DECISION: Events go to the local log only. They are a debugging
aid, not a persisted history of the ledger.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ledger.models.ledger import MonthKey, Transaction


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_CONFIRMED = "transaction_confirmed"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_REJECTED = "transaction_rejected"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    VALIDATION_WARNING = "validation_warning"
    
    # Month settings
    CARRY_OVER_TOGGLED = "carry_over_toggled"
    MONTH_SELECTED = "month_selected"
    
    # Categories
    CATEGORY_ADDED = "category_added"
    
    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_SEEDED = "state_seeded"
    STATE_SAVED = "state_saved"
    SAVE_FAILED = "save_failed"
    
    # External services
    NARRATIVE_FAILED = "narrative_failed"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single structured log event."""
    
    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO
    
    # Context - which month / transaction is this about?
    month: Optional[MonthKey] = None
    transaction_id: Optional[str] = None
    
    # Correlation - for tracking related events in one session
    correlation_id: Optional[UUID] = None
    
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    
    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "month": self.month.value if self.month else None,
            "transaction_id": self.transaction_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.
    
    Usage:
        event = ActivityEventBuilder.transaction_added(month, tx, correlation_id)
    """
    
    @staticmethod
    def transaction_added(
        month: MonthKey,
        transaction: Transaction,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_ADDED,
            month=month,
            transaction_id=transaction.id,
            correlation_id=correlation_id,
            description=f"{transaction.type.value.title()} added: {transaction.description}",
            details={
                "amount": str(transaction.amount),
                "status": transaction.status.value,
                "category": transaction.category,
            },
        )
    
    @staticmethod
    def transaction_updated(
        month: MonthKey,
        transaction: Transaction,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_UPDATED,
            month=month,
            transaction_id=transaction.id,
            correlation_id=correlation_id,
            description=f"Transaction edited: {transaction.description}",
            details={
                "amount": str(transaction.amount),
                "status": transaction.status.value,
            },
        )
    
    @staticmethod
    def transaction_confirmed(
        month: MonthKey,
        transaction_id: str,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_CONFIRMED,
            month=month,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction confirmed",
        )
    
    @staticmethod
    def transaction_deleted(
        month: MonthKey,
        transaction_id: str,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_DELETED,
            month=month,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction deleted",
        )
    
    @staticmethod
    def transaction_rejected(
        month: MonthKey,
        issues: list[dict],
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_REJECTED,
            severity=ActivitySeverity.WARNING,
            month=month,
            correlation_id=correlation_id,
            description="Transaction failed validation",
            details={"issues": issues},
        )
    
    @staticmethod
    def transaction_not_found(
        month: MonthKey,
        transaction_id: str,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_NOT_FOUND,
            severity=ActivitySeverity.WARNING,
            month=month,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction id not found (stale reference?)",
        )
    
    @staticmethod
    def carry_over_toggled(
        month: MonthKey,
        enabled: bool,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.CARRY_OVER_TOGGLED,
            month=month,
            correlation_id=correlation_id,
            description=f"Carry-over {'enabled' if enabled else 'disabled'}",
            details={"carry_over_balance": enabled},
        )
    
    @staticmethod
    def save_failed(
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SAVE_FAILED,
            severity=ActivitySeverity.ERROR,
            correlation_id=correlation_id,
            description="Snapshot write failed; changes kept in memory",
            error_message=error_message,
        )
    
    @staticmethod
    def narrative_failed(
        month: MonthKey,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.NARRATIVE_FAILED,
            severity=ActivitySeverity.WARNING,
            month=month,
            correlation_id=correlation_id,
            description="Narrative service failed; fallback text returned",
            error_message=error_message,
        )
