"""
Data Models Package

This package contains all Pydantic models used by the ledger.
All data held in a FinanceState must conform to these schemas.
"""

from ledger.models.ledger import (
    INITIAL_CATEGORIES,
    MONTHS,
    Category,
    CategoryTotal,
    FinanceState,
    MonthKey,
    MonthLedger,
    MonthOverview,
    MonthSettings,
    MonthTotals,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
    TypeFilter,
    ValidationIssue,
    ValidationResult,
    new_transaction_id,
)
from ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)
from ledger.models.auth import AuthSession, Profile

__all__ = [
    "INITIAL_CATEGORIES",
    "MONTHS",
    "Category",
    "CategoryTotal",
    "FinanceState",
    "MonthKey",
    "MonthLedger",
    "MonthOverview",
    "MonthSettings",
    "MonthTotals",
    "Transaction",
    "TransactionDraft",
    "TransactionStatus",
    "TransactionType",
    "TypeFilter",
    "ValidationIssue",
    "ValidationResult",
    "new_transaction_id",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
    # Account models
    "AuthSession",
    "Profile",
]
