"""
Core Data Models for Monthly Ledger

These models define the strict schemas for all data held by the ledger.
They are designed to:
1. Enforce type safety at runtime
2. Reject malformed transactions at construction time
3. Be serializable as a single finance-state snapshot
4. Keep the 12-month calendar complete at all times

DESIGN DECISION: Amounts are Decimal and never negative.
The sign of a transaction is carried by its type, not its amount.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


ZERO = Decimal("0")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money movement."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionStatus(str, Enum):
    """
    Settlement status.

    PENDING items count only towards projected totals.
    Quick-confirm moves PENDING -> CONFIRMED; a direct edit may set either.
    """
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"


class TypeFilter(str, Enum):
    """Type selector used when filtering a month's transactions."""
    ALL = "ALL"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class MonthKey(str, Enum):
    """
    The fixed 12-slot calendar.

    Definition order is calendar order; the balance chain relies on it.
    """
    JAN = "Jan"
    FEB = "Feb"
    MAR = "Mar"
    APR = "Apr"
    MAY = "May"
    JUN = "Jun"
    JUL = "Jul"
    AUG = "Aug"
    SEP = "Sep"
    OCT = "Oct"
    NOV = "Nov"
    DEC = "Dec"

    @property
    def position(self) -> int:
        """Zero-based position in the calendar."""
        return MONTHS.index(self)

    @property
    def previous(self) -> Optional["MonthKey"]:
        """The month before this one, or None for the first month."""
        idx = self.position
        return MONTHS[idx - 1] if idx > 0 else None

    @classmethod
    def from_date(cls, value: dt.date) -> "MonthKey":
        return MONTHS[value.month - 1]


MONTHS: list[MonthKey] = list(MonthKey)


def new_transaction_id() -> str:
    """Mint an opaque, unique transaction id."""
    return uuid4().hex


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionDraft(BaseModel):
    """
    A transaction as entered by the user, before it has an identity.

    Construction rejects an empty description and a negative or
    non-finite amount. The date is free-form: it is NOT checked
    against the month the transaction is filed under.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the money was for"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Non-negative amount; sign comes from type"
    )
    type: TransactionType = Field(
        ...,
        description="INCOME or EXPENSE"
    )
    status: TransactionStatus = Field(
        default=TransactionStatus.CONFIRMED,
        description="Settlement status"
    )
    category: str = Field(
        ...,
        max_length=100,
        description="Category name (soft reference into the registry)"
    )
    date: dt.date = Field(
        default_factory=dt.date.today,
        description="Calendar date of the transaction"
    )


class Transaction(TransactionDraft):
    """
    A stored transaction.

    The id is minted once at insert time and never changes. Stored
    transactions are frozen: edits go through model_copy and are
    written back by the transaction store.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_transaction_id,
        min_length=1,
        description="Opaque unique transaction id"
    )

    @classmethod
    def from_draft(cls, draft: TransactionDraft) -> "Transaction":
        """Give a draft a freshly minted id."""
        return cls(id=new_transaction_id(), **draft.model_dump(exclude={"id"}))

    @property
    def is_confirmed(self) -> bool:
        return self.status == TransactionStatus.CONFIRMED


# =============================================================================
# CATEGORIES
# =============================================================================

class Category(BaseModel):
    """Reference data used to tag transactions."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)


INITIAL_CATEGORIES: list[Category] = [
    Category(id="1", name="Salário"),
    Category(id="2", name="Freelance"),
    Category(id="3", name="Investimentos"),
    Category(id="4", name="Alimentação"),
    Category(id="5", name="Moradia"),
    Category(id="6", name="Transporte"),
    Category(id="7", name="Saúde"),
    Category(id="8", name="Educação"),
    Category(id="9", name="Lazer"),
    Category(id="10", name="Assinaturas"),
    Category(id="11", name="Outros"),
]


# =============================================================================
# MONTH LEDGER & FINANCE STATE
# =============================================================================

class MonthSettings(BaseModel):
    """Per-month toggles."""

    carry_over_balance: bool = Field(
        default=False,
        description="Import the previous month's cumulative balance"
    )


class MonthLedger(BaseModel):
    """
    One calendar month: its transactions (newest first) and settings.

    This is the unit of storage and lifecycle.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    settings: MonthSettings = Field(default_factory=MonthSettings)


class FinanceState(BaseModel):
    """
    The whole ledger: 12 month slots plus the category list.

    CRITICAL: Every month slot exists, even if never populated.
    Slots missing from a loaded snapshot are filled with empty ledgers.
    """

    months: dict[MonthKey, MonthLedger] = Field(default_factory=dict)
    categories: list[Category] = Field(
        default_factory=lambda: [c.model_copy() for c in INITIAL_CATEGORIES]
    )

    @model_validator(mode='after')
    def fill_month_slots(self) -> 'FinanceState':
        """Guarantee the 12-slot calendar."""
        for month in MONTHS:
            if month not in self.months:
                self.months[month] = MonthLedger()
        # Keep calendar order regardless of snapshot key order
        self.months = {month: self.months[month] for month in MONTHS}
        return self

    def month(self, key: MonthKey) -> MonthLedger:
        return self.months[key]


# =============================================================================
# AGGREGATES
# =============================================================================

class MonthTotals(BaseModel):
    """
    Headline figures for one month.

    net       = carry + confirmed income - confirmed expense
    projected = net + pending income - pending expense
    """

    month: MonthKey
    carry_amount: Decimal = ZERO
    confirmed_income: Decimal = ZERO
    confirmed_expense: Decimal = ZERO
    pending_income: Decimal = ZERO
    pending_expense: Decimal = ZERO
    net: Decimal = ZERO
    projected: Decimal = ZERO


class MonthOverview(BaseModel):
    """Income and expense of one month across all statuses."""

    month: MonthKey
    income: Decimal = ZERO
    expense: Decimal = ZERO


class CategoryTotal(BaseModel):
    """Total expense booked under one category name."""

    name: str
    total: Decimal


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'too_large', 'unknown_category')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Outcome of checking a draft before it enters a month."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]
