"""
Ledger Exceptions

Errors raised by the ledger engine and session. Storage and credential
errors live next to their interfaces in ledger.services.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledger.models.ledger import MonthKey, ValidationResult


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class TransactionNotFoundError(LedgerError):
    """No transaction with the given id exists in the month."""

    def __init__(self, transaction_id: str, month: "MonthKey | None" = None):
        self.transaction_id = transaction_id
        self.month = month
        where = f" in {month.value}" if month is not None else ""
        super().__init__(f"Transaction not found{where}: {transaction_id!r}")


class LedgerValidationError(LedgerError):
    """A transaction draft failed the ledger's business checks."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"Transaction rejected: {messages}")
