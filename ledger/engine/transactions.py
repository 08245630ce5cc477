"""
Transaction Store

Pure transformations over one month's transaction sequence.
The input list is never modified; every operation returns a new list.

Ordering is newest first: inserts go to the front.

Lookups by id that miss raise TransactionNotFoundError so callers
holding a stale id find out instead of getting an unchanged list back.
"""

from typing import Optional, Sequence

from ledger.errors import TransactionNotFoundError
from ledger.models.ledger import (
    MonthKey,
    Transaction,
    TransactionDraft,
    TransactionStatus,
)


def _index_of(
    transactions: Sequence[Transaction],
    transaction_id: str,
    month: Optional[MonthKey],
) -> int:
    for idx, tx in enumerate(transactions):
        if tx.id == transaction_id:
            return idx
    raise TransactionNotFoundError(transaction_id, month)


def insert_transaction(
    transactions: Sequence[Transaction],
    draft: TransactionDraft,
) -> tuple[list[Transaction], Transaction]:
    """
    Mint an id for the draft and prepend it.

    Returns:
        (new_sequence, created_transaction)
    """
    created = Transaction.from_draft(draft)
    return [created, *transactions], created


def update_transaction(
    transactions: Sequence[Transaction],
    updated: Transaction,
    month: Optional[MonthKey] = None,
) -> list[Transaction]:
    """
    Replace the transaction carrying the same id, wholesale.

    The edit is validated again, since model_copy(update=...) skips
    field validation.

    Raises:
        TransactionNotFoundError: If no transaction has that id
        pydantic.ValidationError: If the edit breaks a field constraint
    """
    idx = _index_of(transactions, updated.id, month)
    updated = Transaction.model_validate(updated.model_dump())
    result = list(transactions)
    result[idx] = updated
    return result


def set_transaction_status(
    transactions: Sequence[Transaction],
    transaction_id: str,
    status: TransactionStatus = TransactionStatus.CONFIRMED,
    month: Optional[MonthKey] = None,
) -> list[Transaction]:
    """
    Change only the status of one transaction.

    Confirming an already confirmed transaction is allowed and
    leaves it as it was.
    """
    idx = _index_of(transactions, transaction_id, month)
    result = list(transactions)
    result[idx] = result[idx].model_copy(update={"status": status})
    return result


def delete_transaction(
    transactions: Sequence[Transaction],
    transaction_id: str,
    month: Optional[MonthKey] = None,
) -> list[Transaction]:
    """Remove the transaction with the given id."""
    idx = _index_of(transactions, transaction_id, month)
    result = list(transactions)
    del result[idx]
    return result


def find_transaction(
    transactions: Sequence[Transaction],
    transaction_id: str,
    month: Optional[MonthKey] = None,
) -> Transaction:
    return transactions[_index_of(transactions, transaction_id, month)]
