"""
Balance Chain Resolver

Computes the cumulative confirmed balance up to and including a month.

RULES:
1. The scan always starts at the first calendar month, from zero.
2. Each later month whose own carry-over flag is OFF discards what
   was accumulated before it and starts fresh.
3. Only CONFIRMED transactions count. Pending items never enter
   the chain.
4. A month slot with no ledger contributes nothing and does not
   break the chain.

The flag checked at each step belongs to the month being folded in,
not to the target month.
"""

from decimal import Decimal
from typing import Iterable

from ledger.models.ledger import (
    MONTHS,
    ZERO,
    FinanceState,
    MonthKey,
    Transaction,
    TransactionStatus,
    TransactionType,
)


def sum_amounts(
    transactions: Iterable[Transaction],
    tx_type: TransactionType,
    status: TransactionStatus,
) -> Decimal:
    """Sum the amounts of one (type, status) partition."""
    return sum(
        (tx.amount for tx in transactions if tx.type == tx_type and tx.status == status),
        ZERO,
    )


def confirmed_net(transactions: Iterable[Transaction]) -> Decimal:
    """Confirmed income minus confirmed expense."""
    transactions = list(transactions)
    income = sum_amounts(transactions, TransactionType.INCOME, TransactionStatus.CONFIRMED)
    expense = sum_amounts(transactions, TransactionType.EXPENSE, TransactionStatus.CONFIRMED)
    return income - expense


def resolve_balance_chain(state: FinanceState, target: MonthKey) -> Decimal:
    """
    Cumulative confirmed balance at the end of ``target``.

    O(months) per call; the calendar is bounded at 12 slots.
    """
    cumulative = ZERO
    for idx, month in enumerate(MONTHS[: target.position + 1]):
        ledger = state.months.get(month)
        if ledger is None:
            continue
        if idx > 0 and not ledger.settings.carry_over_balance:
            cumulative = ZERO
        cumulative += confirmed_net(ledger.transactions)
    return cumulative
