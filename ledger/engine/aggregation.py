"""
Aggregation View

Headline figures for one month, recomputed from state on every call.
Nothing here mutates the state or caches results.
"""

from decimal import Decimal
from typing import Iterable

from ledger.engine.balance import resolve_balance_chain, sum_amounts
from ledger.models.ledger import (
    ZERO,
    FinanceState,
    MonthKey,
    MonthLedger,
    MonthTotals,
    Transaction,
    TransactionStatus,
    TransactionType,
    TypeFilter,
)


def carry_amount_for(state: FinanceState, month: MonthKey) -> Decimal:
    """
    Opening balance imported into ``month``.

    Zero when the month does not carry over or has no previous month;
    otherwise the resolved chain at the end of the previous month.
    """
    ledger = state.months.get(month) or MonthLedger()
    previous = month.previous
    if not ledger.settings.carry_over_balance or previous is None:
        return ZERO
    return resolve_balance_chain(state, previous)


def compute_month_totals(state: FinanceState, month: MonthKey) -> MonthTotals:
    """Compute carry, the four partition sums, net and projected for a month."""
    ledger = state.months.get(month) or MonthLedger()
    txs = ledger.transactions

    carry = carry_amount_for(state, month)
    confirmed_income = sum_amounts(txs, TransactionType.INCOME, TransactionStatus.CONFIRMED)
    confirmed_expense = sum_amounts(txs, TransactionType.EXPENSE, TransactionStatus.CONFIRMED)
    pending_income = sum_amounts(txs, TransactionType.INCOME, TransactionStatus.PENDING)
    pending_expense = sum_amounts(txs, TransactionType.EXPENSE, TransactionStatus.PENDING)

    return MonthTotals(
        month=month,
        carry_amount=carry,
        confirmed_income=confirmed_income,
        confirmed_expense=confirmed_expense,
        pending_income=pending_income,
        pending_expense=pending_expense,
        net=carry + confirmed_income - confirmed_expense,
        projected=(
            carry
            + (confirmed_income + pending_income)
            - (confirmed_expense + pending_expense)
        ),
    )


def filter_transactions(
    transactions: Iterable[Transaction],
    search: str = "",
    type_filter: TypeFilter = TypeFilter.ALL,
) -> list[Transaction]:
    """
    Case-insensitive substring match on description or category,
    combined with a type filter. Order is preserved.
    """
    needle = search.lower()
    results = []
    for tx in transactions:
        matches_search = needle in tx.description.lower() or needle in tx.category.lower()
        matches_type = type_filter == TypeFilter.ALL or tx.type.value == type_filter.value
        if matches_search and matches_type:
            results.append(tx)
    return results
