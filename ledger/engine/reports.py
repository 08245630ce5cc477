"""
Yearly Reports

Whole-year views over the finance state: per-month income and expense,
and the categories that took the most money. Both count every
transaction regardless of status.
"""

from collections import defaultdict
from decimal import Decimal

from ledger.models.ledger import (
    MONTHS,
    ZERO,
    CategoryTotal,
    FinanceState,
    MonthOverview,
    TransactionType,
)


def monthly_overview(state: FinanceState) -> list[MonthOverview]:
    """Income and expense for every month, in calendar order."""
    overview = []
    for month in MONTHS:
        ledger = state.months.get(month)
        txs = ledger.transactions if ledger else []
        overview.append(MonthOverview(
            month=month,
            income=sum((t.amount for t in txs if t.type == TransactionType.INCOME), ZERO),
            expense=sum((t.amount for t in txs if t.type == TransactionType.EXPENSE), ZERO),
        ))
    return overview


def top_expense_categories(state: FinanceState, limit: int = 5) -> list[CategoryTotal]:
    """
    Expense totals per category name across the year, largest first.

    Ties keep the order in which categories were first seen.
    """
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for ledger in state.months.values():
        for tx in ledger.transactions:
            if tx.type == TransactionType.EXPENSE:
                totals[tx.category] += tx.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(name=name, total=total) for name, total in ranked[:limit]]
