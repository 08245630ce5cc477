"""Ledger aggregation engine."""

from ledger.engine.aggregation import (
    carry_amount_for,
    compute_month_totals,
    filter_transactions,
)
from ledger.engine.balance import confirmed_net, resolve_balance_chain, sum_amounts
from ledger.engine.categories import CategoryRegistry
from ledger.engine.reports import monthly_overview, top_expense_categories
from ledger.engine.transactions import (
    delete_transaction,
    find_transaction,
    insert_transaction,
    set_transaction_status,
    update_transaction,
)

__all__ = [
    "CategoryRegistry",
    "carry_amount_for",
    "compute_month_totals",
    "confirmed_net",
    "delete_transaction",
    "filter_transactions",
    "find_transaction",
    "insert_transaction",
    "monthly_overview",
    "resolve_balance_chain",
    "set_transaction_status",
    "sum_amounts",
    "top_expense_categories",
    "update_transaction",
]
