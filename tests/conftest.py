"""
Shared fixtures for ledger tests.

Fixtures hand out factories rather than objects so each test builds
exactly the ledger it needs.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger.config import get_settings
from ledger.models.ledger import (
    FinanceState,
    MonthKey,
    Transaction,
    TransactionStatus,
    TransactionType,
)


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch):
    """Keep tests away from any real .env and snapshot file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LEDGER_STORAGE_STATE_PATH", str(tmp_path / "state.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_tx():
    """Build a stored transaction with sensible defaults."""
    def _make(
        amount,
        tx_type: TransactionType = TransactionType.INCOME,
        status: TransactionStatus = TransactionStatus.CONFIRMED,
        description: str = "Item",
        category: str = "Outros",
        on: date = date(2024, 1, 15),
    ) -> Transaction:
        return Transaction(
            description=description,
            amount=Decimal(str(amount)),
            type=tx_type,
            status=status,
            category=category,
            date=on,
        )
    return _make


@pytest.fixture
def scenario_state(make_tx) -> FinanceState:
    """
    Jan: +1000 / -400 confirmed, no carry      -> chain 600
    Feb: carry, -100 confirmed                 -> chain 500
    Mar: no carry, +50 confirmed               -> chain 50
    """
    state = FinanceState()
    state.months[MonthKey.JAN].transactions = [
        make_tx(1000, TransactionType.INCOME, description="Salary"),
        make_tx(400, TransactionType.EXPENSE, description="Rent", category="Moradia"),
    ]
    feb = state.months[MonthKey.FEB]
    feb.settings.carry_over_balance = True
    feb.transactions = [
        make_tx(100, TransactionType.EXPENSE, description="Groceries", category="Alimentação",
                on=date(2024, 2, 3)),
    ]
    state.months[MonthKey.MAR].transactions = [
        make_tx(50, TransactionType.INCOME, description="Refund", on=date(2024, 3, 9)),
    ]
    return state
