"""
Tests for the ledger aggregation engine.

Covers the transaction store, the balance chain, the month aggregation,
filtering, the category registry and the yearly reports.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from ledger.engine import (
    CategoryRegistry,
    carry_amount_for,
    compute_month_totals,
    confirmed_net,
    delete_transaction,
    filter_transactions,
    find_transaction,
    insert_transaction,
    monthly_overview,
    resolve_balance_chain,
    set_transaction_status,
    top_expense_categories,
    update_transaction,
)
from ledger.errors import TransactionNotFoundError
from ledger.models.ledger import (
    INITIAL_CATEGORIES,
    MONTHS,
    FinanceState,
    MonthKey,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
    TypeFilter,
)


class TestTransactionStore:
    """Tests for the pure per-month transaction operations."""
    
    def test_insert_mints_id_and_prepends(self, make_tx):
        existing = [make_tx(10)]
        draft = TransactionDraft(
            description="Coffee",
            amount=Decimal("4.50"),
            type=TransactionType.EXPENSE,
            category="Alimentação",
        )
        result, created = insert_transaction(existing, draft)
        
        assert result[0] is created
        assert result[1] is existing[0]
        assert created.id
        assert created.description == "Coffee"
        assert len(existing) == 1  # input untouched
    
    def test_insert_ids_are_unique(self):
        draft = TransactionDraft(
            description="Bus", amount=Decimal("3"), type=TransactionType.EXPENSE, category="Transporte"
        )
        txs, first = insert_transaction([], draft)
        txs, second = insert_transaction(txs, draft)
        assert first.id != second.id
        assert [t.id for t in txs] == [second.id, first.id]
    
    def test_update_replaces_wholesale(self, make_tx):
        original = make_tx(10, description="Old")
        edited = original.model_copy(update={"description": "New", "amount": Decimal("20")})
        
        result = update_transaction([original], edited)
        
        assert result == [edited]
        assert original.description == "Old"
    
    def test_update_revalidates_edit(self, make_tx):
        original = make_tx(10)
        edited = original.model_copy(update={"amount": Decimal("-5")})
        
        with pytest.raises(ValidationError):
            update_transaction([original], edited)
    
    def test_update_unknown_id_raises(self, make_tx):
        stranger = make_tx(5)
        with pytest.raises(TransactionNotFoundError) as exc:
            update_transaction([make_tx(10)], stranger, MonthKey.MAY)
        assert exc.value.transaction_id == stranger.id
        assert exc.value.month == MonthKey.MAY
    
    def test_set_status_confirms_pending(self, make_tx):
        pending = make_tx(10, status=TransactionStatus.PENDING)
        result = set_transaction_status([pending], pending.id)
        
        assert result[0].status == TransactionStatus.CONFIRMED
        assert result[0].id == pending.id
        assert pending.status == TransactionStatus.PENDING
    
    def test_set_status_unknown_id_raises(self):
        with pytest.raises(TransactionNotFoundError):
            set_transaction_status([], "missing")
    
    def test_delete_removes_only_match(self, make_tx):
        a, b = make_tx(1), make_tx(2)
        assert delete_transaction([a, b], a.id) == [b]
    
    def test_delete_unknown_id_raises(self, make_tx):
        with pytest.raises(TransactionNotFoundError):
            delete_transaction([make_tx(1)], "")
    
    def test_find_transaction(self, make_tx):
        a = make_tx(1)
        assert find_transaction([a], a.id) is a


class TestBalanceChain:
    """Tests for the carry-over chain."""
    
    def test_scenario_a_first_month(self, scenario_state):
        assert resolve_balance_chain(scenario_state, MonthKey.JAN) == Decimal("600")
    
    def test_scenario_b_carry_into_february(self, scenario_state):
        assert resolve_balance_chain(scenario_state, MonthKey.FEB) == Decimal("500")
    
    def test_scenario_c_chain_broken_in_march(self, scenario_state):
        assert resolve_balance_chain(scenario_state, MonthKey.MAR) == Decimal("50")
    
    def test_scenario_d_pending_never_enters_chain(self, scenario_state, make_tx):
        for month in (MonthKey.JAN, MonthKey.FEB, MonthKey.MAR):
            scenario_state.months[month].transactions.append(
                make_tx(9999, TransactionType.EXPENSE, TransactionStatus.PENDING)
            )
        assert resolve_balance_chain(scenario_state, MonthKey.JAN) == Decimal("600")
        assert resolve_balance_chain(scenario_state, MonthKey.FEB) == Decimal("500")
        assert resolve_balance_chain(scenario_state, MonthKey.MAR) == Decimal("50")
    
    def test_non_carry_month_is_its_own_net(self, scenario_state):
        """Every month without carry-over resolves to its own confirmed net."""
        for month in MONTHS:
            ledger = scenario_state.months[month]
            if not ledger.settings.carry_over_balance:
                assert resolve_balance_chain(scenario_state, month) == confirmed_net(
                    ledger.transactions
                )
    
    def test_first_month_ignores_its_own_flag(self, scenario_state):
        scenario_state.months[MonthKey.JAN].settings.carry_over_balance = True
        assert resolve_balance_chain(scenario_state, MonthKey.JAN) == Decimal("600")
    
    def test_chain_runs_through_empty_months(self, scenario_state, make_tx):
        for month in (MonthKey.MAR, MonthKey.APR, MonthKey.MAY):
            scenario_state.months[month].settings.carry_over_balance = True
        scenario_state.months[MonthKey.MAY].transactions = [make_tx(25)]
        # Jan 600 -> Feb 500 -> Mar 550 -> Apr 550 (empty) -> May 575
        assert resolve_balance_chain(scenario_state, MonthKey.MAY) == Decimal("575")
    
    def test_missing_slot_contributes_zero(self, scenario_state):
        scenario_state.months[MonthKey.MAR].settings.carry_over_balance = True
        del scenario_state.months[MonthKey.FEB]
        # Feb skipped without a reset: 600 + 50
        assert resolve_balance_chain(scenario_state, MonthKey.MAR) == Decimal("650")
    
    def test_empty_state_is_zero(self):
        assert resolve_balance_chain(FinanceState(), MonthKey.DEC) == Decimal("0")


class TestAggregationView:
    """Tests for the headline figures of one month."""
    
    def test_first_month_carry_is_zero(self, scenario_state):
        scenario_state.months[MonthKey.JAN].settings.carry_over_balance = True
        assert carry_amount_for(scenario_state, MonthKey.JAN) == Decimal("0")
    
    def test_carry_comes_from_previous_month_chain(self, scenario_state):
        assert carry_amount_for(scenario_state, MonthKey.FEB) == Decimal("600")
        assert carry_amount_for(scenario_state, MonthKey.MAR) == Decimal("0")
    
    def test_formulas_against_hand_computed_fixture(self, scenario_state, make_tx):
        feb = scenario_state.months[MonthKey.FEB]
        feb.transactions += [
            make_tx(300, TransactionType.INCOME),
            make_tx(80, TransactionType.INCOME, TransactionStatus.PENDING),
            make_tx(120, TransactionType.EXPENSE, TransactionStatus.PENDING),
        ]
        totals = compute_month_totals(scenario_state, MonthKey.FEB)
        
        assert totals.carry_amount == Decimal("600")
        assert totals.confirmed_income == Decimal("300")
        assert totals.confirmed_expense == Decimal("100")
        assert totals.pending_income == Decimal("80")
        assert totals.pending_expense == Decimal("120")
        assert totals.net == Decimal("800")          # 600 + 300 - 100
        assert totals.projected == Decimal("760")    # 600 + 380 - 220
    
    def test_pending_expense_only_moves_projected(self, scenario_state, make_tx):
        before = compute_month_totals(scenario_state, MonthKey.JAN)
        scenario_state.months[MonthKey.JAN].transactions.append(
            make_tx(9999, TransactionType.EXPENSE, TransactionStatus.PENDING)
        )
        after = compute_month_totals(scenario_state, MonthKey.JAN)
        
        assert after.net == before.net == Decimal("600")
        assert after.projected == before.projected - Decimal("9999")
    
    def test_confirming_twice_leaves_totals_unchanged(self, scenario_state):
        jan = scenario_state.months[MonthKey.JAN]
        target = jan.transactions[0].id
        jan.transactions = set_transaction_status(jan.transactions, target)
        once = compute_month_totals(scenario_state, MonthKey.JAN)
        jan.transactions = set_transaction_status(jan.transactions, target)
        twice = compute_month_totals(scenario_state, MonthKey.JAN)
        assert once == twice
    
    def test_deletion_removes_from_sums(self, scenario_state):
        jan = scenario_state.months[MonthKey.JAN]
        rent = next(t for t in jan.transactions if t.description == "Rent")
        jan.transactions = delete_transaction(jan.transactions, rent.id)
        
        totals = compute_month_totals(scenario_state, MonthKey.JAN)
        assert totals.confirmed_expense == Decimal("0")
        assert totals.net == Decimal("1000")
        assert compute_month_totals(scenario_state, MonthKey.FEB).carry_amount == Decimal("1000")
    
    def test_untouched_month_is_all_zero(self):
        totals = compute_month_totals(FinanceState(), MonthKey.SEP)
        assert totals.net == totals.projected == Decimal("0")


class TestFilterTransactions:
    """Tests for the free-text and type filter."""
    
    def test_search_matches_description_or_category(self, make_tx):
        salary = make_tx(1000, description="Monthly Salary", category="Salário")
        rent = make_tx(400, TransactionType.EXPENSE, description="Rent", category="Moradia")
        
        assert filter_transactions([salary, rent], "salary") == [salary]
        assert filter_transactions([salary, rent], "MORADIA") == [rent]
        assert filter_transactions([salary, rent], "") == [salary, rent]
    
    def test_type_filter(self, make_tx):
        income = make_tx(10)
        expense = make_tx(5, TransactionType.EXPENSE)
        
        assert filter_transactions([income, expense], type_filter=TypeFilter.EXPENSE) == [expense]
        assert filter_transactions([income, expense], type_filter=TypeFilter.INCOME) == [income]
        assert filter_transactions([income, expense], type_filter=TypeFilter.ALL) == [income, expense]
    
    def test_filter_does_not_mutate(self, make_tx):
        txs = [make_tx(1, description="a"), make_tx(2, description="b")]
        filter_transactions(txs, "a")
        assert len(txs) == 2


class TestCategoryRegistry:
    """Tests for the category lookup table."""
    
    def test_seeded_with_initial_categories(self):
        registry = CategoryRegistry(FinanceState().categories)
        assert registry.names() == [c.name for c in INITIAL_CATEGORIES]
        assert registry.lookup("Moradia") == "5"
        assert registry.lookup("Unknown") is None
    
    def test_add_appends_with_next_id(self):
        state = FinanceState()
        category = CategoryRegistry(state.categories).add("  Pets ")
        
        assert category.name == "Pets"
        assert category.id == str(len(INITIAL_CATEGORIES) + 1)
        assert state.categories[-1] == category
    
    def test_add_existing_name_is_returned(self):
        state = FinanceState()
        registry = CategoryRegistry(state.categories)
        assert registry.add("Lazer").id == "9"
        assert len(registry) == len(INITIAL_CATEGORIES)
    
    def test_add_rejects_blank_name(self):
        with pytest.raises(ValueError):
            CategoryRegistry([]).add("   ")
    
    def test_registry_edits_do_not_touch_transactions(self, scenario_state):
        scenario_state.categories[4] = scenario_state.categories[4].model_copy(
            update={"name": "Casa"}
        )
        rent = scenario_state.months[MonthKey.JAN].transactions[1]
        assert rent.category == "Moradia"
    
    def test_seed_is_copied_per_state(self):
        first, second = FinanceState(), FinanceState()
        CategoryRegistry(first.categories).add("Pets")
        assert len(second.categories) == len(INITIAL_CATEGORIES)


class TestReports:
    """Tests for the yearly views."""
    
    def test_monthly_overview_counts_all_statuses(self, scenario_state, make_tx):
        scenario_state.months[MonthKey.JAN].transactions.append(
            make_tx(50, TransactionType.EXPENSE, TransactionStatus.PENDING)
        )
        overview = monthly_overview(scenario_state)
        
        assert [o.month for o in overview] == MONTHS
        assert overview[0].income == Decimal("1000")
        assert overview[0].expense == Decimal("450")
        assert overview[11].income == overview[11].expense == Decimal("0")
    
    def test_top_expense_categories(self, scenario_state, make_tx):
        scenario_state.months[MonthKey.APR].transactions = [
            make_tx(700, TransactionType.EXPENSE, category="Lazer"),
            make_tx(20, TransactionType.EXPENSE, category="Alimentação"),
            make_tx(5000, TransactionType.INCOME, category="Salário"),
        ]
        top = top_expense_categories(scenario_state, limit=2)
        
        assert [(c.name, c.total) for c in top] == [
            ("Lazer", Decimal("700")),
            ("Moradia", Decimal("400")),
        ]
    
    def test_top_expense_categories_empty(self):
        assert top_expense_categories(FinanceState()) == []
