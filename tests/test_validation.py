"""Tests for ledger-level transaction validation."""

from datetime import date
from decimal import Decimal

from ledger.config import AppSettings
from ledger.engine import CategoryRegistry
from ledger.models.ledger import (
    FinanceState,
    MonthKey,
    TransactionDraft,
    TransactionType,
)
from ledger.validation import TransactionValidator


def _draft(amount="10", category="Outros", on=date(2024, 1, 10)) -> TransactionDraft:
    return TransactionDraft(
        description="Item",
        amount=Decimal(amount),
        type=TransactionType.EXPENSE,
        category=category,
        date=on,
    )


class TestTransactionValidator:
    """Tests for TransactionValidator."""
    
    def setup_method(self):
        self.validator = TransactionValidator(AppSettings(max_transaction_amount=Decimal("1000")))
        self.registry = CategoryRegistry(FinanceState().categories)
    
    def test_clean_draft_has_no_issues(self):
        result = self.validator.validate(_draft(), MonthKey.JAN, self.registry)
        assert result.issues == []
        assert self.validator.get_user_friendly_summary(result) == "All checks passed."
    
    def test_amount_over_limit_is_error(self):
        result = self.validator.validate(_draft("1000.01"), MonthKey.JAN, self.registry)
        assert result.has_errors
        assert result.issues[0].issue_type == "too_large"
        assert "Cannot save" in self.validator.get_user_friendly_summary(result)
    
    def test_zero_amount_allowed_by_default(self):
        result = self.validator.validate(_draft("0"), MonthKey.JAN, self.registry)
        assert result.is_valid
    
    def test_zero_amount_rejected_when_configured(self):
        validator = TransactionValidator(AppSettings(allow_zero_amount=False))
        result = validator.validate(_draft("0"))
        assert [i.issue_type for i in result.issues] == ["zero_amount"]
    
    def test_unknown_category_is_warning(self):
        result = self.validator.validate(_draft(category="Crypto"), MonthKey.JAN, self.registry)
        assert result.is_valid
        assert [i.issue_type for i in result.warnings] == ["unknown_category"]
    
    def test_date_outside_month_is_warning(self):
        result = self.validator.validate(_draft(on=date(2024, 2, 1)), MonthKey.JAN, self.registry)
        assert result.is_valid
        assert [i.issue_type for i in result.warnings] == ["outside_month"]
        assert "double-check" in self.validator.get_user_friendly_summary(result)
    
    def test_checks_skipped_without_context(self):
        result = self.validator.validate(_draft(category="Crypto", on=date(2024, 7, 1)))
        assert result.issues == []
