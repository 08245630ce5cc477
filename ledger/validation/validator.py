"""
Transaction Validation

DESIGN DECISION: Validation happens in two layers.

LAYER 1 - SCHEMA (pydantic, at draft construction):
- Non-empty description
- Non-negative, finite amount
- Known type and status

LAYER 2 - LEDGER CHECKS (this module):
- Amount sanity against configured limits
- Category present in the registry
- Transaction date inside the month it is filed under

Only amount problems are errors. Category and date mismatches are
warnings: the ledger tolerates broken category references and
free-form dates, it just reports them.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them to the caller.
"""

from typing import Optional

from ledger.config import AppSettings, get_settings
from ledger.engine.categories import CategoryRegistry
from ledger.models.ledger import (
    MonthKey,
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)


class TransactionValidator:
    """Checks a draft before it is inserted into, or replaced in, a month."""
    
    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app
    
    def _check_amount(self, draft: TransactionDraft) -> list[ValidationIssue]:
        issues = []
        
        if draft.amount > self._settings.max_transaction_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_large",
                message=(
                    f"Amount {draft.amount} exceeds the limit of "
                    f"{self._settings.max_transaction_amount}"
                ),
                severity="error",
                suggested_fix="Check for a misplaced decimal separator",
            ))
        
        if draft.amount == 0 and not self._settings.allow_zero_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="zero_amount",
                message="Amount must be greater than zero",
                severity="error",
            ))
        
        return issues
    
    def _check_category(
        self,
        draft: TransactionDraft,
        registry: Optional[CategoryRegistry],
    ) -> list[ValidationIssue]:
        if registry is None or registry.contains(draft.category):
            return []
        return [ValidationIssue(
            field="category",
            issue_type="unknown_category",
            message=f"Category '{draft.category}' is not registered",
            severity="warning",
            suggested_fix="Pick a registered category or add this one first",
        )]
    
    def _check_date(
        self,
        draft: TransactionDraft,
        month: Optional[MonthKey],
    ) -> list[ValidationIssue]:
        if month is None or MonthKey.from_date(draft.date) == month:
            return []
        return [ValidationIssue(
            field="date",
            issue_type="outside_month",
            message=(
                f"Date {draft.date.isoformat()} falls outside {month.value}"
            ),
            severity="warning",
        )]
    
    def validate(
        self,
        draft: TransactionDraft,
        month: Optional[MonthKey] = None,
        registry: Optional[CategoryRegistry] = None,
    ) -> ValidationResult:
        """
        Run all ledger checks.
        
        Args:
            draft: The draft (or full transaction) to check
            month: Month the transaction is filed under; skips the date check when None
            registry: Category registry; skips the category check when None
            
        Returns:
            ValidationResult with every issue found
        """
        issues = []
        issues.extend(self._check_amount(draft))
        issues.extend(self._check_category(draft, registry))
        issues.extend(self._check_date(draft, month))
        return ValidationResult(issues=issues)
    
    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Render a result as short lines suitable for display."""
        if not result.issues:
            return "All checks passed."
        
        lines = []
        errors = [i for i in result.issues if i.severity == "error"]
        if errors:
            lines.append("Cannot save this transaction:")
            for issue in errors:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     {issue.suggested_fix}")
        
        if result.warnings:
            lines.append("Please double-check:")
            for issue in result.warnings:
                lines.append(f"   • {issue.message}")
        
        return "\n".join(lines)
