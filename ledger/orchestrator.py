"""
Ledger Session Orchestrator

This module ties together the engine, validation, storage, logging and
the narrative advisor behind one object owned by the caller.

DESIGN DECISION: The session enforces the boundaries:
- Every mutation is applied to the in-memory state in a single step
- Every successful mutation is followed by a full snapshot write
- A failed write never undoes the mutation and is always reported
- Reads recompute from state; nothing is cached

There is no module-level state. Tests build a session around a fixture
FinanceState and an in-memory store.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledger.activity import ActivityLogger, configure_logging
from ledger.agents import NarrativeAdvisor
from ledger.config import get_settings
from ledger.engine import (
    CategoryRegistry,
    compute_month_totals,
    delete_transaction,
    filter_transactions,
    insert_transaction,
    monthly_overview,
    set_transaction_status,
    top_expense_categories,
    update_transaction,
)
from ledger.errors import LedgerValidationError, TransactionNotFoundError
from ledger.models.activity import ActivityEventType
from ledger.models.ledger import (
    Category,
    CategoryTotal,
    FinanceState,
    MonthKey,
    MonthOverview,
    MonthTotals,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TypeFilter,
)
from ledger.services.storage import (
    FinanceStateStorageInterface,
    GoogleSheetsStateStorage,
    InMemoryStateStorage,
    JsonFileStateStorage,
    SnapshotTooLargeError,
    StorageError,
)
from ledger.validation import TransactionValidator


class MutationResult(BaseModel):
    """
    Outcome of a mutation.

    The mutation itself always took effect when a result is returned.
    ``persisted`` says whether the snapshot write that followed succeeded.
    """

    persisted: bool
    error_message: Optional[str] = None
    transaction: Optional[Transaction] = None
    category: Optional[Category] = None


class LedgerSession:
    """
    One user's working session over a FinanceState.

    Mutating methods are async because they persist; read methods are
    plain functions of the current state.
    """

    def __init__(
        self,
        state: FinanceState,
        storage: Optional[FinanceStateStorageInterface] = None,
        validator: Optional[TransactionValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
        advisor: Optional[NarrativeAdvisor] = None,
        current_month: Optional[MonthKey] = None,
        save_attempts: int = 3,
    ):
        self._state = state
        self._storage = storage
        self._validator = validator
        self._activity_logger = activity_logger or ActivityLogger()
        self._advisor = advisor
        self._current_month = current_month or MonthKey.from_date(date.today())
        self._save_attempts = save_attempts
        self._dirty = False

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> FinanceState:
        return self._state

    @property
    def current_month(self) -> MonthKey:
        return self._current_month

    @property
    def dirty(self) -> bool:
        """True while in-memory changes are not yet in storage."""
        return self._dirty

    @property
    def categories(self) -> CategoryRegistry:
        return CategoryRegistry(self._state.categories)

    def select_month(self, month: MonthKey) -> None:
        self._current_month = month
        self._activity_logger.log_simple(
            ActivityEventType.MONTH_SELECTED,
            f"Month selected: {month.value}",
            month=month,
        )

    def _month(self, month: Optional[MonthKey]) -> MonthKey:
        return month or self._current_month

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _persist(self) -> tuple[bool, Optional[str]]:
        """
        Write the full snapshot, retrying transient storage errors.

        A snapshot that is too large for the backend fails on the first try.
        """
        if self._storage is None:
            return False, None

        try:
            async for attempt in AsyncRetrying(
                retry=(
                    retry_if_exception_type(StorageError)
                    & retry_if_not_exception_type(SnapshotTooLargeError)
                ),
                stop=stop_after_attempt(self._save_attempts),
                wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
                reraise=True,
            ):
                with attempt:
                    await self._storage.save(self._state)
        except StorageError as e:
            self._dirty = True
            self._activity_logger.log_save_failed(str(e))
            return False, str(e)

        self._dirty = False
        self._activity_logger.log_simple(
            ActivityEventType.STATE_SAVED,
            "Snapshot written",
        )
        return True, None

    async def _after_mutation(
        self,
        transaction: Optional[Transaction] = None,
        category: Optional[Category] = None,
    ) -> MutationResult:
        self._dirty = True
        persisted, error = await self._persist()
        return MutationResult(
            persisted=persisted,
            error_message=error,
            transaction=transaction,
            category=category,
        )

    async def flush(self) -> MutationResult:
        """Retry writing the snapshot after an earlier failure."""
        persisted, error = await self._persist()
        return MutationResult(persisted=persisted, error_message=error)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _validate(self, draft: TransactionDraft, month: MonthKey) -> None:
        if self._validator is None:
            return

        result = self._validator.validate(draft, month, self.categories)
        if result.has_errors:
            self._activity_logger.log_transaction_rejected(
                month,
                [
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                ],
            )
            raise LedgerValidationError(result)

        if result.warnings:
            self._activity_logger.log_simple(
                ActivityEventType.VALIDATION_WARNING,
                "Transaction accepted with warnings",
                month=month,
                details={"warnings": [i.message for i in result.warnings]},
            )

    async def add_transaction(
        self,
        draft: TransactionDraft,
        month: Optional[MonthKey] = None,
    ) -> MutationResult:
        """
        File a new transaction at the top of a month.

        Raises:
            LedgerValidationError: If the draft fails ledger checks
        """
        month = self._month(month)
        self._validate(draft, month)

        ledger = self._state.month(month)
        ledger.transactions, created = insert_transaction(ledger.transactions, draft)

        self._activity_logger.log_transaction_added(month, created)
        return await self._after_mutation(transaction=created)

    async def update_transaction(
        self,
        transaction: Transaction,
        month: Optional[MonthKey] = None,
    ) -> MutationResult:
        """
        Replace a transaction (matched by id) with an edited copy.

        Raises:
            TransactionNotFoundError: If the id is not in the month
            LedgerValidationError: If the edit fails ledger checks
            pydantic.ValidationError: If the edit breaks a field constraint
        """
        month = self._month(month)
        self._validate(transaction, month)

        ledger = self._state.month(month)
        try:
            ledger.transactions = update_transaction(ledger.transactions, transaction, month)
        except TransactionNotFoundError:
            self._activity_logger.log_transaction_not_found(month, transaction.id)
            raise

        stored = next(t for t in ledger.transactions if t.id == transaction.id)
        self._activity_logger.log_transaction_updated(month, stored)
        return await self._after_mutation(transaction=stored)

    async def confirm_transaction(
        self,
        transaction_id: str,
        month: Optional[MonthKey] = None,
    ) -> MutationResult:
        """
        Mark a pending transaction as settled.

        Raises:
            TransactionNotFoundError: If the id is not in the month
        """
        month = self._month(month)
        ledger = self._state.month(month)
        try:
            ledger.transactions = set_transaction_status(
                ledger.transactions, transaction_id, TransactionStatus.CONFIRMED, month
            )
        except TransactionNotFoundError:
            self._activity_logger.log_transaction_not_found(month, transaction_id)
            raise

        confirmed = next(t for t in ledger.transactions if t.id == transaction_id)
        self._activity_logger.log_transaction_confirmed(month, transaction_id)
        return await self._after_mutation(transaction=confirmed)

    async def delete_transaction(
        self,
        transaction_id: str,
        month: Optional[MonthKey] = None,
    ) -> MutationResult:
        """
        Remove a transaction for good.

        Raises:
            TransactionNotFoundError: If the id is not in the month
        """
        month = self._month(month)
        ledger = self._state.month(month)
        try:
            ledger.transactions = delete_transaction(ledger.transactions, transaction_id, month)
        except TransactionNotFoundError:
            self._activity_logger.log_transaction_not_found(month, transaction_id)
            raise

        self._activity_logger.log_transaction_deleted(month, transaction_id)
        return await self._after_mutation()

    async def toggle_carry_over(self, month: Optional[MonthKey] = None) -> MutationResult:
        """Flip whether a month imports the previous month's balance."""
        month = self._month(month)
        settings = self._state.month(month).settings
        settings.carry_over_balance = not settings.carry_over_balance

        self._activity_logger.log_carry_over_toggled(month, settings.carry_over_balance)
        return await self._after_mutation()

    async def add_category(self, name: str) -> MutationResult:
        """Register a category name (existing names are returned as-is)."""
        registry = self.categories
        before = len(registry)
        category = registry.add(name)
        if len(registry) == before:
            return MutationResult(
                persisted=self._storage is not None and not self._dirty,
                category=category,
            )

        self._activity_logger.log_simple(
            ActivityEventType.CATEGORY_ADDED,
            f"Category added: {category.name}",
            details={"category_id": category.id},
        )
        return await self._after_mutation(category=category)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def transactions(self, month: Optional[MonthKey] = None) -> list[Transaction]:
        return list(self._state.month(self._month(month)).transactions)

    def totals(self, month: Optional[MonthKey] = None) -> MonthTotals:
        return compute_month_totals(self._state, self._month(month))

    def filtered_transactions(
        self,
        search: str = "",
        type_filter: TypeFilter = TypeFilter.ALL,
        month: Optional[MonthKey] = None,
    ) -> list[Transaction]:
        return filter_transactions(self.transactions(month), search, type_filter)

    def yearly_overview(self) -> list[MonthOverview]:
        return monthly_overview(self._state)

    def top_expense_categories(self, limit: int = 5) -> list[CategoryTotal]:
        return top_expense_categories(self._state, limit)

    async def advise(self, month: Optional[MonthKey] = None) -> str:
        """
        Written advice on a month from the narrative service.

        The answer is display-only; it never touches the ledger.
        """
        month = self._month(month)
        if self._advisor is None:
            self._advisor = NarrativeAdvisor(activity_logger=self._activity_logger)
        return await self._advisor.advise(month, self.transactions(month))


def create_storage(backend: Optional[str] = None) -> FinanceStateStorageInterface:
    """Build the storage backend named in settings (or ``backend``)."""
    backend = backend or get_settings().storage.backend
    if backend == "google_sheets":
        return GoogleSheetsStateStorage()
    if backend == "memory":
        return InMemoryStateStorage()
    return JsonFileStateStorage()


async def create_ledger_session(
    storage: Optional[FinanceStateStorageInterface] = None,
    current_month: Optional[MonthKey] = None,
    advisor: Optional[NarrativeAdvisor] = None,
) -> LedgerSession:
    """
    Factory function to create a ready-to-use session.

    Loads the stored snapshot, or seeds an empty 12-month ledger with
    the initial categories and writes it. Load errors propagate: an
    unreadable snapshot is never replaced by an empty ledger.
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    activity_logger = ActivityLogger()
    storage = storage or create_storage()

    state = await storage.load()
    seeded = state is None
    if seeded:
        state = FinanceState()
        activity_logger.log_simple(ActivityEventType.STATE_SEEDED, "Seeded empty ledger")
    else:
        activity_logger.log_simple(ActivityEventType.STATE_LOADED, "Ledger loaded from storage")

    session = LedgerSession(
        state=state,
        storage=storage,
        validator=TransactionValidator(settings.app),
        activity_logger=activity_logger,
        advisor=advisor,
        current_month=current_month,
        save_attempts=settings.storage.save_attempts,
    )
    if seeded:
        await session.flush()
    return session
