"""
Main Orchestrator for the Expense Tracker

Ties the components together and defines the user-facing flows:
1. Voice entry   (transcript -> parse -> draft shown in the form)
2. Manual entry  (draft -> validate -> confirm -> append -> persist)
3. Budgeting     (set budget -> persist -> summaries recomputed)
4. Reporting     (current log + budget -> report data -> text report)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the log without an explicit add_expense() call
- The log changes only through the ExpenseStore transitions
- Every change is persisted immediately and audited
- Storage and parsing failures are absorbed here; the UI never sees them
"""

import datetime as dt
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.config import Settings, get_settings
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.expense import (
    BudgetSummary,
    DraftExpense,
    Expense,
    Preferences,
    ReportData,
)
from expense_tracker.parsing import parse_voice_command
from expense_tracker.queries import aggregation
from expense_tracker.reports import build_report_data, render_text_report
from expense_tracker.services.speech import SpeechCaptureAdapter
from expense_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    TrackerStateRepository,
)
from expense_tracker.store import ExpenseStore
from expense_tracker.validation import DraftValidator


RECEIPT_ACKNOWLEDGEMENT = (
    "Receipt captured! Automatic extraction is not available, "
    "please enter the expense manually."
)


class ExpenseTracker:
    """
    Application facade used by the UI.

    Holds the expense store, the budget and the display preferences, and
    keeps the key-value store in sync with them.
    """

    def __init__(
        self,
        repository: TrackerStateRepository,
        store: Optional[ExpenseStore] = None,
        validator: Optional[DraftValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        default_budget: Decimal = Decimal("1000"),
        alert_percent: float = aggregation.DEFAULT_ALERT_PERCENT,
        recent_limit: int = aggregation.DEFAULT_RECENT_LIMIT,
    ):
        self._repository = repository
        self._store = store or ExpenseStore()
        self._validator = validator or DraftValidator()
        self._audit_logger = audit_logger
        self._default_budget = default_budget
        self._alert_percent = alert_percent
        self._recent_limit = recent_limit
        self._logger = structlog.get_logger(__name__)

        self._budget = default_budget
        self._preferences = Preferences()
        self._hydrating = False

        self._store.subscribe(self._persist_expenses)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def store(self) -> ExpenseStore:
        return self._store

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return self._store.expenses

    @property
    def budget(self) -> Decimal:
        return self._budget

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    def load(self) -> None:
        """
        Hydrate expenses, budget and preferences from storage.

        Hydration never writes the log back: records that failed to load
        stay in storage until the next real change to the log.
        """
        expenses = self._repository.load_expenses()
        self._hydrating = True
        try:
            self._store.replace_all(expenses)
        finally:
            self._hydrating = False
        self._budget = self._repository.load_budget(self._default_budget)
        self._preferences = self._repository.load_preferences()
        self._audit(AuditEventBuilder.expenses_loaded(len(self._store)))

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def add_expense(
        self,
        draft: DraftExpense,
        today: Optional[dt.date] = None,
    ) -> Optional[Expense]:
        """
        Confirm a draft and append it to the log.

        Returns None, and changes nothing, when the draft has no usable
        amount or no category.
        """
        result = self._validator.validate(draft)
        if not result.is_valid:
            self._audit(AuditEventBuilder.expense_rejected(
                [issue.model_dump() for issue in result.issues]
            ))
            return None

        candidate = Expense(
            amount=result.amount,
            category=result.category,
            description=draft.description,
            date=today or dt.date.today(),
        )
        expense = self._store.append(candidate)
        self._audit(AuditEventBuilder.expense_added(
            expense_id=expense.id,
            category=expense.category.value,
            amount=str(expense.amount),
        ))
        return expense

    def delete_expense(self, expense_id: UUID) -> bool:
        """Remove an expense. Unknown ids are ignored."""
        found = self._store.remove_by_id(expense_id)
        self._audit(AuditEventBuilder.expense_deleted(expense_id, found))
        return found

    def _persist_expenses(self, expenses: list[Expense]) -> None:
        if self._hydrating:
            return
        self._repository.save_expenses(expenses)

    # -------------------------------------------------------------------------
    # Budget and preferences
    # -------------------------------------------------------------------------

    def set_budget(self, budget: Decimal) -> None:
        """Change the budget and persist it. Any finite value is accepted."""
        budget = Decimal(str(budget))
        if not budget.is_finite():
            self._logger.warning("budget_rejected", budget=str(budget))
            return
        old_budget, self._budget = self._budget, budget
        self._repository.save_budget(budget)
        self._audit(AuditEventBuilder.budget_updated(str(old_budget), str(budget)))

    def set_dark_mode(self, enabled: bool) -> None:
        self._preferences = self._preferences.model_copy(update={"dark_mode": enabled})
        self._repository.save_preferences(self._preferences)
        self._audit(AuditEventBuilder.preference_updated("dark_mode", enabled))

    # -------------------------------------------------------------------------
    # Voice entry and receipts
    # -------------------------------------------------------------------------

    def handle_transcript(self, transcript: str) -> Optional[DraftExpense]:
        """
        Turn a FINAL transcript into a draft for the add-expense form.

        Returns None when the transcript has no amount; the form is left
        untouched in that case.
        """
        if not transcript or not transcript.strip():
            return None

        draft = parse_voice_command(transcript)
        if draft is None:
            self._audit(AuditEventBuilder.voice_command_no_match(transcript))
            return None

        self._audit(AuditEventBuilder.voice_command_parsed(
            transcript=transcript,
            amount=draft.amount,
            category=draft.category,
        ))
        return draft

    def capture_receipt(self, filename: Optional[str]) -> Optional[str]:
        """
        Acknowledge a receipt image.

        No extraction happens and the log is not touched. Returns the
        message to show, or None when no file was selected.
        """
        if not filename:
            return None
        self._audit(AuditEventBuilder.receipt_captured(filename))
        return RECEIPT_ACKNOWLEDGEMENT

    # -------------------------------------------------------------------------
    # Summaries and reports
    # -------------------------------------------------------------------------

    def summary(self) -> BudgetSummary:
        return aggregation.summarize(
            self._budget,
            self._store.expenses,
            alert_percent=self._alert_percent,
            recent_limit=self._recent_limit,
        )

    def report(self) -> ReportData:
        return build_report_data(self._budget, self._store.expenses)

    def export_report(self) -> str:
        data = self.report()
        self._audit(AuditEventBuilder.report_exported(
            expense_count=len(data.expenses),
            total=str(data.total),
        ))
        return render_text_report(data)

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)


def create_key_value_store(settings: Settings) -> KeyValueStoreInterface:
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(storage.path)


def create_app_components(
    settings: Optional[Settings] = None,
    key_value_store: Optional[KeyValueStoreInterface] = None,
    speech_adapter: Optional[SpeechCaptureAdapter] = None,
) -> tuple[ExpenseTracker, Optional[SpeechCaptureAdapter], AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        settings: Configuration; defaults to get_settings()
        key_value_store: Overrides the configured storage backend
        speech_adapter: Overrides the default speech adapter

    Returns:
        (tracker, speech_adapter, audit_logger). speech_adapter is None
        when voice entry is disabled. Without a microphone backend the
        adapter can still transcribe recorded clips, but start() returns
        False. The tracker is already loaded from storage.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    speech_settings = settings.speech

    audit_logger = AuditLogger(history_size=app_settings.audit_history_size)
    repository = TrackerStateRepository(
        key_value_store or create_key_value_store(settings),
        audit_logger=audit_logger,
    )

    tracker = ExpenseTracker(
        repository=repository,
        audit_logger=audit_logger,
        default_budget=app_settings.default_budget,
        alert_percent=app_settings.budget_alert_percent,
        recent_limit=app_settings.recent_expense_limit,
    )
    tracker.load()

    if speech_adapter is None and speech_settings.enabled:
        speech_adapter = SpeechCaptureAdapter(
            language=speech_settings.language,
            phrase_time_limit=speech_settings.phrase_time_limit,
        )
    if speech_adapter is not None and not speech_adapter.is_available:
        audit_logger.log(AuditEventBuilder.speech_unavailable(
            speech_adapter.unavailable_reason or "unknown"
        ))

    return tracker, speech_adapter, audit_logger
