"""
Flow tests for the ExpenseTracker facade.

Storage is an in-memory key-value store; speech is never started.
"""

import datetime as dt
import json
from decimal import Decimal
from uuid import uuid4

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.config import Settings
from expense_tracker.models.audit import AuditEventType
from expense_tracker.models.expense import BudgetStatus, DraftExpense, ExpenseCategory
from expense_tracker.orchestrator import (
    RECEIPT_ACKNOWLEDGEMENT,
    ExpenseTracker,
    create_app_components,
)
from expense_tracker.services.speech import SpeechCaptureAdapter, SpeechUnavailableError
from expense_tracker.services.storage import (
    BUDGET_KEY,
    DARK_MODE_KEY,
    EXPENSES_KEY,
    InMemoryKeyValueStore,
    StorageWriteError,
    TrackerStateRepository,
)


TODAY = dt.date(2024, 3, 15)


class ReadOnlyStore(InMemoryKeyValueStore):
    """Store that rejects every write."""

    def set_item(self, key, value):
        raise StorageWriteError("storage full")


def event_types(audit_logger):
    return [event.event_type for event in audit_logger.history]


def add(tracker, amount, category="Food", description=""):
    return tracker.add_expense(
        DraftExpense(amount=amount, category=category, description=description),
        today=TODAY,
    )


class TestAddExpense:

    def test_add_valid_draft(self, tracker, audit_logger):
        expense = add(tracker, "12.50", "Food", "lunch")
        assert expense.amount == Decimal("12.50")
        assert expense.category == ExpenseCategory.FOOD
        assert expense.date == TODAY
        assert tracker.expenses == (expense,)
        assert event_types(audit_logger)[-1] == AuditEventType.EXPENSE_ADDED

    def test_empty_description_becomes_category(self, tracker):
        assert add(tracker, "8", "Transport").description == "Transport"

    def test_amount_uses_leading_number(self, tracker):
        assert add(tracker, "12abc").amount == Decimal("12")

    @pytest.mark.parametrize("amount, category", [
        ("", "Food"),
        ("abc", "Food"),
        ("5", ""),
    ])
    def test_invalid_draft_changes_nothing(self, tracker, audit_logger, amount, category):
        assert add(tracker, amount, category) is None
        assert tracker.expenses == ()
        assert event_types(audit_logger)[-1] == AuditEventType.EXPENSE_REJECTED

    def test_add_persists_immediately(self, tracker, kv_store):
        add(tracker, "3", "Health")
        stored = json.loads(kv_store.get_item(EXPENSES_KEY))
        assert len(stored) == 1
        assert stored[0]["category"] == "Health"

    def test_write_failure_keeps_in_memory_state(self):
        """A failed write is reported, never rolled back."""
        audit_logger = AuditLogger()
        repository = TrackerStateRepository(ReadOnlyStore(), audit_logger=audit_logger)
        tracker = ExpenseTracker(repository=repository, audit_logger=audit_logger)
        tracker.load()

        expense = add(tracker, "10")

        assert tracker.expenses == (expense,)
        assert AuditEventType.STORAGE_WRITE_FAILED in event_types(audit_logger)


class TestDeleteExpense:

    def test_delete(self, tracker, kv_store):
        first = add(tracker, "1")
        second = add(tracker, "2")
        assert tracker.delete_expense(first.id) is True
        assert tracker.expenses == (second,)
        assert len(json.loads(kv_store.get_item(EXPENSES_KEY))) == 1

    def test_delete_unknown_id(self, tracker, audit_logger):
        add(tracker, "1")
        assert tracker.delete_expense(uuid4()) is False
        assert len(tracker.expenses) == 1
        assert audit_logger.history[-1].details["found"] is False


class TestLoad:

    def test_defaults_on_empty_storage(self, tracker):
        assert tracker.expenses == ()
        assert tracker.budget == Decimal("1000")
        assert tracker.preferences.dark_mode is False

    def test_state_survives_reload(self, tracker, kv_store):
        expense = add(tracker, "4.75", "Bills", "water")
        tracker.set_budget(Decimal("250"))
        tracker.set_dark_mode(True)

        reloaded = ExpenseTracker(repository=TrackerStateRepository(kv_store))
        reloaded.load()

        assert reloaded.expenses == (expense,)
        assert reloaded.budget == Decimal("250")
        assert reloaded.preferences.dark_mode is True

    def test_corrupt_expenses_load_as_empty(self, audit_logger):
        store = InMemoryKeyValueStore({EXPENSES_KEY: "not json", BUDGET_KEY: "300"})
        tracker = ExpenseTracker(
            repository=TrackerStateRepository(store, audit_logger=audit_logger),
            audit_logger=audit_logger,
        )
        tracker.load()
        assert tracker.expenses == ()
        assert tracker.budget == Decimal("300")
        assert AuditEventType.STORAGE_READ_FAILED in event_types(audit_logger)

    def test_one_bad_record_keeps_the_rest(self, make_expense, audit_logger):
        """Test that a single invalid record neither empties nor overwrites the log."""
        good = make_expense("12", "Food", "lunch")
        bad = {**json.loads(good.model_dump_json()), "id": str(uuid4()), "amount": "oops"}
        raw = json.dumps([json.loads(good.model_dump_json()), bad])
        store = InMemoryKeyValueStore({EXPENSES_KEY: raw})
        tracker = ExpenseTracker(
            repository=TrackerStateRepository(store, audit_logger=audit_logger),
            audit_logger=audit_logger,
        )

        tracker.load()

        assert tracker.expenses == (good,)
        assert store.get_item(EXPENSES_KEY) == raw
        dropped = [
            e for e in audit_logger.history
            if e.event_type == AuditEventType.STORAGE_READ_FAILED
        ]
        assert [e.details for e in dropped] == [{"key": "expenses", "index": 1}]

    def test_unreadable_log_is_not_overwritten_on_load(self):
        store = InMemoryKeyValueStore({EXPENSES_KEY: "not json"})
        tracker = ExpenseTracker(repository=TrackerStateRepository(store))
        tracker.load()
        assert tracker.expenses == ()
        assert store.get_item(EXPENSES_KEY) == "not json"

    def test_next_change_rewrites_the_log(self):
        store = InMemoryKeyValueStore({EXPENSES_KEY: "not json"})
        tracker = ExpenseTracker(repository=TrackerStateRepository(store))
        tracker.load()
        add(tracker, "7")
        assert len(json.loads(store.get_item(EXPENSES_KEY))) == 1


class TestBudgetAndPreferences:

    def test_set_budget_persists_number(self, tracker, kv_store):
        tracker.set_budget(Decimal("250"))
        assert tracker.budget == Decimal("250")
        assert kv_store.get_item(BUDGET_KEY) == "250"

    def test_zero_and_negative_budgets_accepted(self, tracker):
        tracker.set_budget(Decimal("0"))
        assert tracker.budget == 0
        tracker.set_budget(Decimal("-5"))
        assert tracker.budget == Decimal("-5")

    def test_non_finite_budget_ignored(self, tracker):
        tracker.set_budget(float("inf"))
        assert tracker.budget == Decimal("1000")

    def test_dark_mode_persists(self, tracker, kv_store, audit_logger):
        tracker.set_dark_mode(True)
        assert tracker.preferences.dark_mode is True
        assert kv_store.get_item(DARK_MODE_KEY) == "true"
        assert event_types(audit_logger)[-1] == AuditEventType.PREFERENCE_UPDATED


class TestVoiceAndReceipts:

    def test_transcript_fills_draft(self, tracker, audit_logger):
        draft = tracker.handle_transcript("add 45.50 dollars for groceries shopping")
        assert draft == DraftExpense(amount="45.50", category="Groceries", description="shopping")
        assert event_types(audit_logger)[-1] == AuditEventType.VOICE_COMMAND_PARSED
        # the draft is not added until confirmed
        assert tracker.expenses == ()

        expense = tracker.add_expense(draft, today=TODAY)
        assert expense.amount == Decimal("45.50")
        assert expense.category == ExpenseCategory.GROCERIES

    def test_transcript_without_amount(self, tracker, audit_logger):
        assert tracker.handle_transcript("bought lunch") is None
        assert event_types(audit_logger)[-1] == AuditEventType.VOICE_COMMAND_NO_MATCH

    def test_blank_transcript_is_ignored(self, tracker, audit_logger):
        before = len(audit_logger.history)
        assert tracker.handle_transcript("   ") is None
        assert len(audit_logger.history) == before

    def test_receipt_does_not_touch_log(self, tracker, audit_logger):
        add(tracker, "5")
        before = tracker.expenses
        assert tracker.capture_receipt("receipt.jpg") == RECEIPT_ACKNOWLEDGEMENT
        assert tracker.expenses == before
        assert event_types(audit_logger)[-1] == AuditEventType.RECEIPT_CAPTURED

    def test_receipt_without_file(self, tracker):
        assert tracker.capture_receipt(None) is None


class TestSummaryAndReport:

    def test_summary_scenario(self, tracker):
        tracker.set_budget(Decimal("100"))
        add(tracker, "30", "Food")
        add(tracker, "20", "Food")
        add(tracker, "10", "Bills")

        summary = tracker.summary()

        assert summary.total == Decimal("60")
        assert summary.remaining == Decimal("40")
        assert summary.status == BudgetStatus.OK
        assert [(c.name, c.value) for c in summary.by_category] == [
            ("Food", Decimal("50")),
            ("Bills", Decimal("10")),
        ]

    def test_export_report(self, tracker, audit_logger):
        tracker.set_budget(Decimal("100"))
        add(tracker, "30", "Food", "lunch")
        add(tracker, "10", "Bills")

        text = tracker.export_report()

        assert text.splitlines() == [
            "Expense Report",
            "",
            "Total Expenses: $40.00",
            "Budget: $100",
            "Remaining: $60.00",
            "",
            "Expenses:",
            "2024-03-15 - Food: $30 (lunch)",
            "2024-03-15 - Bills: $10 (Bills)",
        ]
        assert event_types(audit_logger)[-1] == AuditEventType.REPORT_EXPORTED

    def test_report_data_is_a_snapshot(self, tracker):
        add(tracker, "1")
        report = tracker.report()
        add(tracker, "2")
        assert len(report.expenses) == 1


class TestCreateAppComponents:

    @pytest.fixture(autouse=True)
    def memory_backend(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_STORAGE_BACKEND", "memory")

    def test_components_are_wired(self):
        def no_microphone():
            raise SpeechUnavailableError("No input device found")

        adapter = SpeechCaptureAdapter(recognizer=object(), availability_check=no_microphone)
        tracker, speech, audit_logger = create_app_components(
            settings=Settings(),
            speech_adapter=adapter,
        )

        assert speech is adapter
        assert tracker.budget == Decimal("1000")
        types = event_types(audit_logger)
        assert AuditEventType.EXPENSES_LOADED in types
        assert AuditEventType.SPEECH_UNAVAILABLE in types

    def test_speech_disabled(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_SPEECH_ENABLED", "false")
        monkeypatch.setenv("DEFAULT_BUDGET", "500")
        tracker, speech, _ = create_app_components(settings=Settings())
        assert speech is None
        assert tracker.budget == Decimal("500")

    def test_given_store_is_used(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_SPEECH_ENABLED", "false")
        store = InMemoryKeyValueStore({BUDGET_KEY: "42"})
        tracker, _, _ = create_app_components(settings=Settings(), key_value_store=store)
        assert tracker.budget == Decimal("42")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
