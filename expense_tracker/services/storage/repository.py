"""
Tracker State Repository

Typed access to the three persisted slots on top of any
KeyValueStoreInterface:

    "expenses"  JSON list of Expense records
    "budget"    JSON number
    "darkMode"  JSON boolean

CRITICAL: This layer FAILS SOFT. A missing key, unreadable storage or
malformed content yields the default value; a failed write is logged and
audited. No exception ever escapes to the caller, and a failed write
never rolls back in-memory state.
"""

import json
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.expense import Expense, Preferences
from expense_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
)


EXPENSES_KEY = "expenses"
BUDGET_KEY = "budget"
DARK_MODE_KEY = "darkMode"

T = TypeVar("T")

_expense_list = TypeAdapter(list[Expense])
_stored_records = TypeAdapter(list[Any])
_budget = TypeAdapter(Decimal)
_flag = TypeAdapter(bool)


class TrackerStateRepository:
    """Reads and writes tracker state, falling back to defaults on any failure."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__)

    @property
    def store(self) -> KeyValueStoreInterface:
        return self._store

    # -------------------------------------------------------------------------
    # Generic read/write
    # -------------------------------------------------------------------------

    def _read(self, key: str, parse: Callable[[str], T], default: T) -> T:
        try:
            raw = self._store.get_item(key)
        except StorageError as e:
            self._report_read_failure(key, e)
            return default

        if raw is None:
            return default

        try:
            return parse(raw)
        except (ValidationError, ValueError) as e:
            self._report_read_failure(key, e)
            return default

    def _write(self, key: str, serialized: str) -> bool:
        try:
            self._store.set_item(key, serialized)
        except StorageError as e:
            self._logger.error("storage_write_failed", key=key, error=str(e))
            if self._audit_logger:
                self._audit_logger.log(
                    AuditEventBuilder.storage_write_failed(key, str(e))
                )
            return False
        return True

    def _report_read_failure(self, key: str, error: Exception) -> None:
        self._logger.warning("storage_read_failed", key=key, error=str(error))
        if self._audit_logger:
            self._audit_logger.log(
                AuditEventBuilder.storage_read_failed(key, str(error))
            )

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def load_expenses(self) -> list[Expense]:
        """
        Stored expense log, or an empty list.

        Records are validated one at a time; a record that fails is
        dropped and audited, and the rest still load.
        """
        records = self._read(EXPENSES_KEY, _stored_records.validate_json, [])
        expenses = []
        for index, record in enumerate(records):
            try:
                expenses.append(Expense.model_validate(record))
            except ValidationError as e:
                self._logger.warning("expense_record_dropped", index=index, error=str(e))
                if self._audit_logger:
                    self._audit_logger.log(
                        AuditEventBuilder.expense_record_dropped(index, str(e))
                    )
        return expenses

    def save_expenses(self, expenses: list[Expense]) -> bool:
        return self._write(
            EXPENSES_KEY,
            _expense_list.dump_json(list(expenses)).decode("utf-8"),
        )

    # -------------------------------------------------------------------------
    # Budget
    # -------------------------------------------------------------------------

    def load_budget(self, default: Decimal) -> Decimal:
        """Stored budget, or default. Non-finite values count as malformed."""
        return self._read(BUDGET_KEY, _parse_budget, default)

    def save_budget(self, budget: Decimal) -> bool:
        return self._write(BUDGET_KEY, _dump_number(budget))

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    def load_preferences(self) -> Preferences:
        dark_mode = self._read(DARK_MODE_KEY, _flag.validate_json, False)
        return Preferences(dark_mode=dark_mode)

    def save_preferences(self, preferences: Preferences) -> bool:
        return self._write(DARK_MODE_KEY, json.dumps(preferences.dark_mode))


def _parse_budget(raw: str) -> Decimal:
    value = _budget.validate_json(raw)
    if not value.is_finite():
        raise ValueError(f"Budget must be a finite number, got {raw!r}")
    return value


def _dump_number(value: Decimal) -> str:
    # str() of a finite Decimal is already a valid JSON number, at full precision.
    return str(value)
