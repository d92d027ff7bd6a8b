"""
Expense Store

The single authoritative, ordered log of expenses.

CRITICAL: Callers never mutate the log directly. There are exactly three
transitions:
- append(candidate)       add one record at the end with a fresh id
- remove_by_id(id)        drop one record; unknown ids are a no-op
- replace_all(records)    bulk overwrite, used to hydrate at startup

There is no update-in-place. Every transition runs to completion before
listeners are told about it, so a listener that fails (e.g. a storage
write) can never leave the log half-changed.
"""

from typing import Callable, Iterable, Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.models.expense import Expense


logger = structlog.get_logger(__name__)

ChangeListener = Callable[[list[Expense]], None]


class ExpenseStore:
    """Owns the expense log and notifies listeners after every transition."""

    def __init__(self, records: Optional[Iterable[Expense]] = None):
        self._log: list[Expense] = []
        self._listeners: list[ChangeListener] = []
        if records is not None:
            self._log = _unique_by_id(records)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """Snapshot of the log in insertion order."""
        return tuple(self._log)

    def __len__(self) -> int:
        return len(self._log)

    def __iter__(self):
        return iter(tuple(self._log))

    def __contains__(self, expense_id: object) -> bool:
        return any(expense.id == expense_id for expense in self._log)

    def get(self, expense_id: UUID) -> Optional[Expense]:
        for expense in self._log:
            if expense.id == expense_id:
                return expense
        return None

    def subscribe(self, listener: ChangeListener) -> None:
        """Call listener with the new log after every transition."""
        self._listeners.append(listener)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def append(self, candidate: Expense) -> Expense:
        """
        Append a record with a freshly assigned id.

        Any id already on the candidate is ignored.
        """
        record = candidate.model_copy(update={"id": self._new_id()})
        self._log = [*self._log, record]
        logger.debug("expense_appended", expense_id=str(record.id))
        self._notify()
        return record

    def remove_by_id(self, expense_id: UUID) -> bool:
        """
        Remove the record with this id.

        Returns False (and changes nothing) if no such record exists.
        """
        remaining = [expense for expense in self._log if expense.id != expense_id]
        if len(remaining) == len(self._log):
            return False
        self._log = remaining
        logger.debug("expense_removed", expense_id=str(expense_id))
        self._notify()
        return True

    def replace_all(self, records: Iterable[Expense]) -> None:
        """Overwrite the whole log. Ids are kept as given."""
        self._log = _unique_by_id(records)
        logger.debug("expenses_replaced", count=len(self._log))
        self._notify()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _new_id(self) -> UUID:
        existing = {expense.id for expense in self._log}
        new_id = uuid4()
        while new_id in existing:
            new_id = uuid4()
        return new_id

    def _notify(self) -> None:
        snapshot = list(self._log)
        for listener in self._listeners:
            listener(snapshot)


def _unique_by_id(records: Iterable[Expense]) -> list[Expense]:
    """Keep the first record for each id, preserving order."""
    seen: set[UUID] = set()
    unique = []
    for record in records:
        if record.id in seen:
            logger.warning("duplicate_expense_id_dropped", expense_id=str(record.id))
            continue
        seen.add(record.id)
        unique.append(record)
    return unique
