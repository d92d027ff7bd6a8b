"""Expense log package."""

from expense_tracker.store.expense_store import ChangeListener, ExpenseStore

__all__ = ["ChangeListener", "ExpenseStore"]
