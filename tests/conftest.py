"""Shared fixtures for the Expense Tracker tests."""

import datetime as dt
from decimal import Decimal

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Expense
from expense_tracker.orchestrator import ExpenseTracker
from expense_tracker.services.storage import (
    InMemoryKeyValueStore,
    TrackerStateRepository,
)


TODAY = dt.date(2024, 3, 15)


@pytest.fixture
def make_expense():
    """Build an Expense with sensible defaults."""
    def _make(amount="10", category="Food", description="", date=TODAY):
        return Expense(
            amount=Decimal(amount),
            category=category,
            description=description,
            date=date,
        )
    return _make


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_logger():
    return AuditLogger(history_size=100)


@pytest.fixture
def tracker(kv_store, audit_logger):
    repository = TrackerStateRepository(kv_store, audit_logger=audit_logger)
    tracker = ExpenseTracker(repository=repository, audit_logger=audit_logger)
    tracker.load()
    return tracker
