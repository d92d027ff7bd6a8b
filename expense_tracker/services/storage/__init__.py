"""
Storage Services Package

Provides the key-value store interface, local implementations and the
fail-soft repository the tracker persists through.
"""

from expense_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.local_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from expense_tracker.services.storage.repository import (
    BUDGET_KEY,
    DARK_MODE_KEY,
    EXPENSES_KEY,
    TrackerStateRepository,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Repository
    "BUDGET_KEY",
    "DARK_MODE_KEY",
    "EXPENSES_KEY",
    "TrackerStateRepository",
]
