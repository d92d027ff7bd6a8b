"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The tracker persists three string slots ("expenses",
"budget", "darkMode"), exactly like a browser's local storage. We define
the smallest interface that covers that, so that:
1. A JSON file on disk backs the real application
2. An in-memory dict backs the tests
3. Business logic never touches files directly

Backends RAISE StorageError subclasses. The repository layer above them
catches those errors and falls back to defaults; nothing in the core ever
sees a storage exception.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for string key-value storage.

    Values are opaque strings; serialization is the caller's concern.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            The stored string, or None if the key is missing

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store value under key, replacing any previous value.

        Raises:
            StorageWriteError: If the value could not be persisted
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Remove key. Removing a missing key is not an error.

        Raises:
            StorageWriteError: If the change could not be persisted
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """Return all stored keys."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written (quota, permissions, disk)."""
    pass
