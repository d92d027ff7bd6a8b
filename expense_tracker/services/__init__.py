"""Services package."""

from expense_tracker.services.speech import (
    CaptureAlreadyActiveError,
    SpeechCaptureAdapter,
    SpeechCaptureError,
    SpeechUnavailableError,
)
from expense_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
    TrackerStateRepository,
)

__all__ = [
    # Speech services
    "CaptureAlreadyActiveError",
    "SpeechCaptureAdapter",
    "SpeechCaptureError",
    "SpeechUnavailableError",
    # Storage services
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "TrackerStateRepository",
]
