"""Configuration package."""

from expense_tracker.config.settings import (
    AppSettings,
    Settings,
    SpeechSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "SpeechSettings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
