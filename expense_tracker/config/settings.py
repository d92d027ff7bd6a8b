"""
Configuration Management for the Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Rendering preferences (dark mode) are NOT configuration: they are user
state kept in the key-value store and passed explicitly to the UI.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Where to keep expenses, budget and preferences"
    )
    path: str = Field(
        default="expense_tracker_data.json",
        description="JSON document used by the file backend"
    )


class SpeechSettings(BaseSettings):
    """Speech-to-text configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_SPEECH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Offer voice entry when a microphone backend is present"
    )
    language: str = Field(
        default="en-US",
        description="Recognition language passed to the recognizer"
    )
    phrase_time_limit: float = Field(
        default=8.0,
        gt=0,
        le=60,
        description="Seconds of speech captured per command"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    default_budget: Decimal = Field(
        default=Decimal("1000"),
        description="Budget used until the user sets one"
    )
    budget_alert_percent: float = Field(
        default=80.0,
        gt=0,
        le=100,
        description="Percent of budget used above which the alert shows"
    )
    recent_expense_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="How many expenses the recent list shows"
    )
    report_filename: str = Field(
        default="expense-report.txt",
        description="File name offered for the exported report"
    )
    audit_history_size: int = Field(
        default=200,
        ge=0,
        description="Audit events kept in memory for display"
    )

    @field_validator("report_filename")
    @classmethod
    def validate_report_filename(cls, v: str) -> str:
        if "/" in v or "\\" in v:
            raise ValueError("Report filename must not contain a path")
        return v


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def speech(self) -> SpeechSettings:
        return SpeechSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for each section that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "speech", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
