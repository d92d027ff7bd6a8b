"""Tests for environment-driven settings."""

from decimal import Decimal

import pytest

from expense_tracker.config import (
    AppSettings,
    SpeechSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:

    def test_defaults(self):
        app = AppSettings()
        assert app.default_budget == Decimal("1000")
        assert app.budget_alert_percent == 80.0
        assert app.recent_expense_limit == 10
        assert app.report_filename == "expense-report.txt"
        assert StorageSettings().backend == "file"
        assert SpeechSettings().language == "en-US"

    def test_env_prefixes(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_STORAGE_PATH", "/tmp/expenses.json")
        monkeypatch.setenv("EXPENSE_SPEECH_LANGUAGE", "en-GB")
        assert StorageSettings().path == "/tmp/expenses.json"
        assert SpeechSettings().language == "en-GB"

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_STORAGE_BACKEND", "sheets")
        with pytest.raises(ValueError):
            StorageSettings()

    def test_report_filename_must_not_be_a_path(self):
        with pytest.raises(ValueError):
            AppSettings(report_filename="../report.txt")

    def test_validate_all_settings_reports_bad_section(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_SPEECH_PHRASE_TIME_LIMIT", "0")
        status = validate_all_settings()
        assert status["storage"] is True
        assert status["app"] is True
        assert status["speech"] is False
        assert "speech_error" in status


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
