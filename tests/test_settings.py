"""Tests for configuration and the activity logger."""

import logging

import pytest
from pydantic import ValidationError

from family_ledger.activity import ActivityLogger, create_correlation_id
from family_ledger.config import LedgerSettings, get_settings, validate_all_settings
from family_ledger.models import ActivityEventBuilder


class TestLedgerSettings:
    """Tests for LEDGER_* settings."""

    def test_defaults(self, monkeypatch):
        """Test default ledger behaviour."""
        for name in ("STORAGE_BACKEND", "SEED_DEFAULT_ACCOUNTS", "ADJUSTMENT_DESCRIPTION", "CURRENCY_SYMBOL"):
            monkeypatch.delenv(f"LEDGER_{name}", raising=False)

        settings = LedgerSettings()

        assert settings.storage_backend == "memory"
        assert settings.seed_default_accounts is True
        assert settings.adjustment_description == "Weekly balance adjustment"
        assert settings.currency_symbol == "$"

    def test_environment_override(self, monkeypatch):
        """Test values read from the environment."""
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "google_sheets")
        monkeypatch.setenv("LEDGER_CURRENCY_SYMBOL", "€")

        settings = LedgerSettings()

        assert settings.storage_backend == "google_sheets"
        assert settings.currency_symbol == "€"

    def test_unknown_backend_rejected(self, monkeypatch):
        """Test that only known backends are accepted."""
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "postgres")
        with pytest.raises(ValidationError):
            LedgerSettings()

    def test_validate_all_settings_reports_missing_sheets_config(self, monkeypatch):
        """Test that missing Google settings are reported, not raised."""
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)

        results = validate_all_settings()

        assert results["ledger"] is True
        assert results["app"] is True
        assert results["google_sheets"] is False
        assert "google_sheets_error" in results

    def test_get_settings_is_cached(self):
        """Test that settings are only built once."""
        assert get_settings() is get_settings()


class TestActivityLogger:
    """Tests for local logging and the notification listener."""

    def test_listener_receives_event(self):
        """Test that events reach the listener."""
        received = []
        activity_logger = ActivityLogger(listener=received.append)
        event = ActivityEventBuilder.operation_rejected(
            operation="Transfer",
            error_code="invalid_amount",
            error_message="Transfer amount must be greater than zero",
            correlation_id=create_correlation_id(),
        )

        activity_logger.log(event)

        assert received == [event]

    def test_set_listener(self):
        """Test swapping the listener after construction."""
        first, second = [], []
        activity_logger = ActivityLogger(listener=first.append)
        activity_logger.set_listener(second.append)

        activity_logger.log(ActivityEventBuilder.operation_failed("Deletion", "deletion_failed", "boom"))

        assert first == []
        assert len(second) == 1

    def test_listener_failure_is_logged(self, caplog):
        """Test that a broken listener is logged and swallowed."""
        def broken(event):
            raise RuntimeError("toast crashed")

        activity_logger = ActivityLogger(listener=broken)
        with caplog.at_level(logging.ERROR, logger="family_ledger.activity"):
            activity_logger.log(ActivityEventBuilder.operation_failed("Deletion", "deletion_failed", "boom"))

        assert "activity_listener_failed" in caplog.text

    def test_no_listener(self):
        """Test logging without a listener."""
        ActivityLogger().log(ActivityEventBuilder.operation_failed("Deletion", "deletion_failed", "boom"))

    def test_correlation_ids_are_unique(self):
        """Test correlation ID generation."""
        assert create_correlation_id() != create_correlation_id()
