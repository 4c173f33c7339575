"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from splitledger.config import (
    AppSettings,
    LedgerPolicySettings,
    LoggingSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    """Out-of-the-box values."""

    def test_storage_defaults(self, monkeypatch):
        """Test the default keys and backend."""
        monkeypatch.delenv("SPLITLEDGER_STORAGE_BACKEND", raising=False)
        storage = StorageSettings()
        assert storage.backend == "file"
        assert storage.transactions_key == "saved_transactions"
        assert storage.recipients_key == "recipients"
        assert storage.data_dir == Path.home() / ".splitledger"

    def test_policies_fail_open_by_default(self):
        """Test corrupt blobs load empty and failed writes only log."""
        policy = LedgerPolicySettings()
        assert policy.decode_error_policy == "empty"
        assert policy.write_failure_policy == "log"

    def test_app_defaults(self):
        """Test reminder title and sanity threshold."""
        app = AppSettings()
        assert app.reminder_title == "Payment Reminder"
        assert app.max_transaction_amount == 100000.0

    def test_app_settings_fields(self):
        """Test every app setting is one the ledger reads."""
        assert set(AppSettings.model_fields) == {"max_transaction_amount", "reminder_title"}


class TestEnvironment:
    """Overrides through SPLITLEDGER_* variables."""

    def test_storage_from_env(self, monkeypatch, tmp_path):
        """Test prefixed variables reach the storage group."""
        monkeypatch.setenv("SPLITLEDGER_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("SPLITLEDGER_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("SPLITLEDGER_STORAGE_WRITE_RETRY_ATTEMPTS", "5")

        storage = get_settings().storage
        assert storage.backend == "memory"
        assert storage.data_dir == tmp_path
        assert storage.write_retry_attempts == 5

    def test_strict_policies_from_env(self, monkeypatch):
        """Test fail-loud mode is a deployment switch."""
        monkeypatch.setenv("SPLITLEDGER_DECODE_ERROR_POLICY", "raise")
        monkeypatch.setenv("SPLITLEDGER_WRITE_FAILURE_POLICY", "raise")
        policy = get_settings().policy
        assert policy.decode_error_policy == "raise"
        assert policy.write_failure_policy == "raise"

    def test_data_dir_expands_home(self):
        """Test ~ in the data directory is expanded."""
        storage = StorageSettings(data_dir="~/ledger")
        assert storage.data_dir == Path.home() / "ledger"

    def test_log_level_normalized(self):
        """Test log levels are case-insensitive."""
        assert LoggingSettings(level=" debug ").level == "DEBUG"


class TestInvalidValues:
    """Rejected configuration."""

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            StorageSettings(backend="s3")

    def test_unknown_policy(self):
        with pytest.raises(ValidationError):
            LedgerPolicySettings(decode_error_policy="ignore")

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        """Test startup validation names the broken group."""
        monkeypatch.setenv("SPLITLEDGER_WRITE_FAILURE_POLICY", "explode")
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["policy"] is False
        assert "policy_error" in results


def test_get_settings_is_cached():
    """Test the root container is built once."""
    assert get_settings() is get_settings()
