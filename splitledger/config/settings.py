"""
Configuration Management for SplitLedger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This includes the fail-open/fail-loud policies, so switching the ledger
to strict mode is a deployment decision rather than a code change.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Blob store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITLEDGER_STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Blob store backend"
    )
    data_dir: Path = Field(
        default=Path.home() / ".splitledger",
        description="Directory holding one file per blob key"
    )

    # Keys within the blob store
    transactions_key: str = Field(
        default="saved_transactions",
        description="Key of the transaction collection"
    )
    recipients_key: str = Field(
        default="recipients",
        description="Key of the recipient collection"
    )

    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per blob write before giving up"
    )

    @field_validator('data_dir')
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        return v.expanduser()


class LedgerPolicySettings(BaseSettings):
    """
    Failure policies of the ledger store.

    empty/log are the fail-open defaults: a corrupt blob loads as an empty
    collection and a failed write is logged. raise makes either fail loud.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPLITLEDGER_",
        extra="ignore"
    )

    decode_error_policy: str = Field(
        default="empty",
        pattern="^(empty|raise)$",
        description="What load() does with an undecodable blob"
    )
    write_failure_policy: str = Field(
        default="log",
        pattern="^(log|raise)$",
        description="What a mutation does when its persistence write fails"
    )


class LoggingSettings(BaseSettings):
    """structlog output configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITLEDGER_LOG_",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render JSON lines (False renders for a console)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    # Validation thresholds
    max_transaction_amount: float = Field(
        default=100000.0,
        gt=0,
        description="Totals above this are flagged for review (sanity check)"
    )

    reminder_title: str = Field(
        default="Payment Reminder",
        description="Title of scheduled payment reminders"
    )


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
    def policy(self) -> LedgerPolicySettings:
        return LedgerPolicySettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

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
    Validate all settings groups load from the current environment.

    Returns a dict of {group_name: is_valid}, plus {group_name}_error
    entries for the failing ones. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "policy", "logging", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
