"""
Family Ledger Configuration

Environment-driven settings, one pydantic-settings class per concern:
- GoogleSheetsSettings: where the remote ledger tables live
- LedgerSettings: which store to use and how the ledger behaves
- AppSettings: environment and logging

DESIGN DECISION: Sections are built on access, not at import. The
in-memory backend needs no Google credentials, so a missing
GOOGLE_SHEETS_* variable must only fail when the Sheets store is used.
"""

import warnings
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Location of the Accounts and Transactions worksheets."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Service account JSON key used to open the ledger spreadsheet"
    )
    spreadsheet_id: str = Field(
        ...,
        description="Key of the spreadsheet holding the ledger tables"
    )
    accounts_sheet_name: str = Field(
        default="Accounts",
        description="Worksheet with one row per account"
    )
    transactions_sheet_name: str = Field(
        default="Transactions",
        description="Worksheet with one row per transaction"
    )

    @field_validator('credentials_path')
    @classmethod
    def warn_if_credentials_missing(cls, v: str) -> str:
        """The key file may be mounted after startup, so only warn."""
        if not Path(v).exists():
            warnings.warn(
                f"Service account key not found at {v}; "
                "the Sheets store will fail to connect until it exists."
            )
        return v


class LedgerSettings(BaseSettings):
    """Ledger behaviour configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        extra="ignore"
    )

    storage_backend: str = Field(
        default="memory",
        pattern="^(memory|google_sheets)$",
        description="Which ledger store implementation to use"
    )
    seed_default_accounts: bool = Field(
        default=True,
        description="Create the three default accounts for an owner with none"
    )
    adjustment_description: str = Field(
        default="Weekly balance adjustment",
        min_length=1,
        description="Description recorded on credit statement adjustments"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol used in result messages"
    )


class AppSettings(BaseSettings):
    """Runtime environment. Also read from a local .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="development, staging or production"
    )
    debug_mode: bool = Field(
        default=False,
        description="Verbose behaviour for local runs"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for the family_ledger loggers"
    )


class Settings(BaseSettings):
    """Entry point for all settings sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


SECTIONS = ("google_sheets", "ledger", "app")


@lru_cache()
def get_settings() -> Settings:
    """
    Shared Settings instance.

    Sections are still re-read from the environment on every access;
    get_settings.cache_clear() drops the root object itself.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Startup check: can each section be built from the environment?

    Returns {section: ok}, plus "{section}_error" for each failure.
    """
    settings = get_settings()
    report: dict[str, bool] = {}

    for section in SECTIONS:
        try:
            getattr(settings, section)
        except Exception as e:
            report[section] = False
            report[f"{section}_error"] = str(e)
        else:
            report[section] = True

    return report
