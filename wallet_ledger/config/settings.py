"""
Configuration Management for Wallet Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Display labels the ledger writes into transactions (seed entry, adjustment,
transfer legs) live here too, so a deployment can localize them without
touching ledger code.
"""

from functools import lru_cache
from pathlib import Path
from typing import Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Labels and defaults used when the ledger creates transactions."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_LEDGER_",
        extra="ignore"
    )

    default_wallet_name: str = Field(
        default="Main wallet",
        min_length=1,
        description="Name of the wallet created when the store is empty"
    )
    default_currency: str = Field(
        default="VND",
        min_length=1,
        max_length=10,
        description="Currency label attached to new wallets"
    )
    initial_balance_label: str = Field(
        default="Initial balance",
        description="Name of the seed adjustment every wallet starts with"
    )
    initial_balance_note: str = Field(
        default="Wallet initialized",
        description="Note on the seed adjustment"
    )
    adjustment_label: str = Field(
        default="Balance adjustment",
        description="Name of manual balance adjustments"
    )
    transfer_out_label: str = Field(
        default="Transfer to {wallet}",
        description="Name of the expense leg; {wallet} is the destination"
    )
    transfer_in_label: str = Field(
        default="Transfer from {wallet}",
        description="Name of the income leg; {wallet} is the source"
    )
    transfer_note: str = Field(
        default="Transfer between wallets",
        description="Default note shared by both transfer legs"
    )

    @field_validator('transfer_out_label', 'transfer_in_label')
    @classmethod
    def validate_wallet_placeholder(cls, v: str) -> str:
        """Transfer labels must name the other wallet."""
        if "{wallet}" not in v:
            raise ValueError("Transfer labels must contain a {wallet} placeholder")
        return v


class StorageSettings(BaseSettings):
    """Local file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_STORAGE_",
        extra="ignore"
    )

    data_dir: str = Field(
        default="data",
        description="Directory holding the snapshot and audit files"
    )
    snapshot_filename: str = Field(
        default="wallets.json",
        description="File name of the ledger snapshot"
    )
    audit_filename: str = Field(
        default="audit.jsonl",
        description="File name of the append-only audit log"
    )
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed file write is attempted"
    )

    @property
    def snapshot_path(self) -> Path:
        return Path(self.data_dir) / self.snapshot_filename

    @property
    def audit_path(self) -> Path:
        return Path(self.data_dir) / self.audit_filename


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, Union[bool, str]]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus {setting_name}_error
    holding the message for each invalid group.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
