"""
Configuration Management for FinCorp Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, ledger policy constants and logging level are all
validated at startup instead of being scattered through the code.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINCORP_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".fincorp_data"),
        description="Directory holding the JSON documents"
    )

    # Document keys (one JSON document per collection)
    staff_key: str = Field(
        default="company_staff",
        description="Key of the staff roster document"
    )
    transactions_key: str = Field(
        default="company_trxs",
        description="Key of the transaction log document"
    )
    accounts_key: str = Field(
        default="company_accounts",
        description="Key of the chart of accounts document"
    )
    audit_key: str = Field(
        default="company_audit_logs",
        description="Key of the audit log document"
    )

    @field_validator("staff_key", "transactions_key", "accounts_key", "audit_key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Invalid storage key: {v!r}")
        return v


class LedgerSettings(BaseSettings):
    """Ledger policy constants."""

    model_config = SettingsConfigDict(
        env_prefix="FINCORP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    recent_limit: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Rows shown on the Recent tab when no filter is active"
    )
    reserved_admin_username: str = Field(
        default="admin",
        description="Username that can never be deleted"
    )

    # Actor used for audit entries when nobody is logged in
    system_actor_id: str = Field(default="sys")
    system_actor_name: str = Field(default="System")

    # Report export
    report_filename_prefix: str = Field(
        default="Financial_Report",
        description="Prefix of suggested CSV report file names"
    )
    search_filename_chars: int = Field(
        default=10,
        ge=1,
        description="How much of the search query goes into the report file name"
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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for the structured log"
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
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

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

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    sections = {
        "storage": lambda: settings.storage,
        "ledger": lambda: settings.ledger,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
