"""
Configuration Management for the Wallet Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger itself needs no configuration; only the dump locations,
the history page size and logging are configurable.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DumpSettings(BaseSettings):
    """Flat-file dump configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_DUMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    directory: str = Field(
        default="data",
        description="Directory for accounts/payments/favorites dumps"
    )
    account_file: str = Field(
        default="accounts.txt",
        description="File name for the single-file account dump"
    )
    history_page_size: int = Field(
        default=100,
        ge=1,
        description="Payments per file when exporting history"
    )

    @field_validator('directory')
    @classmethod
    def validate_directory(cls, v: str) -> str:
        """Warn if the dump directory doesn't exist (it may be created later)."""
        if not Path(v).is_dir():
            import warnings
            warnings.warn(
                f"Dump directory not found at {v}. "
                "Create it before exporting."
            )
        return v

    @property
    def account_file_path(self) -> Path:
        return Path(self.directory) / self.account_file


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
        description="Log at DEBUG regardless of log_level"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR)$",
        description="Level for the structured audit log"
    )

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level


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

    # Loaded lazily to allow partial configuration

    @property
    def dump(self) -> DumpSettings:
        return DumpSettings()

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

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.dump
        results["dump"] = True
    except Exception as e:
        results["dump"] = False
        results["dump_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
