"""Configuration package."""

from wallet.config.settings import (
    AppSettings,
    DumpSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "DumpSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
