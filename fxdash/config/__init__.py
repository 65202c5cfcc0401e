"""Configuration package."""

from fxdash.config.settings import (
    ONE_DAY_MS,
    AppSettings,
    CacheSettings,
    FxSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "ONE_DAY_MS",
    "AppSettings",
    "CacheSettings",
    "FxSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
