"""
Configuration Management for FX Dashboard

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The base currency, the FX endpoint and the staleness window are
read once and shared by every component.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ONE_DAY_MS = 24 * 60 * 60 * 1000


class FxSettings(BaseSettings):
    """Exchange rate service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_currency: str = Field(
        default="THB",
        min_length=3,
        max_length=3,
        description="Currency every persisted amount is stored in"
    )
    base_currency_symbol: str = Field(
        default="฿",
        min_length=1,
        description="Literal symbol always used when rendering the base currency"
    )
    api_url: str = Field(
        default="https://open.er-api.com/v6/latest/{base}",
        description="FX endpoint; '{base}' is replaced with the base currency"
    )
    request_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=120,
        description="Timeout for the outbound FX request"
    )
    max_age_ms: int = Field(
        default=ONE_DAY_MS,
        gt=0,
        description="Snapshot age after which rates are refreshed"
    )
    supported_currencies: str = Field(
        default="THB,USD,MMK",
        description="Comma-separated list of currencies offered for display"
    )
    default_locale: str = Field(
        default="en",
        description="Locale used when the user has not chosen one"
    )

    @field_validator('base_currency')
    @classmethod
    def validate_base_currency(cls, v: str) -> str:
        """Base currency must be a 3-letter alphabetic code."""
        v = v.strip().upper()
        if not v.isalpha():
            raise ValueError(f"Invalid base currency code: {v}")
        return v

    @property
    def supported_currencies_list(self) -> list[str]:
        """Supported codes, upper-cased, base first, without duplicates."""
        codes = [self.base_currency]
        for code in self.supported_currencies.split(","):
            code = code.strip().upper()
            if len(code) == 3 and code.isalpha() and code not in codes:
                codes.append(code)
        return codes

    @property
    def required_currencies(self) -> list[str]:
        """Codes that must be present in a snapshot for it to count as complete."""
        return [c for c in self.supported_currencies_list if c != self.base_currency]


class CacheSettings(BaseSettings):
    """Durable local cache configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FX_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    directory: str = Field(
        default=".fxdash_cache",
        description="Directory holding one JSON file per cache key"
    )
    rates_key: str = Field(
        default="fxRates_THB_cache_v2",
        description="Key the rate snapshot is stored under"
    )
    preferences_key: str = Field(
        default="appSettings",
        description="Key the user's saved preferences are stored under"
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

    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    event_history_size: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="How many rate events are kept in memory for display"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


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
    def fx(self) -> FxSettings:
        return FxSettings()

    @property
    def cache(self) -> CacheSettings:
        return CacheSettings()

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


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("fx", "cache", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
