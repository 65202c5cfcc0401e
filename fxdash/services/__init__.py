"""Services package."""

from fxdash.services.rates import (
    ExchangeRateClient,
    RateFetchError,
    RateProvider,
    RateStore,
)
from fxdash.services.storage import (
    CacheBackend,
    CacheError,
    CacheReadError,
    CacheWriteError,
    InMemoryCache,
    JsonFileCache,
)

__all__ = [
    # Rate services
    "ExchangeRateClient",
    "RateFetchError",
    "RateProvider",
    "RateStore",
    # Storage services
    "CacheBackend",
    "CacheError",
    "CacheReadError",
    "CacheWriteError",
    "InMemoryCache",
    "JsonFileCache",
]
