"""
Rate Services Package

Local rate cache, FX HTTP client and the refresh policy on top of them.
"""

from fxdash.services.rates.client import ExchangeRateClient, RateFetchError
from fxdash.services.rates.provider import RateProvider, SnapshotListener, epoch_ms
from fxdash.services.rates.store import RateStore

__all__ = [
    "ExchangeRateClient",
    "RateFetchError",
    "RateProvider",
    "RateStore",
    "SnapshotListener",
    "epoch_ms",
]
