"""
Shared fixtures for FX Dashboard tests.

The durable cache is an InMemoryCache (or tmp_path for file tests) and the
clock is fixed, so every test starts from the same cold state.
"""

import pytest

from fxdash.audit import RateEventLogger
from fxdash.config import ONE_DAY_MS
from fxdash.currency import CurrencyConverter, CurrencyFormatter
from fxdash.services.rates import ExchangeRateClient, RateFetchError, RateProvider, RateStore
from fxdash.services.storage import InMemoryCache
from tests.helpers import FakeClock, FakeRateClient


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def event_logger() -> RateEventLogger:
    return RateEventLogger()


@pytest.fixture
def store(backend, event_logger) -> RateStore:
    return RateStore(backend, base_currency="THB", event_logger=event_logger)


@pytest.fixture
def client() -> FakeRateClient:
    return FakeRateClient()


@pytest.fixture
def failing_client() -> FakeRateClient:
    return FakeRateClient(error=RateFetchError("HTTP 503 from FX service"))


@pytest.fixture
def make_provider(store, clock, event_logger):
    """Build a RateProvider over the shared store with a given client."""
    def _make(client: ExchangeRateClient) -> RateProvider:
        return RateProvider(
            store,
            client,
            required_currencies=["THB", "USD", "MMK"],
            max_age_ms=ONE_DAY_MS,
            clock=clock,
            event_logger=event_logger,
        )
    return _make


@pytest.fixture
def converter(store) -> CurrencyConverter:
    return CurrencyConverter(store)


@pytest.fixture
def formatter(converter) -> CurrencyFormatter:
    return CurrencyFormatter(converter, base_symbol="฿", default_locale="en")
