"""
Component Wiring for FX Dashboard

This module builds the rate subsystem from settings:

    cache backend -> RateStore (loaded) -> RateProvider -> converter/formatter
                                                        -> CurrencyBinding

DESIGN DECISION: Nothing here is a module-level singleton. The app builds
one AppComponents and shares it; tests build their own with fakes.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from fxdash.audit import RateEventLogger, configure_log_level
from fxdash.config import Settings, get_settings
from fxdash.currency import CurrencyConverter, CurrencyFormatter
from fxdash.preferences import CurrencyBinding, PreferencesSource, StoredPreferences
from fxdash.services.rates import ExchangeRateClient, RateProvider, RateStore
from fxdash.services.storage import CacheBackend, JsonFileCache


@dataclass
class AppComponents:
    """Everything a UI needs to display money."""
    backend: CacheBackend
    event_logger: RateEventLogger
    store: RateStore
    provider: RateProvider
    converter: CurrencyConverter
    formatter: CurrencyFormatter
    preferences: PreferencesSource
    binding: CurrencyBinding


def create_app_components(
    settings: Optional[Settings] = None,
    backend: Optional[CacheBackend] = None,
    client: Optional[ExchangeRateClient] = None,
    preferences: Optional[PreferencesSource] = None,
    clock: Optional[Callable[[], int]] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to get_settings()
        backend: Cache backend; defaults to a JsonFileCache in the
                configured directory
        client: FX client; defaults to ExchangeRateClient for the
                configured endpoint
        preferences: Preference source; defaults to the preferences
                saved in the same cache backend
        clock: Epoch-ms clock, for tests

    Returns:
        AppComponents with the store already hydrated from the cache.
        No fetch is started here; call binding.mount() or binding.sync().
    """
    settings = settings or get_settings()
    fx = settings.fx
    cache = settings.cache
    app = settings.app

    configure_log_level(app.log_level)
    event_logger = RateEventLogger(history_size=app.event_history_size)

    backend = backend or JsonFileCache(cache.directory)
    store = RateStore(
        backend,
        base_currency=fx.base_currency,
        cache_key=cache.rates_key,
        event_logger=event_logger,
    )
    store.load()

    client = client or ExchangeRateClient(
        url_template=fx.api_url,
        timeout=fx.request_timeout_seconds,
    )
    provider = RateProvider(
        store,
        client,
        required_currencies=fx.required_currencies,
        max_age_ms=fx.max_age_ms,
        clock=clock,
        event_logger=event_logger,
    )

    converter = CurrencyConverter(store)
    formatter = CurrencyFormatter(
        converter,
        base_symbol=fx.base_currency_symbol,
        default_locale=fx.default_locale,
    )

    preferences = preferences or StoredPreferences(backend, key=cache.preferences_key)
    binding = CurrencyBinding(
        preferences,
        provider,
        converter,
        formatter,
        default_locale=fx.default_locale,
    )

    return AppComponents(
        backend=backend,
        event_logger=event_logger,
        store=store,
        provider=provider,
        converter=converter,
        formatter=formatter,
        preferences=preferences,
        binding=binding,
    )
