"""
Tests for the preference-aware binding and preference sources.
"""

import asyncio
import json

import pytest

from fxdash.models import RateSnapshot, RefreshStatus
from fxdash.preferences import (
    CurrencyBinding,
    InMemoryPreferences,
    StoredPreferences,
    normalize_currency,
    normalize_language,
)
from fxdash.services.storage import CacheReadError, InMemoryCache
from tests.helpers import NOW_MS, FakeRateClient, run_async


FRESH = RateSnapshot(
    rates={"THB": 1.0, "USD": 0.0285, "MMK": 60.5},
    last_updated=NOW_MS,
)


@pytest.fixture
def preferences():
    return InMemoryPreferences()


@pytest.fixture
def make_binding(preferences, make_provider, converter, formatter):
    """Build a CurrencyBinding over a provider with the given client."""
    def _make(client):
        return CurrencyBinding(preferences, make_provider(client), converter, formatter)
    return _make


class TestNormalization:
    """Raw preference values become usable codes and tags."""

    @pytest.mark.parametrize("value,expected", [
        ("usd", "USD"),
        (" MMK ", "MMK"),
        ("THB", "THB"),
        (None, "THB"),
        ("", "THB"),
        ("dollars", "THB"),
        ("US", "THB"),
        (42, "THB"),
    ])
    def test_normalize_currency(self, value, expected):
        """Test that currency preferences become a 3-letter code or the base."""
        assert normalize_currency(value, "THB") == expected

    @pytest.mark.parametrize("value,expected", [
        ("en", "en"),
        ("English", "en"),
        ("thai", "th"),
        ("Burmese", "my"),
        ("myanmar", "my"),
        ("th-TH", "th"),
        ("fr", "fr"),
        (None, "en"),
        ("   ", "en"),
        (3, "en"),
    ])
    def test_normalize_language(self, value, expected):
        """Test language names and tags map to short tags."""
        assert normalize_language(value) == expected


class TestPreferences:
    """Display preferences take effect on the next read."""

    def test_defaults(self, make_binding, client):
        """Test base currency and English when nothing is saved."""
        binding = make_binding(client)
        assert binding.display_currency == "THB"
        assert binding.locale == "en"
        assert binding.base_currency == "THB"

    def test_change_is_immediate_and_fetch_free(self, store, preferences, make_binding, client):
        """Test that a currency switch shows on the next read without a fetch."""
        store.save(FRESH)
        binding = make_binding(client)
        assert binding.format(1000) == "฿1,000"

        preferences.update(currency="USD")
        assert binding.display_currency == "USD"
        assert binding.format(1000) == "$28.50"
        assert client.calls == 0

    def test_invalid_currency_falls_back_to_base(self, preferences, make_binding, client):
        """Test that a malformed currency preference falls back to THB."""
        preferences.update(currency="not-a-code")
        assert make_binding(client).display_currency == "THB"

    def test_language_alias(self, preferences, make_binding, client):
        """Test that a full language name resolves through the alias table."""
        preferences.update(language="Thai")
        assert make_binding(client).locale == "th"


class TestMoneyOperations:
    """convert / to_base / format / symbol default to the preferences."""

    def test_convert_uses_display_currency(self, store, preferences, make_binding, client):
        """Test convert() targets the display currency unless told otherwise."""
        store.save(FRESH)
        preferences.update(currency="MMK")
        binding = make_binding(client)
        assert binding.convert(100) == pytest.approx(6050)
        assert binding.convert(100, "USD") == pytest.approx(2.85)
        assert binding.convert(100, "THB") == 100

    def test_to_base_uses_display_currency(self, store, preferences, make_binding, client):
        """Test to_base() reads from the display currency unless told otherwise."""
        store.save(FRESH)
        preferences.update(currency="USD")
        binding = make_binding(client)
        assert binding.to_base(28.5) == pytest.approx(1000)
        assert binding.to_base(60.5, "MMK") == pytest.approx(1)

    def test_to_base_without_rates_is_identity(self, preferences, make_binding, client):
        """Test to_base() returns the amount unchanged without a rate."""
        preferences.update(currency="USD")
        assert make_binding(client).to_base(12.5) == 12.5

    def test_symbol(self, preferences, make_binding, client):
        """Test symbol() follows the display currency."""
        binding = make_binding(client)
        assert binding.symbol() == "฿"
        preferences.update(currency="USD")
        assert binding.symbol() == "$"
        assert binding.symbol("MMK") == "MMK"

    def test_rates_is_a_copy(self, store, make_binding, client):
        """Test that mutating the exposed rates does not touch the store."""
        store.save(FRESH)
        binding = make_binding(client)
        binding.rates["USD"] = 99.0
        assert binding.rates["USD"] == 0.0285
        assert binding.last_updated == NOW_MS

    def test_rate_summary(self, store, make_binding, client):
        """Test the settings-page rate line."""
        store.save(FRESH)
        assert make_binding(client).rate_summary() == "1 THB ≈ 0.0285 USD • 60.5 MMK"

    def test_rate_summary_without_rates(self, make_binding, client):
        """Test the rate line before any fetch."""
        assert make_binding(client).rate_summary() == "1 THB ≈ … USD • … MMK"


class TestLifecycle:
    """Mounting, syncing, listening and tearing down."""

    def test_sync_fetches_when_stale(self, make_binding, client):
        """Test sync() fetches on a cold start."""
        binding = make_binding(client)
        result = run_async(binding.sync())
        assert result.status == RefreshStatus.REFRESHED
        assert binding.rates["USD"] == 0.0285

    def test_sync_skips_when_fresh(self, store, make_binding, client):
        """Test sync() does nothing when rates are fresh."""
        store.save(FRESH)
        result = run_async(make_binding(client).sync())
        assert result.status == RefreshStatus.SKIPPED
        assert client.calls == 0

    def test_listener_notified_after_refresh(self, make_binding, client):
        """Test subscribers hear about a new snapshot."""
        binding = make_binding(client)
        received = []
        binding.subscribe(received.append)
        run_async(binding.refresh_rates())
        assert len(received) == 1
        assert received[0].rates["MMK"] == 60.5

    def test_unsubscribe(self, make_binding, client):
        """Test an unsubscribed listener is not called."""
        binding = make_binding(client)
        received = []
        unsubscribe = binding.subscribe(received.append)
        unsubscribe()
        run_async(binding.refresh_rates())
        assert received == []

    def test_mount_without_loop(self, make_binding, client):
        """Test mount() is a no-op outside an event loop."""
        assert make_binding(client).mount() is None
        assert client.calls == 0

    def test_mount_with_running_loop(self, make_binding, client):
        """Test mount() schedules a staleness check on the running loop."""
        binding = make_binding(client)

        async def scenario():
            task = binding.mount()
            assert task is not None
            return await task

        result = run_async(scenario())
        assert result.status == RefreshStatus.REFRESHED
        assert client.calls == 1

    def test_closed_binding_does_not_sync(self, make_binding, client):
        """Test that a closed binding never starts a fetch."""
        binding = make_binding(client)
        binding.close()
        assert binding.closed
        assert binding.mount() is None
        result = run_async(binding.sync())
        assert result.status == RefreshStatus.SKIPPED
        assert client.calls == 0

    def test_late_completion_after_close(self, store, make_binding):
        """Closing mid-fetch: the store updates, listeners hear nothing."""
        client = FakeRateClient(delay=0.05)
        binding = make_binding(client)
        received = []
        binding.subscribe(received.append)

        async def scenario():
            task = asyncio.create_task(binding.refresh_rates())
            await asyncio.sleep(0.01)
            binding.close()
            return await task

        result = run_async(scenario())
        assert result.ok
        assert received == []
        assert store.current().rates["USD"] == 0.0285

    def test_error_and_loading_mirrored(self, make_binding, failing_client):
        """Test the provider's advisory state is visible through the binding."""
        binding = make_binding(failing_client)
        assert binding.error is None
        run_async(binding.refresh_rates())
        assert binding.error == "HTTP 503 from FX service"
        assert binding.loading is False

    def test_sync_in_background_does_not_wait(self, store, make_binding):
        """Test a background sync returns before the fetch and then applies it."""
        client = FakeRateClient(delay=0.2)
        binding = make_binding(client)

        future = binding.sync_in_background()
        assert future is not None
        assert not future.done()
        assert binding.loading

        assert future.result(timeout=5).status == RefreshStatus.REFRESHED
        assert binding.rates["USD"] == 0.0285
        assert binding.sync_in_background() is None

    def test_closed_binding_does_not_sync_in_background(self, make_binding, client):
        """Test a closed binding never starts a background fetch."""
        binding = make_binding(client)
        binding.close()
        assert binding.sync_in_background() is None
        assert client.calls == 0

    def test_refresh_rates_in_background(self, store, make_binding):
        """Test the manual background refresh fetches even when fresh."""
        store.save(FRESH)
        client = FakeRateClient(rates={"USD": 0.03, "MMK": 61.0})
        binding = make_binding(client)
        binding.refresh_rates_in_background().result(timeout=5)
        assert binding.rates["MMK"] == 61.0


class TestStoredPreferences:
    """Preferences read from the durable cache."""

    def test_reads_saved_object(self):
        """Test preferences are read from the saved JSON object."""
        backend = InMemoryCache({"appSettings": json.dumps({"currency": "usd", "language": "th"})})
        prefs = StoredPreferences(backend).get_preferences()
        assert prefs.currency == "usd"
        assert prefs.language == "th"

    def test_missing_key(self):
        """Test a missing key gives empty preferences."""
        prefs = StoredPreferences(InMemoryCache()).get_preferences()
        assert prefs.currency is None
        assert prefs.language is None

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", "\"USD\"", "null", ""])
    def test_unusable_values(self, raw):
        """Test that corrupt or non-object values give empty preferences."""
        prefs = StoredPreferences(InMemoryCache({"appSettings": raw})).get_preferences()
        assert prefs.currency is None

    def test_read_error(self):
        """Test a cache read error gives empty preferences."""
        class Broken(InMemoryCache):
            def read(self, key):
                raise CacheReadError("disk gone")

        assert StoredPreferences(Broken()).get_preferences().currency is None

    def test_custom_key(self):
        """Test preferences under a configured key."""
        backend = InMemoryCache({"prefs": json.dumps({"currency": "MMK"})})
        assert StoredPreferences(backend, key="prefs").get_preferences().currency == "MMK"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
