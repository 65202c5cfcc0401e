"""
Currency Binding

The public surface the rest of the application uses for money:
- convert(amount)  base -> display currency
- to_base(amount)  display currency -> base, for saving user input
- format(amount)   base amount -> display string
- symbol()         short symbol for input adornments

Every call reads the current preferences and the current rate snapshot,
so a preference change or a newly published snapshot shows up on the
next read without any cached values to invalidate.

Consumers that need to redraw when rates change register with subscribe().
After close(), late refresh completions are no longer delivered.
"""

import asyncio
import re
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any, Optional

from fxdash.currency.converter import CurrencyConverter
from fxdash.currency.formatter import CurrencyFormatter, format_rate, resolve_locale
from fxdash.models.rates import RateSnapshot, RefreshResult, RefreshStatus
from fxdash.preferences.sources import PreferencesSource
from fxdash.services.rates import RateProvider, SnapshotListener


# Free-form language names and tags seen in saved preferences
LANGUAGE_ALIASES = {
    "english": "en",
    "en": "en",
    "thai": "th",
    "th": "th",
    "burmese": "my",
    "myanmar": "my",
    "my": "my",
}

_CURRENCY_CODE = re.compile(r"[A-Z]{3}")


def normalize_currency(value: Any, base_currency: str = "THB") -> str:
    """Upper-cased 3-letter code, or the base currency."""
    if not isinstance(value, str):
        return base_currency
    code = value.strip().upper()
    return code if _CURRENCY_CODE.fullmatch(code) else base_currency


def normalize_language(value: Any, default: str = "en") -> str:
    """
    Map a language preference to a short tag.

    Known names/tags go through LANGUAGE_ALIASES; anything else longer
    than two characters is cut to its first two.
    """
    if not isinstance(value, str) or not value.strip():
        return default
    s = value.strip().lower()
    if s in LANGUAGE_ALIASES:
        return LANGUAGE_ALIASES[s]
    return s[:2] if len(s) > 2 else s


class CurrencyBinding:
    """Preference-aware conversion and formatting for UI consumers."""

    def __init__(
        self,
        preferences: PreferencesSource,
        provider: RateProvider,
        converter: CurrencyConverter,
        formatter: CurrencyFormatter,
        default_locale: str = "en",
    ):
        self._preferences = preferences
        self._provider = provider
        self._converter = converter
        self._formatter = formatter
        self._default_locale = default_locale

        self._listeners: list[SnapshotListener] = []
        self._closed = False
        self._unsubscribe = provider.subscribe(self._on_snapshot)

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------
    @property
    def base_currency(self) -> str:
        return self._converter.base_currency

    @property
    def display_currency(self) -> str:
        prefs = self._preferences.get_preferences()
        return normalize_currency(prefs.currency, self.base_currency)

    @property
    def locale(self) -> str:
        prefs = self._preferences.get_preferences()
        return normalize_language(prefs.language, self._default_locale)

    # ------------------------------------------------------------------
    # Rate state
    # ------------------------------------------------------------------
    @property
    def snapshot(self) -> RateSnapshot:
        return self._provider.store.current()

    @property
    def rates(self) -> dict[str, float]:
        return dict(self.snapshot.rates)

    @property
    def last_updated(self) -> int:
        return self.snapshot.last_updated

    @property
    def loading(self) -> bool:
        return self._provider.loading

    @property
    def error(self) -> Optional[str]:
        return self._provider.error

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Money operations
    # ------------------------------------------------------------------
    def convert(self, amount_base: Any, to_currency: Optional[str] = None) -> float:
        """Base amount -> display currency (or `to_currency`)."""
        target = to_currency if to_currency is not None else self.display_currency
        return self._converter.to_display(amount_base, target)

    def to_base(self, amount_display: Any, from_currency: Optional[str] = None) -> float:
        """Display-currency amount (or `from_currency`) -> base, for persisting."""
        source = from_currency if from_currency is not None else self.display_currency
        return self._converter.to_base(amount_display, source)

    def format(
        self,
        amount_base: Any,
        to_currency: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> str:
        target = to_currency if to_currency is not None else self.display_currency
        return self._formatter.format(
            amount_base, target, locale if locale is not None else self.locale
        )

    def symbol(self, currency: Optional[str] = None) -> str:
        return self._formatter.symbol(
            currency if currency is not None else self.display_currency
        )

    def rate_summary(self) -> str:
        """Settings line such as '1 THB ≈ 0.0285 USD • 1,234.5 MMK'."""
        snapshot = self.snapshot
        loc = resolve_locale(self.locale, self._default_locale)
        parts = [
            f"{format_rate(snapshot.rate_for(code), loc)} {code}"
            for code in self._provider.required_currencies
        ]
        return f"1 {self.base_currency} ≈ " + " • ".join(parts)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Be told about new snapshots while this binding is open (on the refresh thread)."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def mount(self) -> Optional[asyncio.Task]:
        """
        Schedule a staleness check on the running event loop.

        Call when the consuming view appears and after preferences change.
        Returns the task, or None if there is no running loop.
        """
        if self._closed:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return None
        return loop.create_task(self.sync())

    async def sync(self) -> RefreshResult:
        """Refresh rates if stale or incomplete and wait for the outcome."""
        if self._closed:
            return RefreshResult(status=RefreshStatus.SKIPPED, snapshot=self.snapshot)
        return await self._provider.refresh_if_needed()

    async def refresh_rates(self) -> RefreshResult:
        """Manual "Refresh rates" action."""
        return await self._provider.refresh()

    def sync_in_background(self) -> Optional[Future]:
        """
        Start a staleness check without waiting for the fetch.

        For callers without a long-lived event loop (Streamlit reruns).
        Returns the in-flight future, or None if rates are fresh or the
        binding is closed.
        """
        if self._closed:
            return None
        return self._provider.refresh_if_needed_in_background()

    def refresh_rates_in_background(self) -> Future:
        """Manual "Refresh rates" action without waiting for the fetch."""
        return self._provider.refresh_in_background()

    def close(self) -> None:
        """Tear down: stop receiving snapshots. In-flight fetches still finish."""
        self._closed = True
        self._unsubscribe()
        self._listeners.clear()

    def _on_snapshot(self, snapshot: RateSnapshot) -> None:
        if self._closed:
            return
        for listener in list(self._listeners):
            listener(snapshot)
