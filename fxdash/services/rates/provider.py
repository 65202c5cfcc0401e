"""
Rate Provider

Decides when the rate snapshot needs refreshing and performs the refresh.

Staleness rule - a refresh is needed when either:
1. More than max_age_ms has passed since the last successful fetch
2. A required currency has no usable rate in the snapshot

Refresh rules:
- At most one fetch in flight; concurrent callers await the same one
- On success the new snapshot is saved and published to listeners
- On failure the previous snapshot is kept and an advisory error is set
- No automatic retry; the next staleness check tries again

The fetch runs on a single worker thread owned by the provider. Callers
may wait for it from any event loop (or thread), or just start it and
read the published snapshot later, so nothing waits on the network
unless it asks to.
"""

import asyncio
import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from fxdash.audit import RateEventLogger
from fxdash.config.settings import ONE_DAY_MS
from fxdash.models.events import RateEventBuilder
from fxdash.models.rates import RateSnapshot, RefreshResult, RefreshStatus
from fxdash.services.rates.client import ExchangeRateClient
from fxdash.services.rates.store import RateStore


SnapshotListener = Callable[[RateSnapshot], None]


def epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class RateProvider:
    """
    Owns the staleness policy and the single in-flight refresh.

    Construct one per process and share it across sessions and threads;
    tests construct a fresh one with a fake client and an in-memory store.
    """

    def __init__(
        self,
        store: RateStore,
        client: ExchangeRateClient,
        required_currencies: Iterable[str] = (),
        max_age_ms: int = ONE_DAY_MS,
        clock: Optional[Callable[[], int]] = None,
        event_logger: Optional[RateEventLogger] = None,
    ):
        self._store = store
        self._client = client
        self._required = [
            c.upper() for c in required_currencies
            if c.upper() != store.base_currency
        ]
        self._max_age_ms = max_age_ms
        self._clock = clock or epoch_ms
        self._event_logger = event_logger

        self._listeners: list[SnapshotListener] = []
        self._inflight: Optional[Future] = None
        self._loading = False
        self._error: Optional[str] = None
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fxdash-refresh")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def store(self) -> RateStore:
        return self._store

    @property
    def required_currencies(self) -> list[str]:
        return list(self._required)

    @property
    def loading(self) -> bool:
        """True while a fetch is in flight."""
        return self._loading

    @property
    def error(self) -> Optional[str]:
        """Advisory message from the last failed refresh, cleared on the next attempt."""
        return self._error

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._in_flight_locked()

    # ------------------------------------------------------------------
    # Staleness policy
    # ------------------------------------------------------------------
    def is_stale(
        self,
        snapshot: Optional[RateSnapshot] = None,
        now_ms: Optional[int] = None,
    ) -> bool:
        snapshot = snapshot if snapshot is not None else self._store.current()
        now = self._clock() if now_ms is None else now_ms
        return now - snapshot.last_updated > self._max_age_ms

    def missing_currencies(self, snapshot: Optional[RateSnapshot] = None) -> list[str]:
        snapshot = snapshot if snapshot is not None else self._store.current()
        return [c for c in self._required if not snapshot.has_rate(c)]

    def needs_refresh(self, snapshot: Optional[RateSnapshot] = None) -> bool:
        snapshot = snapshot if snapshot is not None else self._store.current()
        return self.is_stale(snapshot) or bool(self.missing_currencies(snapshot))

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------
    async def refresh_if_needed(self) -> RefreshResult:
        """
        Refresh only if the snapshot is stale or incomplete.

        Joins an in-flight refresh instead of starting a second one.
        """
        future = self.refresh_if_needed_in_background()
        if future is None:
            return RefreshResult(status=RefreshStatus.SKIPPED, snapshot=self._store.current())
        return await self._wait(future)

    async def refresh(self) -> RefreshResult:
        """
        Manual refresh ("Refresh rates" button).

        Bypasses the staleness check but still never runs two fetches at once.
        """
        return await self._wait(self.refresh_in_background())

    def refresh_if_needed_in_background(self) -> Optional[Future]:
        """
        Start a refresh if one is needed, without waiting for it.

        Returns the in-flight future, or None when the snapshot is fresh.
        Safe to call from any thread, with or without an event loop.
        """
        with self._lock:
            if self._in_flight_locked():
                self._log(RateEventBuilder.refresh_joined())
                return self._inflight

            snapshot = self._store.current()
            missing = self.missing_currencies(snapshot)
            if self.is_stale(snapshot):
                reason = "stale"
            elif missing:
                reason = "missing " + ",".join(missing)
            else:
                self._log(RateEventBuilder.refresh_skipped(snapshot.last_updated))
                return None
            return self._submit_locked(reason)

    def refresh_in_background(self) -> Future:
        """Start a manual refresh (or join the running one) without waiting."""
        with self._lock:
            if self._in_flight_locked():
                self._log(RateEventBuilder.refresh_joined())
                return self._inflight
            return self._submit_locked("manual")

    async def _wait(self, future: Future) -> RefreshResult:
        # A cancelled waiter must not cancel the shared fetch
        return await asyncio.shield(asyncio.wrap_future(future))

    def _in_flight_locked(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def _submit_locked(self, reason: str) -> Future:
        self._loading = True
        self._error = None
        self._inflight = self._executor.submit(self._run, reason)
        return self._inflight

    def _run(self, reason: str) -> RefreshResult:
        """Fetch, save and publish. Runs on the refresh worker thread."""
        base = self._store.base_currency
        url = self._client.url_for(base)
        self._log(RateEventBuilder.refresh_started(url, reason))

        try:
            rates = self._client.fetch_rates(base)
        except Exception as e:
            with self._lock:
                self._error = str(e) or "FX fetch failed"
                self._loading = False
            self._log(RateEventBuilder.refresh_failed(url, self._error))
            return RefreshResult(
                status=RefreshStatus.FAILED,
                snapshot=self._store.current(),
                error=self._error,
            )

        snapshot = RateSnapshot(rates=rates, last_updated=self._clock()).with_base(base)
        self._store.save(snapshot)
        current = self._store.current()
        with self._lock:
            self._loading = False
        self._log(RateEventBuilder.refresh_succeeded(len(current.rates), current.last_updated))
        self._publish(current)
        return RefreshResult(status=RefreshStatus.REFRESHED, snapshot=current)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a listener for new snapshots.

        Listeners are called on the refresh worker thread.
        Returns a function that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, snapshot: RateSnapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot.model_copy(deep=True))
            except Exception as e:
                # One broken consumer must not stop the others
                self._log(RateEventBuilder.listener_failed(repr(listener), str(e)))

    def _log(self, event) -> None:
        if self._event_logger is not None:
            self._event_logger.log(event)
