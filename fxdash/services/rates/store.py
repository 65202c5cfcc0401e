"""
Rate Store

Holds the current RateSnapshot in memory and mirrors it to the durable
cache under a fixed key.

CRITICAL: rates[base] is exactly 1 in every snapshot this store hands out,
whatever the cache or the FX service claimed.

The cache is an optimization, not a source of truth:
- A missing or corrupt cached value is a cold start
- A failed write is logged and otherwise ignored
"""

import json
from typing import Optional

from fxdash.audit import RateEventLogger
from fxdash.models.events import RateEventBuilder
from fxdash.models.rates import RateSnapshot
from fxdash.services.storage import CacheBackend, CacheError


class RateStore:
    """In-memory rate snapshot with write-through to a CacheBackend."""

    def __init__(
        self,
        backend: CacheBackend,
        base_currency: str = "THB",
        cache_key: str = "fxRates_THB_cache_v2",
        event_logger: Optional[RateEventLogger] = None,
    ):
        self._backend = backend
        self._base = base_currency.upper()
        self._key = cache_key
        self._event_logger = event_logger
        self._snapshot = RateSnapshot.empty(self._base)

    @property
    def base_currency(self) -> str:
        return self._base

    @property
    def cache_key(self) -> str:
        return self._key

    def load(self) -> RateSnapshot:
        """
        Adopt the cached snapshot if there is a well-formed one.

        Never raises. On a missing or malformed value the in-memory
        snapshot is left as it is (empty at startup).
        """
        try:
            raw = self._backend.read(self._key)
        except CacheError as e:
            self._log(RateEventBuilder.cache_corrupt(self._key, str(e)))
            return self.current()

        if raw is None:
            self._log(RateEventBuilder.cache_missing(self._key))
            return self.current()

        try:
            payload = json.loads(raw)
        except ValueError as e:
            self._log(RateEventBuilder.cache_corrupt(self._key, f"invalid JSON: {e}"))
            return self.current()

        snapshot = RateSnapshot.from_cache_payload(payload, self._base)
        if snapshot is None:
            self._log(RateEventBuilder.cache_corrupt(self._key, "missing 'rates' mapping"))
            return self.current()

        self._snapshot = snapshot
        self._log(RateEventBuilder.cache_loaded(
            self._key, len(snapshot.rates), snapshot.last_updated
        ))
        return self.current()

    def save(self, snapshot: RateSnapshot) -> bool:
        """
        Make a snapshot current and write it to the durable cache.

        Returns True if the durable write succeeded. The in-memory
        snapshot is updated either way.
        """
        self._snapshot = snapshot.with_base(self._base)
        try:
            self._backend.write(
                self._key, json.dumps(self._snapshot.to_cache_payload())
            )
        except (CacheError, TypeError, ValueError) as e:
            self._log(RateEventBuilder.cache_write_failed(self._key, str(e)))
            return False
        return True

    def current(self) -> RateSnapshot:
        """Copy of the in-memory snapshot."""
        return self._snapshot.model_copy(deep=True)

    def _log(self, event) -> None:
        if self._event_logger is not None:
            self._event_logger.log(event)
