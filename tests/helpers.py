"""
Test doubles for FX Dashboard tests.

No test touches the real network; FX responses come from FakeRateClient.
"""

import asyncio
import time
from typing import Callable, Optional

from fxdash.services.rates import ExchangeRateClient


NOW_MS = 1_760_000_000_000


def run_async(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


class FakeClock:
    """Epoch-ms clock the test controls."""

    def __init__(self, now: int = NOW_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeRateClient(ExchangeRateClient):
    """FX client returning canned rates, counting every fetch."""

    def __init__(
        self,
        rates: Optional[dict] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        on_fetch: Optional[Callable[[], None]] = None,
    ):
        super().__init__(url_template="https://fx.test/latest/{base}")
        self.rates = rates if rates is not None else {"THB": 1, "USD": 0.0285, "MMK": 60.5}
        self.error = error
        self.delay = delay
        self.on_fetch = on_fetch
        self.calls = 0

    def fetch_rates(self, base: str) -> dict[str, float]:
        self.calls += 1
        if self.on_fetch:
            self.on_fetch()
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return dict(self.rates)
