"""
Currency Converter

Converts amounts between the base currency and a display currency using
the current rate snapshot. Pure and synchronous: it never touches the
network and never raises for an unknown currency.

Degradation rules:
- Target is the base currency, or has no usable rate -> amount unchanged
- Non-numeric or NaN input amounts are treated as 0; infinities pass through

No rounding happens here; that is the formatter's job.
"""

import math
from typing import Any, Optional

from fxdash.models.rates import RateSnapshot
from fxdash.services.rates import RateStore


def as_amount(value: Any) -> float:
    """Coerce an input amount to a float; NaN and unparsable values become 0.0."""
    if isinstance(value, bool):
        return float(value)
    try:
        n = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return 0.0 if math.isnan(n) else n


def _normalize_code(code: Any) -> Optional[str]:
    if not isinstance(code, str) or not code.strip():
        return None
    return code.strip().upper()


def convert_from_base(
    snapshot: RateSnapshot,
    amount_base: Any,
    to_currency: Any,
    base_currency: str,
) -> float:
    """Base amount -> amount in `to_currency`."""
    amount = as_amount(amount_base)
    code = _normalize_code(to_currency)
    if code is None or code == base_currency:
        return amount
    rate = snapshot.rate_for(code)
    if rate is None:
        return amount
    return amount * rate


def convert_to_base(
    snapshot: RateSnapshot,
    amount_display: Any,
    from_currency: Any,
    base_currency: str,
) -> float:
    """Amount in `from_currency` -> base amount."""
    amount = as_amount(amount_display)
    code = _normalize_code(from_currency)
    if code is None or code == base_currency:
        return amount
    rate = snapshot.rate_for(code)
    if rate is None:
        return amount
    return amount / rate


class CurrencyConverter:
    """
    Converter bound to a RateStore.

    Reads store.current() on every call, so it always sees the latest
    published snapshot.
    """

    def __init__(self, store: RateStore):
        self._store = store

    @property
    def base_currency(self) -> str:
        return self._store.base_currency

    def to_display(self, amount_base: Any, to_currency: Any) -> float:
        return convert_from_base(
            self._store.current(), amount_base, to_currency, self.base_currency
        )

    def to_base(self, amount_display: Any, from_currency: Any) -> float:
        return convert_to_base(
            self._store.current(), amount_display, from_currency, self.base_currency
        )
