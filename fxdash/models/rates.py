"""
Rate and Preference Models for FX Dashboard

These models define the data that flows between the rate cache,
the FX provider and the display layer.

DESIGN DECISION: A snapshot is immutable by convention. Components never
edit rates in place; they build a new snapshot and hand it to the store.
"""

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def is_currency_code(value: Any) -> bool:
    """True for a 3-letter alphabetic code (any case)."""
    return (
        isinstance(value, str)
        and len(value.strip()) == 3
        and value.strip().isascii()
        and value.strip().isalpha()
    )


def is_usable_rate(value: Any) -> bool:
    """A rate can be used for conversion only if it is a finite positive number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def clean_rate_table(raw: Any) -> dict[str, float]:
    """
    Keep only well-formed entries of a rate table.

    Codes are upper-cased; entries with a malformed code or a rate that is
    not a finite positive number are dropped.
    """
    cleaned: dict[str, float] = {}
    if not isinstance(raw, Mapping):
        return cleaned
    for code, rate in raw.items():
        if not is_currency_code(code) or not is_usable_rate(rate):
            continue
        cleaned[code.strip().upper()] = float(rate)
    return cleaned


# =============================================================================
# RATE SNAPSHOT
# =============================================================================

class RateSnapshot(BaseModel):
    """
    Point-in-time copy of the rate table.

    `rates[code]` is how many units of `code` equal one unit of the base
    currency. `last_updated` is epoch milliseconds of the last successful
    fetch, 0 if rates were never fetched.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rates: dict[str, float] = Field(
        default_factory=dict,
        description="Currency code -> units per one base unit"
    )
    last_updated: int = Field(
        default=0,
        ge=0,
        alias="lastUpdated",
        description="Epoch ms of the last successful fetch"
    )

    @classmethod
    def empty(cls, base: str) -> "RateSnapshot":
        """Cold-start snapshot: only the base currency, never fetched."""
        return cls(rates={base: 1.0}, last_updated=0)

    @classmethod
    def from_cache_payload(cls, payload: Any, base: str) -> Optional["RateSnapshot"]:
        """
        Build a snapshot from a decoded cache value.

        Returns None if the payload is not an object with a `rates` mapping.
        The base rate is always forced to 1.
        """
        if not isinstance(payload, Mapping):
            return None
        raw_rates = payload.get("rates")
        if not isinstance(raw_rates, Mapping):
            return None

        last_updated = payload.get("lastUpdated", 0)
        if isinstance(last_updated, bool) or not isinstance(last_updated, (int, float)):
            last_updated = 0
        elif not math.isfinite(last_updated) or last_updated < 0:
            last_updated = 0

        return cls(
            rates=clean_rate_table(raw_rates),
            last_updated=int(last_updated),
        ).with_base(base)

    def with_base(self, base: str) -> "RateSnapshot":
        """Copy of this snapshot with rates[base] forced to exactly 1."""
        rates = dict(self.rates)
        rates[base] = 1.0
        return RateSnapshot(rates=rates, last_updated=self.last_updated)

    def rate_for(self, code: str) -> Optional[float]:
        """Usable rate for a currency, or None."""
        if not isinstance(code, str):
            return None
        rate = self.rates.get(code.strip().upper())
        return rate if is_usable_rate(rate) else None

    def has_rate(self, code: str) -> bool:
        return self.rate_for(code) is not None

    def to_cache_payload(self) -> dict:
        """Serialize to the `{rates, lastUpdated}` cache format."""
        return {"rates": dict(self.rates), "lastUpdated": self.last_updated}


# =============================================================================
# REFRESH OUTCOME
# =============================================================================

class RefreshStatus(str, Enum):
    """What a refresh call ended up doing."""
    REFRESHED = "refreshed"  # Fetched and applied new rates
    SKIPPED = "skipped"      # Snapshot fresh and complete, no fetch
    FAILED = "failed"        # Fetch failed, previous snapshot kept


class RefreshResult(BaseModel):
    """Result of a refresh attempt, shared by every caller that awaited it."""
    model_config = ConfigDict(frozen=True)

    status: RefreshStatus
    snapshot: RateSnapshot
    error: Optional[str] = Field(
        default=None,
        description="Advisory message for display when the refresh failed"
    )

    @property
    def ok(self) -> bool:
        return self.status != RefreshStatus.FAILED

    @property
    def fetched(self) -> bool:
        return self.status == RefreshStatus.REFRESHED


# =============================================================================
# USER PREFERENCES
# =============================================================================

class Preferences(BaseModel):
    """
    Raw display preferences as stored by the rest of the application.

    Values are free-form here; CurrencyBinding normalizes them.
    """
    model_config = ConfigDict(extra="ignore")

    currency: Optional[Any] = None
    language: Optional[Any] = None
