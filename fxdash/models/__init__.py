"""
Data Models Package

This package contains all Pydantic models used by the FX Dashboard core.
"""

from fxdash.models.rates import (
    Preferences,
    RateSnapshot,
    RefreshResult,
    RefreshStatus,
    clean_rate_table,
    is_currency_code,
    is_usable_rate,
)
from fxdash.models.events import (
    RateEvent,
    RateEventBuilder,
    RateEventSeverity,
    RateEventType,
)

__all__ = [
    # Rate models
    "Preferences",
    "RateSnapshot",
    "RefreshResult",
    "RefreshStatus",
    "clean_rate_table",
    "is_currency_code",
    "is_usable_rate",
    # Event models
    "RateEvent",
    "RateEventBuilder",
    "RateEventSeverity",
    "RateEventType",
]
