"""Display preferences and the preference-aware money surface."""

from fxdash.preferences.binding import (
    LANGUAGE_ALIASES,
    CurrencyBinding,
    normalize_currency,
    normalize_language,
)
from fxdash.preferences.sources import (
    InMemoryPreferences,
    PreferencesSource,
    StoredPreferences,
)

__all__ = [
    "LANGUAGE_ALIASES",
    "CurrencyBinding",
    "InMemoryPreferences",
    "PreferencesSource",
    "StoredPreferences",
    "normalize_currency",
    "normalize_language",
]
