"""
Preference Sources

The user's display preferences are owned by the rest of the application
(backend profile, settings page). This module only reads them.

DESIGN DECISION: Sources return raw values. Normalization happens in one
place (CurrencyBinding) so every source is treated the same way.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

from fxdash.models.rates import Preferences
from fxdash.services.storage import CacheBackend, CacheError


class PreferencesSource(ABC):
    """Read-only access to the current user's display preferences."""

    @abstractmethod
    def get_preferences(self) -> Preferences:
        """Current raw preferences. Must not raise."""
        pass


class InMemoryPreferences(PreferencesSource):
    """Preferences held in memory; the owner updates them directly."""

    def __init__(self, currency: Optional[Any] = None, language: Optional[Any] = None):
        self._prefs = Preferences(currency=currency, language=language)

    def get_preferences(self) -> Preferences:
        return self._prefs

    def update(self, **changes: Any) -> None:
        """Replace some preference values (currency=..., language=...)."""
        self._prefs = self._prefs.model_copy(update=changes)


class StoredPreferences(PreferencesSource):
    """
    Preferences saved as a JSON object under a cache key.

    A missing, unreadable or non-object value yields empty preferences,
    which the binding turns into defaults.
    """

    def __init__(self, backend: CacheBackend, key: str = "appSettings"):
        self._backend = backend
        self._key = key

    def get_preferences(self) -> Preferences:
        try:
            raw = self._backend.read(self._key)
        except CacheError:
            return Preferences()
        if not raw:
            return Preferences()
        try:
            data = json.loads(raw)
        except ValueError:
            return Preferences()
        if not isinstance(data, dict):
            return Preferences()
        return Preferences(currency=data.get("currency"), language=data.get("language"))
