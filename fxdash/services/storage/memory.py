"""In-memory cache backend, used by tests and cache-less deployments."""

from typing import Optional

from fxdash.services.storage.interface import CacheBackend


class InMemoryCache(CacheBackend):
    """Dictionary-backed cache. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def write(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._values
