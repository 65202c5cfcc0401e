"""
Abstract Cache Interface

DESIGN DECISION: We define an abstract key/value interface for the
durable cache. This allows us to:
1. Keep rates in a local JSON file today
2. Use in-memory storage for testing
3. Move to another store later without touching the rate logic

The interface is intentionally tiny: values are opaque strings stored
under fixed keys, like browser local storage.
"""

from abc import ABC, abstractmethod
from typing import Optional


class CacheBackend(ABC):
    """
    Abstract interface for durable key/value storage.

    Implementations may raise CacheError subclasses; callers that treat
    the cache as best-effort are expected to catch them.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if nothing is stored

        Raises:
            CacheReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            CacheWriteError: If the value could not be stored
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error."""
        pass


class CacheError(Exception):
    """Base exception for cache operations."""
    pass


class CacheReadError(CacheError):
    """Stored value could not be read."""
    pass


class CacheWriteError(CacheError):
    """Value could not be stored."""
    pass
