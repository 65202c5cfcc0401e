"""
Storage Services Package

Provides the abstract cache interface and concrete backends.
The rate snapshot and saved preferences both live behind CacheBackend.
"""

from fxdash.services.storage.interface import (
    CacheBackend,
    CacheError,
    CacheReadError,
    CacheWriteError,
)
from fxdash.services.storage.file_cache import JsonFileCache
from fxdash.services.storage.memory import InMemoryCache

__all__ = [
    # Interface
    "CacheBackend",
    # Exceptions
    "CacheError",
    "CacheReadError",
    "CacheWriteError",
    # Implementations
    "InMemoryCache",
    "JsonFileCache",
]
