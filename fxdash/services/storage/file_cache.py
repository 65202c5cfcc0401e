"""
JSON File Cache Implementation

DESIGN DECISION: Each key lives in its own file inside a cache directory.
1. No database required for a single-user dashboard
2. Files are human-readable and easy to delete
3. One writer per key, so no locking is needed

Writes go to a temporary file first and are moved into place, so a crash
mid-write leaves the previous value intact.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from fxdash.services.storage.interface import (
    CacheBackend,
    CacheReadError,
    CacheWriteError,
)


_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileCache(CacheBackend):
    """File-per-key cache rooted at a directory."""

    def __init__(self, directory: str):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """File that holds a key's value."""
        safe = _UNSAFE_KEY_CHARS.sub("_", key) or "_"
        return self._directory / f"{safe}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise CacheReadError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory, prefix=f".{path.stem}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise CacheWriteError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise CacheWriteError(f"Failed to delete {key}: {e}") from e
