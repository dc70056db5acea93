"""DiskCache-backed storage slot."""

import pickle
import sqlite3
from typing import Any, Optional
from diskcache import Cache

from .storage_service import StorageSlot


class DiskCacheSlot(StorageSlot):
    """Key-value slot kept in a diskcache directory, entries never expire.

    The cache is opened on first use; an unreadable cache surfaces as OSError.
    """

    def __init__(self, directory: str):
        self.directory = directory
        self._cache: Optional[Cache] = None

    def _open(self) -> Cache:
        if self._cache is None:
            try:
                self._cache = Cache(self.directory)
            except sqlite3.DatabaseError as e:
                raise OSError(f"Cannot open diskcache in {self.directory}: {e}") from e
        return self._cache

    def read(self, key: str) -> Optional[Any]:
        cache = self._open()
        try:
            return cache.get(key, default=None)
        except (sqlite3.DatabaseError, pickle.UnpicklingError) as e:
            raise OSError(f"Cannot read '{key}' from diskcache: {e}") from e

    def write(self, key: str, data: Any) -> None:
        cache = self._open()
        try:
            cache.set(key, data)
        except sqlite3.DatabaseError as e:
            raise OSError(f"Cannot write '{key}' to diskcache: {e}") from e

    def close(self):
        if self._cache:
            self._cache.close()
            self._cache = None
