"""Durable key-value slot for the persisted chat state."""

import json
import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ..config import settings
from ..models.storage import PersistedState

logger = logging.getLogger(__name__)


class StorageSlot(ABC):
    """Named key-value slot holding JSON-shaped data."""

    @abstractmethod
    def read(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when the key is absent."""
        pass

    @abstractmethod
    def write(self, key: str, data: Any) -> None:
        pass

    def close(self):
        pass


class JsonFileSlot(StorageSlot):
    """One JSON file per key inside a storage directory."""

    def __init__(self, storage_dir: str = "data"):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.storage_dir / f"{key}.json"

    def read(self, key: str) -> Optional[Any]:
        file_path = self.path_for(key)
        if not file_path.exists():
            return None
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def write(self, key: str, data: Any) -> None:
        file_path = self.path_for(key)
        tmp_path = file_path.with_suffix(".json.tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, file_path)


class StorageService:
    """Reads and writes the chat state under a fixed namespace key."""

    def __init__(self, slot: StorageSlot, key: str = "chat-storage"):
        self.slot = slot
        self.key = key

    def load(self) -> PersistedState:
        """Restore the persisted state; anything unreadable yields an empty state."""
        try:
            data = self.slot.read(self.key)
        except (OSError, ValueError, sqlite3.DatabaseError) as e:
            logger.warning(f"Could not read storage slot '{self.key}': {e}")
            return PersistedState()

        if data is None:
            return PersistedState()

        try:
            return PersistedState.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Discarding malformed storage slot '{self.key}': {e.error_count()} errors")
            return PersistedState()

    def save(self, state: PersistedState) -> None:
        try:
            self.slot.write(self.key, state.to_json_data())
        except Exception:
            logger.exception(f"Failed to write storage slot '{self.key}'")
            raise

    def close(self):
        self.slot.close()


def build_storage_service(backend: Optional[str] = None, storage_dir: Optional[str] = None,
                          key: Optional[str] = None) -> StorageService:
    """Create the storage service for the configured backend."""
    backend = (backend or settings.storage_backend).lower()
    storage_dir = storage_dir or settings.storage_dir
    key = key or settings.storage_key

    if backend == "json":
        slot = JsonFileSlot(storage_dir)
    elif backend == "diskcache":
        from .cache import DiskCacheSlot
        slot = DiskCacheSlot(storage_dir)
    else:
        raise ValueError(f"Unsupported storage backend: {backend}")

    logger.info(f"Using {backend} storage slot '{key}' in {storage_dir}")
    return StorageService(slot, key)
