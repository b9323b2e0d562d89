from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, Optional

from .errors import StorageQuotaExceeded
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class KeyValueStorage(ABC):
    """Abstract string key-value store holding the persisted document."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the raw value stored under key, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Overwrite the value stored under key.

        Raises:
            StorageError if the medium cannot persist the value.
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key. Return True if it existed."""


class InMemoryKeyValueStorage(KeyValueStorage):
    """
    Thread-safe in-memory store suitable for testing and default runtime.

    quota_bytes bounds the UTF-8 size of a single value (0 disables the
    quota), the way browser local storage refuses oversized writes.
    """

    def __init__(self, quota_bytes: int = 0) -> None:
        self._lock = RLock()
        self._items: Dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        size = len(value.encode("utf-8"))
        if self._quota_bytes and size > self._quota_bytes:
            raise StorageQuotaExceeded(size, self._quota_bytes)
        with self._lock:
            self._items[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, None) is not None


# PUBLIC_INTERFACE
def get_storage(settings: Optional[Settings] = None) -> KeyValueStorage:
    """
    Factory to return the configured storage based on settings.
    - memory: InMemoryKeyValueStorage
    - sqlite: SQLiteKeyValueStorage (local file)
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteKeyValueStorage

        logger.info("Using sqlite storage at %s", settings.sqlite_db_path)
        return SQLiteKeyValueStorage(settings.sqlite_db_path)
    return InMemoryKeyValueStorage(quota_bytes=settings.storage_quota_bytes)
