"""Process-local cache with absolute per-entry expiry."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, Protocol


class Cache(Protocol):
    """Minimal key/value cache contract used by the warranty monitor."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl: timedelta) -> None: ...


class MemoryCache:
    """
    In-memory cache shared by the background monitor and API readers.

    - Values are replaced wholesale on ``set``; callers store immutable
      collections so readers never observe partial updates.
    - Expired entries are dropped lazily on access.
    - Not visible across processes.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        # key -> (value, expires_at)
        self._items: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at <= self._clock():
                del self._items[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        seconds = ttl.total_seconds()
        if seconds <= 0:
            raise ValueError("Cache TTL must be positive")
        with self._lock:
            self._items[key] = (value, self._clock() + seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


memory_cache = MemoryCache()


__all__ = ["Cache", "MemoryCache", "memory_cache"]
