"""In-memory TTL cache for weather payloads."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

WEATHER_TTL_SECONDS = 15 * 60
HISTORICAL_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: T
    timestamp: float


class WeatherCache(Generic[T]):
    """Keyed store whose entries go stale after ``ttl`` seconds.

    Expired entries are kept so that :meth:`get_stale` can serve them when a
    refresh fails.
    """

    def __init__(self, ttl: float = WEATHER_TTL_SECONDS, clock: Callable[[], float] = time.time) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> T | None:
        """Return the cached value, or None if absent or older than the TTL."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or self._clock() - entry.timestamp > self.ttl:
            return None
        return entry.data

    def get_stale(self, key: str) -> T | None:
        """Return the cached value regardless of age."""
        with self._lock:
            entry = self._entries.get(key)
        return entry.data if entry is not None else None

    def set(self, key: str, data: T) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(data=data, timestamp=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
