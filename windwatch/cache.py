"""
In-memory TTL cache for provider responses.

Each service owns its own cache instance: wind readings are cached per
airport for 5 minutes, flight feed queries for 10 seconds. There is no
capacity bound; the key space is the (small, fixed) airport catalog.

Entries are only ever replaced whole. A failed fetch never reaches
``put()``, so the previous entry survives untouched.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Cached value with the clock reading at which it was stored."""
    value: T
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at

    def is_valid(self, now: float, ttl_seconds: float) -> bool:
        return self.age(now) < ttl_seconds


class TTLCache(Generic[T]):
    """
    Thread-safe keyed cache with a single TTL per instance.

    ``clock`` defaults to ``time.monotonic`` so wall-clock jumps don't
    resurrect or kill entries; tests pass a fake clock.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = 'cache',
    ):
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock

        self._entries: Dict[Hashable, CacheEntry[T]] = {}
        self._lock = threading.RLock()

        # Statistics
        self._hits = 0
        self._misses = 0

    def get(self, key: Hashable) -> Optional[T]:
        """
        Get cached value by key.

        Returns None if not cached or expired.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if entry.is_valid(self._clock(), self.ttl_seconds):
                    self._hits += 1
                    return entry.value
                # Expired
                del self._entries[key]
            self._misses += 1
            return None

    def peek(self, key: Hashable) -> Optional[T]:
        """Like get(), without touching statistics or evicting."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_valid(self._clock(), self.ttl_seconds):
                return entry.value
            return None

    def get_entry(self, key: Hashable) -> Optional[CacheEntry[T]]:
        """Raw entry lookup, ignoring TTL and statistics."""
        with self._lock:
            return self._entries.get(key)

    def put(self, key: Hashable, value: T) -> None:
        """Store value, replacing any previous entry for key."""
        with self._lock:
            self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
        logger.debug(f'{self.name}: stored {key!r}')

    def invalidate(self, key: Hashable) -> None:
        """Remove specific entry from cache."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear entire cache."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            return {
                'name': self.name,
                'entries': len(self._entries),
                'ttl_seconds': self.ttl_seconds,
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': self._hits / total if total > 0 else 0,
            }
