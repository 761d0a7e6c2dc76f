"""In-memory TTL cache.

Holds resolved lookups (item and user details) for a fixed freshness
window. Expired entries are evicted when read, and swept from the whole
map by ``set`` at most once per window.
"""

import threading
import time
from typing import Any, Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

import structlog

logger = structlog.get_logger()

V = TypeVar("V")


class TTLCache(Generic[V]):
    """Key/value cache whose entries expire ``ttl_seconds`` after being set.

    Args:
        name: Label used in logs and stats.
        ttl_seconds: Freshness window for every entry.
        clock: Time source in seconds (injectable for tests).
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.name = name
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[V, float]] = {}
        self._hits = 0
        self._misses = 0
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[V]:
        """Return the cached value, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            value, stored_at = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                self._misses += 1
                return None

            self._hits += 1
            return value

    def set(self, key: Hashable, value: V) -> None:
        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self.ttl_seconds:
                self._evict_expired(now)
            self._entries[key] = (value, now)

    def _evict_expired(self, now: float) -> None:
        expired = [
            key
            for key, (_, stored_at) in self._entries.items()
            if now - stored_at >= self.ttl_seconds
        ]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        if expired:
            logger.debug("ttl_cache_swept", cache=self.name, evicted=len(expired))

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()
        logger.debug("ttl_cache_cleared", cache=self.name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "name": self.name,
                "size": len(self._entries),
                "ttl_seconds": self.ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
            }
