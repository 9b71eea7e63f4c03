"""
In-memory key/value cache with TTL.

Used for the provider access token and for per-account transaction listings.
Entries expire after their time-to-live and can be invalidated explicitly.
All operations are guarded by a lock because FastAPI runs sync handlers and
background tasks in a thread pool.

For distributed deployments with multiple instances, consider migrating to Redis.
"""

from __future__ import annotations

import threading
import time
from typing import Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class TTLCache(Generic[K, V]):
    """
    Thread-safe in-memory cache with time-to-live (TTL) expiration.

    Attributes:
        ttl_seconds: Default time-to-live applied by set()
        _entries: Internal storage mapping key to (value, expires_at) tuples

    Example:
        >>> cache: TTLCache[int, str] = TTLCache(ttl_seconds=300)
        >>> cache.set(1, "value")
        >>> cache.get(1)
        'value'
        >>> cache.invalidate(1)
    """

    def __init__(self, ttl_seconds: float = 3600):
        self.ttl_seconds = ttl_seconds
        self._entries: dict[K, tuple[V, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> Optional[V]:
        """
        Get cached value if not expired.

        Args:
            key: Cache key

        Returns:
            Cached value if found and not expired, None otherwise
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if time.monotonic() < expires_at:
                return value
            # Expired
            del self._entries[key]
            return None

    def set(self, key: K, value: V, ttl_seconds: Optional[float] = None) -> None:
        """
        Cache value with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Override for the default TTL
        """
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            self._entries[key] = (value, time.monotonic() + ttl)

    def invalidate(self, key: K) -> bool:
        """
        Remove a single entry.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Number of entries currently held (expired entries included until touched)."""
        with self._lock:
            return len(self._entries)


# Provider access tokens keyed by secret id. The TTL passed on set() comes from
# the provider's access_expires so the default only applies as a fallback.
token_cache: TTLCache[str, str] = TTLCache(ttl_seconds=3600)
