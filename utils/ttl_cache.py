"""Thread-safe TTL cache for dispatch results."""

import threading
import time
from typing import Any, Callable


class InMemoryTTLCache:
    """
    Thread-safe in-memory cache with TTL (Time To Live).

    Each entry carries its own expiry instant; expired entries are dropped
    lazily on read or by purge_expired(). Nothing is scheduled, so clear()
    leaves no pending eviction behind.

    Unbounded unless max_entries is given. When bounded and full, expired
    entries are purged first, then the entry closest to expiry is evicted.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache with TTL.

        Args:
            ttl_seconds: Default time to live in seconds for cached entries
            max_entries: Optional upper bound on stored entries
            clock: Monotonic time source in seconds
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._cache: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()  # Required for FastAPI concurrency
        self._ttl = float(ttl_seconds)
        self._max_entries = max_entries
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        """
        Get cached value if exists and not expired.

        Args:
            key: Cache key

        Returns:
            Cached value if exists and valid, None otherwise
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            value, expiry = entry
            if self._clock() < expiry:
                return value
            del self._cache[key]
            return None

    def set(self, key: str, value: Any, ttl_seconds: float | None = None):
        """
        Store value in cache, replacing any existing entry and its expiry.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Override for the default TTL
        """
        ttl = self._ttl if ttl_seconds is None else float(ttl_seconds)
        with self._lock:
            now = self._clock()
            if (
                self._max_entries is not None
                and key not in self._cache
                and len(self._cache) >= self._max_entries
            ):
                self._purge_expired_locked(now)
                if len(self._cache) >= self._max_entries:
                    soonest = min(self._cache, key=lambda k: self._cache[k][1])
                    del self._cache[soonest]
            self._cache[key] = (value, now + ttl)

    def clear(self):
        """Clear all cached entries."""
        with self._lock:
            self._cache.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            return self._purge_expired_locked(self._clock())

    def _purge_expired_locked(self, now: float) -> int:
        expired = [k for k, (_, expiry) in self._cache.items() if expiry <= now]
        for k in expired:
            del self._cache[k]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
