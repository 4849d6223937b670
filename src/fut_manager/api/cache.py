"""
Caching layer with Redis support and in-memory fallback.

Cached data:
- Top players (overall 87+): no expiry, cleared by /cleanRedis
- Random-draw player pools: 45 minutes, shrinking with every draw
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)

# TTL constants (seconds). 0 means "never expires".
TTL_FOREVER = 0
TTL_DEFAULT = 3600


class CacheBackend(ABC):
    """Abstract base class for cache backends."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> None:
        """Set value in cache. A ttl of 0 stores without expiry."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> int:
        """Clear all cached values. Returns count of removed keys."""
        pass

    @abstractmethod
    def size(self) -> int:
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass


class InMemoryBackend(CacheBackend):
    """Thread-safe in-memory cache backend with max-size eviction."""

    MAX_ENTRIES = 10_000

    def __init__(self):
        self._cache: dict[str, tuple[Any, Optional[datetime]]] = {}
        self._lock = threading.RLock()

    @staticmethod
    def _alive(expiry: Optional[datetime]) -> bool:
        return expiry is None or datetime.now(tz=timezone.utc) < expiry

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            if key in self._cache:
                value, expiry = self._cache[key]
                if self._alive(expiry):
                    return value
                del self._cache[key]
        return None

    def set(self, key: str, value: Any, ttl: int) -> None:
        expiry = None
        if ttl > 0:
            expiry = datetime.now(tz=timezone.utc) + timedelta(seconds=ttl)
        # Store a JSON round-trip so callers never share mutable state with the cache
        stored = json.loads(json.dumps(value, default=str))
        with self._lock:
            if len(self._cache) >= self.MAX_ENTRIES and key not in self._cache:
                self.cleanup_expired()
                if len(self._cache) >= self.MAX_ENTRIES:
                    oldest_key = next(iter(self._cache))
                    del self._cache[oldest_key]
            self._cache[key] = (stored, expiry)

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> int:
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
        return count

    def size(self) -> int:
        with self._lock:
            return len(self._cache)

    def exists(self, key: str) -> bool:
        with self._lock:
            if key in self._cache:
                _, expiry = self._cache[key]
                return self._alive(expiry)
            return False

    def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns count of removed entries."""
        removed = 0
        with self._lock:
            expired_keys = [key for key, (_, expiry) in self._cache.items() if not self._alive(expiry)]
            for key in expired_keys:
                del self._cache[key]
                removed += 1
        return removed


class RedisBackend(CacheBackend):
    """Redis cache backend for caching shared across workers."""

    def __init__(self, url: str, prefix: str = "futmanager:"):
        self._redis = redis.from_url(url, decode_responses=False)
        self._prefix = prefix
        self._redis.ping()
        logger.info("Redis cache backend connected")

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[Any]:
        try:
            data = self._redis.get(self._key(key))
            if data is not None:
                return json.loads(data)
        except redis.RedisError as e:
            logger.warning(f"Redis get error: {e}")
        return None

    def set(self, key: str, value: Any, ttl: int) -> None:
        payload = json.dumps(value, default=str)
        try:
            if ttl > 0:
                self._redis.setex(self._key(key), ttl, payload)
            else:
                self._redis.set(self._key(key), payload)
        except redis.RedisError as e:
            logger.warning(f"Redis set error: {e}")

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Redis delete error: {e}")

    def clear(self) -> int:
        try:
            keys = list(self._redis.scan_iter(match=f"{self._prefix}*"))
            if keys:
                self._redis.delete(*keys)
            return len(keys)
        except redis.RedisError as e:
            logger.warning(f"Redis clear error: {e}")
            return 0

    def size(self) -> int:
        try:
            return sum(1 for _ in self._redis.scan_iter(match=f"{self._prefix}*"))
        except redis.RedisError as e:
            logger.warning(f"Redis size error: {e}")
            return 0

    def exists(self, key: str) -> bool:
        try:
            return bool(self._redis.exists(self._key(key)))
        except redis.RedisError:
            return False


class HybridCache:
    """
    Cache with Redis primary and in-memory fallback.

    Redis is used when a URL is configured and reachable; otherwise a
    process-local in-memory backend takes its place.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        default_ttl: int = TTL_DEFAULT,
        prefix: str = "futmanager:",
    ):
        self.default_ttl = default_ttl
        self._stats = {"hits": 0, "misses": 0}
        self._primary: CacheBackend

        if redis_url:
            try:
                self._primary = RedisBackend(redis_url, prefix=prefix)
                self._using_redis = True
                logger.info("Using Redis as primary cache")
            except redis.RedisError as e:
                logger.warning(f"Redis unavailable ({e}), using in-memory cache")
                self._primary = InMemoryBackend()
                self._using_redis = False
        else:
            logger.info("No REDIS_URL configured, using in-memory cache")
            self._primary = InMemoryBackend()
            self._using_redis = False

    def _make_key(self, *args) -> str:
        """Create a colon-delimited cache key from arguments."""
        return ":".join(str(arg) for arg in args)

    def get(self, *args) -> Optional[Any]:
        """
        Get cached value.

        Args:
            *args: Arguments to create cache key from

        Returns:
            Cached value if exists and not expired, None otherwise
        """
        value = self._primary.get(self._make_key(*args))
        if value is not None:
            self._stats["hits"] += 1
            return value

        self._stats["misses"] += 1
        return None

    def set(self, value: Any, *args, ttl: Optional[int] = None) -> None:
        """
        Set cached value.

        Args:
            value: JSON-serializable value to cache
            *args: Arguments to create cache key from
            ttl: Time-to-live in seconds; None uses default_ttl, 0 never expires
        """
        if ttl is None:
            ttl = self.default_ttl
        self._primary.set(self._make_key(*args), value, ttl)

    def exists(self, *args) -> bool:
        return self._primary.exists(self._make_key(*args))

    def delete(self, *args) -> None:
        self._primary.delete(self._make_key(*args))

    def clear(self) -> int:
        """Clear all cached values. Returns count of removed keys."""
        count = self._primary.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def size(self) -> int:
        return self._primary.size()

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        total = self._stats["hits"] + self._stats["misses"]
        hit_rate = (self._stats["hits"] / total * 100) if total > 0 else 0
        return {
            "hits": self._stats["hits"],
            "misses": self._stats["misses"],
            "hit_rate_percent": round(hit_rate, 2),
            "total_requests": total,
            "entries": self._primary.size(),
            "using_redis": self._using_redis,
            "default_ttl": self.default_ttl,
        }

    def cleanup_expired(self) -> None:
        """Clean up expired entries from the in-memory backend."""
        if isinstance(self._primary, InMemoryBackend):
            self._primary.cleanup_expired()
