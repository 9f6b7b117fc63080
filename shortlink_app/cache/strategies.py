"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple


logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    This is the Strategy Pattern interface - the service layer talks to it
    without knowing which backend sits behind it.

    All methods are async because cache operations involve I/O (network for Redis).
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL (Time To Live).

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete key from cache.

        Returns:
            True if deleted, False if key didn't exist
        """
        pass

    def close(self) -> None:
        """Release backend resources (called on app shutdown)"""


class RedisCache(CacheStrategy):
    """
    Redis cache implementation.

    Shared between app instances, so a link cached by one worker is
    served by all of them. Errors are logged and treated as cache misses.
    """

    def __init__(self, redis_client):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(key)
            return value.decode("utf-8") if value else None
        except Exception as e:
            logger.warning("Redis get error: %s", e)
            return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        try:
            return bool(self.redis.setex(key, ttl, value))
        except Exception as e:
            logger.warning("Redis set error: %s", e)
            return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(self.redis.delete(key))
        except Exception as e:
            logger.warning("Redis delete error: %s", e)
            return False

    def close(self) -> None:
        self.redis.close()


class InMemoryCache(CacheStrategy):
    """
    In-memory cache implementation using a Python dict.

    Per-process, lost on restart. Entries carry their own deadline: a read
    drops its own expired entry, and every write sweeps out all expired
    entries, so links nobody visits don't pile up.
    """

    def __init__(self, clock=time.monotonic):
        self._cache: Dict[str, Tuple[str, float]] = {}
        self._clock = clock

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (_, deadline) in self._cache.items() if now >= deadline]
        for key in expired:
            del self._cache[key]

    async def get(self, key: str) -> Optional[str]:
        entry = self._cache.get(key)
        if entry is None:
            return None

        value, deadline = entry
        if self._clock() >= deadline:
            del self._cache[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        now = self._clock()
        self._purge_expired(now)
        self._cache[key] = (value, now + ttl)
        return True

    async def delete(self, key: str) -> bool:
        if key in self._cache:
            del self._cache[key]
            return True
        return False

    def close(self) -> None:
        self._cache.clear()


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Used for tests and for disabling the cache entirely.
    """

    async def get(self, key: str) -> Optional[str]:
        """Always a cache miss"""
        return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        return True

    async def delete(self, key: str) -> bool:
        return True
