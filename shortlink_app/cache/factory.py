"""
Factory for creating cache instances.

The app calls this once at startup and keeps the result on `app.state`;
nothing is cached at module or class level.
"""

import logging
from enum import Enum

from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache
from shortlink_app.config import Settings


logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """Builds the cache backend named in settings"""

    @staticmethod
    def create(backend: CacheBackend, settings: Settings) -> CacheStrategy:
        """
        Create a cache instance.

        Args:
            backend: Type of cache backend (from enum)
            settings: Application settings (redis_url for the Redis backend)

        Returns:
            A new cache instance. Redis falls back to in-memory when the
            server can't be reached at startup.
        """
        if backend == CacheBackend.REDIS:
            import redis

            try:
                redis_client = redis.from_url(
                    settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )

                # Test connection immediately
                redis_client.ping()

                logger.info("Redis cache initialized")
                return RedisCache(redis_client)

            except redis.RedisError as e:
                logger.warning("Redis connection failed (%s), falling back to in-memory cache", e)
                return InMemoryCache()

        elif backend == CacheBackend.MEMORY:
            logger.info("In-memory cache initialized")
            return InMemoryCache()

        elif backend == CacheBackend.NULL:
            logger.info("Null cache initialized")
            return NullCache()

        raise ValueError(f"Unknown cache backend: {backend}")
