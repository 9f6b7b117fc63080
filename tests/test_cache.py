"""
Tests for cache strategies and the cache factory.
"""
import asyncio
from unittest.mock import Mock, patch

import pytest
import redis

from shortlink_app.cache.factory import CacheBackend, CacheFactory
from shortlink_app.cache.strategies import InMemoryCache, NullCache, RedisCache


class TestInMemoryCache:

    def test_set_get_delete(self):
        cache = InMemoryCache()

        assert asyncio.run(cache.set("k", "v", ttl=10)) is True
        assert asyncio.run(cache.get("k")) == "v"
        assert asyncio.run(cache.delete("k")) is True
        assert asyncio.run(cache.get("k")) is None
        assert asyncio.run(cache.delete("k")) is False

    def test_entries_expire(self):
        now = [100.0]
        cache = InMemoryCache(clock=lambda: now[0])
        asyncio.run(cache.set("k", "v", ttl=5))

        now[0] = 104.9
        assert asyncio.run(cache.get("k")) == "v"
        now[0] = 105.0
        assert asyncio.run(cache.get("k")) is None

    def test_set_sweeps_expired_entries(self):
        now = [0.0]
        cache = InMemoryCache(clock=lambda: now[0])
        asyncio.run(cache.set("old", "v", ttl=5))
        asyncio.run(cache.set("long", "v", ttl=50))

        now[0] = 10.0
        asyncio.run(cache.set("new", "v", ttl=5))

        assert set(cache._cache) == {"long", "new"}


class TestNullCache:

    def test_never_hits(self):
        cache = NullCache()
        assert asyncio.run(cache.set("k", "v")) is True
        assert asyncio.run(cache.get("k")) is None


class TestRedisCache:

    def test_decodes_values(self):
        client = Mock()
        client.get.return_value = b"value"
        assert asyncio.run(RedisCache(client).get("k")) == "value"

    def test_set_uses_ttl(self):
        client = Mock()
        client.setex.return_value = True
        assert asyncio.run(RedisCache(client).set("k", "v", ttl=42)) is True
        client.setex.assert_called_once_with("k", 42, "v")

    def test_errors_are_cache_misses(self):
        client = Mock()
        client.get.side_effect = redis.ConnectionError("down")
        client.setex.side_effect = redis.ConnectionError("down")

        cache = RedisCache(client)
        assert asyncio.run(cache.get("k")) is None
        assert asyncio.run(cache.set("k", "v")) is False


class TestCacheFactory:

    def test_memory(self, settings):
        assert isinstance(CacheFactory.create(CacheBackend.MEMORY, settings), InMemoryCache)

    def test_null(self, settings):
        assert isinstance(CacheFactory.create(CacheBackend.NULL, settings), NullCache)

    def test_redis(self, settings):
        client = Mock()
        with patch("redis.from_url", return_value=client) as from_url:
            cache = CacheFactory.create(CacheBackend.REDIS, settings)

        assert isinstance(cache, RedisCache)
        assert from_url.call_args.args[0] == settings.redis_url
        client.ping.assert_called_once()

    def test_redis_unreachable_falls_back_to_memory(self, settings):
        client = Mock()
        client.ping.side_effect = redis.ConnectionError("Connection refused")
        with patch("redis.from_url", return_value=client):
            cache = CacheFactory.create(CacheBackend.REDIS, settings)

        assert isinstance(cache, InMemoryCache)

    def test_unknown_backend_name(self):
        with pytest.raises(ValueError):
            CacheBackend("memcached")
