"""
Tests for cache strategies.
"""
import asyncio

from quickurl.cache.strategies import InMemoryCache, NullCache


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestInMemoryCache:
    """Test in-memory cache with TTL enforcement"""

    def test_set_and_get(self):
        cache = InMemoryCache()

        assert asyncio.run(cache.set("url:abc", "https://example.com", ttl=60)) is True
        assert asyncio.run(cache.get("url:abc")) == "https://example.com"
        assert asyncio.run(cache.exists("url:abc")) is True

    def test_entries_expire(self):
        clock = FakeClock()
        cache = InMemoryCache(clock=clock)
        asyncio.run(cache.set("url:abc", "https://example.com", ttl=10))

        clock.now += 9
        assert asyncio.run(cache.get("url:abc")) == "https://example.com"

        clock.now += 1
        assert asyncio.run(cache.get("url:abc")) is None
        assert asyncio.run(cache.exists("url:abc")) is False

    def test_non_positive_ttl_is_not_cached(self):
        cache = InMemoryCache()

        assert asyncio.run(cache.set("url:abc", "https://example.com", ttl=0)) is False
        assert asyncio.run(cache.get("url:abc")) is None

    def test_delete(self):
        cache = InMemoryCache()
        asyncio.run(cache.set("url:abc", "https://example.com"))

        assert asyncio.run(cache.delete("url:abc")) is True
        assert asyncio.run(cache.delete("url:abc")) is False

    def test_clear(self):
        cache = InMemoryCache()
        asyncio.run(cache.set("a", "1"))
        asyncio.run(cache.set("b", "2"))

        asyncio.run(cache.clear())

        assert asyncio.run(cache.get("a")) is None
        assert asyncio.run(cache.get("b")) is None


class TestNullCache:
    """Null cache never stores anything"""

    def test_always_misses(self):
        cache = NullCache()
        asyncio.run(cache.set("url:abc", "https://example.com"))

        assert asyncio.run(cache.get("url:abc")) is None
        assert asyncio.run(cache.exists("url:abc")) is False
