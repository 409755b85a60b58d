import pytest

from app.core import cache as cache_module
from app.core.cache import RedisCache, cache_categories_key, cache_product_key


class DummyRedis:
    def __init__(self):
        self.store = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value):
        self.store[key] = value

    async def setex(self, key, ttl, value):
        self.store[key] = value

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += self.store.pop(key, None) is not None
        return removed

    async def keys(self, pattern):
        prefix = pattern.rstrip("*")
        return [k for k in self.store if k.startswith(prefix)]


def test_keys():
    assert cache_categories_key("tree") == "categories:tree"
    assert cache_product_key("abc") == "product:abc"


@pytest.mark.asyncio
async def test_cache_is_noop_without_redis_url(monkeypatch):
    monkeypatch.setattr(cache_module.settings, "REDIS_URL", None)
    cache = RedisCache()

    assert await cache.set("k", {"a": 1}) is False
    assert await cache.get("k") is None
    assert await cache.ping() is False


@pytest.mark.asyncio
async def test_roundtrip_with_client():
    cache = RedisCache()
    cache.redis_client = DummyRedis()

    assert await cache.set("categories:flat", [{"id": 1}], ttl=60) is True
    assert await cache.get("categories:flat") == [{"id": 1}]


@pytest.mark.asyncio
async def test_invalidate_catalog(monkeypatch):
    dummy = DummyRedis()
    monkeypatch.setattr(cache_module.cache, "redis_client", dummy)
    dummy.store.update({"categories:flat": "[]", "categories:tree": "[]", "product:1": "{}", "product:2": "{}"})

    await cache_module.invalidate_catalog("1")

    assert sorted(dummy.store) == ["product:2"]
