"""Local TTL cache and the CacheManager facade (Redis disabled)."""

import asyncio

import pytest

from app.config import settings
from app.core import cache as cache_module
from app.core.cache import CacheManager, LocalTTLCache


@pytest.fixture
def clock(monkeypatch):
    """Controllable replacement for time.monotonic inside the cache module."""
    now = [1000.0]
    monkeypatch.setattr(cache_module.time, "monotonic", lambda: now[0])
    return now


def test_lru_eviction_keeps_capacity_bound():
    cache = LocalTTLCache(max_entries=2, default_ttl=60)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")  # "b" is now least recently used
    cache.set("c", 3)

    assert cache.get("a") == 1
    assert cache.get("b") is None
    assert cache.get("c") == 3
    assert len(cache) == 2


def test_entries_expire(clock):
    cache = LocalTTLCache(max_entries=10, default_ttl=60)
    cache.set("short", "x", ttl=5)
    cache.set("default", "y")

    clock[0] += 10
    assert cache.get("short") is None
    assert cache.get("default") == "y"

    clock[0] += 60
    assert len(cache) == 0


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        LocalTTLCache(max_entries=0, default_ttl=60)


def test_manager_falls_back_to_local_cache():
    manager = CacheManager(settings)
    manager.connect()

    assert manager.backend == "local"
    assert manager.set("key", {"a": 1}) is True
    assert manager.get("key") == {"a": 1}
    assert manager.delete("key") is True
    assert manager.get("key") is None

    stats = manager.get_stats()
    assert stats["connected"] is False
    assert stats["capacity"] == settings.CACHE_MAX_ENTRIES


def test_get_or_set_runs_factory_once_per_key():
    manager = CacheManager(settings)
    calls = []

    async def factory():
        calls.append(1)
        await asyncio.sleep(0.01)
        return ["value"]

    async def run():
        concurrent = await asyncio.gather(*[manager.get_or_set("k", factory) for _ in range(4)])
        later = await manager.get_or_set("k", factory)
        return concurrent, later

    concurrent, later = asyncio.run(run())

    assert len(calls) == 1
    assert sorted(hit for _, hit in concurrent) == [False, True, True, True]
    assert later == (["value"], True)


def test_get_or_set_does_not_cache_failures():
    manager = CacheManager(settings)

    async def failing():
        raise RuntimeError("upstream down")

    async def succeeding():
        return "ok"

    with pytest.raises(RuntimeError):
        asyncio.run(manager.get_or_set("k", failing))

    assert manager.get("k") is None
    assert asyncio.run(manager.get_or_set("k", succeeding)) == ("ok", False)
