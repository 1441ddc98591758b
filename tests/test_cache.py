"""Tests for the read-through API cache and the key/value cache backend."""
from __future__ import annotations

import pytest

from lwl.utils.cache import ApiCache, CacheBackend, build_cache_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_build_cache_key_is_order_independent() -> None:
    assert build_cache_key(a=1, b={"x": 1, "y": 2}) == build_cache_key(b={"y": 2, "x": 1}, a=1)
    assert build_cache_key(a=1) != build_cache_key(a=2)


def test_api_cache_reuses_fresh_entries() -> None:
    clock = FakeClock()
    cache = ApiCache(default_ttl=10, clock=clock)
    calls: list[int] = []

    def fetch() -> str:
        calls.append(1)
        return f"value-{len(calls)}"

    assert cache.get("key", fetch) == "value-1"
    clock.now = 5
    assert cache.get("key", fetch) == "value-1"
    clock.now = 11
    assert cache.get("key", fetch) == "value-2"
    assert len(calls) == 2


def test_api_cache_zero_ttl_always_refetches() -> None:
    cache = ApiCache(default_ttl=10, clock=FakeClock())
    calls: list[int] = []

    def fetch() -> int:
        calls.append(1)
        return len(calls)

    assert cache.get("key", fetch, ttl=0) == 1
    assert cache.get("key", fetch, ttl=0) == 2
    assert cache.get("key", fetch) == 2


def test_api_cache_serves_stale_data_when_fetch_fails() -> None:
    clock = FakeClock()
    cache = ApiCache(default_ttl=10, clock=clock)
    cache.get("key", lambda: "cached")
    clock.now = 20

    def failing() -> str:
        raise RuntimeError("provider down")

    assert cache.get("key", failing) == "cached"


def test_api_cache_raises_without_previous_entry() -> None:
    cache = ApiCache(default_ttl=10, clock=FakeClock())

    def failing() -> str:
        raise RuntimeError("provider down")

    with pytest.raises(RuntimeError):
        cache.get("missing", failing)


def test_api_cache_invalidate_forces_refetch() -> None:
    cache = ApiCache(default_ttl=10, clock=FakeClock())
    cache.get("key", lambda: "first")
    cache.invalidate("key")

    assert cache.get("key", lambda: "second") == "second"


async def test_api_cache_async_fetch() -> None:
    cache = ApiCache(default_ttl=10, clock=FakeClock())

    async def fetch() -> dict[str, int]:
        return {"answer": 42}

    assert await cache.aget("async", fetch) == {"answer": 42}
    assert await cache.aget("async", fetch) == {"answer": 42}


def test_cache_backend_prefix_invalidation() -> None:
    backend = CacheBackend()
    backend.set("banner", "home", {"id": 1}, ttl_seconds=60)
    backend.set("banner", "pricing", {"id": 2}, ttl_seconds=60)

    backend.invalidate("banner", key="home")
    assert backend.get("banner", "home") is None
    assert backend.get("banner", "pricing") == {"id": 2}

    backend.invalidate("banner", prefix="")
    assert backend.get("banner", "pricing") is None
