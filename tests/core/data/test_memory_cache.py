"""Tests for the in-memory TTL cache."""

from __future__ import annotations

import pytest

from rpbands.core.data.cache.memory import InMemoryTTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_entry_expires_after_ttl() -> None:
    clock = FakeClock()
    cache = InMemoryTTLCache(clock=clock)

    await cache.set("k", "v", ttl=60)
    clock.now += 59
    assert await cache.get("k") == "v"

    clock.now += 1
    assert await cache.get("k") is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_zero_ttl_is_not_stored() -> None:
    cache = InMemoryTTLCache()

    await cache.set("k", "v", ttl=0)

    assert await cache.get("k") is None


@pytest.mark.asyncio
async def test_least_recently_used_entry_is_evicted() -> None:
    cache = InMemoryTTLCache(max_size=2)

    await cache.set("a", 1, ttl=60)
    await cache.set("b", 2, ttl=60)
    await cache.get("a")
    await cache.set("c", 3, ttl=60)

    assert await cache.get("a") == 1
    assert await cache.get("b") is None
    assert await cache.get("c") == 3


@pytest.mark.asyncio
async def test_overwrite_refreshes_expiry() -> None:
    clock = FakeClock()
    cache = InMemoryTTLCache(clock=clock)

    await cache.set("k", "old", ttl=60)
    clock.now += 50
    await cache.set("k", "new", ttl=60)
    clock.now += 50

    assert await cache.get("k") == "new"
    assert len(cache) == 1
