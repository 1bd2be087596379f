"""Process-lifetime in-memory feed cache."""

import time
from collections import OrderedDict
from collections.abc import Callable
from threading import Lock
from typing import Any

from .base import CacheStrategy


class InMemoryTTLCache(CacheStrategy):
    """线程安全的LRU内存缓存, 条目按TTL过期."""

    def __init__(self, max_size: int = 16, clock: Callable[[], float] | None = None):
        self.max_size = max_size
        self._clock = clock or time.monotonic
        self._cache: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self._lock = Lock()

    async def get(self, key: str) -> Any | None:
        with self._lock:
            if key not in self._cache:
                return None

            value, expiry = self._cache[key]
            if self._clock() >= expiry:
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        if ttl <= 0:
            return
        expiry = self._clock() + ttl

        with self._lock:
            if key in self._cache:
                del self._cache[key]

            while len(self._cache) >= self.max_size and self._cache:
                self._cache.popitem(last=False)

            self._cache[key] = (value, expiry)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
