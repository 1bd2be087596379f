"""Feed caching."""

from rpbands.core.data.cache.base import CacheStrategy
from rpbands.core.data.cache.memory import InMemoryTTLCache

__all__ = ["CacheStrategy", "InMemoryTTLCache"]
