"""Feed payload cache interface."""

from abc import ABC, abstractmethod
from typing import Any


class CacheStrategy(ABC):
    """Stores validated feed payloads keyed by feed name."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the cached payload, or ``None`` when missing or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store ``value`` for ``ttl`` seconds."""
