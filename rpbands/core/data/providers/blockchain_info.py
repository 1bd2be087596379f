"""Blockchain.info market price chart (full daily history)."""

from __future__ import annotations

from typing import Any

from rpbands.core.data.providers.base import FeedFetcher, is_number
from rpbands.core.models.series import PricePoint

MARKET_PRICE = "market_price"


def parse_history_payload(payload: Any) -> tuple[PricePoint, ...] | None:
    """Require ``status == "ok"`` and a non-empty ``values`` list of ``{x, y}``."""

    if not isinstance(payload, dict) or payload.get("status") != "ok":
        return None
    values = payload.get("values")
    if not isinstance(values, list) or not values:
        return None

    points = []
    for entry in values:
        if not isinstance(entry, dict):
            continue
        x, y = entry.get("x"), entry.get("y")
        if not is_number(x) or not is_number(y):
            continue
        points.append(PricePoint(timestamp_s=int(x), value=float(y)))
    return tuple(points) or None


class BlockchainInfoFetcher(FeedFetcher[tuple[PricePoint, ...]]):
    """Fetches the full historical market price series."""

    def __init__(self, client, *, url: str, **kwargs):
        super().__init__(client, **kwargs)
        self.url = url

    async def fetch_history(self) -> tuple[PricePoint, ...] | None:
        return await self._cached(
            f"blockchain_info:{MARKET_PRICE}",
            lambda: self._fetch(MARKET_PRICE, self.url, parse_history_payload),
        )


__all__ = ["BlockchainInfoFetcher", "MARKET_PRICE", "parse_history_payload"]
