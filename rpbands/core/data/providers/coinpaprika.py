"""CoinPaprika ticker endpoint (live spot price)."""

from __future__ import annotations

from typing import Any

from rpbands.core.data.providers.base import FeedFetcher, is_number

LIVE_PRICE = "live_price"


def parse_ticker_payload(payload: Any) -> float | None:
    """Read ``quotes.USD.price``; missing, non-numeric or non-positive is absence."""

    if not isinstance(payload, dict):
        return None
    quotes = payload.get("quotes")
    usd = quotes.get("USD") if isinstance(quotes, dict) else None
    price = usd.get("price") if isinstance(usd, dict) else None
    if not is_number(price) or price <= 0:
        return None
    return float(price)


class CoinPaprikaFetcher(FeedFetcher[float]):
    """Fetches the current spot price; never cached."""

    def __init__(self, client, *, url: str, **kwargs):
        kwargs.pop("cache", None)
        super().__init__(client, **kwargs)
        self.url = url

    async def fetch_live_price(self) -> float | None:
        return await self._fetch(LIVE_PRICE, self.url, parse_ticker_payload)


__all__ = ["CoinPaprikaFetcher", "LIVE_PRICE", "parse_ticker_payload"]
