"""Wires the three feed fetchers from configuration."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from rpbands.core.config.settings import FeedConfig
from rpbands.core.data.cache.memory import InMemoryTTLCache
from rpbands.core.data.providers.base import FeedHttpClient, HttpConfig
from rpbands.core.data.providers.bgeometrics import BGeometricsFetcher
from rpbands.core.data.providers.blockchain_info import BlockchainInfoFetcher
from rpbands.core.data.providers.coinpaprika import CoinPaprikaFetcher
from rpbands.core.monitoring.metrics import MetricsCollector


@dataclass
class FeedSet:
    """The fetchers used by one bands service, sharing an HTTP client."""

    metrics: BGeometricsFetcher
    history: BlockchainInfoFetcher
    live: CoinPaprikaFetcher
    client: FeedHttpClient

    async def close(self) -> None:
        await self.client.close()


def create_feed_set(
    config: FeedConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    metrics: MetricsCollector | None = None,
) -> FeedSet:
    """Build fetchers; the two history feeds share one process-lifetime cache."""

    config = config or FeedConfig()
    client = FeedHttpClient(HttpConfig(user_agent=config.user_agent), transport=transport)
    cache = InMemoryTTLCache(max_size=config.cache_size)

    return FeedSet(
        metrics=BGeometricsFetcher(
            client,
            url_template=config.metrics_url,
            timeout=config.timeout,
            cache=cache,
            cache_ttl=config.cache_ttl,
            metrics=metrics,
        ),
        history=BlockchainInfoFetcher(
            client,
            url=config.history_url,
            timeout=config.timeout,
            cache=cache,
            cache_ttl=config.cache_ttl,
            metrics=metrics,
        ),
        live=CoinPaprikaFetcher(
            client,
            url=config.live_url,
            timeout=config.live_timeout,
            metrics=metrics,
        ),
        client=client,
    )


__all__ = ["FeedSet", "create_feed_set"]
