"""Upstream feed fetchers."""

from rpbands.core.data.providers.base import FeedFetcher, FeedHttpClient, HttpConfig
from rpbands.core.data.providers.bgeometrics import (
    LTH_REALIZED_PRICE,
    REALIZED_PRICE,
    STH_REALIZED_PRICE,
    BGeometricsFetcher,
)
from rpbands.core.data.providers.blockchain_info import BlockchainInfoFetcher
from rpbands.core.data.providers.coinpaprika import CoinPaprikaFetcher
from rpbands.core.data.providers.factory import FeedSet, create_feed_set

__all__ = [
    "BGeometricsFetcher",
    "BlockchainInfoFetcher",
    "CoinPaprikaFetcher",
    "FeedFetcher",
    "FeedHttpClient",
    "FeedSet",
    "HttpConfig",
    "LTH_REALIZED_PRICE",
    "REALIZED_PRICE",
    "STH_REALIZED_PRICE",
    "create_feed_set",
]
