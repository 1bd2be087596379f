"""rpbands - Bitcoin realized price bands

Aggregates the on-chain realized price, the historical spot price and the
live spot price into one daily, time-aligned dataset for valuation charts.
"""

import asyncio

from rpbands.core.config import ConfigManager, MergeConfig, RPBandsConfig
from rpbands.core.data.providers import create_feed_set
from rpbands.core.models import BandsFailure, BandsSnapshot, CompositeRecord
from rpbands.core.services import BandsService


def create_service(config: RPBandsConfig | None = None) -> BandsService:
    """Build a :class:`BandsService` from file/env configuration."""

    config = config or ConfigManager().get_config()
    return BandsService(create_feed_set(config.feeds), config.merge)


async def get_bands_async(config: RPBandsConfig | None = None) -> BandsSnapshot | BandsFailure:
    """Run one aggregation.

    Examples:
        >>> import asyncio
        >>> import rpbands
        >>> result = asyncio.run(rpbands.get_bands_async())
        >>> result.data_points if isinstance(result, rpbands.BandsSnapshot) else result.error
    """
    service = create_service(config)
    try:
        return await service.query()
    finally:
        await service.close()


def get_bands(config: RPBandsConfig | None = None) -> BandsSnapshot | BandsFailure:
    """同步运行一次聚合."""
    return asyncio.run(get_bands_async(config))


__version__ = "0.1.0"

__all__ = [
    "BandsFailure",
    "BandsService",
    "BandsSnapshot",
    "CompositeRecord",
    "MergeConfig",
    "RPBandsConfig",
    "create_service",
    "get_bands",
    "get_bands_async",
]
