"""Merge engine aligning the realized price series with the spot price history."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from rpbands.core.config.settings import BandMultipliers, MergeConfig
from rpbands.core.exceptions.base import InsufficientDataError
from rpbands.core.models.records import CompositeRecord
from rpbands.core.models.series import PricePoint
from rpbands.core.services.day_series import DayIndexedSeries

PRIMARY_FEED = "on-chain realized price"
HISTORY_FEED = "historical BTC price"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, like ``Math.round``."""

    return math.floor(value + 0.5)


def _round_optional(value: float | None) -> int | None:
    return None if value is None else round_half_up(value)


def build_record(
    timestamp_ms: int,
    price: float,
    rp: float,
    sth_rp: float | None,
    lth_rp: float | None,
    multipliers: BandMultipliers,
) -> CompositeRecord:
    """Assemble one composite record; bands use the unrounded ``rp``."""

    bands = {name: round_half_up(rp * factor) for name, factor in multipliers.items()}
    return CompositeRecord(
        date=timestamp_ms,
        price=round_half_up(price),
        rp=round_half_up(rp),
        sth_rp=_round_optional(sth_rp),
        lth_rp=_round_optional(lth_rp),
        **bands,
    )


def lookup_optional(series: DayIndexedSeries | None, timestamp_ms: int) -> float | None:
    return series.lookup(timestamp_ms) if series is not None else None


def check_coverage(
    primary: DayIndexedSeries | None,
    prices: Sequence[PricePoint] | None,
    config: MergeConfig,
) -> None:
    """Reject sparse mandatory inputs instead of rendering a misleading chart."""

    observed = len(primary) if primary is not None else 0
    if observed < config.min_coverage:
        raise InsufficientDataError(
            f"Failed to fetch {PRIMARY_FEED} data",
            feed_name="realized_price",
            observed=observed,
            required=config.min_coverage,
        )

    observed = len(prices) if prices is not None else 0
    if observed < config.min_coverage:
        raise InsufficientDataError(
            f"Failed to fetch {HISTORY_FEED} data",
            feed_name="market_price",
            observed=observed,
            required=config.min_coverage,
        )


def window_prices(points: Sequence[PricePoint], config: MergeConfig) -> list[PricePoint]:
    """Drop pre-window and non-positive points, returning them in time order."""

    start = config.window_start_s
    kept = [point for point in points if point.timestamp_s >= start and point.value > 0]
    kept.sort(key=lambda point: point.timestamp_s)
    return kept


def resample_prices(points: Sequence[PricePoint], stride: int) -> list[PricePoint]:
    """Keep every ``stride``-th point and always end on the latest point."""

    if not points:
        return []
    sampled = list(points[::stride])
    if sampled[-1].timestamp_s != points[-1].timestamp_s:
        sampled.append(points[-1])
    return sampled


@dataclass(frozen=True)
class MergeResult:
    """Merged records plus the most recent windowed historical point."""

    records: list[CompositeRecord]
    last_historical: PricePoint | None


class MergeEngine:
    """Builds the ordered composite record sequence."""

    def __init__(self, config: MergeConfig | None = None) -> None:
        self.config = config or MergeConfig()

    def merge(
        self,
        primary: DayIndexedSeries | None,
        prices: Sequence[PricePoint] | None,
        sth: DayIndexedSeries | None = None,
        lth: DayIndexedSeries | None = None,
    ) -> MergeResult:
        check_coverage(primary, prices, self.config)

        windowed = window_prices(prices, self.config)
        sampled = resample_prices(windowed, self.config.stride)
        logger.debug(
            "Resampled price history",
            raw=len(prices),
            windowed=len(windowed),
            sampled=len(sampled),
        )

        records = []
        for point in sampled:
            timestamp_ms = point.timestamp_ms
            rp = primary.lookup(timestamp_ms)
            records.append(
                build_record(
                    timestamp_ms,
                    point.value,
                    rp if rp is not None else 0.0,
                    lookup_optional(sth, timestamp_ms),
                    lookup_optional(lth, timestamp_ms),
                    self.config.band_multipliers,
                )
            )

        return MergeResult(records=records, last_historical=windowed[-1] if windowed else None)


__all__ = [
    "MergeEngine",
    "MergeResult",
    "build_record",
    "check_coverage",
    "lookup_optional",
    "resample_prices",
    "round_half_up",
    "window_prices",
]
