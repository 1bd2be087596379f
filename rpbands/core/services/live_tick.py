"""Folds the live spot price into the merged record sequence."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from rpbands.core.config.settings import MergeConfig
from rpbands.core.models.records import CompositeRecord
from rpbands.core.models.series import PricePoint
from rpbands.core.services.day_series import DayIndexedSeries
from rpbands.core.services.merge import build_record, round_half_up


def _lookup_or_latest(series: DayIndexedSeries | None, timestamp_ms: int) -> float | None:
    if series is None:
        return None
    value = series.lookup(timestamp_ms)
    if value is None:
        latest = series.latest()
        value = latest[1] if latest is not None else None
    return value


def resolve_current_price(
    live_price: float | None,
    last_historical: PricePoint | None,
    records: Sequence[CompositeRecord],
) -> int:
    """Price shown in summaries: live, last historical, last record, then zero."""

    if live_price is not None:
        return round_half_up(live_price)
    if last_historical is not None:
        return round_half_up(last_historical.value)
    if records:
        return records[-1].price
    return 0


class LiveTickReconciler:
    """Replaces or appends the trailing record with a live observation."""

    def __init__(self, config: MergeConfig | None = None) -> None:
        self.config = config or MergeConfig()

    def build_candidate(
        self,
        live_price: float,
        now_ms: int,
        primary: DayIndexedSeries,
        sth: DayIndexedSeries | None = None,
        lth: DayIndexedSeries | None = None,
    ) -> CompositeRecord:
        rp = _lookup_or_latest(primary, now_ms)
        return build_record(
            now_ms,
            live_price,
            rp if rp is not None else 0.0,
            _lookup_or_latest(sth, now_ms),
            _lookup_or_latest(lth, now_ms),
            self.config.band_multipliers,
        )

    def reconcile(
        self,
        records: Sequence[CompositeRecord],
        live_price: float | None,
        now_ms: int,
        primary: DayIndexedSeries,
        sth: DayIndexedSeries | None = None,
        lth: DayIndexedSeries | None = None,
    ) -> list[CompositeRecord]:
        merged = list(records)
        if live_price is None or not merged:
            return merged

        candidate = self.build_candidate(live_price, now_ms, primary, sth, lth)
        if now_ms - merged[-1].date > self.config.live_append_after_ms:
            merged.append(candidate)
            logger.debug("Appended live tick", date=now_ms)
        else:
            merged[-1] = candidate
            logger.debug("Replaced trailing record with live tick", date=now_ms)
        return merged


__all__ = ["LiveTickReconciler", "resolve_current_price"]
