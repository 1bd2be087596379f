"""The bands aggregation operation: fan out to the feeds, merge, reconcile."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from loguru import logger

from rpbands.core.config.settings import MergeConfig
from rpbands.core.data.providers.bgeometrics import (
    LTH_REALIZED_PRICE,
    REALIZED_PRICE,
    STH_REALIZED_PRICE,
)
from rpbands.core.data.providers.factory import FeedSet, create_feed_set
from rpbands.core.exceptions.codes import ErrorSeverity
from rpbands.core.exceptions.handler import ErrorHandler, get_error_handler
from rpbands.core.logging import current_trace_id, log_context
from rpbands.core.models.records import BandsFailure, BandsSnapshot
from rpbands.core.models.series import PricePoint, RawPoint
from rpbands.core.monitoring.metrics import MetricsCollector, get_metrics_collector
from rpbands.core.services.day_series import DayIndexedSeries, build_day_series
from rpbands.core.services.live_tick import LiveTickReconciler, resolve_current_price
from rpbands.core.services.merge import MergeEngine, round_half_up


@dataclass(frozen=True)
class FeedPayloads:
    """Settled results of one fan-out; ``None`` marks an absent feed."""

    realized_price: tuple[RawPoint, ...] | None
    sth_realized_price: tuple[RawPoint, ...] | None
    lth_realized_price: tuple[RawPoint, ...] | None
    price_history: tuple[PricePoint, ...] | None
    live_price: float | None


def _latest_rounded(series: DayIndexedSeries | None) -> int | None:
    latest = series.latest() if series is not None else None
    return round_half_up(latest[1]) if latest is not None else None


class BandsService:
    """Builds the realized price bands dataset from the upstream feeds."""

    def __init__(
        self,
        feeds: FeedSet | None = None,
        config: MergeConfig | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
        error_handler: ErrorHandler | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.feeds = feeds or create_feed_set(metrics=metrics)
        self.config = config or MergeConfig()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._error_handler = error_handler or get_error_handler()
        self._metrics = metrics
        self._engine = MergeEngine(self.config)
        self._reconciler = LiveTickReconciler(self.config)

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics or get_metrics_collector()

    async def close(self) -> None:
        await self.feeds.close()

    async def fetch_all(self) -> FeedPayloads:
        """Issue every feed request concurrently and wait for all of them."""

        realized, sth, lth, history, live = await asyncio.gather(
            self.feeds.metrics.fetch_metric(REALIZED_PRICE),
            self.feeds.metrics.fetch_metric(STH_REALIZED_PRICE),
            self.feeds.metrics.fetch_metric(LTH_REALIZED_PRICE),
            self.feeds.history.fetch_history(),
            self.feeds.live.fetch_live_price(),
        )
        return FeedPayloads(
            realized_price=realized,
            sth_realized_price=sth,
            lth_realized_price=lth,
            price_history=history,
            live_price=live,
        )

    def assemble(self, payloads: FeedPayloads) -> BandsSnapshot:
        """Merge settled feed payloads into a snapshot.

        Raises:
            InsufficientDataError: when a mandatory feed is absent or sparse.
        """

        now = self._clock()
        now_ms = int(now.timestamp() * 1000)

        primary = build_day_series(payloads.realized_price)
        sth = build_day_series(payloads.sth_realized_price)
        lth = build_day_series(payloads.lth_realized_price)

        merged = self._engine.merge(primary, payloads.price_history, sth, lth)
        records = self._reconciler.reconcile(merged.records, payloads.live_price, now_ms, primary, sth, lth)
        current_price = resolve_current_price(payloads.live_price, merged.last_historical, records)

        _, latest_rp = primary.latest()
        # raw instant of the newest observation, not its midnight day-key
        latest_observed_ms = max(point.timestamp_ms for point in payloads.realized_price)
        return BandsSnapshot(
            data=records,
            latest_rp=round_half_up(latest_rp),
            latest_rp_date=datetime.fromtimestamp(latest_observed_ms / 1000, UTC),
            latest_sth=_latest_rounded(sth),
            latest_lth=_latest_rounded(lth),
            latest_price=current_price,
            updated_at=now,
            data_points=len(records),
        )

    async def snapshot(self) -> BandsSnapshot:
        """Run one aggregation; raises on gate rejection or internal faults."""

        payloads = await self.fetch_all()
        absent = [name for name, value in vars(payloads).items() if value is None]
        if absent:
            logger.info("Aggregating in degraded mode", absent_feeds=absent)
        return self.assemble(payloads)

    async def query(self) -> BandsSnapshot | BandsFailure:
        """Run one aggregation and never raise; failures become payloads."""

        with log_context(trace_id=current_trace_id(), operation="bands_snapshot") as trace_id:
            try:
                snapshot = await self.snapshot()
            except Exception as exc:
                error = self._error_handler.handle_exception(exc, "bands_snapshot", trace_id=trace_id)
                self.metrics.record_aggregation(error.severity.value)
                details = error.details if error.severity is ErrorSeverity.UPSTREAM else {}
                return BandsFailure(
                    error=error.message,
                    code=error.error_code,
                    severity=error.severity,
                    details=details,
                )

            self.metrics.record_aggregation("success", snapshot.data_points)
            logger.info("Bands snapshot ready", data_points=snapshot.data_points)
            return snapshot


__all__ = ["BandsService", "FeedPayloads"]
