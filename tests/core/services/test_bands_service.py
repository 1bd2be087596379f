"""Tests for the bands operation: fan-out, degraded mode and failure payloads."""

from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest
from loguru import logger
from prometheus_client import CollectorRegistry

from rpbands.core.config.settings import FeedConfig, MergeConfig
from rpbands.core.data.providers.factory import FeedSet, create_feed_set
from rpbands.core.exceptions import ErrorCode, ErrorSeverity, InsufficientDataError
from rpbands.core.logging import log_context
from rpbands.core.models.records import DEFAULT_SOURCE, BandsFailure, BandsSnapshot
from rpbands.core.models.series import RawPoint
from rpbands.core.monitoring.metrics import MetricsCollector
from rpbands.core.services.bands import BandsService, FeedPayloads
from tests.factories import HOUR_MS, day_ms, flat_metric, rising_prices


class StubMetricFetcher:
    def __init__(self, metrics: dict) -> None:
        self.metrics = metrics
        self.calls: list[str] = []

    async def fetch_metric(self, metric: str):
        self.calls.append(metric)
        return self.metrics.get(metric)


class StubHistoryFetcher:
    def __init__(self, history) -> None:
        self.history = history

    async def fetch_history(self):
        return self.history


class StubLiveFetcher:
    def __init__(self, price) -> None:
        self.price = price

    async def fetch_live_price(self):
        return self.price


class StubClient:
    def __init__(self) -> None:
        self.closed = False

    async def close(self) -> None:
        self.closed = True


NOW = datetime.fromtimestamp((day_ms(199) + 13 * HOUR_MS) / 1000, UTC)


def _feed_set(
    *,
    realized=flat_metric(200, 20_000.0),
    sth=flat_metric(200, 30_000.0),
    lth=flat_metric(200, 15_000.0),
    history=rising_prices(200),
    live: float | None = 65_000.0,
) -> FeedSet:
    metrics = {"realized_price": realized, "sth_realized_price": sth, "lth_realized_price": lth}
    return FeedSet(
        metrics=StubMetricFetcher(metrics),
        history=StubHistoryFetcher(history),
        live=StubLiveFetcher(live),
        client=StubClient(),
    )


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


def _service(feeds: FeedSet, registry: CollectorRegistry, config: MergeConfig | None = None) -> BandsService:
    return BandsService(feeds, config, clock=lambda: NOW, metrics=MetricsCollector(registry=registry))


@pytest.mark.asyncio
async def test_fetch_all_requests_every_feed(registry: CollectorRegistry) -> None:
    feeds = _feed_set()
    service = _service(feeds, registry)

    payloads = await service.fetch_all()

    assert isinstance(payloads, FeedPayloads)
    assert sorted(feeds.metrics.calls) == ["lth_realized_price", "realized_price", "sth_realized_price"]
    assert payloads.live_price == 65_000.0
    assert len(payloads.price_history) == 200


@pytest.mark.asyncio
async def test_query_returns_full_snapshot(registry: CollectorRegistry) -> None:
    service = _service(_feed_set(), registry)

    result = await service.query()

    assert isinstance(result, BandsSnapshot)
    assert result.data_points == len(result.data) == 52
    assert result.latest_rp == 20_000
    assert result.latest_rp_date == datetime.fromtimestamp(day_ms(199) / 1000, UTC)
    assert result.latest_sth == 30_000
    assert result.latest_lth == 15_000
    assert result.latest_price == 65_000
    assert result.updated_at == NOW
    assert result.source == DEFAULT_SOURCE
    assert result.data[-1].date == int(NOW.timestamp() * 1000)
    assert result.data[-1].price == 65_000
    assert registry.get_sample_value("rpbands_aggregations_total", {"status": "success"}) == 1.0
    assert registry.get_sample_value("rpbands_merged_records") == 52.0


@pytest.mark.asyncio
async def test_payload_uses_camel_case_keys(registry: CollectorRegistry) -> None:
    result = await _service(_feed_set(), registry).query()

    payload = result.to_payload()

    assert set(payload) == {
        "data",
        "latestRP",
        "latestRPDate",
        "latestSTH",
        "latestLTH",
        "latestPrice",
        "updatedAt",
        "source",
        "priceNote",
        "dataPoints",
    }
    assert set(payload["data"][0]) == {
        "date",
        "price",
        "rp",
        "rp_0_8",
        "rp_1_25",
        "rp_1_7",
        "rp_2_4",
        "rp_3_2",
        "sth_rp",
        "lth_rp",
    }


@pytest.mark.asyncio
async def test_optional_feeds_degrade_to_nulls(registry: CollectorRegistry) -> None:
    service = _service(_feed_set(sth=None, lth=None, live=None), registry)

    result = await service.query()

    assert isinstance(result, BandsSnapshot)
    assert result.latest_sth is None
    assert result.latest_lth is None
    assert all(record.sth_rp is None and record.lth_rp is None for record in result.data)
    assert result.data_points == 51
    assert result.latest_price == 31_990


@pytest.mark.asyncio
async def test_missing_primary_feed_is_upstream_failure(registry: CollectorRegistry) -> None:
    service = _service(_feed_set(realized=None), registry)

    result = await service.query()

    assert isinstance(result, BandsFailure)
    assert result.severity is ErrorSeverity.UPSTREAM
    assert result.status_code == 502
    assert result.code == ErrorCode.INSUFFICIENT_DATA.value
    assert result.error == "Failed to fetch on-chain realized price data"
    assert result.details["feed"] == "realized_price"
    assert registry.get_sample_value("rpbands_aggregations_total", {"status": "upstream"}) == 1.0


@pytest.mark.asyncio
async def test_sparse_history_is_upstream_failure(registry: CollectorRegistry) -> None:
    result = await _service(_feed_set(history=rising_prices(50)), registry).query()

    assert isinstance(result, BandsFailure)
    assert result.error == "Failed to fetch historical BTC price data"
    assert result.details["observed"] == 50


@pytest.mark.asyncio
async def test_unexpected_fault_is_internal_failure(registry: CollectorRegistry) -> None:
    service = _service(_feed_set(), registry)

    def explode(*_args, **_kwargs):
        raise RuntimeError("secret stack detail")

    service._engine.merge = explode  # type: ignore[method-assign]

    result = await service.query()

    assert isinstance(result, BandsFailure)
    assert result.severity is ErrorSeverity.INTERNAL
    assert result.status_code == 500
    assert result.error == "Internal server error fetching BTC data"
    assert result.details == {}
    assert "secret" not in str(result.to_payload())
    assert registry.get_sample_value("rpbands_aggregations_total", {"status": "internal"}) == 1.0


@pytest.mark.asyncio
async def test_snapshot_raises_for_callers_wanting_exceptions(registry: CollectorRegistry) -> None:
    with pytest.raises(InsufficientDataError):
        await _service(_feed_set(realized=None), registry).snapshot()


@pytest.mark.asyncio
async def test_close_releases_feed_client(registry: CollectorRegistry) -> None:
    feeds = _feed_set()

    await _service(feeds, registry).close()

    assert feeds.client.closed is True


@pytest.mark.asyncio
async def test_negative_cohort_value_does_not_sink_the_snapshot(registry: CollectorRegistry) -> None:
    def metric_payload(value: float) -> list[list[float]]:
        return [[point.timestamp_ms, point.value] for point in flat_metric(200, value)]

    sth = metric_payload(30_000.0)
    sth[100][1] = -5.0
    payloads = {
        "/files/realized_price.json": metric_payload(20_000.0),
        "/files/sth_realized_price.json": sth,
        "/files/lth_realized_price.json": metric_payload(15_000.0),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "charts.example.test":
            return httpx.Response(200, json=payloads[request.url.path])
        if request.url.host == "history.example.test":
            values = [{"x": point.timestamp_s, "y": point.value} for point in rising_prices(200)]
            return httpx.Response(200, json={"status": "ok", "values": values})
        return httpx.Response(200, json={"quotes": {"USD": {"price": 65_000.0}}})

    metrics = MetricsCollector(registry=registry)
    config = FeedConfig(
        metrics_url="https://charts.example.test/files/{metric}.json",
        history_url="https://history.example.test/market-price",
        live_url="https://live.example.test/ticker",
    )
    feeds = create_feed_set(config, transport=httpx.MockTransport(handler), metrics=metrics)
    service = BandsService(feeds, clock=lambda: NOW, metrics=metrics)
    try:
        result = await service.query()
    finally:
        await service.close()

    assert isinstance(result, BandsSnapshot)
    assert all(record.sth_rp is not None and record.sth_rp >= 0 for record in result.data)
    assert result.latest_sth == 30_000


@pytest.mark.asyncio
async def test_query_logs_under_the_callers_trace_id(registry: CollectorRegistry) -> None:
    trace_ids: list[str] = []
    sink_id = logger.add(lambda message: trace_ids.append(message.record["extra"]["trace_id"]), level="DEBUG")
    try:
        with log_context(trace_id="req-42"):
            result = await _service(_feed_set(realized=None), registry).query()
    finally:
        logger.remove(sink_id)

    assert isinstance(result, BandsFailure)
    assert trace_ids
    assert set(trace_ids) == {"req-42"}


@pytest.mark.asyncio
async def test_latest_rp_date_keeps_the_observation_instant(registry: CollectorRegistry) -> None:
    realized = (*flat_metric(199, 20_000.0), RawPoint(timestamp_ms=day_ms(199) + 5 * HOUR_MS, value=21_000.0))

    result = await _service(_feed_set(realized=realized), registry).query()

    assert isinstance(result, BandsSnapshot)
    assert result.latest_rp == 21_000
    assert result.latest_rp_date == datetime.fromtimestamp((day_ms(199) + 5 * HOUR_MS) / 1000, UTC)
