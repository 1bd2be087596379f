"""Prometheus metrics helpers for rpbands services."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


@dataclass
class _FeedStats:
    """Internal container tracking feed level success and failure counts."""

    total: int = 0
    failures: int = 0


class MetricsCollector:
    """Collects and exposes core Prometheus metrics for feed fetches and aggregations."""

    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.feed_latency_seconds = Histogram(
            "rpbands_feed_latency_seconds",
            "Latency distribution for upstream feed requests.",
            ("feed",),
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0, float("inf")),
            registry=self.registry,
        )
        self.feed_requests_total = Counter(
            "rpbands_feed_requests_total",
            "Total count of upstream feed requests.",
            ("feed",),
            registry=self.registry,
        )
        self.feed_failures_total = Counter(
            "rpbands_feed_failures_total",
            "Total count of upstream feed requests that degraded to absence.",
            ("feed",),
            registry=self.registry,
        )
        self.feed_error_rate = Gauge(
            "rpbands_feed_error_rate",
            "Rolling error rate for upstream feeds (0-1 range).",
            ("feed",),
            registry=self.registry,
        )
        self.aggregations_total = Counter(
            "rpbands_aggregations_total",
            "Aggregation outcomes grouped by status.",
            ("status",),
            registry=self.registry,
        )
        self.merged_records = Gauge(
            "rpbands_merged_records",
            "Number of composite records in the latest successful aggregation.",
            registry=self.registry,
        )
        self._feed_stats: DefaultDict[str, _FeedStats] = defaultdict(_FeedStats)

    def observe_feed(self, feed: str, latency_seconds: float, *, success: bool = True) -> None:
        """Record an upstream feed request."""

        self.feed_latency_seconds.labels(feed=feed).observe(latency_seconds)
        stats = self._feed_stats[feed]
        stats.total += 1
        self.feed_requests_total.labels(feed=feed).inc()
        if not success:
            stats.failures += 1
            self.feed_failures_total.labels(feed=feed).inc()
        error_rate = stats.failures / stats.total if stats.total else 0.0
        self.feed_error_rate.labels(feed=feed).set(error_rate)

    def record_aggregation(self, status: str, record_count: int | None = None) -> None:
        """Track aggregation outcomes with constrained status labels."""

        label = status if status in _ALLOWED_AGGREGATION_STATUSES else "__other__"
        self.aggregations_total.labels(status=label).inc()
        if record_count is not None:
            self.merged_records.set(record_count)

    def render(self) -> bytes:
        """Render metrics in Prometheus exposition format."""

        return generate_latest(self.registry)


_DEFAULT_COLLECTOR: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Return the global metrics collector instance."""

    global _DEFAULT_COLLECTOR
    if _DEFAULT_COLLECTOR is None:
        _DEFAULT_COLLECTOR = MetricsCollector()
    return _DEFAULT_COLLECTOR


def configure_metrics_collector(collector: MetricsCollector | None) -> None:
    """Override the global metrics collector for application wiring or tests."""

    global _DEFAULT_COLLECTOR
    _DEFAULT_COLLECTOR = collector


_ALLOWED_AGGREGATION_STATUSES = {
    "success",
    "upstream",
    "internal",
}
