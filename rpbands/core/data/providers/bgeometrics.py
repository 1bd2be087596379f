"""BGeometrics on-chain metric files (``[timestampMs, value]`` pairs)."""

from __future__ import annotations

from typing import Any

from rpbands.core.data.providers.base import FeedFetcher, is_number
from rpbands.core.models.series import RawPoint

REALIZED_PRICE = "realized_price"
STH_REALIZED_PRICE = "sth_realized_price"
LTH_REALIZED_PRICE = "lth_realized_price"


def parse_metric_payload(payload: Any) -> tuple[RawPoint, ...] | None:
    """Validate a metric file; pairs with non-numeric members or negative values are skipped."""

    if not isinstance(payload, list) or not payload:
        return None

    points = []
    for entry in payload:
        if not isinstance(entry, (list, tuple)) or len(entry) < 2:
            continue
        timestamp, value = entry[0], entry[1]
        if not is_number(timestamp) or not is_number(value) or value < 0:
            continue
        points.append(RawPoint(timestamp_ms=int(timestamp), value=float(value)))
    return tuple(points) or None


class BGeometricsFetcher(FeedFetcher[tuple[RawPoint, ...]]):
    """Fetches named daily on-chain metrics."""

    def __init__(self, client, *, url_template: str, **kwargs):
        super().__init__(client, **kwargs)
        self.url_template = url_template

    async def fetch_metric(self, metric: str) -> tuple[RawPoint, ...] | None:
        url = self.url_template.format(metric=metric)
        return await self._cached(
            f"bgeometrics:{metric}",
            lambda: self._fetch(metric, url, parse_metric_payload),
        )


__all__ = [
    "BGeometricsFetcher",
    "LTH_REALIZED_PRICE",
    "REALIZED_PRICE",
    "STH_REALIZED_PRICE",
    "parse_metric_payload",
]
