"""Raw observations produced by the upstream feeds."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RawPoint:
    """One valuation-metric observation, timestamped in epoch milliseconds."""

    timestamp_ms: int
    value: float


@dataclass(frozen=True, slots=True)
class PricePoint:
    """One historical spot-price observation, timestamped in epoch seconds."""

    timestamp_s: int
    value: float

    @property
    def timestamp_ms(self) -> int:
        return self.timestamp_s * 1000


__all__ = ["PricePoint", "RawPoint"]
