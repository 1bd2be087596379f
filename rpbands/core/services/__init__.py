"""Core services: day-indexed series, merge engine, live-tick reconciler and the bands operation."""

from rpbands.core.services.bands import BandsService, FeedPayloads
from rpbands.core.services.day_series import DayIndexedSeries, build_day_series, day_key, lookup_nearest_or_exact
from rpbands.core.services.live_tick import LiveTickReconciler, resolve_current_price
from rpbands.core.services.merge import MergeEngine, MergeResult
from rpbands.core.services.valuation import PositionAssessment, ValuationZone, classify_position

__all__ = [
    "BandsService",
    "DayIndexedSeries",
    "FeedPayloads",
    "LiveTickReconciler",
    "MergeEngine",
    "MergeResult",
    "PositionAssessment",
    "ValuationZone",
    "build_day_series",
    "classify_position",
    "day_key",
    "lookup_nearest_or_exact",
    "resolve_current_price",
]
