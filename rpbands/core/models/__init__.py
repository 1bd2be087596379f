"""Data models for feeds, composite records and operation payloads."""

from rpbands.core.models.records import BandsFailure, BandsSnapshot, CompositeRecord
from rpbands.core.models.series import PricePoint, RawPoint

__all__ = [
    "BandsFailure",
    "BandsSnapshot",
    "CompositeRecord",
    "PricePoint",
    "RawPoint",
]
