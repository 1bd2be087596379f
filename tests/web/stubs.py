"""Stub bands service shared by the web and CLI tests."""

from __future__ import annotations

from datetime import UTC, datetime

from rpbands.core.config.settings import BandMultipliers, MergeConfig
from rpbands.core.exceptions import ErrorCode, ErrorSeverity
from rpbands.core.models.records import BandsFailure, BandsSnapshot
from rpbands.core.services.merge import build_record

DAY0_MS = int(datetime(2024, 1, 1, tzinfo=UTC).timestamp() * 1000)
DAY10_MS = DAY0_MS + 10 * 86_400_000


def build_snapshot(latest_price: int = 30_000, latest_rp: int = 20_000) -> BandsSnapshot:
    multipliers = BandMultipliers()
    records = [
        build_record(DAY0_MS, 21_000.0, 20_000.0, None, None, multipliers),
        build_record(DAY10_MS, 23_500.0, 22_000.0, 31_000.0, 14_000.0, multipliers),
    ]
    return BandsSnapshot(
        data=records,
        latest_rp=latest_rp,
        latest_rp_date=datetime.fromtimestamp(DAY10_MS / 1000, UTC),
        latest_sth=31_000,
        latest_lth=14_000,
        latest_price=latest_price,
        updated_at=datetime(2024, 1, 11, 12, tzinfo=UTC),
        data_points=len(records),
    )


def upstream_failure() -> BandsFailure:
    return BandsFailure(
        error="Failed to fetch on-chain realized price data",
        code=ErrorCode.INSUFFICIENT_DATA.value,
        severity=ErrorSeverity.UPSTREAM,
        details={"feed": "realized_price", "observed": 0, "required": 100},
    )


def internal_failure() -> BandsFailure:
    return BandsFailure(
        error="Internal server error fetching BTC data",
        code=ErrorCode.INTERNAL_ERROR.value,
        severity=ErrorSeverity.INTERNAL,
    )


class StubBandsService:
    def __init__(self, result: BandsSnapshot | BandsFailure) -> None:
        self.result = result
        self.config = MergeConfig()
        self.queries = 0
        self.closed = False

    async def query(self) -> BandsSnapshot | BandsFailure:
        self.queries += 1
        return self.result

    async def close(self) -> None:
        self.closed = True
