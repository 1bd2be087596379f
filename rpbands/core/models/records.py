"""Composite records and the payloads returned by the bands operation."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rpbands.core.exceptions.codes import ErrorSeverity

DEFAULT_SOURCE = "BGeometrics (on-chain) + Blockchain.info (full history) + CoinPaprika (live)"
DEFAULT_PRICE_NOTE = (
    "Historical BTC price is daily average from Blockchain.info; live spot price from CoinPaprika"
)


class CompositeRecord(BaseModel):
    """One point of the merged valuation chart."""

    model_config = ConfigDict(frozen=True)

    date: int = Field(..., description="Epoch milliseconds")
    price: int = Field(..., ge=0)
    rp: int = Field(..., ge=0)
    rp_0_8: int = Field(..., ge=0)
    rp_1_25: int = Field(..., ge=0)
    rp_1_7: int = Field(..., ge=0)
    rp_2_4: int = Field(..., ge=0)
    rp_3_2: int = Field(..., ge=0)
    sth_rp: int | None = Field(None, ge=0)
    lth_rp: int | None = Field(None, ge=0)


class BandsSnapshot(BaseModel):
    """Successful result of the bands aggregation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: list[CompositeRecord]
    latest_rp: int = Field(..., alias="latestRP")
    latest_rp_date: datetime = Field(..., alias="latestRPDate")
    latest_sth: int | None = Field(None, alias="latestSTH")
    latest_lth: int | None = Field(None, alias="latestLTH")
    latest_price: int
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source: str = DEFAULT_SOURCE
    price_note: str = DEFAULT_PRICE_NOTE
    data_points: int

    def to_payload(self) -> dict:
        """Serialize with the camelCase keys expected by chart consumers."""

        return self.model_dump(mode="json", by_alias=True)


class BandsFailure(BaseModel):
    """Operation-level failure; never carries partial chart data."""

    error: str
    code: str
    severity: ErrorSeverity
    details: dict = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def status_code(self) -> int:
        return 502 if self.severity is ErrorSeverity.UPSTREAM else 500

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")


__all__ = [
    "BandsFailure",
    "BandsSnapshot",
    "CompositeRecord",
    "DEFAULT_PRICE_NOTE",
    "DEFAULT_SOURCE",
]
