"""Classification of the current price against realized price bands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rpbands.core.config.settings import BandMultipliers
from rpbands.core.exceptions.base import DataValidationError
from rpbands.core.services.merge import round_half_up


class ValuationZone(str, Enum):
    """Price position relative to the realized price multiples."""

    ABOVE_3_2 = "above 3.2x RP"
    BETWEEN_2_4_AND_3_2 = "between 2.4x-3.2x RP"
    BETWEEN_1_7_AND_2_4 = "between 1.7x-2.4x RP"
    BETWEEN_1_25_AND_1_7 = "between 1.25x-1.7x RP"
    BETWEEN_1_0_AND_1_25 = "between 1.0x-1.25x RP"
    BETWEEN_0_8_AND_1_0 = "between 0.8x-1.0x RP"
    BELOW_0_8 = "below 0.8x RP"


# Lower bound ratio, zone, sentiment; checked from the top down.
_ZONE_TABLE: tuple[tuple[float, ValuationZone, str], ...] = (
    (3.2, ValuationZone.ABOVE_3_2, "Extreme Overheated"),
    (2.4, ValuationZone.BETWEEN_2_4_AND_3_2, "Euphoria"),
    (1.7, ValuationZone.BETWEEN_1_7_AND_2_4, "Above Fair Value"),
    (1.25, ValuationZone.BETWEEN_1_25_AND_1_7, "Bull Trend"),
    (1.0, ValuationZone.BETWEEN_1_0_AND_1_25, "Caution"),
    (0.8, ValuationZone.BETWEEN_0_8_AND_1_0, "Capitulation Risk"),
)

DECISION_LINE = 1.25


@dataclass(frozen=True)
class PositionAssessment:
    """Where ``price`` sits within the realized price bands."""

    price: int
    rp: int
    ratio: float
    zone: ValuationZone
    sentiment: str
    band_levels: dict[str, int]
    above_decision_line: bool


def classify_position(
    price: float,
    rp: float,
    multipliers: BandMultipliers | None = None,
) -> PositionAssessment:
    """Place ``price`` against the bands derived from ``rp``."""

    if rp <= 0:
        raise DataValidationError(
            "Realized price must be positive to classify a position",
            validation_errors={"rp": rp},
        )

    ratio = price / rp
    zone, sentiment = ValuationZone.BELOW_0_8, "Deep Capitulation"
    for lower_bound, candidate, label in _ZONE_TABLE:
        if ratio >= lower_bound:
            zone, sentiment = candidate, label
            break

    levels = {"rp": round_half_up(rp)}
    for name, factor in (multipliers or BandMultipliers()).items():
        levels[name] = round_half_up(rp * factor)

    return PositionAssessment(
        price=round_half_up(price),
        rp=round_half_up(rp),
        ratio=round(ratio, 2),
        zone=zone,
        sentiment=sentiment,
        band_levels=levels,
        above_decision_line=price >= round_half_up(rp * DECISION_LINE),
    )


__all__ = ["DECISION_LINE", "PositionAssessment", "ValuationZone", "classify_position"]
