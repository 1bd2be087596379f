"""Tests for placing the current price within the bands."""

from __future__ import annotations

import pytest

from rpbands.core.exceptions import DataValidationError
from rpbands.core.services.valuation import ValuationZone, classify_position


@pytest.mark.parametrize(
    ("price", "zone", "sentiment"),
    [
        (70_000, ValuationZone.ABOVE_3_2, "Extreme Overheated"),
        (64_000, ValuationZone.ABOVE_3_2, "Extreme Overheated"),
        (50_000, ValuationZone.BETWEEN_2_4_AND_3_2, "Euphoria"),
        (40_000, ValuationZone.BETWEEN_1_7_AND_2_4, "Above Fair Value"),
        (25_000, ValuationZone.BETWEEN_1_25_AND_1_7, "Bull Trend"),
        (20_000, ValuationZone.BETWEEN_1_0_AND_1_25, "Caution"),
        (17_000, ValuationZone.BETWEEN_0_8_AND_1_0, "Capitulation Risk"),
        (15_000, ValuationZone.BELOW_0_8, "Deep Capitulation"),
    ],
)
def test_zone_classification(price: int, zone: ValuationZone, sentiment: str) -> None:
    assessment = classify_position(price, 20_000)

    assert assessment.zone is zone
    assert assessment.sentiment == sentiment


def test_assessment_fields() -> None:
    assessment = classify_position(30_000.4, 20_000.0)

    assert assessment.price == 30_000
    assert assessment.rp == 20_000
    assert assessment.ratio == 1.5
    assert assessment.above_decision_line is True
    assert assessment.band_levels == {
        "rp": 20_000,
        "rp_0_8": 16_000,
        "rp_1_25": 25_000,
        "rp_1_7": 34_000,
        "rp_2_4": 48_000,
        "rp_3_2": 64_000,
    }


def test_below_decision_line() -> None:
    assert classify_position(24_999, 20_000).above_decision_line is False


@pytest.mark.parametrize("rp", [0, -1.0])
def test_non_positive_realized_price_is_rejected(rp: float) -> None:
    with pytest.raises(DataValidationError):
        classify_position(30_000, rp)
