"""Unit tests for price tiers, statistics and formatting."""

import pytest

from fuelmap.config import Settings
from fuelmap.domain.entities import PriceStatistics
from fuelmap.domain.enums import PriceTier
from fuelmap.domain.formatting import format_distance, format_price
from fuelmap.domain.pricing import (
    PriceThresholds,
    compute_price_statistics,
    low_price_stations,
    price_tier,
)
from tests.conftest import make_station


class TestPriceTier:
    @pytest.mark.parametrize(
        "price, tier",
        [
            (1.649, PriceTier.LOW),
            (1.65, PriceTier.MID),
            (1.72, PriceTier.MID),
            (1.80, PriceTier.MID),
            (1.801, PriceTier.HIGH),
            (None, PriceTier.UNKNOWN),
        ],
    )
    def test_default_boundaries(self, price, tier):
        assert price_tier(price) is tier

    def test_zero_is_a_price_not_missing(self):
        assert price_tier(0.0) is PriceTier.LOW

    def test_thresholds_are_overridable(self):
        custom = PriceThresholds(low=1.50, high=1.60)
        assert price_tier(1.55, custom) is PriceTier.MID
        assert price_tier(1.62, custom) is PriceTier.HIGH

    def test_thresholds_from_settings(self):
        settings = Settings(price_low_threshold=1.7, price_high_threshold=1.9)
        thresholds = PriceThresholds.from_settings(settings)
        assert thresholds == PriceThresholds(low=1.7, high=1.9)


class TestPriceStatistics:
    def test_min_max_avg_rounded(self):
        stations = [
            make_station("a", price_diesel=1.629),
            make_station("b", price_diesel=1.749),
            make_station("c", price_diesel=1.7),
            make_station("d"),  # no diesel price
        ]
        stats = compute_price_statistics(stations)
        assert stats.min_diesel == 1.629
        assert stats.max_diesel == 1.749
        assert stats.avg_diesel == 1.693

    def test_empty_gives_nulls(self):
        assert compute_price_statistics([make_station("a")]) == PriceStatistics()


class TestLowPriceStations:
    def test_selects_low_tier_diesel_only(self):
        cheap = make_station("cheap", price_diesel=1.60)
        mid = make_station("mid", price_diesel=1.65)
        unpriced = make_station("none", price_sp95=1.40)
        assert low_price_stations([cheap, mid, unpriced]) == [cheap]


class TestFormatting:
    def test_format_price(self):
        assert format_price(1.629) == "1.629 €/L"
        assert format_price(None) == "N/A"

    @pytest.mark.parametrize(
        "km, text",
        [(0.25, "250m"), (0.9994, "999m"), (1.0, "1.0km"), (12.34, "12.3km"), (None, "N/A")],
    )
    def test_format_distance(self, km, text):
        assert format_distance(km) == text
