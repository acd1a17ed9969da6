"""
Price tiers and price statistics.

Tiers (EUR / litre, thresholds configurable)
--------------------------------------------
* ``price <  low``   -> LOW     (favourable, green)
* ``price >  high``  -> HIGH    (unfavourable, red)
* otherwise          -> MID     (orange); both thresholds are MID
* missing price      -> UNKNOWN (grey)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .entities import PriceStatistics, Station
from .enums import PriceTier


@dataclass(frozen=True)
class PriceThresholds:
    low: float = 1.65
    high: float = 1.80

    @classmethod
    def from_settings(cls, settings) -> "PriceThresholds":
        return cls(
            low=settings.price_low_threshold,
            high=settings.price_high_threshold,
        )


DEFAULT_THRESHOLDS = PriceThresholds()


def price_tier(
    price: Optional[float], thresholds: PriceThresholds = DEFAULT_THRESHOLDS
) -> PriceTier:
    if price is None:
        return PriceTier.UNKNOWN
    if price < thresholds.low:
        return PriceTier.LOW
    if price > thresholds.high:
        return PriceTier.HIGH
    return PriceTier.MID


def low_price_stations(
    stations: Iterable[Station], thresholds: PriceThresholds = DEFAULT_THRESHOLDS
) -> list[Station]:
    """Stations whose diesel price falls in the LOW tier."""
    return [
        s for s in stations
        if price_tier(s.price_diesel, thresholds) is PriceTier.LOW
    ]


def compute_price_statistics(stations: Iterable[Station]) -> PriceStatistics:
    """Min / max / mean diesel price, rounded to 3 decimals."""
    prices = [s.price_diesel for s in stations if s.price_diesel is not None]
    if not prices:
        return PriceStatistics()
    return PriceStatistics(
        min_diesel=round(min(prices), 3),
        max_diesel=round(max(prices), 3),
        avg_diesel=round(sum(prices) / len(prices), 3),
    )
