"""
Domain entities and value objects.

All of them are immutable: a re-clustering or re-sorting pass builds new
values and never edits the ones it was given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import ALL_FUELS, FuelFilter, FuelKind, SortBy, SortOrder


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Bounds:
    """Rectangular viewport.  Antimeridian wrapping is not handled."""

    north: float
    south: float
    east: float
    west: float

    def contains(self, lat: float, lon: float) -> bool:
        # NaN compares False everywhere, so it is simply "outside"
        return self.south <= lat <= self.north and self.west <= lon <= self.east


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Station:
    id: str
    name: str
    address: str
    city: str
    lat: float
    lon: float
    postal_code: Optional[str] = None
    price_diesel: Optional[float] = None
    price_sp95: Optional[float] = None
    price_sp98: Optional[float] = None
    price_e10: Optional[float] = None
    price_e85: Optional[float] = None
    price_lpg: Optional[float] = None
    last_updated: Optional[datetime] = None

    def price(self, fuel: FuelKind) -> Optional[float]:
        return getattr(self, f"price_{FuelKind(fuel).value}")

    @property
    def location(self) -> Location:
        return Location(self.lat, self.lon)


@dataclass(frozen=True)
class Cluster:
    """A non-empty group of nearby stations shown as one marker."""

    stations: tuple[Station, ...]
    lat: float
    lon: float

    @property
    def count(self) -> int:
        return len(self.stations)

    @property
    def primary(self) -> Station:
        """First member in traversal order; what a cluster click selects."""
        return self.stations[0]

    @property
    def representative(self) -> Optional[Station]:
        """Cheapest member by diesel price, first one wins on ties."""
        best: Optional[Station] = None
        for station in self.stations:
            if station.price_diesel is None:
                continue
            if best is None or station.price_diesel < best.price_diesel:
                best = station
        return best

    @property
    def representative_price(self) -> Optional[float]:
        best = self.representative
        return best.price_diesel if best else None


@dataclass
class ClusterResult:
    clusters: list[Cluster] = field(default_factory=list)
    singles: list[Station] = field(default_factory=list)


@dataclass
class SortState:
    sort_by: SortBy = SortBy.PRICE
    order: SortOrder = SortOrder.ASC
    fuel_filter: FuelFilter = ALL_FUELS


@dataclass(frozen=True)
class PriceStatistics:
    min_diesel: Optional[float] = None
    max_diesel: Optional[float] = None
    avg_diesel: Optional[float] = None
