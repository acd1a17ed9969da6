"""
List-view Sort / Filter Facade  (Strategy Pattern)
==================================================

* **PriceSort**    -- price of the filtered fuel (diesel when "all");
  unpriced stations get a large sentinel and land last in ascending order.
* **DistanceSort** -- Haversine distance from the user.  Without a user
  location there is no key at all and the list passes through unchanged.
* **NameSort**     -- case-sensitive lexical order on the station name.

A specific fuel filter drops stations without a price for that fuel.
Ties keep their input order: Python's sort is stable, including with
``reverse=True``.

Complexity: O(n log n).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from .distance import distance_km
from .entities import Location, SortState, Station
from .enums import ALL_FUELS, FuelFilter, FuelKind, SortBy, SortOrder

MISSING_PRICE_SENTINEL = 999.0


def price_fuel(fuel_filter: FuelFilter) -> FuelKind:
    """Fuel whose price drives price sorting for the given filter."""
    if fuel_filter == ALL_FUELS:
        return FuelKind.DIESEL
    return FuelKind(fuel_filter)


# ── Strategy hierarchy ────────────────────────────────────────────────


class SortStrategy(ABC):
    @abstractmethod
    def key(self, station: Station) -> Any: ...

    def applicable(self) -> bool:
        return True


class PriceSort(SortStrategy):
    def __init__(self, fuel: FuelKind = FuelKind.DIESEL):
        self.fuel = fuel

    def key(self, station: Station) -> float:
        price = station.price(self.fuel)
        return MISSING_PRICE_SENTINEL if price is None else price


class DistanceSort(SortStrategy):
    def __init__(self, origin: Optional[Location]):
        self.origin = origin

    def applicable(self) -> bool:
        return self.origin is not None

    def key(self, station: Station) -> float:
        if self.origin is None:
            raise ValueError("distance sort needs a user location")
        return distance_km(
            self.origin.latitude, self.origin.longitude, station.lat, station.lon
        )


class NameSort(SortStrategy):
    def key(self, station: Station) -> str:
        return station.name


def strategy_for(
    state: SortState, user_location: Optional[Location] = None
) -> SortStrategy:
    sort_by = SortBy(state.sort_by)
    if sort_by is SortBy.DISTANCE:
        return DistanceSort(user_location)
    if sort_by is SortBy.NAME:
        return NameSort()
    return PriceSort(price_fuel(state.fuel_filter))


# ── Facade ────────────────────────────────────────────────────────────


def apply_fuel_filter(
    stations: Iterable[Station], fuel_filter: FuelFilter
) -> list[Station]:
    if fuel_filter == ALL_FUELS:
        return list(stations)
    fuel = FuelKind(fuel_filter)
    return [s for s in stations if s.price(fuel) is not None]


def present_sorted(
    stations: Iterable[Station],
    state: SortState,
    user_location: Optional[Location] = None,
) -> list[Station]:
    """Filter then order *stations* for the list view.  Inputs untouched."""
    visible = apply_fuel_filter(stations, state.fuel_filter)
    strategy = strategy_for(state, user_location)
    if not strategy.applicable():
        return visible
    return sorted(
        visible,
        key=strategy.key,
        reverse=SortOrder(state.order) is SortOrder.DESC,
    )
