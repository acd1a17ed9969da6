"""
Station list panel state.

Owns the sort state, the panel mode and the user's location.  Every setter
re-runs the sort/filter facade, so ``visible`` is always current.
"""

from __future__ import annotations

from typing import Iterable, Optional

from fuelmap.domain.distance import distance_km
from fuelmap.domain.entities import Location, SortState, Station
from fuelmap.domain.enums import (
    PANEL_DISMISS,
    PANEL_TOGGLE,
    FuelFilter,
    PanelMode,
    SortBy,
    SortOrder,
)
from fuelmap.domain.presentation import present_sorted


class StationListPanel:
    def __init__(
        self,
        stations: Iterable[Station] = (),
        user_location: Optional[Location] = None,
    ):
        self.sort_state = SortState()
        self.mode = PanelMode.COLLAPSED
        self.user_location = user_location
        self._stations = list(stations)
        self.visible: list[Station] = []
        self._recompute()

    # ── Setters ───────────────────────────────────────────────────────

    def set_stations(self, stations: Iterable[Station]) -> None:
        self._stations = list(stations)
        self._recompute()

    def set_user_location(self, location: Optional[Location]) -> None:
        self.user_location = location
        self._recompute()

    def toggle_sort(self, sort_by: SortBy) -> None:
        """Same key flips the order; a new key starts ascending."""
        sort_by = SortBy(sort_by)
        if self.sort_state.sort_by == sort_by:
            self.sort_state.order = (
                SortOrder.DESC
                if self.sort_state.order == SortOrder.ASC
                else SortOrder.ASC
            )
        else:
            self.sort_state.sort_by = sort_by
            self.sort_state.order = SortOrder.ASC
        self._recompute()

    def set_fuel_filter(self, fuel_filter: FuelFilter) -> None:
        self.sort_state.fuel_filter = fuel_filter
        self._recompute()

    def toggle_panel(self) -> None:
        self.mode = PANEL_TOGGLE[self.mode]

    def dismiss_panel(self) -> None:
        self.mode = PANEL_DISMISS[self.mode]

    # ── Queries ───────────────────────────────────────────────────────

    def distance_to(self, station: Station) -> Optional[float]:
        if self.user_location is None:
            return None
        return distance_km(
            self.user_location.latitude,
            self.user_location.longitude,
            station.lat,
            station.lon,
        )

    def _recompute(self) -> None:
        self.visible = present_sorted(
            self._stations, self.sort_state, self.user_location
        )
