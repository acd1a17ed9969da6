"""
Map view: turns controller state into markers.

Pipeline, re-run on every controller state change::

    stations -> filter_in_bounds -> order_for_clustering -> compute_clusters

The result is a fresh ``MapRender``; nothing from the previous pass is
reused.  When a ``StationListPanel`` is attached, it receives the visible
stations on each pass.  Visible stations in the LOW diesel tier feed the
"low price" notice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from fuelmap.controllers.list_panel import StationListPanel
from fuelmap.controllers.viewport import ViewportController, ViewportState
from fuelmap.domain.bounds import filter_in_bounds
from fuelmap.domain.clustering import (
    DEFAULT_CONFIG,
    ClusteringConfig,
    compute_clusters,
    order_for_clustering,
    select_from_cluster,
)
from fuelmap.domain.entities import Cluster, Station
from fuelmap.domain.enums import FetchStatus, PriceTier
from fuelmap.domain.formatting import format_price
from fuelmap.domain.pricing import (
    DEFAULT_THRESHOLDS,
    PriceThresholds,
    low_price_stations,
    price_tier,
)

ZOOM_HINT = "Zoom in to see stations"


@dataclass
class MapRender:
    clusters: list[Cluster] = field(default_factory=list)
    singles: list[Station] = field(default_factory=list)
    visible: list[Station] = field(default_factory=list)
    low_price: list[Station] = field(default_factory=list)
    status: FetchStatus = FetchStatus.IDLE
    error: Optional[str] = None
    zoom_hint: Optional[str] = None


class MapView:
    def __init__(
        self,
        controller: ViewportController,
        clustering: ClusteringConfig = DEFAULT_CONFIG,
        thresholds: PriceThresholds = DEFAULT_THRESHOLDS,
        list_panel: Optional[StationListPanel] = None,
    ):
        self.controller = controller
        self.clustering = clustering
        self.thresholds = thresholds
        self.list_panel = list_panel
        self.selected_station_id: Optional[str] = None
        self.render = MapRender()
        controller.add_listener(self._recompute)
        self._recompute(controller.state)

    def _recompute(self, state: ViewportState) -> None:
        if state.status is FetchStatus.ZOOM_TOO_LOW:
            self.render = MapRender(status=state.status, zoom_hint=ZOOM_HINT)
            visible: list[Station] = []
        else:
            visible = filter_in_bounds(state.stations, state.bounds)
            result = compute_clusters(
                order_for_clustering(visible), state.zoom, self.clustering
            )
            self.render = MapRender(
                clusters=result.clusters,
                singles=result.singles,
                visible=visible,
                low_price=low_price_stations(visible, self.thresholds),
                status=state.status,
                error=state.error,
            )
        if self.list_panel is not None:
            self.list_panel.set_stations(visible)

    def low_price_notice(self) -> Optional[str]:
        """Banner text naming the cheapest visible LOW-tier diesel, if any."""
        if not self.render.low_price:
            return None
        cheapest = min(self.render.low_price, key=lambda s: s.price_diesel)
        return (
            f"Low price detected: diesel at {format_price(cheapest.price_diesel)} "
            f"at {cheapest.name}"
        )

    def cluster_tier(self, cluster: Cluster) -> PriceTier:
        return price_tier(cluster.representative_price, self.thresholds)

    def station_tier(self, station: Station) -> PriceTier:
        return price_tier(station.price_diesel, self.thresholds)

    def click_cluster(self, cluster: Cluster) -> str:
        self.selected_station_id = select_from_cluster(cluster)
        return self.selected_station_id

    def click_station(self, station: Station) -> str:
        self.selected_station_id = station.id
        return self.selected_station_id
