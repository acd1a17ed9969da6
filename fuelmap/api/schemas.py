"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fuelmap.domain.entities import Cluster, PriceStatistics, Station
from fuelmap.domain.enums import PriceTier


# ── Requests ──────────────────────────────────────────────────────────


class StationCreateRequest(BaseModel):
    id: Optional[str] = Field(
        None,
        max_length=36,
        description="Feed identifier; generated when omitted.",
    )
    name: str = Field(..., min_length=1)
    address: str
    city: str
    postal_code: Optional[str] = Field(None, max_length=10)
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    price_diesel: Optional[float] = Field(None, gt=0)
    price_sp95: Optional[float] = Field(None, gt=0)
    price_sp98: Optional[float] = Field(None, gt=0)
    price_e10: Optional[float] = Field(None, gt=0)
    price_e85: Optional[float] = Field(None, gt=0)
    price_lpg: Optional[float] = Field(None, gt=0)


# ── Responses ─────────────────────────────────────────────────────────


class StationResponse(BaseModel):
    id: str
    name: str
    address: str
    city: str
    postal_code: Optional[str] = None
    lat: float
    lon: float
    price_diesel: Optional[float] = None
    price_sp95: Optional[float] = None
    price_sp98: Optional[float] = None
    price_e10: Optional[float] = None
    price_e85: Optional[float] = None
    price_lpg: Optional[float] = None
    last_updated: Optional[datetime] = None

    model_config = {"from_attributes": True}

    def to_entity(self) -> Station:
        return Station(**self.model_dump())


class MarkerResponse(StationResponse):
    tier: PriceTier
    is_favorite: bool = False


class ClusterResponse(BaseModel):
    lat: float
    lon: float
    count: int
    representative_price: Optional[float] = None
    tier: PriceTier
    primary_station_id: str
    station_ids: list[str]

    @classmethod
    def from_cluster(cls, cluster: Cluster, tier: PriceTier) -> "ClusterResponse":
        return cls(
            lat=cluster.lat,
            lon=cluster.lon,
            count=cluster.count,
            representative_price=cluster.representative_price,
            tier=tier,
            primary_station_id=cluster.primary.id,
            station_ids=[s.id for s in cluster.stations],
        )


class MapResponse(BaseModel):
    zoom: float
    zoom_too_low: bool = False
    clusters: list[ClusterResponse] = []
    singles: list[MarkerResponse] = []
    # Stations in the LOW diesel tier, for the "low price" notice
    low_price_station_ids: list[str] = []


class PriceStatisticsResponse(BaseModel):
    min_diesel: Optional[float] = None
    max_diesel: Optional[float] = None
    avg_diesel: Optional[float] = None

    model_config = {"from_attributes": True}

    def to_entity(self) -> PriceStatistics:
        return PriceStatistics(**self.model_dump())


class FavoritesResponse(BaseModel):
    station_ids: list[str]
    count: int


class FavoriteToggleResponse(BaseModel):
    station_id: str
    is_favorite: bool


class CacheClearResponse(BaseModel):
    cleared: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
