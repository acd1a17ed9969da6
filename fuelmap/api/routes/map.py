"""
Map endpoints
=============

GET /api/v1/map/clusters -- clustered markers for a viewport and zoom
GET /api/v1/map/list     -- sorted / filtered station list
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from fuelmap.api.dependencies import get_cache, get_db, get_favorites
from fuelmap.api.middleware import RATE_LIMIT, limiter
from fuelmap.api.routes.stations import bounds_query, stations_in_bounds
from fuelmap.api.schemas import (
    ClusterResponse,
    ErrorResponse,
    MapResponse,
    MarkerResponse,
    StationResponse,
)
from fuelmap.config import settings
from fuelmap.domain.clustering import (
    ClusteringConfig,
    compute_clusters,
    order_for_clustering,
)
from fuelmap.domain.entities import Bounds, Location, SortState
from fuelmap.domain.enums import SortBy, SortOrder, parse_fuel_filter
from fuelmap.domain.presentation import present_sorted
from fuelmap.domain.pricing import PriceThresholds, low_price_stations, price_tier
from fuelmap.infrastructure.cache import TTLCache
from fuelmap.infrastructure.favorites import FavoritesStore
from fuelmap.infrastructure.repositories import StationRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/map", tags=["map"])

CLUSTERING = ClusteringConfig(max_zoom=settings.cluster_max_zoom)


@router.get(
    "/clusters",
    response_model=MapResponse,
    summary="Clustered markers for a viewport",
    description=(
        "Below the clustering zoom, nearby stations are merged into cluster "
        "markers coloured by their cheapest diesel price.  At or below the "
        "minimum zoom no stations are returned and ``zoom_too_low`` is set."
    ),
)
@limiter.limit(RATE_LIMIT)
async def get_clusters(
    request: Request,
    zoom: float = Query(..., ge=0, le=22),
    bounds: Bounds = Depends(bounds_query),
    db: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
    favorites: FavoritesStore = Depends(get_favorites),
):
    if zoom <= settings.min_zoom_for_stations:
        return MapResponse(zoom=zoom, zoom_too_low=True)

    stations = await stations_in_bounds(bounds, db, cache)
    result = compute_clusters(order_for_clustering(stations), zoom, CLUSTERING)
    thresholds = PriceThresholds.from_settings(settings)
    try:
        favorite_ids = await favorites.all()
    except RedisError as exc:
        logger.warning("Favorites unavailable, markers left unflagged: %s", exc)
        favorite_ids = set()

    return MapResponse(
        zoom=zoom,
        clusters=[
            ClusterResponse.from_cluster(
                c, price_tier(c.representative_price, thresholds)
            )
            for c in result.clusters
        ],
        singles=[
            MarkerResponse(
                **StationResponse.model_validate(s).model_dump(),
                tier=price_tier(s.price_diesel, thresholds),
                is_favorite=s.id in favorite_ids,
            )
            for s in result.singles
        ],
        low_price_station_ids=[
            s.id for s in low_price_stations(stations, thresholds)
        ],
    )


@router.get(
    "/list",
    response_model=list[StationResponse],
    summary="Sorted and filtered station list",
    responses={400: {"model": ErrorResponse, "description": "Incomplete bounds"}},
)
@limiter.limit(RATE_LIMIT)
async def get_station_list(
    request: Request,
    sort_by: SortBy = SortBy.PRICE,
    order: SortOrder = SortOrder.ASC,
    fuel: str = Query("all", description="'all' or a fuel kind"),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    north: Optional[float] = Query(None, allow_inf_nan=False),
    south: Optional[float] = Query(None, allow_inf_nan=False),
    east: Optional[float] = Query(None, allow_inf_nan=False),
    west: Optional[float] = Query(None, allow_inf_nan=False),
    db: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
):
    try:
        fuel_filter = parse_fuel_filter(fuel)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown fuel: {fuel}")

    edges = (north, south, east, west)
    if all(e is not None for e in edges):
        stations = await stations_in_bounds(Bounds(*edges), db, cache)
    elif any(e is not None for e in edges):
        raise HTTPException(
            status_code=400, detail="north, south, east and west go together"
        )
    else:
        stations = [m.to_entity() for m in await StationRepository(db).get_all()]

    user_location = (
        Location(lat, lon) if lat is not None and lon is not None else None
    )
    state = SortState(sort_by=sort_by, order=order, fuel_filter=fuel_filter)
    return present_sorted(stations, state, user_location)
