"""
Station endpoints
=================

GET  /api/v1/stations                          -- all stations
GET  /api/v1/stations/bounds                   -- stations inside a viewport
GET  /api/v1/stations/nearby                   -- stations within a radius
GET  /api/v1/stations/search/{query}           -- text search
GET  /api/v1/stations/low-price/{max_price}    -- diesel at or below a price
GET  /api/v1/stations/stats/prices             -- diesel min / max / mean
GET  /api/v1/stations/{station_id}             -- one station
POST /api/v1/stations                          -- create a station

Read endpoints go through the shared TTL response cache; creating a
station clears it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fuelmap.api.dependencies import get_cache, get_db
from fuelmap.api.middleware import RATE_LIMIT, limiter
from fuelmap.api.schemas import (
    ErrorResponse,
    PriceStatisticsResponse,
    StationCreateRequest,
    StationResponse,
)
from fuelmap.domain.entities import Bounds, PriceStatistics, Station
from fuelmap.domain.pricing import compute_price_statistics
from fuelmap.infrastructure.cache import TTLCache
from fuelmap.infrastructure.repositories import StationRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stations", tags=["stations"])

ALL_STATIONS_KEY = "all-stations"
PRICE_STATS_KEY = "price-stats"


def bounds_query(
    north: float = Query(..., allow_inf_nan=False),
    south: float = Query(..., allow_inf_nan=False),
    east: float = Query(..., allow_inf_nan=False),
    west: float = Query(..., allow_inf_nan=False),
) -> Bounds:
    return Bounds(north=north, south=south, east=east, west=west)


async def stations_in_bounds(
    bounds: Bounds, db: AsyncSession, cache: TTLCache
) -> list[Station]:
    """Viewport lookup shared with the map routes, cached per bounds value."""
    cached = cache.get(bounds)
    if cached is not None:
        return cached
    models = await StationRepository(db).get_in_bounds(bounds)
    stations = [m.to_entity() for m in models]
    cache.set(bounds, stations)
    return stations


@router.get(
    "",
    response_model=list[StationResponse],
    summary="List all stations",
)
@limiter.limit(RATE_LIMIT)
async def list_stations(
    request: Request,
    db: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
):
    cached = cache.get(ALL_STATIONS_KEY)
    if cached is not None:
        return cached
    stations = [m.to_entity() for m in await StationRepository(db).get_all()]
    cache.set(ALL_STATIONS_KEY, stations)
    return stations


@router.get(
    "/bounds",
    response_model=list[StationResponse],
    summary="Stations inside a map viewport",
)
@limiter.limit(RATE_LIMIT)
async def get_stations_in_bounds(
    request: Request,
    bounds: Bounds = Depends(bounds_query),
    db: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
):
    return await stations_in_bounds(bounds, db, cache)


@router.get(
    "/nearby",
    response_model=list[StationResponse],
    summary="Stations within a radius, closest first",
)
@limiter.limit(RATE_LIMIT)
async def get_nearby_stations(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius: float = Query(10.0, gt=0, le=500, description="Radius in km"),
    db: AsyncSession = Depends(get_db),
):
    models = await StationRepository(db).get_nearby(lat, lon, radius)
    return [m.to_entity() for m in models]


@router.get(
    "/search/{query}",
    response_model=list[StationResponse],
    summary="Search by name, city or address",
    responses={400: {"model": ErrorResponse, "description": "Blank search query"}},
)
@limiter.limit(RATE_LIMIT)
async def search_stations(
    request: Request,
    query: str,
    db: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
):
    if not query.strip():
        raise HTTPException(status_code=400, detail="Search query required")

    key = ("search", query)
    cached = cache.get(key)
    if cached is not None:
        return cached
    stations = [m.to_entity() for m in await StationRepository(db).search(query)]
    cache.set(key, stations)
    return stations


@router.get(
    "/low-price/{max_price}",
    response_model=list[StationResponse],
    summary="Stations selling diesel at or below a price",
)
@limiter.limit(RATE_LIMIT)
async def get_low_price_stations(
    request: Request,
    max_price: float,
    db: AsyncSession = Depends(get_db),
):
    models = await StationRepository(db).get_by_max_diesel(max_price)
    return [m.to_entity() for m in models]


@router.get(
    "/stats/prices",
    response_model=PriceStatisticsResponse,
    summary="Diesel price statistics",
)
@limiter.limit(RATE_LIMIT)
async def get_price_statistics(
    request: Request,
    db: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
):
    cached: PriceStatistics | None = cache.get(PRICE_STATS_KEY)
    if cached is not None:
        return cached
    models = await StationRepository(db).get_all()
    stats = compute_price_statistics(m.to_entity() for m in models)
    cache.set(PRICE_STATS_KEY, stats)
    return stats


@router.get(
    "/{station_id}",
    response_model=StationResponse,
    summary="Get one station",
    responses={404: {"model": ErrorResponse, "description": "Unknown station id"}},
)
@limiter.limit(RATE_LIMIT)
async def get_station(
    request: Request,
    station_id: str,
    db: AsyncSession = Depends(get_db),
):
    station = await StationRepository(db).get_by_id(station_id)
    if not station:
        raise HTTPException(status_code=404, detail="Station not found")
    return station.to_entity()


@router.post(
    "",
    status_code=201,
    response_model=StationResponse,
    summary="Create a station",
    responses={409: {"model": ErrorResponse, "description": "Station id already taken"}},
)
@limiter.limit(RATE_LIMIT)
async def create_station(
    request: Request,
    body: StationCreateRequest,
    db: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
):
    repo = StationRepository(db)
    if body.id and await repo.get_by_id(body.id):
        raise HTTPException(status_code=409, detail="Station already exists")

    fields = body.model_dump(exclude={"id"})
    station = await repo.create_station(station_id=body.id, **fields)
    cache.clear()
    logger.info("Created station %s (%s)", station.id, station.city)
    return station.to_entity()
