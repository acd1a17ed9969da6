"""
Favorite endpoints
==================

GET  /api/v1/favorites                       -- favorite station ids
POST /api/v1/favorites/{station_id}/toggle   -- add or remove a favorite
"""

from fastapi import APIRouter, Depends, Request

from fuelmap.api.dependencies import get_favorites
from fuelmap.api.middleware import RATE_LIMIT, limiter
from fuelmap.api.schemas import FavoritesResponse, FavoriteToggleResponse
from fuelmap.infrastructure.favorites import FavoritesStore

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=FavoritesResponse, summary="List favorites")
@limiter.limit(RATE_LIMIT)
async def list_favorites(
    request: Request,
    favorites: FavoritesStore = Depends(get_favorites),
):
    ids = sorted(await favorites.all())
    return FavoritesResponse(station_ids=ids, count=len(ids))


@router.post(
    "/{station_id}/toggle",
    response_model=FavoriteToggleResponse,
    summary="Toggle a favorite",
)
@limiter.limit(RATE_LIMIT)
async def toggle_favorite(
    request: Request,
    station_id: str,
    favorites: FavoritesStore = Depends(get_favorites),
):
    added = await favorites.toggle(station_id)
    return FavoriteToggleResponse(station_id=station_id, is_favorite=added)
