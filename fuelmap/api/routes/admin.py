"""
Admin / observability endpoints
===============================

POST /api/v1/admin/cache/clear -- drop every cached response (refresh)
GET  /api/v1/admin/health      -- simple health check
"""

import logging

from fastapi import APIRouter, Depends, Request

from fuelmap.api.dependencies import get_cache
from fuelmap.api.middleware import RATE_LIMIT, limiter
from fuelmap.api.schemas import CacheClearResponse, HealthResponse
from fuelmap.infrastructure.cache import TTLCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/cache/clear",
    response_model=CacheClearResponse,
    summary="Clear the response cache",
)
@limiter.limit(RATE_LIMIT)
async def clear_cache(
    request: Request,
    cache: TTLCache = Depends(get_cache),
):
    cleared = len(cache)
    cache.clear()
    logger.info("Response cache cleared (%d entries)", cleared)
    return CacheClearResponse(cleared=cleared)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
