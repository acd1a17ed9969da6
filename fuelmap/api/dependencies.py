"""FastAPI dependency injection helpers."""

import redis.asyncio as aioredis
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fuelmap.config import settings
from fuelmap.infrastructure.cache import TTLCache
from fuelmap.infrastructure.database import async_session_factory
from fuelmap.infrastructure.favorites import FavoritesStore
from fuelmap.infrastructure.redis_client import get_redis


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_cache(request: Request) -> TTLCache:
    """The response cache built once by the app factory."""
    return request.app.state.cache


async def get_favorites(
    redis: aioredis.Redis = Depends(get_redis),
) -> FavoritesStore:
    return FavoritesStore(redis, key=settings.favorites_key)
