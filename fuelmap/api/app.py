"""
FastAPI application factory.

* Registers routes for stations, map markers, favorites and admin.
* Builds the single response cache of the process and keeps it on
  ``app.state`` for the routes to share.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from fuelmap.api.middleware import limiter
from fuelmap.api.routes import admin, favorites, map as map_routes, stations
from fuelmap.config import settings
from fuelmap.infrastructure.cache import TTLCache

logging.basicConfig(level=logging.INFO)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Fuel Station Map API",
        description=(
            "Locates French gas stations and compares fuel prices.  Serves "
            "stations by viewport, clustered map markers, sorted station "
            "lists, price statistics and favorites."
        ),
        version="1.0.0",
    )

    app.state.cache = TTLCache(
        ttl_seconds=settings.cache_ttl_seconds, maxsize=settings.cache_maxsize
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(stations.router, prefix="/api/v1")
    app.include_router(map_routes.router, prefix="/api/v1")
    app.include_router(favorites.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
