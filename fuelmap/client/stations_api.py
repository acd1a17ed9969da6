"""
Station data source
===================

``StationSource`` is what the viewport controller and the list views
consume.  ``StationsApiClient`` implements it over the REST API with
``httpx``; every request carries a timeout.

Failure model
-------------
Transport errors, timeouts, non-2xx responses and undecodable payloads
all surface as ``FetchError``.  A 404 on a single-station lookup is not a
failure: it returns ``None``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from fuelmap.api.schemas import PriceStatisticsResponse, StationResponse
from fuelmap.config import settings
from fuelmap.domain.entities import Bounds, PriceStatistics, Station

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when the station data source cannot deliver a result."""


# ── Port ──────────────────────────────────────────────────────────────


class StationSource(ABC):
    @abstractmethod
    async def fetch_all_stations(self) -> list[Station]: ...

    @abstractmethod
    async def fetch_stations_in_bounds(self, bounds: Bounds) -> list[Station]: ...

    @abstractmethod
    async def fetch_station_by_id(self, station_id: str) -> Optional[Station]: ...

    @abstractmethod
    async def search_stations(self, query: str) -> list[Station]: ...

    @abstractmethod
    async def fetch_price_statistics(self) -> PriceStatistics: ...


# ── HTTP adapter ──────────────────────────────────────────────────────


class StationsApiClient(StationSource):
    def __init__(
        self,
        base_url: str = settings.api_base_url,
        timeout: float = settings.fetch_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def _get(
        self, path: str, params: dict[str, Any] | None = None, allow_404: bool = False
    ) -> Any:
        try:
            resp = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out fetching {path}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Network error fetching {path}: {exc}") from exc

        if allow_404 and resp.status_code == 404:
            return None
        if not resp.is_success:
            raise FetchError(f"GET {path} returned HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise FetchError(f"GET {path} returned invalid JSON") from exc

    @staticmethod
    def _stations(payload: Any) -> list[Station]:
        try:
            return [StationResponse.model_validate(item).to_entity() for item in payload]
        except (TypeError, ValidationError) as exc:
            raise FetchError("Malformed station payload") from exc

    async def fetch_all_stations(self) -> list[Station]:
        return self._stations(await self._get("/stations"))

    async def fetch_stations_in_bounds(self, bounds: Bounds) -> list[Station]:
        logger.debug("Fetching stations in %s", bounds)
        params = {
            "north": bounds.north,
            "south": bounds.south,
            "east": bounds.east,
            "west": bounds.west,
        }
        return self._stations(await self._get("/stations/bounds", params=params))

    async def fetch_station_by_id(self, station_id: str) -> Optional[Station]:
        payload = await self._get(
            f"/stations/{quote(station_id, safe='')}", allow_404=True
        )
        if payload is None:
            return None
        return self._stations([payload])[0]

    async def search_stations(self, query: str) -> list[Station]:
        if not query.strip():
            return []
        return self._stations(
            await self._get(f"/stations/search/{quote(query, safe='')}")
        )

    async def fetch_price_statistics(self) -> PriceStatistics:
        payload = await self._get("/stations/stats/prices")
        try:
            return PriceStatisticsResponse.model_validate(payload).to_entity()
        except ValidationError as exc:
            raise FetchError("Malformed price statistics payload") from exc
