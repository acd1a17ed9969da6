"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

The repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Every list query is ordered by id, which is
the traversal order the clustering engine expects.
"""

from __future__ import annotations

import math
import uuid
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import StationModel
from fuelmap.domain.distance import EARTH_RADIUS_KM, distance_km
from fuelmap.domain.entities import Bounds


class StationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_station(
        self,
        *,
        name: str,
        address: str,
        city: str,
        lat: float,
        lon: float,
        station_id: str | None = None,
        postal_code: str | None = None,
        price_diesel: float | None = None,
        price_sp95: float | None = None,
        price_sp98: float | None = None,
        price_e10: float | None = None,
        price_e85: float | None = None,
        price_lpg: float | None = None,
    ) -> StationModel:
        station = StationModel(
            id=station_id or str(uuid.uuid4()),
            name=name,
            address=address,
            city=city,
            postal_code=postal_code,
            lat=lat,
            lon=lon,
            price_diesel=price_diesel,
            price_sp95=price_sp95,
            price_sp98=price_sp98,
            price_e10=price_e10,
            price_e85=price_e85,
            price_lpg=price_lpg,
        )
        self.session.add(station)
        await self.session.flush()
        await self.session.refresh(station)
        return station

    async def get_by_id(self, station_id: str) -> Optional[StationModel]:
        return await self.session.get(StationModel, station_id)

    async def get_all(self) -> list[StationModel]:
        result = await self.session.execute(
            select(StationModel).order_by(StationModel.id)
        )
        return list(result.scalars().all())

    async def get_in_bounds(self, bounds: Bounds) -> list[StationModel]:
        result = await self.session.execute(
            select(StationModel)
            .where(
                StationModel.lat.between(bounds.south, bounds.north),
                StationModel.lon.between(bounds.west, bounds.east),
            )
            .order_by(StationModel.id)
        )
        return list(result.scalars().all())

    async def search(self, query: str) -> list[StationModel]:
        """Case-insensitive substring match on name, city or address."""
        needle = query.strip()
        result = await self.session.execute(
            select(StationModel)
            .where(
                or_(
                    StationModel.name.icontains(needle, autoescape=True),
                    StationModel.city.icontains(needle, autoescape=True),
                    StationModel.address.icontains(needle, autoescape=True),
                )
            )
            .order_by(StationModel.id)
        )
        return list(result.scalars().all())

    async def get_by_max_diesel(self, max_price: float) -> list[StationModel]:
        result = await self.session.execute(
            select(StationModel)
            .where(
                StationModel.price_diesel.is_not(None),
                StationModel.price_diesel <= max_price,
            )
            .order_by(StationModel.id)
        )
        return list(result.scalars().all())

    async def get_nearby(
        self, lat: float, lon: float, radius_km: float
    ) -> list[StationModel]:
        """
        Stations within *radius_km* of a point, closest first.

        A lat/lon bounding box narrows the candidates through the index,
        then Haversine gives the exact cut.
        """
        dlat = math.degrees(radius_km / EARTH_RADIUS_KM)
        cos_lat = max(math.cos(math.radians(lat)), 1e-6)
        dlon = min(180.0, dlat / cos_lat)
        box = Bounds(north=lat + dlat, south=lat - dlat, east=lon + dlon, west=lon - dlon)

        candidates = await self.get_in_bounds(box)
        with_distance = [
            (distance_km(lat, lon, s.lat, s.lon), s) for s in candidates
        ]
        return [
            s for d, s in sorted(with_distance, key=lambda pair: pair[0])
            if d <= radius_km
        ]

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(StationModel)
        )
        return result.scalar() or 0
