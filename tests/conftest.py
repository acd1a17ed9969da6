"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  The stations table has no PostgreSQL-only
column types, so the production models are created as-is.  Redis is
replaced by a small in-memory double.
"""

import asyncio
from typing import AsyncGenerator, Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from redis.exceptions import WatchError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from fuelmap.client.stations_api import StationSource
from fuelmap.domain.entities import Bounds, PriceStatistics, Station
from fuelmap.infrastructure.database import Base
from fuelmap.infrastructure.repositories import StationRepository


TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ── Helpers ───────────────────────────────────────────────────────────


def make_station(
    station_id: str,
    lat: float = 48.8566,
    lon: float = 2.3522,
    name: Optional[str] = None,
    **prices,
) -> Station:
    return Station(
        id=station_id,
        name=name or f"Station {station_id}",
        address="1 rue de Test",
        city="Paris",
        lat=lat,
        lon=lon,
        **prices,
    )


class FakeRedis:
    """
    Just enough of ``redis.asyncio.Redis`` for the favorites store.

    With ``yields=True`` every round trip suspends once, so concurrent
    callers interleave the way they would against a real server.
    """

    def __init__(self, yields: bool = False):
        self.data: dict[str, str] = {}
        self.versions: dict[str, int] = {}
        self.yields = yields

    async def _round_trip(self) -> None:
        if self.yields:
            await asyncio.sleep(0)

    def _write(self, key: str, value: str) -> None:
        self.data[key] = value
        self.versions[key] = self.versions.get(key, 0) + 1

    async def get(self, key: str) -> Optional[str]:
        await self._round_trip()
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        await self._round_trip()
        self._write(key, value)
        return True

    def pipeline(self, transaction: bool = True) -> "FakePipeline":
        return FakePipeline(self)


class FakePipeline:
    """WATCH / MULTI / EXEC with optimistic-locking semantics."""

    def __init__(self, redis: FakeRedis):
        self.redis = redis
        self.reset()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        self.reset()

    def reset(self) -> None:
        self.watched: dict[str, int] = {}
        self.queued: list[tuple[str, str]] = []

    async def watch(self, *keys: str) -> None:
        await self.redis._round_trip()
        for key in keys:
            self.watched[key] = self.redis.versions.get(key, 0)

    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(key)

    def multi(self) -> None:
        pass

    def set(self, key: str, value: str) -> "FakePipeline":
        self.queued.append((key, value))
        return self

    async def execute(self) -> list[bool]:
        await self.redis._round_trip()
        try:
            for key, version in self.watched.items():
                if self.redis.versions.get(key, 0) != version:
                    raise WatchError("Watched variable changed.")
            for key, value in self.queued:
                self.redis._write(key, value)
            return [True] * len(self.queued)
        finally:
            self.reset()


class FakeStationSource(StationSource):
    """Records calls; optional per-bounds gates hold a response back."""

    def __init__(self):
        self.calls: list[tuple[Bounds, float]] = []
        self.results: dict[Bounds, list[Station]] = {}
        self.gates: dict[Bounds, asyncio.Event] = {}
        self.search_results: dict[str, list[Station]] = {}
        self.searches: list[str] = []
        self.search_gates: dict[str, asyncio.Event] = {}
        self.error: Optional[Exception] = None

    async def fetch_stations_in_bounds(self, bounds: Bounds) -> list[Station]:
        self.calls.append((bounds, asyncio.get_running_loop().time()))
        gate = self.gates.get(bounds)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        return self.results.get(bounds, [])

    async def fetch_all_stations(self) -> list[Station]:
        return [s for stations in self.results.values() for s in stations]

    async def fetch_station_by_id(self, station_id: str) -> Optional[Station]:
        return None

    async def search_stations(self, query: str) -> list[Station]:
        self.searches.append(query)
        gate = self.search_gates.get(query)
        if gate is not None:
            await gate.wait()
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.search_results.get(query, [])

    async def fetch_price_statistics(self) -> PriceStatistics:
        return PriceStatistics()


SEED_STATIONS = [
    # Two stations ~0.0001 deg apart in central Paris
    dict(station_id="paris-a", name="Total Access", address="12 rue de la République",
         city="Paris", lat=48.8566, lon=2.3522, price_diesel=1.629, price_sp95=1.729),
    dict(station_id="paris-b", name="Esso", address="8 rue de Rivoli",
         city="Paris", lat=48.8566, lon=2.3523, price_diesel=1.749),
    dict(station_id="paris-c", name="Avia", address="3 rue de Vaugirard",
         city="Paris", lat=48.9500, lon=2.5000, price_sp98=1.879),
    dict(station_id="lyon-a", name="Leclerc", address="30 rue de la Paix",
         city="Lyon", lat=45.7640, lon=4.8357, price_diesel=1.859, price_sp95=1.759),
]


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables created."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine: AsyncEngine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest_asyncio.fixture
async def client(session_factory, fake_redis) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient on the real app, backed by SQLite and the fake redis."""
    async with session_factory() as session:
        repo = StationRepository(session)
        for s in SEED_STATIONS:
            await repo.create_station(**s)
        await session.commit()

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def _test_redis():
        return fake_redis

    from fuelmap.api.app import create_app
    from fuelmap.api.dependencies import get_db
    from fuelmap.api.middleware import limiter
    from fuelmap.infrastructure.redis_client import get_redis

    limiter.reset()
    app = create_app()
    app.dependency_overrides[get_db] = _test_db
    app.dependency_overrides[get_redis] = _test_redis

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
