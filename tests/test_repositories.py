"""Station repository tests against in-memory SQLite."""

import pytest
import pytest_asyncio

from fuelmap.domain.entities import Bounds
from fuelmap.infrastructure.repositories import StationRepository
from tests.conftest import SEED_STATIONS


@pytest_asyncio.fixture
async def repo(db_session) -> StationRepository:
    repo = StationRepository(db_session)
    for s in SEED_STATIONS:
        await repo.create_station(**s)
    return repo


@pytest.mark.asyncio
async def test_bounds_are_inclusive(repo: StationRepository):
    # paris-c sits exactly on the north-east corner
    box = Bounds(north=48.95, south=48.8566, east=2.5, west=2.3522)
    found = await repo.get_in_bounds(box)
    assert [s.id for s in found] == ["paris-a", "paris-b", "paris-c"]


@pytest.mark.asyncio
async def test_nearby_uses_great_circle_cut(repo: StationRepository):
    # Lyon is ~392 km from central Paris
    found = await repo.get_nearby(48.8566, 2.3522, radius_km=390)
    assert "lyon-a" not in [s.id for s in found]

    found = await repo.get_nearby(48.8566, 2.3522, radius_km=400)
    assert [s.id for s in found][-1] == "lyon-a"


@pytest.mark.asyncio
async def test_search_is_case_insensitive(repo: StationRepository):
    found = await repo.search("ESSO")
    assert [s.id for s in found] == ["paris-b"]


@pytest.mark.asyncio
async def test_count_and_lookup(repo: StationRepository):
    assert await repo.count() == 4
    station = await repo.get_by_id("lyon-a")
    assert station.to_entity().city == "Lyon"
    assert await repo.get_by_id("missing") is None
