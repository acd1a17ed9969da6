"""Tests for the Redis-backed favorites store (fake Redis)."""

import asyncio
import json

import pytest
from redis.exceptions import WatchError

from fuelmap.infrastructure.favorites import FavoritesStore
from tests.conftest import FakePipeline, FakeRedis

KEY = "gas-station-favorites"


@pytest.fixture
def redis():
    return FakeRedis()


@pytest.mark.asyncio
async def test_empty_store(redis):
    store = FavoritesStore(redis, key=KEY)
    assert await store.all() == set()
    assert await store.count() == 0


@pytest.mark.asyncio
async def test_toggle_adds_then_removes(redis):
    store = FavoritesStore(redis, key=KEY)
    assert await store.toggle("75001001") is True
    assert await store.is_favorite("75001001")
    assert await store.toggle("75001001") is False
    assert not await store.is_favorite("75001001")


@pytest.mark.asyncio
async def test_single_json_array_under_one_key(redis):
    store = FavoritesStore(redis, key=KEY)
    await store.toggle("b")
    await store.toggle("a")
    assert list(redis.data) == [KEY]
    assert json.loads(redis.data[KEY]) == ["a", "b"]


@pytest.mark.asyncio
async def test_reads_existing_layout(redis):
    redis.data[KEY] = json.dumps(["x", "y"])
    store = FavoritesStore(redis, key=KEY)
    assert await store.all() == {"x", "y"}
    assert await store.count() == 2


@pytest.mark.asyncio
async def test_corrupt_data_reads_as_empty(redis):
    redis.data[KEY] = "{not json"
    store = FavoritesStore(redis, key=KEY)
    assert await store.all() == set()
    assert await store.toggle("a") is True
    assert json.loads(redis.data[KEY]) == ["a"]


@pytest.mark.asyncio
async def test_concurrent_toggles_keep_every_update():
    redis = FakeRedis(yields=True)
    store = FavoritesStore(redis, key=KEY)

    results = await asyncio.gather(
        store.toggle("a"), store.toggle("b"), store.toggle("c")
    )

    assert results == [True, True, True]
    assert await store.all() == {"a", "b", "c"}


@pytest.mark.asyncio
async def test_concurrent_add_and_remove(redis):
    redis.data[KEY] = json.dumps(["a"])
    redis.yields = True
    store = FavoritesStore(redis, key=KEY)

    await asyncio.gather(store.toggle("a"), store.toggle("b"))

    assert await store.all() == {"b"}


class AlwaysConflictingPipeline(FakePipeline):
    async def execute(self):
        self.reset()
        raise WatchError("Watched variable changed.")


@pytest.mark.asyncio
async def test_toggle_gives_up_when_key_never_settles(redis):
    redis.pipeline = lambda transaction=True: AlwaysConflictingPipeline(redis)
    store = FavoritesStore(redis, key=KEY)

    with pytest.raises(RuntimeError, match="kept changing"):
        await store.toggle("a")
    assert KEY not in redis.data
