"""
Favorite stations, persisted in Redis.

Layout: a single JSON array of station ids under one well-known key
(``settings.favorites_key``).  Every write replaces the whole array.

``toggle`` is a read-modify-write, so it runs as an optimistic
transaction: ``WATCH`` the key, read, then ``MULTI``/``EXEC`` the new
array.  If another writer touched the key in between, ``EXEC`` fails with
``WatchError`` and the toggle starts over from a fresh read.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import WatchError

logger = logging.getLogger(__name__)

MAX_TOGGLE_ATTEMPTS = 10


class FavoritesStore:
    def __init__(self, client: aioredis.Redis, key: str = "gas-station-favorites"):
        self.redis = client
        self.key = key

    def _decode(self, raw: Optional[str]) -> set[str]:
        if not raw:
            return set()
        try:
            ids = json.loads(raw)
        except ValueError:
            logger.error("Unreadable favorites under %s, starting empty", self.key)
            return set()
        if not isinstance(ids, list):
            logger.error("Favorites under %s is not a list, starting empty", self.key)
            return set()
        return {str(i) for i in ids}

    async def all(self) -> set[str]:
        return self._decode(await self.redis.get(self.key))

    async def is_favorite(self, station_id: str) -> bool:
        return station_id in await self.all()

    async def toggle(self, station_id: str) -> bool:
        """Flip membership of *station_id*.  Returns the new state."""
        async with self.redis.pipeline(transaction=True) as pipe:
            for attempt in range(1, MAX_TOGGLE_ATTEMPTS + 1):
                try:
                    await pipe.watch(self.key)
                    ids = self._decode(await pipe.get(self.key))
                    added = station_id not in ids
                    if added:
                        ids.add(station_id)
                    else:
                        ids.discard(station_id)

                    pipe.multi()
                    pipe.set(self.key, json.dumps(sorted(ids)))
                    await pipe.execute()
                    return added
                except WatchError:
                    logger.debug(
                        "Favorites changed during toggle of %s (attempt %d)",
                        station_id,
                        attempt,
                    )
        raise RuntimeError(
            f"Could not toggle favorite {station_id}: key kept changing"
        )

    async def count(self) -> int:
        return len(await self.all())
