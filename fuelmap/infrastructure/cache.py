"""
In-memory TTL cache.

One instance is built per process (API) or per map session (viewport
controller) and handed to whoever needs it.

Eviction
--------
* Entries expire ``ttl`` seconds after being written.  Every ``set()``
  first sweeps the expired entries, so keys that are never read again
  do not pile up.
* At most ``maxsize`` entries are held; beyond that the oldest write is
  dropped first.
* ``clear()`` is the only explicit invalidation.

Entries are kept in write order (a rewrite moves the key to the end), so
the sweep stops at the first live entry.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Hashable, Optional

logger = logging.getLogger(__name__)


class TTLCache:
    def __init__(
        self,
        ttl_seconds: float = 300.0,
        maxsize: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.ttl = ttl_seconds
        self.maxsize = maxsize
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or ``None`` if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self.purge()
        self._entries.pop(key, None)
        self._entries[key] = (self._clock(), value)
        while len(self._entries) > self.maxsize:
            del self._entries[next(iter(self._entries))]

    def purge(self) -> int:
        """Drop every expired entry; returns how many were dropped."""
        now = self._clock()
        expired = []
        for key, (stored_at, _) in self._entries.items():
            if now - stored_at < self.ttl:
                break
            expired.append(key)
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        """Number of live entries."""
        self.purge()
        return len(self._entries)

    def clear(self) -> None:
        logger.debug("Clearing %d cache entries", len(self._entries))
        self._entries.clear()
