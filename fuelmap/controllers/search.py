"""
Debounced station search.

The search bar calls ``on_query_change`` on every keystroke.  The query is
recorded at once; a search only goes out once typing has paused for
``debounce_seconds`` (300 ms), for the trimmed query.  ``submit()`` skips
the wait.  A blank query clears the results without a request.

Ordering and failures work as in the viewport controller: every change
bumps ``generation``, only the latest search may update the results, and
a ``FetchError`` leaves the previous results on display with status
``ERROR``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from fuelmap.client.stations_api import FetchError, StationSource
from fuelmap.config import settings
from fuelmap.domain.entities import Station
from fuelmap.domain.enums import FetchStatus

logger = logging.getLogger(__name__)


@dataclass
class SearchState:
    query: str = ""
    results: list[Station] = field(default_factory=list)
    status: FetchStatus = FetchStatus.IDLE
    error: Optional[str] = None
    generation: int = 0


class SearchController:
    def __init__(
        self,
        source: StationSource,
        *,
        debounce_seconds: float = settings.debounce_seconds,
    ):
        self.source = source
        self.debounce_seconds = debounce_seconds
        self.state = SearchState()
        self._listeners: list[Callable[[SearchState], None]] = []
        self._debounce_task: asyncio.Task | None = None
        self._searches: set[asyncio.Task] = set()

    def add_listener(self, listener: Callable[[SearchState], None]) -> None:
        self._listeners.append(listener)

    def on_query_change(self, query: str) -> None:
        self.state.query = query
        self.state.generation += 1
        self._cancel_debounce()

        if not query.strip():
            self.state.results = []
            self.state.status = FetchStatus.IDLE
            self.state.error = None
        else:
            self._debounce_task = asyncio.create_task(
                self._debounce(self.state.generation)
            )
        self._notify()

    def clear(self) -> None:
        self.on_query_change("")

    async def submit(self) -> None:
        """Search for the current query now, without waiting out the debounce."""
        if not self.state.query.strip():
            return
        self.state.generation += 1
        self._cancel_debounce()
        self._issue(self.state.generation)
        await self.wait_idle()

    async def wait_idle(self) -> None:
        while True:
            pending = [t for t in self._searches if not t.done()]
            if self._debounce_task is not None and not self._debounce_task.done():
                pending.append(self._debounce_task)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ── Internals ─────────────────────────────────────────────────────

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self.state)

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def _debounce(self, generation: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if generation == self.state.generation:
            self._issue(generation)

    def _issue(self, generation: int) -> None:
        self.state.status = FetchStatus.LOADING
        self.state.error = None
        self._notify()
        task = asyncio.create_task(self._search(self.state.query.strip(), generation))
        self._searches.add(task)
        task.add_done_callback(self._searches.discard)

    async def _search(self, query: str, generation: int) -> None:
        try:
            results = await self.source.search_stations(query)
        except FetchError as exc:
            if generation != self.state.generation:
                return
            logger.warning("Search for %r failed: %s", query, exc)
            self.state.status = FetchStatus.ERROR
            self.state.error = str(exc)
            self._notify()
            return

        if generation != self.state.generation:
            logger.debug("Discarding stale results for %r", query)
            return
        self.state.results = list(results)
        self.state.status = FetchStatus.READY
        self._notify()
