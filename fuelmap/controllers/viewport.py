"""
Debounced Bounds-Fetch Controller
=================================

The map calls ``on_viewport_change`` on every ``moveend`` / ``zoomend``.

* Bounds and zoom are recorded at once, for local display.
* A fetch for the new bounds is only issued once no further change has
  arrived for ``debounce_seconds`` (default 300 ms).  A newer event
  cancels the pending timer and starts it again with the latest bounds.
* At ``zoom <= min_zoom`` nothing is fetched and the state reports
  ``ZOOM_TOO_LOW`` ("zoom in to see stations").
* Results are cached per bounds value in a ``TTLCache``; a cache hit
  after the debounce window skips the network entirely.

Ordering
--------
Every viewport change, retry or refresh bumps ``generation``.  A response
is applied only if its generation is still the latest, so the display
always reflects the most recently *issued* fetch (last-issued-wins), even
when an older request resolves late.

Failures
--------
``FetchError`` is recovered here: status becomes ``ERROR`` with a message,
the last good stations stay on display, and ``retry()`` re-issues.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from fuelmap.client.stations_api import FetchError, StationSource
from fuelmap.config import settings
from fuelmap.domain.entities import Bounds, Station
from fuelmap.domain.enums import FetchStatus
from fuelmap.infrastructure.cache import TTLCache

logger = logging.getLogger(__name__)

Listener = Callable[["ViewportState"], None]


def default_bounds() -> Bounds:
    return Bounds(
        north=settings.default_north,
        south=settings.default_south,
        east=settings.default_east,
        west=settings.default_west,
    )


@dataclass
class ViewportState:
    bounds: Bounds
    zoom: float
    stations: list[Station] = field(default_factory=list)
    status: FetchStatus = FetchStatus.IDLE
    error: Optional[str] = None
    generation: int = 0


class ViewportController:
    def __init__(
        self,
        source: StationSource,
        cache: TTLCache,
        *,
        debounce_seconds: float = settings.debounce_seconds,
        min_zoom: int = settings.min_zoom_for_stations,
        initial_bounds: Optional[Bounds] = None,
        initial_zoom: float = settings.default_zoom,
    ):
        self.source = source
        self.cache = cache
        self.debounce_seconds = debounce_seconds
        self.min_zoom = min_zoom
        self.state = ViewportState(
            bounds=initial_bounds or default_bounds(), zoom=initial_zoom
        )
        self._listeners: list[Listener] = []
        self._debounce_task: asyncio.Task | None = None
        self._fetches: set[asyncio.Task] = set()

    # ── Public API ────────────────────────────────────────────────────

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def zoom_too_low(self, zoom: Optional[float] = None) -> bool:
        return (self.state.zoom if zoom is None else zoom) <= self.min_zoom

    def on_viewport_change(self, bounds: Bounds, zoom: float) -> None:
        """Record the viewport now; fetch once the map has settled."""
        self.state.bounds = bounds
        self.state.zoom = zoom
        self.state.generation += 1
        self._cancel_debounce()

        if self.zoom_too_low(zoom):
            self.state.status = FetchStatus.ZOOM_TOO_LOW
            self.state.error = None
        else:
            self._debounce_task = asyncio.create_task(
                self._debounce(bounds, self.state.generation)
            )
        self._notify()

    async def retry(self) -> None:
        """Re-issue the fetch for the current viewport immediately."""
        if self.zoom_too_low():
            return
        self.state.generation += 1
        self._cancel_debounce()
        self._issue(self.state.bounds, self.state.generation)
        await self.wait_idle()

    async def refresh(self) -> None:
        """Drop every cached viewport, then fetch the current one again."""
        logger.info("Refresh requested, clearing viewport cache")
        self.cache.clear()
        await self.retry()

    async def wait_idle(self) -> None:
        """Wait for the pending debounce timer and all in-flight fetches."""
        while True:
            pending = [t for t in self._fetches if not t.done()]
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

    async def _debounce(self, bounds: Bounds, generation: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if generation != self.state.generation:
            return
        self._issue(bounds, generation)

    def _issue(self, bounds: Bounds, generation: int) -> None:
        cached = self.cache.get(bounds)
        if cached is not None:
            logger.debug("Viewport cache hit for %s", bounds)
            self._apply(cached)
            return

        self.state.status = FetchStatus.LOADING
        self.state.error = None
        self._notify()
        task = asyncio.create_task(self._fetch(bounds, generation))
        self._fetches.add(task)
        task.add_done_callback(self._fetches.discard)

    async def _fetch(self, bounds: Bounds, generation: int) -> None:
        try:
            stations = await self.source.fetch_stations_in_bounds(bounds)
        except FetchError as exc:
            if generation != self.state.generation:
                logger.debug("Ignoring failure of superseded fetch: %s", exc)
                return
            logger.warning("Station fetch failed: %s", exc)
            self.state.status = FetchStatus.ERROR
            self.state.error = str(exc)
            self._notify()
            return

        # The answer is still right for its own bounds
        self.cache.set(bounds, stations)
        if generation != self.state.generation:
            logger.debug(
                "Discarding stale response (generation %d, latest %d)",
                generation,
                self.state.generation,
            )
            return
        self._apply(stations)

    def _apply(self, stations: list[Station]) -> None:
        self.state.stations = list(stations)
        self.state.status = FetchStatus.READY
        self.state.error = None
        self._notify()
