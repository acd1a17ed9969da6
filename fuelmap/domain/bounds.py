"""Viewport filtering.  O(n), stable, never raises."""

from __future__ import annotations

from typing import Iterable

from .entities import Bounds, Station


def filter_in_bounds(stations: Iterable[Station], bounds: Bounds) -> list[Station]:
    """
    Keep the stations lying inside *bounds*, in input order.

    The map passes through invalid intermediate viewports while animating;
    degenerate (``north == south``), inverted or NaN bounds just select
    fewer stations, possibly none.
    """
    return [s for s in stations if bounds.contains(s.lat, s.lon)]
