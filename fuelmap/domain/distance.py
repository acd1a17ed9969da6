"""
Distance calculation using the Haversine formula.

Great-circle distance on a spherical Earth (radius 6371 km).  Error stays
well under 0.5 % for the few-hundred-kilometre ranges the map deals with,
which is all the "nearby" search and the distance sort need.

Complexity: O(1) per call.
"""

import math

from .entities import Location

EARTH_RADIUS_KM = 6_371.0


def distance_km(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_between(a: Location, b: Location) -> float:
    return distance_km(a.latitude, a.longitude, b.latitude, b.longitude)
