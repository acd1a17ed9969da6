"""
Greedy Marker Clustering
========================

1. **Zoom gate**        -- clustering only runs below ``max_zoom`` (12).
   At higher zoom every visible station is its own marker.
2. **Distance band**    -- the merge radius is a step function of zoom,
   in raw degrees: zoom < 8 -> 0.05, zoom < 10 -> 0.02, else 0.01.
3. **Greedy grouping**  -- walk the stations in order; each unassigned
   station becomes a seed and claims every *unassigned* station within the
   radius.  A seed with no neighbours stays a single marker.

Distance metric
---------------
Planar Euclidean distance on degree differences,
``sqrt(dlat^2 + dlon^2)``.  This is a crude proxy for on-screen pixel
distance: a degree of longitude shrinks toward the poles, so clusters are
narrower east-west than north-south in real metres.

Complexity
----------
Let N = visible stations.

* Worst-case:  O(N^2)  -- every seed scans every remaining station
* Typical:     well below that once most stations are claimed early

**Note:** the partition depends on traversal order.  The first station
reached "owns" its neighbours even if a later seed would have been a
better centre.  Callers must hand stations over in a defined order (see
``order_for_clustering``) for the output to be reproducible.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .entities import Cluster, ClusterResult, Station


@dataclass(frozen=True)
class ClusteringConfig:
    max_zoom: int = 12
    # (zoom upper bound, radius in degrees), checked in order
    bands: tuple[tuple[int, float], ...] = field(
        default=((8, 0.05), (10, 0.02))
    )
    default_distance: float = 0.01

    def should_cluster(self, zoom: float) -> bool:
        return zoom < self.max_zoom

    def cluster_distance(self, zoom: float) -> float:
        for upper, radius in self.bands:
            if zoom < upper:
                return radius
        return self.default_distance


DEFAULT_CONFIG = ClusteringConfig()


def order_for_clustering(stations: Iterable[Station]) -> list[Station]:
    """Canonical traversal order (by id) so clustering is reproducible."""
    return sorted(stations, key=lambda s: s.id)


def planar_distance(a: Station, b: Station) -> float:
    return math.sqrt((a.lat - b.lat) ** 2 + (a.lon - b.lon) ** 2)


def compute_clusters(
    stations: Sequence[Station],
    zoom: float,
    config: Optional[ClusteringConfig] = None,
) -> ClusterResult:
    """
    Partition *stations* into clusters and single markers.

    Every station ends up in exactly one cluster or in ``singles``;
    clusters keep their members in input order and are never empty.
    Assignment is tracked by input position, not by id, so duplicate ids
    cannot make a station vanish or be counted twice.
    """
    config = config or DEFAULT_CONFIG
    if not config.should_cluster(zoom):
        return ClusterResult(clusters=[], singles=list(stations))

    radius = config.cluster_distance(zoom)
    assigned = [False] * len(stations)
    result = ClusterResult()

    for i, seed in enumerate(stations):
        if assigned[i]:
            continue

        neighbours = [
            j
            for j in range(i + 1, len(stations))
            if not assigned[j] and planar_distance(seed, stations[j]) <= radius
        ]
        assigned[i] = True

        if not neighbours:
            result.singles.append(seed)
            continue

        for j in neighbours:
            assigned[j] = True
        members = (seed, *(stations[j] for j in neighbours))
        result.clusters.append(
            Cluster(
                stations=members,
                lat=sum(s.lat for s in members) / len(members),
                lon=sum(s.lon for s in members) / len(members),
            )
        )

    return result


def select_from_cluster(cluster: Cluster) -> str:
    """
    Station id a click on *cluster* selects.

    Always the first member in traversal order; the cluster's other
    members are not offered as a sub-list.
    """
    return cluster.primary.id
