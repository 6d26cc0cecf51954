"""
Region Clusterer - Merges nearby skin regions into person candidates
"""

import math
import logging
from typing import List, Sequence

from ..types import SkinRegion, Cluster

logger = logging.getLogger(__name__)

# Merge radius as a fraction of the smaller frame dimension
DISTANCE_FACTOR = 0.15

# Clusters this small or smaller are treated as noise
MIN_CLUSTER_SIZE = 80


def cluster_regions(
    regions: Sequence[SkinRegion],
    width: int,
    height: int
) -> List[Cluster]:
    """
    Greedy single-pass merge of regions in input order.

    Each unused region opens a cluster; later unused regions closer than
    the merge radius to the opening region are folded into it. The
    cluster keeps the opening region's coordinates.

    Args:
        regions: Candidate regions from the frame scanner
        width: Frame width in pixels
        height: Frame height in pixels

    Returns:
        Clusters with total size above MIN_CLUSTER_SIZE, in opening order
    """
    if not regions:
        return []

    max_distance = min(width, height) * DISTANCE_FACTOR
    used = set()
    clusters = []

    for i, anchor in enumerate(regions):
        if i in used:
            continue

        cluster = Cluster(x=anchor.x, y=anchor.y, size=anchor.size)
        used.add(i)

        for j in range(i + 1, len(regions)):
            if j in used:
                continue

            other = regions[j]
            distance = math.sqrt((anchor.x - other.x) ** 2 + (anchor.y - other.y) ** 2)

            if distance < max_distance:
                cluster.size += other.size
                used.add(j)

        if cluster.size > MIN_CLUSTER_SIZE:
            clusters.append(cluster)

    return clusters
