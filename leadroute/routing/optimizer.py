"""Nearest-neighbor ordering of the stops in a batch."""

import logging
from typing import List, Sequence

from leadroute.models import GeoPoint, Lead
from leadroute.routing.distance import distance

logger = logging.getLogger(__name__)


def optimize(origin: GeoPoint, stops: Sequence[Lead]) -> List[Lead]:
    """Order ``stops`` greedily, always moving to the closest remaining stop.

    The result is a permutation of ``stops``. Ties go to the stop that comes
    first in the input. O(n^2), which is fine for batch-sized inputs.
    """
    if len(stops) <= 1:
        return list(stops)

    remaining = list(stops)
    ordered: List[Lead] = []
    current = origin
    while remaining:
        nearest_index = 0
        nearest_distance = distance(current, remaining[0].location)
        for index in range(1, len(remaining)):
            candidate = distance(current, remaining[index].location)
            if candidate < nearest_distance:
                nearest_index = index
                nearest_distance = candidate
        nearest = remaining.pop(nearest_index)
        ordered.append(nearest)
        current = nearest.location

    logger.debug("Optimized %d stops: %s", len(ordered), [stop.id for stop in ordered])
    return ordered
