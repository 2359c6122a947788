"""
Great-circle distance and running distance accumulation.

Distances use the haversine formula on a spherical Earth. The accumulator
adds one leg per sample so a run's total never has to be recomputed from
the whole path.
"""

import math
from typing import Optional

from ..tracking.models import Coordinate

EARTH_RADIUS_METERS = 6_371_000.0


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """
    Compute great-circle distance in meters between two coordinates.

    Args:
        a: First coordinate
        b: Second coordinate

    Returns:
        Distance in meters; zero for identical coordinates, symmetric in a and b
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = (math.sin(d_phi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2)
    # Rounding can push h a hair outside [0, 1] for antipodal points
    h = min(max(h, 0.0), 1.0)

    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


class DistanceAccumulator:
    """Running total of leg distances over an ordered path."""

    def __init__(self) -> None:
        self.total_meters: float = 0.0
        self.previous: Optional[Coordinate] = None

    def update(self, coordinate: Coordinate) -> float:
        """
        Feed the next coordinate of the path.

        Returns:
            Length of the leg just added (0.0 for the first coordinate)
        """
        leg = 0.0
        if self.previous is not None:
            leg = haversine_distance(self.previous, coordinate)
            self.total_meters += leg
        self.previous = coordinate
        return leg

    def reset(self) -> None:
        self.total_meters = 0.0
        self.previous = None
