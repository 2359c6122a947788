"""
Path metrics module.

Geodesic distance between coordinates and the incremental running total
kept while a run is being tracked.
"""

from .distance import EARTH_RADIUS_METERS, DistanceAccumulator, haversine_distance

__all__ = [
    "EARTH_RADIUS_METERS",
    "DistanceAccumulator",
    "haversine_distance",
]
