"""Great-circle distance and path summaries over GeoPoint sequences."""
import math
from typing import Sequence

from trailtrack.config import EARTH_RADIUS_M
from trailtrack.models.geo import GeoPoint


def great_circle_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance in meters on a sphere of radius EARTH_RADIUS_M.

    Non-finite coordinates yield NaN; callers validate fixes first.
    """
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return EARTH_RADIUS_M * c


def cumulative_distance(path: Sequence[GeoPoint]) -> float:
    """Sum of consecutive pairwise distances; 0 for a path of one point or none."""
    return sum(great_circle_distance(p, q) for p, q in zip(path, path[1:]))


def duration(path: Sequence[GeoPoint]) -> int:
    """Milliseconds between first and last point; 0 for a path of one point or none."""
    if len(path) <= 1:
        return 0
    return path[-1].timestamp - path[0].timestamp
