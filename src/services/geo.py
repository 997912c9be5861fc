"""Great-circle distance helpers."""

import math

from src.models.locatable import Coordinates

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometers on a spherical Earth."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    # float error can push a slightly past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_between(a: Coordinates, b: Coordinates) -> float:
    """Distance in kilometers between two points.

    Points are put in a canonical order first so the result is bit-for-bit
    identical whichever way round they are passed.
    """
    p, q = sorted(((a.lat, a.lng), (b.lat, b.lng)))
    return haversine_km(p[0], p[1], q[0], q[1])
