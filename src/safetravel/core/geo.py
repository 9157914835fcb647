from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt
from typing import Protocol

"""
Geospatial helpers.

Great-circle (Haversine) distance on a spherical Earth. Kilometers are used for
everything shown to users (place and alert distances); meters are used for radius
filtering because search radii are expressed in meters.

Coordinates are not range-checked: any object exposing `latitude`/`longitude` works.
"""

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_M = 6_371_000.0


class LatLon(Protocol):
    latitude: float
    longitude: float


def _central_angle(a: LatLon, b: LatLon) -> float:
    lat1 = radians(a.latitude)
    lat2 = radians(b.latitude)
    dlat = radians(b.latitude - a.latitude)
    dlon = radians(b.longitude - a.longitude)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair past 1 for antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * atan2(sqrt(h), sqrt(1 - h))


def haversine_km(a: LatLon, b: LatLon) -> float:
    """Compute great-circle distance in kilometers between two points."""
    return EARTH_RADIUS_KM * _central_angle(a, b)


def haversine_m(a: LatLon, b: LatLon) -> float:
    """Compute great-circle distance in meters between two points."""
    return EARTH_RADIUS_M * _central_angle(a, b)
