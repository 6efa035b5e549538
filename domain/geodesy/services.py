"""Geodesy Bounded Context - Domain Services.

Pure functions over GeoPoints. NO I/O.

Distances use the haversine formula on a sphere of mean Earth radius, which is
what link lengths are reported in. Azimuths use the WGS84 ellipsoid through
pyproj, since antenna alignment is the one place where direction matters.
"""

from __future__ import annotations

import math

from pyproj import Geod

from domain.geodesy.value_objects import GeoPoint

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
EARTH_RADIUS_KM = 6371.0  # Mean Earth radius

# WGS84 ellipsoid for azimuth calculations (same as GPS, EPSG:4326)
_geod = Geod(ellps="WGS84")


# ---------------------------------------------------------------------------
# Great-circle Distance
# ---------------------------------------------------------------------------
def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine great-circle distance between two points in kilometers.

    Symmetric, and exactly 0.0 for coincident points.

    Args:
        a: First geographic point
        b: Second geographic point

    Returns:
        Distance in kilometers (never negative)
    """
    d_lat = math.radians(b.latitude - a.latitude)
    d_lng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.latitude))
        * math.cos(math.radians(b.latitude))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


# ---------------------------------------------------------------------------
# Azimuth
# ---------------------------------------------------------------------------
def azimuth_deg(start: GeoPoint, end: GeoPoint) -> float:
    """Forward azimuth from start to end in degrees, normalized to [0, 360).

    Returns 0.0 for coincident points.
    """
    if start == end:
        return 0.0
    forward, _, _ = _geod.inv(
        start.longitude, start.latitude, end.longitude, end.latitude
    )
    return float(forward % 360.0)


# ---------------------------------------------------------------------------
# Linear Path Helpers
# ---------------------------------------------------------------------------
def interpolate(start: GeoPoint, end: GeoPoint, fraction: float) -> GeoPoint:
    """Point at `fraction` of the way from start to end.

    Linear in latitude/longitude, not geodesic. Good enough at planning-tool
    scale (links of a few tens of km); do not use across the antimeridian.
    """
    return GeoPoint(
        latitude=start.latitude + (end.latitude - start.latitude) * fraction,
        longitude=start.longitude + (end.longitude - start.longitude) * fraction,
    )


def midpoint(a: GeoPoint, b: GeoPoint) -> GeoPoint:
    """Arithmetic mean of the two coordinates (not the geodesic midpoint)."""
    return GeoPoint(
        latitude=(a.latitude + b.latitude) / 2,
        longitude=(a.longitude + b.longitude) / 2,
    )
