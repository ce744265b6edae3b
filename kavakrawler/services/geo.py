"""
Point geometry helpers for bar locations.

Bars keep their coordinates twice: scalar latitude/longitude columns and an
EWKT point (`SRID=4326;POINT(lon lat)`) used for proximity queries.
Distances are great-circle distances on a spherical earth.
"""

import math
import re
from typing import Optional, Tuple

SRID = 4326
EARTH_RADIUS_KM = 6371.0088

_POINT_RE = re.compile(
    r'^(?:SRID=(?P<srid>\d+);)?POINT\s*\(\s*(?P<lon>[-+0-9.eE]+)\s+(?P<lat>[-+0-9.eE]+)\s*\)$'
)


def make_point(latitude: float, longitude: float) -> str:
    """Build the EWKT point for a coordinate (x = longitude, y = latitude)."""
    return f'SRID={SRID};POINT({float(longitude)} {float(latitude)})'


def parse_point(ewkt: Optional[str]) -> Optional[Tuple[float, float]]:
    """Return (latitude, longitude) from an EWKT point, or None if it can't be parsed."""
    if not ewkt:
        return None
    match = _POINT_RE.match(ewkt.strip())
    if not match:
        return None
    return float(match.group('lat')), float(match.group('lon'))


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def is_valid_coordinate(latitude, longitude) -> bool:
    try:
        lat, lng = float(latitude), float(longitude)
    except (TypeError, ValueError):
        return False
    if math.isnan(lat) or math.isnan(lng):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0
