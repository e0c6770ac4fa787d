"""
Geofence validation.

A point is inside a work location when its great-circle (haversine) distance
to the location center is within the location radius.
"""

import math
from typing import Iterable, Optional

from app.models import GeofenceResult, GeoLocation, WorkLocation

EARTH_RADIUS_METERS = 6_371_000.0


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two WGS84 coordinates."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def check_geofence(
    point: GeoLocation, locations: Iterable[WorkLocation]
) -> GeofenceResult:
    """
    Match a point against work locations.

    Returns the closest location containing the point. When no location
    contains it, within_geofence is False and distance_meters is the distance
    to the nearest location (None if there are no locations at all).
    """
    nearest: Optional[tuple[float, WorkLocation]] = None
    best_match: Optional[tuple[float, WorkLocation]] = None

    for location in locations:
        if not location.is_active:
            continue
        distance = haversine_distance(
            point.lat, point.lng, location.latitude, location.longitude
        )
        if nearest is None or distance < nearest[0]:
            nearest = (distance, location)
        if distance <= location.radius and (
            best_match is None or distance < best_match[0]
        ):
            best_match = (distance, location)

    if best_match is not None:
        return GeofenceResult(
            within_geofence=True,
            location_id=best_match[1].id,
            distance_meters=round(best_match[0], 2),
        )
    return GeofenceResult(
        within_geofence=False,
        distance_meters=round(nearest[0], 2) if nearest else None,
    )
