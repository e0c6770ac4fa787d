"""Tests for haversine distance and geofence matching."""

import pytest

from app.core.geofence import check_geofence, haversine_distance
from app.models import GeoLocation, WorkLocation


def _location(name: str, lat: float, lng: float, radius: float = 100.0, **kwargs):
    return WorkLocation(
        name=name, address=f"{name} address", latitude=lat, longitude=lng, radius=radius, **kwargs
    )


def test_distance_to_self_is_zero():
    assert haversine_distance(10.0, 20.0, 10.0, 20.0) == 0.0


def test_one_degree_of_latitude():
    """One degree along a meridian is about 111.19 km on a 6371 km sphere."""
    assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_194.93, abs=0.5)


def test_known_city_distance():
    # Paris -> London, roughly 343.5 km
    distance = haversine_distance(48.8566, 2.3522, 51.5074, -0.1278)
    assert distance == pytest.approx(343_550, rel=0.005)


def test_distance_is_symmetric():
    a = haversine_distance(10.7769, 106.7009, 21.0285, 105.8542)
    b = haversine_distance(21.0285, 105.8542, 10.7769, 106.7009)
    assert a == pytest.approx(b)


def test_point_inside_radius_matches():
    hq = _location("hq", 10.7769, 106.7009, radius=200.0)
    result = check_geofence(GeoLocation(lat=10.7779, lng=106.7009), [hq])

    assert result.within_geofence is True
    assert result.location_id == hq.id
    assert result.distance_meters == pytest.approx(111.19, abs=0.05)


def test_point_outside_reports_nearest_distance():
    hq = _location("hq", 10.0, 106.0, radius=50.0)
    branch = _location("branch", 10.01, 106.0, radius=50.0)

    result = check_geofence(GeoLocation(lat=10.02, lng=106.0), [hq, branch])

    assert result.within_geofence is False
    assert result.location_id is None
    assert result.distance_meters == pytest.approx(1111.95, abs=0.5)


def test_closest_containing_location_wins():
    wide = _location("wide", 10.0, 106.0, radius=5_000.0)
    near = _location("near", 10.001, 106.0, radius=500.0)

    result = check_geofence(GeoLocation(lat=10.0012, lng=106.0), [wide, near])

    assert result.within_geofence is True
    assert result.location_id == near.id


def test_boundary_distance_is_inside():
    hq = _location("hq", 0.0, 0.0, radius=haversine_distance(0.001, 0.0, 0.0, 0.0))
    result = check_geofence(GeoLocation(lat=0.001, lng=0.0), [hq])
    assert result.within_geofence is True


def test_inactive_locations_are_ignored():
    closed = _location("closed", 10.0, 106.0, radius=1_000.0, is_active=False)
    result = check_geofence(GeoLocation(lat=10.0, lng=106.0), [closed])

    assert result.within_geofence is False
    assert result.distance_meters is None


def test_no_locations():
    result = check_geofence(GeoLocation(lat=0.0, lng=0.0), [])
    assert result.within_geofence is False
    assert result.location_id is None
    assert result.distance_meters is None
