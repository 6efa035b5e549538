"""Tests for geodesy domain services."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from domain.geodesy.services import (
    EARTH_RADIUS_KM,
    azimuth_deg,
    distance_km,
    interpolate,
    midpoint,
)
from domain.geodesy.value_objects import GeoPoint

BANGALORE_A = GeoPoint(latitude=12.97, longitude=77.59)
BANGALORE_B = GeoPoint(latitude=12.98, longitude=77.60)


# ===========================================================================
# GeoPoint
# ===========================================================================
@pytest.mark.parametrize(
    "lat, lng",
    [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.5), (0.0, -181.0)],
)
def test_geopoint_rejects_out_of_range(lat, lng):
    with pytest.raises(ValidationError):
        GeoPoint(latitude=lat, longitude=lng)


def test_geopoint_value_equality():
    assert GeoPoint(latitude=1, longitude=2) == GeoPoint(latitude=1.0, longitude=2.0)
    assert GeoPoint(latitude=1, longitude=2).as_tuple() == (1.0, 2.0)


# ===========================================================================
# distance_km
# ===========================================================================
def test_distance_zero_for_coincident_points():
    assert distance_km(BANGALORE_A, BANGALORE_A) == 0.0


def test_distance_is_symmetric():
    assert distance_km(BANGALORE_A, BANGALORE_B) == distance_km(
        BANGALORE_B, BANGALORE_A
    )


def test_distance_one_degree_of_meridian():
    """One degree along a meridian is R * pi / 180."""
    start = GeoPoint(latitude=0.0, longitude=0.0)
    end = GeoPoint(latitude=1.0, longitude=0.0)

    assert distance_km(start, end) == pytest.approx(EARTH_RADIUS_KM * math.pi / 180)


def test_distance_short_link_plausible():
    """0.01 deg in both axes near 13N is roughly 1.5 km."""
    assert distance_km(BANGALORE_A, BANGALORE_B) == pytest.approx(1.55, abs=0.01)


def test_distance_antipodal():
    start = GeoPoint(latitude=0.0, longitude=0.0)
    end = GeoPoint(latitude=0.0, longitude=180.0)

    assert distance_km(start, end) == pytest.approx(EARTH_RADIUS_KM * math.pi)


# ===========================================================================
# azimuth_deg
# ===========================================================================
@pytest.mark.parametrize(
    "end, expected",
    [
        (GeoPoint(latitude=0.0, longitude=1.0), 90.0),
        (GeoPoint(latitude=-1.0, longitude=0.0), 180.0),
        (GeoPoint(latitude=0.0, longitude=-1.0), 270.0),
    ],
)
def test_azimuth_cardinal_directions(end, expected):
    origin = GeoPoint(latitude=0.0, longitude=0.0)

    assert azimuth_deg(origin, end) == pytest.approx(expected, abs=1e-6)


def test_azimuth_due_north_is_zero():
    result = azimuth_deg(
        GeoPoint(latitude=0.0, longitude=0.0), GeoPoint(latitude=1.0, longitude=0.0)
    )

    # 0 and 360 are the same bearing; allow either side of the wrap
    assert min(result, 360.0 - result) < 1e-6


def test_azimuth_in_range():
    result = azimuth_deg(BANGALORE_B, BANGALORE_A)

    assert 0.0 <= result < 360.0
    # Roughly south-west
    assert 180.0 < result < 270.0


def test_azimuth_coincident_points_is_zero():
    assert azimuth_deg(BANGALORE_A, BANGALORE_A) == 0.0


# ===========================================================================
# interpolate / midpoint
# ===========================================================================
def test_interpolate_endpoints_and_middle():
    assert interpolate(BANGALORE_A, BANGALORE_B, 0.0) == BANGALORE_A
    assert interpolate(BANGALORE_A, BANGALORE_B, 1.0).latitude == pytest.approx(12.98)

    half = interpolate(BANGALORE_A, BANGALORE_B, 0.5)
    assert half.latitude == pytest.approx(12.975)
    assert half.longitude == pytest.approx(77.595)


def test_midpoint_is_arithmetic_mean():
    mid = midpoint(BANGALORE_A, BANGALORE_B)

    assert mid.latitude == pytest.approx(12.975)
    assert mid.longitude == pytest.approx(77.595)
    assert mid == midpoint(BANGALORE_B, BANGALORE_A)
