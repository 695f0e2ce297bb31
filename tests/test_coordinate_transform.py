import math

import pytest

from globepick.core.errors import OutOfRangeError
from globepick.core.geo import CartesianPoint, CoordinateTransform, GeoPoint, central_angle_deg


def test_round_trip_over_the_whole_grid(transform):
    worst = 0.0
    for lat in range(-89, 90):
        for lon in range(-179, 180):
            geo = transform.to_geo(transform.to_cartesian(lat, lon))
            worst = max(worst, abs(geo.lat - lat), abs(geo.lon - lon))
    assert worst < 1e-6


def test_round_trip_at_non_default_radius():
    t = CoordinateTransform(6371.0)
    geo = t.to_geo(t.to_cartesian(-33.87, 151.21))
    assert geo.lat == pytest.approx(-33.87, abs=1e-9)
    assert geo.lon == pytest.approx(151.21, abs=1e-9)


def test_axis_convention(transform):
    # lon 0 on +X, north pole on +Y, lon +90 on -Z.
    p = transform.to_cartesian(0, 0)
    assert (p.x, p.y, p.z) == pytest.approx((5.0, 0.0, 0.0))

    p = transform.to_cartesian(0, 90)
    assert (p.x, p.y, p.z) == pytest.approx((0.0, 0.0, -5.0), abs=1e-12)

    p = transform.to_cartesian(90, 0)
    assert (p.x, p.y, p.z) == pytest.approx((0.0, 5.0, 0.0), abs=1e-12)


@pytest.mark.parametrize("lat", [90, -90])
@pytest.mark.parametrize("lon", [0, 45, -120])
def test_poles_return_fixed_longitude(transform, lat, lon):
    geo = transform.to_geo(transform.to_cartesian(lat, lon))
    assert geo.lat == lat
    assert geo.lon == 0.0
    assert not math.isnan(geo.lon)


def test_to_geo_rejects_points_off_the_surface(transform):
    with pytest.raises(OutOfRangeError):
        transform.to_geo(CartesianPoint(6.0, 0.0, 0.0))
    with pytest.raises(OutOfRangeError):
        transform.to_geo(CartesianPoint(0.0, 0.0, 0.0))
    with pytest.raises(OutOfRangeError):
        transform.to_geo(CartesianPoint(float("nan"), 0.0, 5.0))


def test_to_geo_accepts_small_deviation_and_explicit_tolerance(transform):
    geo = transform.to_geo(CartesianPoint(5.001, 0.0, 0.0))
    assert (geo.lat, geo.lon) == (0.0, 0.0)

    with pytest.raises(OutOfRangeError):
        transform.to_geo(CartesianPoint(5.1, 0.0, 0.0))
    assert transform.to_geo(CartesianPoint(5.1, 0.0, 0.0), tolerance=0.04).lon == 0.0


def test_to_cartesian_rejects_bad_input(transform):
    with pytest.raises(OutOfRangeError):
        transform.to_cartesian(91, 0)
    with pytest.raises(OutOfRangeError):
        transform.to_cartesian(0, float("inf"))
    with pytest.raises(OutOfRangeError):
        transform.to_cartesian(float("nan"), 0)


def test_out_of_range_error_is_a_value_error():
    assert issubclass(OutOfRangeError, ValueError)
    assert OutOfRangeError("x").to_error_dict() == {"code": "OUT_OF_RANGE", "message": "x"}


def test_constructor_validates_radius():
    with pytest.raises(ValueError):
        CoordinateTransform(0)
    with pytest.raises(ValueError):
        CoordinateTransform(5.0, tolerance=0)


def test_geopoint_normalizes_longitude_and_clamps_latitude():
    assert GeoPoint(lat=95, lon=190) == GeoPoint(lat=90, lon=-170)
    assert GeoPoint(lat=0, lon=180).lon == -180.0
    assert GeoPoint(lat=0, lon=-180).lon == -180.0
    assert GeoPoint(lat=0, lon=540).lon == -180.0
    assert GeoPoint(lat=-100, lon=-190).lat == -90.0
    assert GeoPoint(lat=0, lon=-190).lon == pytest.approx(170.0)
    assert GeoPoint.from_lonlat((12.5, 41.9)) == GeoPoint(lat=41.9, lon=12.5)


def test_geopoint_rejects_non_finite():
    with pytest.raises(OutOfRangeError):
        GeoPoint(lat=float("nan"), lon=0)


def test_uv_convention_matches_equirectangular_texture(transform):
    assert transform.to_uv(GeoPoint(lat=0, lon=0)) == (0.5, 0.5)
    assert transform.to_uv(GeoPoint(lat=90, lon=-180)) == (0.0, 1.0)
    assert transform.to_uv(GeoPoint(lat=-90, lon=-180)) == (0.0, 0.0)

    geo = transform.from_uv(0.25, 0.75)
    assert (geo.lat, geo.lon) == (45.0, -90.0)


def test_surface_marker_floats_above_the_click(transform):
    marker = transform.surface_marker(GeoPoint(lat=27.6, lon=-82.5), 0.02)
    assert marker.norm() == pytest.approx(5.02)
    geo = CoordinateTransform(5.02).to_geo(marker)
    assert geo.lat == pytest.approx(27.6)
    assert geo.lon == pytest.approx(-82.5)


def test_project_scales_onto_surface(transform):
    p = transform.project(CartesianPoint(0.0, 10.0, 0.0))
    assert p == CartesianPoint(0.0, 5.0, 0.0)
    with pytest.raises(OutOfRangeError):
        transform.project(CartesianPoint(0.0, 0.0, 0.0))


def test_central_angle():
    assert central_angle_deg(GeoPoint(0, 0), GeoPoint(0, 90)) == pytest.approx(90.0)
    assert central_angle_deg(GeoPoint(90, 0), GeoPoint(90, 123)) == pytest.approx(0.0, abs=1e-9)
