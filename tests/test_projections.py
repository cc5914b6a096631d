"""Tests for the projection strategies."""

import logging

import numpy as np
import pytest
from pyproj import Proj

from common.types import PlanarPoint, make_point
from hexgridgeo.projections import (
    PROJECTION_AEP,
    PROJECTION_NOOP,
    PROJECTION_SIN,
    PROJECTION_SM,
    PROJECTIONS,
    ProjectionDomainError,
    get_projection,
    project_batch,
    unproject_batch,
)

PRECISION = 1e-5

ALL_PROJECTIONS = [PROJECTION_NOOP, PROJECTION_SIN, PROJECTION_AEP, PROJECTION_SM]

ROUND_TRIP_POINTS = [
    (-73.0, 40.0),
    (0.0, 0.0),
    (151.2, -33.9),
    (-179.5, 60.0),
    (179.5, -60.0),
    (12.5, 84.9),
    (-45.0, -84.9),
    (0.0, 45.0),
]


def assert_planar(point, x, y, precision=PRECISION):
    assert abs(point.x - x) <= precision, f"x: expected {x}, got {point.x}"
    assert abs(point.y - y) <= precision, f"y: expected {y}, got {point.y}"


def assert_geo(point, lon, lat, precision=PRECISION):
    assert abs(point.lon - lon) <= precision, f"lon: expected {lon}, got {point.lon}"
    assert abs(point.lat - lat) <= precision, f"lat: expected {lat}, got {point.lat}"


def test_noop_is_identity():
    point = PROJECTION_NOOP.geo_to_point(make_point(-73.0, 40.0))
    assert point == PlanarPoint(x=-73.0, y=40.0)
    assert PROJECTION_NOOP.point_to_geo(point) == make_point(-73.0, 40.0)


@pytest.mark.parametrize("projection, x, y", [
    (PROJECTION_SIN, 9124497.47463, 4452779.63173),
    (PROJECTION_AEP, -0.83453, -0.25514),
    (PROJECTION_SM, -8126322.82791, 4865942.27950),
])
def test_forward_reference_values(projection, x, y):
    geo_point = make_point(-73.0, 40.0)
    point = projection.geo_to_point(geo_point)
    assert_planar(point, x, y)
    assert_geo(projection.point_to_geo(point), -73.0, 40.0)


@pytest.mark.parametrize("projection", ALL_PROJECTIONS, ids=lambda p: p.name)
@pytest.mark.parametrize("lon, lat", ROUND_TRIP_POINTS)
def test_round_trip(projection, lon, lat):
    restored = projection.point_to_geo(projection.geo_to_point(make_point(lon, lat)))
    assert_geo(restored, lon, lat)


@pytest.mark.parametrize("projection", [PROJECTION_SIN, PROJECTION_AEP, PROJECTION_SM],
                         ids=lambda p: p.name)
@pytest.mark.parametrize("lon, lat", [(-73.0, 40.0), (10.0, -20.0), (100.0, 70.0)])
def test_forward_matches_proj(projection, lon, lat):
    expected_x, expected_y = Proj(projection.to_crs())(lon, lat)
    point = projection.geo_to_point(make_point(lon, lat))
    assert point.x == pytest.approx(expected_x, rel=1e-9, abs=1e-9)
    assert point.y == pytest.approx(expected_y, rel=1e-9, abs=1e-9)


class TestMercatorDomain:

    @pytest.mark.parametrize("lat", [85.06, -85.06, 89.0, 90.0, -90.0])
    def test_rejects_polar_latitudes(self, lat):
        with pytest.raises(ProjectionDomainError) as excinfo:
            PROJECTION_SM.geo_to_point(make_point(10.0, lat))
        assert excinfo.value.projection == "mercator"

    @pytest.mark.parametrize("lat", [85.0, -85.0, 85.0511287798066])
    def test_accepts_up_to_limit(self, lat):
        point = PROJECTION_SM.geo_to_point(make_point(10.0, lat))
        assert np.isfinite(point.x) and np.isfinite(point.y)

    def test_domain_error_is_value_error(self):
        with pytest.raises(ValueError):
            PROJECTION_SM.geo_to_point(make_point(0.0, 86.0))


class TestPoles:

    @pytest.mark.parametrize("lat", [90.0, -90.0])
    def test_sinusoidal_pole_clamps_longitude(self, lat):
        point = PROJECTION_SIN.geo_to_point(make_point(-73.0, lat))
        restored = PROJECTION_SIN.point_to_geo(point)
        assert restored.lon == 0.0
        assert restored.lat == pytest.approx(lat)

    def test_sinusoidal_rejects_beyond_pole(self):
        y = PROJECTION_SIN.geo_to_point(make_point(0.0, 90.0)).y
        with pytest.raises(ProjectionDomainError):
            PROJECTION_SIN.point_to_geo(PlanarPoint(x=0.0, y=y * 1.01))

    def test_aep_north_pole_maps_to_origin(self):
        point = PROJECTION_AEP.geo_to_point(make_point(42.0, 90.0))
        assert_planar(point, 0.0, 0.0, precision=1e-12)
        restored = PROJECTION_AEP.point_to_geo(point)
        assert restored.lon == 0.0
        assert restored.lat == pytest.approx(90.0)

    @pytest.mark.parametrize("lon", [0.0, 180.0, -180.0])
    def test_aep_meridian_through_pole(self, lon):
        # x is zero along these meridians
        restored = PROJECTION_AEP.point_to_geo(
            PROJECTION_AEP.geo_to_point(make_point(lon, -30.0))
        )
        assert restored.lat == pytest.approx(-30.0)
        assert abs(restored.lon) == pytest.approx(abs(lon))

    def test_aep_rejects_beyond_south_pole(self):
        with pytest.raises(ProjectionDomainError):
            PROJECTION_AEP.point_to_geo(PlanarPoint(x=0.0, y=3.5))

    def test_sinusoidal_rejects_point_outside_envelope_near_pole(self):
        y = PROJECTION_SIN.geo_to_point(make_point(0.0, 89.9999)).y
        with pytest.raises(ProjectionDomainError) as excinfo:
            PROJECTION_SIN.point_to_geo(PlanarPoint(x=1.0e6, y=y))
        assert excinfo.value.projection == "sinusoidal"

    @pytest.mark.parametrize("x", [-1.0, 4.1e7])
    def test_sinusoidal_rejects_point_outside_envelope_at_equator(self, x):
        with pytest.raises(ProjectionDomainError):
            PROJECTION_SIN.point_to_geo(PlanarPoint(x=x, y=0.0))

    @pytest.mark.parametrize("lon", [-180.0, 180.0])
    @pytest.mark.parametrize("lat", [0.0, 60.0, -89.9])
    def test_sinusoidal_envelope_edges_round_trip(self, lon, lat):
        restored = PROJECTION_SIN.point_to_geo(PROJECTION_SIN.geo_to_point(make_point(lon, lat)))
        assert -180.0 <= restored.lon <= 180.0
        assert_geo(restored, lon, lat)

    def test_batch_rejects_point_outside_envelope(self):
        with pytest.raises(ProjectionDomainError, match="1 point"):
            unproject_batch(PROJECTION_SIN, [1.0e6, 1.0e6], [0.0, 6.37e6 * 1.5707])


@pytest.mark.parametrize("projection", ALL_PROJECTIONS, ids=lambda p: p.name)
@pytest.mark.parametrize("lon", [540.0, -180.5, 360.0])
def test_forward_rejects_longitude_out_of_range(projection, lon):
    with pytest.raises(ProjectionDomainError):
        projection.geo_to_point(make_point(lon, 0.0))
    with pytest.raises(ProjectionDomainError):
        project_batch(projection, [0.0, lon], [0.0, 0.0])


@pytest.mark.parametrize("projection", ALL_PROJECTIONS, ids=lambda p: p.name)
@pytest.mark.parametrize("x, y", [(np.nan, 0.0), (0.0, np.inf), (-np.inf, 1.0)])
def test_inverse_rejects_non_finite(projection, x, y):
    with pytest.raises(ProjectionDomainError):
        projection.point_to_geo(PlanarPoint(x=x, y=y))


def test_noop_inverse_rejects_latitude_out_of_range():
    with pytest.raises(ProjectionDomainError):
        PROJECTION_NOOP.point_to_geo(PlanarPoint(x=0.0, y=91.0))


def test_projection_properties():
    assert PROJECTION_SM.preserves_angles and not PROJECTION_SM.preserves_area
    assert PROJECTION_SIN.preserves_area and not PROJECTION_SIN.preserves_angles
    assert PROJECTION_SM.sphere_radius == pytest.approx(6378137.0)
    assert PROJECTION_AEP.sphere_radius == 1.0


class TestRegistry:

    def test_names(self):
        assert set(PROJECTIONS) == {"noop", "sinusoidal", "aep", "mercator"}

    def test_lookup_by_name(self):
        assert get_projection("mercator") is PROJECTION_SM
        assert get_projection("Sinusoidal") is PROJECTION_SIN

    def test_instance_passes_through(self):
        assert get_projection(PROJECTION_AEP) is PROJECTION_AEP

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="Unknown projection"):
            get_projection("robinson")


class TestBatch:

    @pytest.mark.parametrize("projection", ALL_PROJECTIONS, ids=lambda p: p.name)
    def test_matches_scalar(self, projection):
        lons = np.array([p[0] for p in ROUND_TRIP_POINTS])
        lats = np.array([p[1] for p in ROUND_TRIP_POINTS])
        x, y = project_batch(projection, lons, lats)
        for i, (lon, lat) in enumerate(ROUND_TRIP_POINTS):
            point = projection.geo_to_point(make_point(lon, lat))
            assert x[i] == pytest.approx(point.x)
            assert y[i] == pytest.approx(point.y)

        restored_lons, restored_lats = unproject_batch(projection, x, y)
        np.testing.assert_allclose(restored_lons, lons, atol=PRECISION)
        np.testing.assert_allclose(restored_lats, lats, atol=PRECISION)

    def test_broadcasts_scalar_latitude(self):
        x, y = project_batch(PROJECTION_SM, [-10.0, 0.0, 10.0], 0.0)
        assert x.shape == (3,)
        np.testing.assert_allclose(y, 0.0, atol=1e-9)

    def test_rejects_any_out_of_domain(self, caplog):
        with caplog.at_level(logging.WARNING, logger="hexgridgeo.projections"):
            with pytest.raises(ProjectionDomainError, match="1 point"):
                project_batch(PROJECTION_SM, [0.0, 0.0, 0.0], [10.0, 86.0, -10.0])
        assert "out of domain" in caplog.text

    def test_unproject_rejects_nan(self):
        with pytest.raises(ProjectionDomainError):
            unproject_batch(PROJECTION_SIN, [0.0, np.nan], [0.0, 0.0])
