"""
Tests for WGS84 geodesy.

Tests cover:
- Geodetic <-> ECEF round trips, including the poles
- East-North-Up frame orthonormality
- Vincenty and haversine distances
- Longitude wrapping
- The conversion self-check
"""

import math
import pytest

import numpy as np

from impactsim.geodesy import (
    WGS84_A,
    WGS84_B,
    Coordinates,
    ecef_to_lat_lng,
    ecef_to_lla,
    haversine_distance,
    llh_to_ecef,
    local_frame,
    normalize_longitude,
    validate_coordinate_conversion,
    vincenty_distance,
)
from impactsim.physics import Vector3D


LONDON = Coordinates(51.5074, -0.1278)
PARIS = Coordinates(48.8566, 2.3522)
TOKYO = Coordinates(35.6895, 139.6917)
SYDNEY = Coordinates(-33.8688, 151.2093)
MOSCOW = Coordinates(55.7558, 37.6173)


# =============================================================================
# CONVERSIONS
# =============================================================================

class TestEcefConversion:
    """Tests for llh_to_ecef / ecef_to_lla."""

    def test_equator_prime_meridian(self):
        """(0, 0, 0) sits on the X axis at the semi-major axis."""
        p = llh_to_ecef(0, 0, 0)
        np.testing.assert_allclose(p.to_tuple(), (WGS84_A, 0, 0), atol=1e-6)

    def test_north_pole(self):
        """The pole sits on +Z at the semi-minor axis."""
        p = llh_to_ecef(90, 0, 0)
        assert p.z == pytest.approx(WGS84_B, abs=1e-6)
        assert math.hypot(p.x, p.y) < 1e-6

    def test_altitude_adds_along_normal(self):
        """At the equator altitude adds directly to the radius."""
        p = llh_to_ecef(0, 90, 1000)
        assert p.y == pytest.approx(WGS84_A + 1000)

    def test_tokyo_round_trip_within_5m(self):
        """Tokyo round-trips with sub-5 m error."""
        back = ecef_to_lat_lng(llh_to_ecef(TOKYO.lat, TOKYO.lng, 0))
        assert vincenty_distance(TOKYO, back) < 5

    def test_sydney_round_trip_within_hundredth_degree(self):
        """Sydney round-trips within 0.01 degrees on each axis."""
        back = ecef_to_lat_lng(llh_to_ecef(SYDNEY.lat, SYDNEY.lng, 0))
        assert abs(back.lat - SYDNEY.lat) < 0.01
        assert abs(back.lng - SYDNEY.lng) < 0.01

    def test_moscow_round_trip_altitude(self):
        """Moscow round-trips within 5 m and with near-zero altitude."""
        lla = ecef_to_lla(llh_to_ecef(MOSCOW.lat, MOSCOW.lng, 0))
        assert vincenty_distance(MOSCOW, Coordinates(lla.lat, lla.lng)) < 5
        assert abs(lla.alt) < 100

    @pytest.mark.parametrize("lat", [-85, -60, -30, 0, 30, 60, 85])
    @pytest.mark.parametrize("lng", [-179, -90, 0, 90, 179])
    def test_round_trip_grid(self, lat, lng):
        """Round trips stay within 5 m over the non-polar range."""
        assert validate_coordinate_conversion(lat, lng).is_valid

    def test_altitude_recovered(self):
        """Altitude survives the round trip."""
        lla = ecef_to_lla(llh_to_ecef(45.0, 10.0, 120_000))
        assert lla.alt == pytest.approx(120_000, abs=1.0)
        assert lla.lat == pytest.approx(45.0, abs=1e-6)

    @pytest.mark.parametrize("lat", [90, -90])
    def test_pole_stability(self, lat):
        """Poles round-trip without blowing up."""
        lla = ecef_to_lla(llh_to_ecef(lat, 0, 0))
        assert abs(lla.lat) > 89.999
        assert math.copysign(1, lla.lat) == math.copysign(1, lat)
        assert abs(lla.alt) < 1.0

    def test_earth_center(self):
        """The origin maps to (0, 0) one semi-major axis below the surface."""
        lla = ecef_to_lla(Vector3D(0.0, 0.0, 0.0))
        assert lla == (0.0, 0.0, -WGS84_A)
        assert ecef_to_lat_lng(Vector3D.zero()) == Coordinates(0.0, 0.0)

    @pytest.mark.parametrize("point", [
        Vector3D(1e-3, 0.0, 0.0),
        Vector3D(0.0, 0.0, 1e-3),
        Vector3D(0.0, 0.0, -5.0),
    ])
    def test_near_center_is_finite(self, point):
        """Points close to the center still convert without raising."""
        lla = ecef_to_lla(point)
        assert all(math.isfinite(v) for v in lla)


class TestLocalFrame:
    """Tests for the East-North-Up frame."""

    @pytest.mark.parametrize("lat,lng", [(0, 0), (51.5, -0.1), (-33.9, 151.2), (89.0, 45.0)])
    def test_orthonormal(self, lat, lng):
        """e, n and u are unit length and mutually orthogonal."""
        frame = local_frame(lat, lng)
        m = np.array([frame.e.to_tuple(), frame.n.to_tuple(), frame.u.to_tuple()])
        np.testing.assert_allclose(m @ m.T, np.eye(3), atol=1e-12)

    def test_right_handed(self):
        """East cross North is Up."""
        frame = local_frame(30, 60)
        assert frame.e.cross(frame.n) == frame.u

    def test_equator_axes(self):
        """At (0, 0) East is +Y and Up is +X."""
        frame = local_frame(0, 0)
        np.testing.assert_allclose(frame.e.to_tuple(), (0, 1, 0), atol=1e-12)
        np.testing.assert_allclose(frame.u.to_tuple(), (1, 0, 0), atol=1e-12)


# =============================================================================
# DISTANCES
# =============================================================================

class TestDistances:
    """Tests for Vincenty and haversine distances."""

    def test_london_paris(self):
        """London to Paris is about 343 km."""
        assert vincenty_distance(LONDON, PARIS) == pytest.approx(343_000, abs=1_500)

    def test_symmetric(self):
        """Distance does not depend on argument order."""
        assert vincenty_distance(LONDON, TOKYO) == pytest.approx(vincenty_distance(TOKYO, LONDON))

    def test_coincident_points(self):
        """Identical points are zero apart."""
        assert vincenty_distance(TOKYO, TOKYO) == 0.0

    def test_quarter_meridian(self):
        """Equator to pole along a meridian is ~10,002 km on WGS84."""
        d = vincenty_distance(Coordinates(0, 0), Coordinates(90, 0))
        assert d == pytest.approx(10_001_966, abs=10)

    def test_haversine_close_to_vincenty(self):
        """Sphere and ellipsoid agree within half a percent."""
        v = vincenty_distance(LONDON, PARIS)
        h = haversine_distance(LONDON, PARIS)
        assert h == pytest.approx(v, rel=5e-3)

    def test_near_antipodal_falls_back_to_haversine(self):
        """Near-antipodal queries that do not converge use the haversine distance."""
        a, b = Coordinates(0, 0), Coordinates(0.5, 179.7)
        d = vincenty_distance(a, b)
        assert math.isfinite(d)
        assert d == haversine_distance(a, b)
        assert 19_800_000 < d < 20_100_000

    def test_haversine_half_circumference(self):
        """Antipodes on the mean sphere are pi R apart."""
        d = haversine_distance(Coordinates(0, 0), Coordinates(0, 180))
        assert d == pytest.approx(math.pi * 6371008.8)


class TestNormalizeLongitude:
    """Tests for longitude wrapping."""

    @pytest.mark.parametrize("lng,expected", [
        (0, 0),
        (179.5, 179.5),
        (180, 180),
        (-180, 180),
        (190, -170),
        (-190, 170),
        (540, 180),
        (-10, -10),
    ])
    def test_wrap(self, lng, expected):
        """Longitudes wrap into (-180, 180]."""
        assert normalize_longitude(lng) == pytest.approx(expected)


class TestConversionCheck:
    """Tests for validate_coordinate_conversion."""

    def test_reports_error_and_message(self):
        """The check reports its error in meters."""
        check = validate_coordinate_conversion(TOKYO.lat, TOKYO.lng)
        assert check.is_valid
        assert check.error < 5
        assert check.message.startswith("Conversion error:")
        assert check.message.endswith(" m")

    def test_negative_tolerance_never_passes(self):
        """A negative tolerance never validates."""
        assert not validate_coordinate_conversion(10, 10, tolerance_m=-1).is_valid
