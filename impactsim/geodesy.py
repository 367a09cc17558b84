"""
WGS84 geodesy for the impact simulator.

Conversions between geodetic coordinates (degrees, meters above the
ellipsoid) and ECEF vectors, the local East-North-Up frame, and ellipsoidal
distances. Every function is total over finite inputs: the only degenerate
cases (polar axis points, near-antipodal Vincenty queries) take explicit
fallback branches instead of raising.

Angles are radians internally and degrees at the API boundary.
"""

from __future__ import annotations

import math
from typing import NamedTuple

from .physics import Vector3D


# =============================================================================
# WGS84 ELLIPSOID
# =============================================================================

WGS84_A = 6378137.0  # semi-major axis (m)
WGS84_F = 1 / 298.257223563  # flattening
WGS84_B = WGS84_A * (1 - WGS84_F)  # semi-minor axis (m)
WGS84_E2 = 2 * WGS84_F - WGS84_F * WGS84_F  # first eccentricity squared
WGS84_EP2 = (WGS84_A**2 - WGS84_B**2) / WGS84_B**2  # second eccentricity squared

# Mean Earth radius for the haversine fallback (m)
MEAN_EARTH_RADIUS_M = 6371008.8

# Iteration limits
ECEF_TO_LLA_MAX_ITERATIONS = 10
ECEF_TO_LLA_TOLERANCE_RAD = 1e-12
VINCENTY_MAX_ITERATIONS = 100
VINCENTY_TOLERANCE_RAD = 1e-12

# Default round-trip tolerance for validate_coordinate_conversion (m)
DEFAULT_CONVERSION_TOLERANCE_M = 5.0


class Coordinates(NamedTuple):
    """Geodetic latitude/longitude in degrees."""
    lat: float
    lng: float


class LLA(NamedTuple):
    """Geodetic latitude/longitude (degrees) and altitude above WGS84 (m)."""
    lat: float
    lng: float
    alt: float


class LocalFrame(NamedTuple):
    """East, North and Up unit vectors at a geodetic point, in ECEF."""
    e: Vector3D
    n: Vector3D
    u: Vector3D


class ConversionCheck(NamedTuple):
    """Result of a geodetic -> ECEF -> geodetic round trip."""
    is_valid: bool
    error: float
    message: str


def normalize_longitude(lng_deg: float) -> float:
    """Wrap a longitude into (-180, 180] degrees."""
    wrapped = math.fmod(lng_deg + 180.0, 360.0)
    if wrapped <= 0:
        wrapped += 360.0
    return wrapped - 180.0


# =============================================================================
# GEODETIC <-> ECEF
# =============================================================================

def llh_to_ecef(lat_deg: float, lng_deg: float, alt_m: float = 0.0) -> Vector3D:
    """
    Convert geodetic latitude/longitude/height to an ECEF position.

    Uses the closed form with the prime vertical radius of curvature
    N = a / sqrt(1 - e^2 sin^2(lat)).

    Args:
        lat_deg: Geodetic latitude (degrees)
        lng_deg: Longitude (degrees)
        alt_m: Height above the WGS84 ellipsoid (meters)

    Returns:
        ECEF position in meters
    """
    lat = math.radians(lat_deg)
    lng = math.radians(lng_deg)
    sin_lat = math.sin(lat)
    cos_lat = math.cos(lat)
    n = WGS84_A / math.sqrt(1 - WGS84_E2 * sin_lat * sin_lat)

    return Vector3D(
        (n + alt_m) * cos_lat * math.cos(lng),
        (n + alt_m) * cos_lat * math.sin(lng),
        (n * (1 - WGS84_E2) + alt_m) * sin_lat,
    )


def ecef_to_lla(ecef: Vector3D) -> LLA:
    """
    Convert an ECEF position to geodetic latitude, longitude and altitude.

    Latitude is refined iteratively (Bowring-style) until successive
    estimates differ by less than 1e-12 rad. If that does not happen within
    10 iterations the last estimate is used.

    The Earth's center has no defined latitude; it maps to (0, 0) at an
    altitude of minus the semi-major axis.

    Args:
        ecef: ECEF position in meters

    Returns:
        LLA in degrees and meters
    """
    p = math.hypot(ecef.x, ecef.y)
    if p == 0 and ecef.z == 0:
        return LLA(0.0, 0.0, -WGS84_A)

    lng = math.atan2(ecef.y, ecef.x)

    lat = math.atan2(ecef.z, p * (1 - WGS84_E2))
    h = 0.0

    for _ in range(ECEF_TO_LLA_MAX_ITERATIONS):
        sin_lat = math.sin(lat)
        n = WGS84_A / math.sqrt(1 - WGS84_E2 * sin_lat * sin_lat)
        cos_lat = math.cos(lat)
        if abs(cos_lat) > 1e-12:
            h = p / cos_lat - n
        else:
            # On the polar axis p / cos(lat) is undefined
            h = abs(ecef.z) - n * (1 - WGS84_E2)
        new_lat = math.atan2(ecef.z, p * (1 - WGS84_E2 * n / (n + h)))
        converged = abs(new_lat - lat) < ECEF_TO_LLA_TOLERANCE_RAD
        lat = new_lat
        if converged:
            break

    return LLA(math.degrees(lat), math.degrees(lng), h)


def ecef_to_lat_lng(ecef: Vector3D) -> Coordinates:
    """Convert an ECEF position to latitude/longitude, dropping altitude."""
    lla = ecef_to_lla(ecef)
    return Coordinates(lla.lat, lla.lng)


def local_frame(lat_deg: float, lng_deg: float) -> LocalFrame:
    """
    East-North-Up unit vectors at a geodetic point.

    Used to turn an entry speed and angle into an ECEF velocity.
    """
    lat = math.radians(lat_deg)
    lng = math.radians(lng_deg)
    sin_lat, cos_lat = math.sin(lat), math.cos(lat)
    sin_lng, cos_lng = math.sin(lng), math.cos(lng)

    return LocalFrame(
        e=Vector3D(-sin_lng, cos_lng, 0.0),
        n=Vector3D(-sin_lat * cos_lng, -sin_lat * sin_lng, cos_lat),
        u=Vector3D(cos_lat * cos_lng, cos_lat * sin_lng, sin_lat),
    )


# =============================================================================
# DISTANCES
# =============================================================================

def haversine_distance(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance on a mean-radius sphere (meters)."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    s = (math.sin(d_lat / 2) ** 2 +
         math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2)
    s = min(1.0, max(0.0, s))
    return 2 * MEAN_EARTH_RADIUS_M * math.atan2(math.sqrt(s), math.sqrt(1 - s))


def vincenty_distance(a: Coordinates, b: Coordinates) -> float:
    """
    Geodesic distance on the WGS84 ellipsoid (Vincenty inverse problem).

    Iterates the longitude on the auxiliary sphere up to 100 times and
    converges at |d_lambda| < 1e-12. Near-antipodal points where the
    iteration does not converge fall back to the haversine distance.

    Args:
        a: First point
        b: Second point

    Returns:
        Distance in meters (never negative)
    """
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    big_l = math.radians(b.lng - a.lng)

    u1 = math.atan((1 - WGS84_F) * math.tan(phi1))
    u2 = math.atan((1 - WGS84_F) * math.tan(phi2))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

    lam = big_l
    converged = False
    sin_sigma = cos_sigma = sigma = 0.0
    cos2_alpha = cos_2sigma_m = 0.0

    for _ in range(VINCENTY_MAX_ITERATIONS):
        sin_lam = math.sin(lam)
        cos_lam = math.cos(lam)
        sin_sigma = math.hypot(
            cos_u2 * sin_lam,
            cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam,
        )
        if sin_sigma == 0:
            return 0.0  # coincident points
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos2_alpha = 1 - sin_alpha * sin_alpha
        if cos2_alpha == 0:
            cos_2sigma_m = 0.0  # equatorial line
        else:
            cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos2_alpha
        c = WGS84_F / 16 * cos2_alpha * (4 + WGS84_F * (4 - 3 * cos2_alpha))
        lam_prev = lam
        lam = big_l + (1 - c) * WGS84_F * sin_alpha * (
            sigma + c * sin_sigma * (
                cos_2sigma_m + c * cos_sigma * (-1 + 2 * cos_2sigma_m**2)
            )
        )
        if abs(lam - lam_prev) < VINCENTY_TOLERANCE_RAD:
            converged = True
            break

    if not converged:
        return haversine_distance(a, b)

    u_sq = cos2_alpha * WGS84_EP2
    big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = big_b * sin_sigma * (
        cos_2sigma_m + big_b / 4 * (
            cos_sigma * (-1 + 2 * cos_2sigma_m**2) -
            big_b / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma**2) * (-3 + 4 * cos_2sigma_m**2)
        )
    )

    s = WGS84_B * big_a * (sigma - delta_sigma)
    return max(0.0, s)


# =============================================================================
# SELF-CHECK
# =============================================================================

def validate_coordinate_conversion(
    lat: float,
    lng: float,
    alt: float = 0.0,
    tolerance_m: float = DEFAULT_CONVERSION_TOLERANCE_M
) -> ConversionCheck:
    """
    Round-trip a point through ECEF and report the surface error.

    Args:
        lat: Latitude (degrees)
        lng: Longitude (degrees)
        alt: Altitude (meters)
        tolerance_m: Maximum acceptable error (meters)

    Returns:
        ConversionCheck with validity flag, Vincenty error and message
    """
    lla = ecef_to_lla(llh_to_ecef(lat, lng, alt))
    error = vincenty_distance(Coordinates(lat, lng), Coordinates(lla.lat, lla.lng))
    return ConversionCheck(
        is_valid=error <= tolerance_m,
        error=error,
        message=f"Conversion error: {error:.2f} m",
    )
