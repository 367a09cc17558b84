"""
Atmosphere and gravity model for atmospheric entry.

Four-segment standard-atmosphere approximation (troposphere, lower and
upper stratosphere, exponential tail above 47 km), a central gravity
field, and the velocity of air co-rotating with the Earth.
"""

from __future__ import annotations

import math

from .physics import (
    EARTH_ROTATION_VECTOR,
    GM_EARTH,
    SEA_LEVEL_AIR_DENSITY,
    Vector3D,
)


# =============================================================================
# ATMOSPHERE CONSTANTS
# =============================================================================

SEA_LEVEL_TEMPERATURE_K = 288.15
SEA_LEVEL_PRESSURE_PA = 101325.0
SPECIFIC_GAS_CONSTANT_AIR = 287.05  # J/(kg*K)

TROPOPAUSE_ALT_M = 11_000
LOWER_STRATOSPHERE_TOP_M = 25_000
UPPER_STRATOSPHERE_TOP_M = 47_000

TROPOSPHERE_LAPSE_RATE = 0.0065  # K/m (temperature decreases)
TROPOSPHERE_PRESSURE_EXPONENT = 5.256
STRATOSPHERE_TEMPERATURE_K = 216.65
TROPOPAUSE_PRESSURE_PA = 22632.0
LOWER_STRATOSPHERE_SCALE_M = 6341.6
UPPER_STRATOSPHERE_LAPSE_RATE = 0.001  # K/m (temperature increases)
UPPER_STRATOSPHERE_BASE_PRESSURE_PA = 2488.66
UPPER_STRATOSPHERE_PRESSURE_EXPONENT = -34.163

# Above 47 km
UPPER_ATMOSPHERE_SCALE_HEIGHT_M = 7000.0
MESOSPHERE_BASE_TEMPERATURE_K = 270.65
MESOSPHERE_LAPSE_RATE = 0.0028
MIN_UPPER_TEMPERATURE_K = 180.0


def air_temperature_at_altitude(altitude_m: float) -> float:
    """
    Ambient air temperature (K) at a geometric altitude.

    Negative altitudes are treated as sea level.
    """
    h = max(0.0, altitude_m)
    if h <= TROPOPAUSE_ALT_M:
        return SEA_LEVEL_TEMPERATURE_K - TROPOSPHERE_LAPSE_RATE * h
    if h <= LOWER_STRATOSPHERE_TOP_M:
        return STRATOSPHERE_TEMPERATURE_K
    if h <= UPPER_STRATOSPHERE_TOP_M:
        return STRATOSPHERE_TEMPERATURE_K + UPPER_STRATOSPHERE_LAPSE_RATE * (h - LOWER_STRATOSPHERE_TOP_M)
    return max(
        MIN_UPPER_TEMPERATURE_K,
        MESOSPHERE_BASE_TEMPERATURE_K - MESOSPHERE_LAPSE_RATE * (h - UPPER_STRATOSPHERE_TOP_M),
    )


def air_density_at_altitude(altitude_m: float) -> float:
    """
    Air density (kg/m^3) at a geometric altitude.

    Below 47 km density follows from the layer pressure and temperature via
    the ideal gas law. Above 47 km it decays exponentially from the
    sea-level value with a 7 km scale height. Altitudes at or below zero
    return sea-level density.

    Args:
        altitude_m: Altitude above the reference sphere (meters)

    Returns:
        Density in kg/m^3
    """
    if altitude_m <= 0:
        return SEA_LEVEL_AIR_DENSITY

    if altitude_m <= TROPOPAUSE_ALT_M:
        t = SEA_LEVEL_TEMPERATURE_K - TROPOSPHERE_LAPSE_RATE * altitude_m
        p = SEA_LEVEL_PRESSURE_PA * (t / SEA_LEVEL_TEMPERATURE_K) ** TROPOSPHERE_PRESSURE_EXPONENT
        return p / (SPECIFIC_GAS_CONSTANT_AIR * t)

    if altitude_m <= LOWER_STRATOSPHERE_TOP_M:
        p = TROPOPAUSE_PRESSURE_PA * math.exp(
            -(altitude_m - TROPOPAUSE_ALT_M) / LOWER_STRATOSPHERE_SCALE_M
        )
        return p / (SPECIFIC_GAS_CONSTANT_AIR * STRATOSPHERE_TEMPERATURE_K)

    if altitude_m <= UPPER_STRATOSPHERE_TOP_M:
        t = STRATOSPHERE_TEMPERATURE_K + UPPER_STRATOSPHERE_LAPSE_RATE * (altitude_m - LOWER_STRATOSPHERE_TOP_M)
        p = UPPER_STRATOSPHERE_BASE_PRESSURE_PA * (
            t / STRATOSPHERE_TEMPERATURE_K
        ) ** UPPER_STRATOSPHERE_PRESSURE_EXPONENT
        return p / (SPECIFIC_GAS_CONSTANT_AIR * t)

    return SEA_LEVEL_AIR_DENSITY * math.exp(-altitude_m / UPPER_ATMOSPHERE_SCALE_HEIGHT_M)


# =============================================================================
# GRAVITY AND EARTH ROTATION
# =============================================================================

def gravity_accel_at_pos(position: Vector3D) -> Vector3D:
    """
    Central gravitational acceleration -GM/r^2 * r_hat (m/s^2).

    Returns the zero vector at the origin.
    """
    r_sq = position.magnitude_squared
    if r_sq == 0:
        return Vector3D.zero()
    return position.normalized() * (-GM_EARTH / r_sq)


def corotating_air_velocity(position: Vector3D) -> Vector3D:
    """Velocity of the atmosphere at an ECEF position, omega x r (m/s)."""
    return EARTH_ROTATION_VECTOR.cross(position)


def escape_velocity(radius_m: float) -> float:
    """Local escape velocity sqrt(2GM/r) (m/s); infinite at r <= 0."""
    if radius_m <= 0:
        return float('inf')
    return math.sqrt(2 * GM_EARTH / radius_m)
