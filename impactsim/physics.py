#!/usr/bin/env python3
"""
Physical Constants and Vector Math for the Impact Simulator

Provides the shared building blocks used by every other module:
- Earth and gravitation constants (SI units)
- 3D vector operations for ECEF positions, velocities and frame axes

All quantities are SI (meters, seconds, kilograms) unless a name says
otherwise (e.g. ``_km``, ``_mt``).
"""

from __future__ import annotations
import math
from dataclasses import dataclass


# =============================================================================
# PHYSICAL CONSTANTS
# =============================================================================

# Gravitational constant (m^3 kg^-1 s^-2)
G = 6.67430e-11

# Earth mass (kg) and gravitational parameter (m^3/s^2)
M_EARTH = 5.972e24
GM_EARTH = G * M_EARTH

# Mean Earth radius used for altitude and ground contact (m)
R_EARTH = 6_371_000

# Earth rotation rate about the ECEF Z axis (rad/s)
OMEGA_EARTH = 7.2921150e-5

# Sea-level air density (kg/m^3)
SEA_LEVEL_AIR_DENSITY = 1.225

# Specific heat of air at constant pressure (J/kg/K)
AIR_CP = 1005.0

# Energy of one megaton of TNT (J)
JOULES_PER_MEGATON = 4.184e15


# =============================================================================
# VECTOR3D CLASS
# =============================================================================

@dataclass(frozen=True)
class Vector3D:
    """
    3D vector for positions, velocities, and directions.

    Simulation vectors live in the Earth-Centered, Earth-Fixed frame:
    - X: through the equator at the prime meridian
    - Y: through the equator at 90 deg East
    - Z: through the North Pole

    Instances are immutable; every operation returns a new vector.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3D) -> Vector3D:
        """Vector addition."""
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        """Vector subtraction."""
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3D:
        """Scalar multiplication."""
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3D:
        """Right scalar multiplication."""
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3D:
        """Scalar division."""
        if scalar == 0:
            raise ValueError("Cannot divide vector by zero")
        return Vector3D(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector3D:
        """Negation."""
        return Vector3D(-self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        """Equality check with tolerance."""
        if not isinstance(other, Vector3D):
            return False
        eps = 1e-10
        return (abs(self.x - other.x) < eps and
                abs(self.y - other.y) < eps and
                abs(self.z - other.z) < eps)

    def dot(self, other: Vector3D) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3D) -> Vector3D:
        """Cross product."""
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    @property
    def magnitude(self) -> float:
        """Vector magnitude (length)."""
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    @property
    def magnitude_squared(self) -> float:
        """Squared magnitude (avoids sqrt for comparisons)."""
        return self.x**2 + self.y**2 + self.z**2

    def normalized(self) -> Vector3D:
        """Return unit vector in same direction (zero vector stays zero)."""
        mag = self.magnitude
        if mag == 0:
            return Vector3D(0, 0, 0)
        return self / mag

    def to_tuple(self) -> tuple[float, float, float]:
        """Convert to tuple."""
        return (self.x, self.y, self.z)

    @classmethod
    def zero(cls) -> Vector3D:
        """Zero vector."""
        return cls(0.0, 0.0, 0.0)

    def __repr__(self) -> str:
        return f"Vector3D({self.x:.6g}, {self.y:.6g}, {self.z:.6g})"


# Earth angular velocity vector in ECEF (rad/s)
EARTH_ROTATION_VECTOR = Vector3D(0.0, 0.0, OMEGA_EARTH)
