"""
Asteroid material table and the simulated body state.

The Body is an immutable value: every integration step produces a new
Body through ``dataclasses.replace`` so each step's inputs stay untouched.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .physics import R_EARTH, Vector3D


class AsteroidType(Enum):
    """Composition class of an impactor."""
    ROCKY = "rocky"
    IRON = "iron"
    ICY = "icy"
    CARBON = "carbon"

    @classmethod
    def parse(cls, value: Union[str, AsteroidType]) -> AsteroidType:
        """
        Accept an AsteroidType or its string value.

        Raises:
            ValueError: If the name is not a known asteroid type.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown asteroid type '{value}' (expected one of: {valid})") from None


@dataclass(frozen=True)
class AsteroidProperties:
    """
    Bulk material properties of an asteroid class.

    Attributes:
        density: Bulk density (kg/m^3)
        strength: Tensile strength (Pa)
        ablation_coeff: Mass lost per unit absorbed heat (kg/J)
        drag_coeff: Drag coefficient (dimensionless)
    """
    density: float
    strength: float
    ablation_coeff: float
    drag_coeff: float


ASTEROID_TYPES: dict[AsteroidType, AsteroidProperties] = {
    AsteroidType.ROCKY: AsteroidProperties(
        density=3000, strength=1e8, ablation_coeff=1e-9, drag_coeff=1.3
    ),
    AsteroidType.IRON: AsteroidProperties(
        density=7800, strength=5e8, ablation_coeff=5e-10, drag_coeff=1.1
    ),
    AsteroidType.ICY: AsteroidProperties(
        density=1000, strength=1e6, ablation_coeff=5e-9, drag_coeff=1.4
    ),
    AsteroidType.CARBON: AsteroidProperties(
        density=2200, strength=5e7, ablation_coeff=2e-9, drag_coeff=1.35
    ),
}

# Used when a body carries no asteroid type
DEFAULT_PROPERTIES = AsteroidProperties(
    density=3000, strength=1e8, ablation_coeff=1e-9, drag_coeff=1.3
)


def get_asteroid_properties(asteroid_type: Optional[AsteroidType]) -> AsteroidProperties:
    """Material properties for a type, or the rocky-like defaults."""
    if asteroid_type is None:
        return DEFAULT_PROPERTIES
    return ASTEROID_TYPES.get(asteroid_type, DEFAULT_PROPERTIES)


def sphere_diameter_from_mass(mass_kg: float, density: float) -> float:
    """Diameter (m) of a solid sphere with the given mass and density."""
    volume = max(0.0, mass_kg) / density
    return 2 * math.cbrt(3 * volume / (4 * math.pi))


def sphere_mass_from_diameter(diameter_m: float, density: float) -> float:
    """Mass (kg) of a solid sphere with the given diameter and density."""
    radius = diameter_m / 2
    return 4 / 3 * math.pi * radius**3 * density


@dataclass(frozen=True)
class Body:
    """
    State of a falling body.

    Attributes:
        mass_kg: Current mass (kg)
        diameter_m: Current equivalent-sphere diameter (m)
        position_m: ECEF position (m)
        velocity_ms: ECEF velocity (m/s)
        asteroid_type: Composition class, selects material properties
        drag_coeff: Drag coefficient override (None uses the material value)
        area_multiplier: Cross-section inflation after fragmentation (>= 1)
        fragmented: True once the body has broken up (never resets)
        fragment_count: Number of fragments (1 while intact)
        strength: Current tensile strength (Pa), None uses the material value
    """
    mass_kg: float
    diameter_m: float
    position_m: Vector3D = field(default_factory=Vector3D.zero)
    velocity_ms: Vector3D = field(default_factory=Vector3D.zero)
    asteroid_type: Optional[AsteroidType] = None
    drag_coeff: Optional[float] = None
    area_multiplier: float = 1.0
    fragmented: bool = False
    fragment_count: int = 1
    strength: Optional[float] = None

    @property
    def properties(self) -> AsteroidProperties:
        """Material properties for this body's type."""
        return get_asteroid_properties(self.asteroid_type)

    @property
    def effective_drag_coeff(self) -> float:
        """Drag coefficient override or the material default."""
        return self.drag_coeff if self.drag_coeff is not None else self.properties.drag_coeff

    @property
    def effective_strength(self) -> float:
        """Current strength or the material default."""
        return self.strength if self.strength is not None else self.properties.strength

    @property
    def radius_m(self) -> float:
        """Distance from Earth's center (m)."""
        return self.position_m.magnitude

    @property
    def altitude_m(self) -> float:
        """Altitude above the mean Earth sphere (m), may be negative."""
        return self.radius_m - R_EARTH

    @property
    def speed_ms(self) -> float:
        """Inertial speed (m/s)."""
        return self.velocity_ms.magnitude

    @property
    def kinetic_energy_j(self) -> float:
        """Kinetic energy 1/2 m v^2 (J)."""
        return 0.5 * self.mass_kg * self.velocity_ms.magnitude_squared
