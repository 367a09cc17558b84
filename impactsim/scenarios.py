"""
Scenario configuration for impact simulations.

A ScenarioParams record carries everything the core needs to set up a run:
impactor mass and size, entry conditions, target point and composition.
Scenarios can be built directly, loaded from dicts or JSON files, or taken
from the historical presets.
"""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .asteroid import AsteroidType, get_asteroid_properties, sphere_mass_from_diameter


@dataclass
class ScenarioParams:
    """
    Inputs for one impact simulation.

    Attributes:
        mass_kg: Impactor mass (kg)
        diameter_m: Impactor diameter (m)
        entry_speed_ms: Speed at the entry interface (m/s)
        entry_altitude_m: Altitude of the entry interface (m)
        target_lat_deg: Desired impact latitude (degrees)
        target_lng_deg: Desired impact longitude (degrees)
        angle_deg: Entry angle below the local horizontal (degrees)
        asteroid_type: Composition class
    """
    mass_kg: float = 1e9
    diameter_m: float = 100.0
    entry_speed_ms: float = 20_000.0
    entry_altitude_m: float = 120_000.0
    target_lat_deg: float = 0.0
    target_lng_deg: float = 0.0
    angle_deg: float = 45.0
    asteroid_type: AsteroidType = AsteroidType.ROCKY

    def __post_init__(self) -> None:
        self.asteroid_type = AsteroidType.parse(self.asteroid_type)

    def validate(self) -> List[str]:
        """
        Check the scenario against physical preconditions.

        Returns:
            List of problems; empty when the scenario is usable.
        """
        problems = []
        numeric = {
            "mass_kg": self.mass_kg,
            "diameter_m": self.diameter_m,
            "entry_speed_ms": self.entry_speed_ms,
            "entry_altitude_m": self.entry_altitude_m,
            "target_lat_deg": self.target_lat_deg,
            "target_lng_deg": self.target_lng_deg,
            "angle_deg": self.angle_deg,
        }
        for name, value in numeric.items():
            if not math.isfinite(value):
                problems.append(f"{name} must be finite (got {value})")

        if self.mass_kg <= 0:
            problems.append(f"mass_kg must be positive (got {self.mass_kg})")
        if self.diameter_m <= 0:
            problems.append(f"diameter_m must be positive (got {self.diameter_m})")
        if self.entry_speed_ms <= 0:
            problems.append(f"entry_speed_ms must be positive (got {self.entry_speed_ms})")
        if self.entry_altitude_m < 0:
            problems.append(f"entry_altitude_m must not be negative (got {self.entry_altitude_m})")
        if not -90 <= self.target_lat_deg <= 90:
            problems.append(f"target_lat_deg must be within [-90, 90] (got {self.target_lat_deg})")
        return problems

    @property
    def is_valid(self) -> bool:
        """True when validate() finds no problems."""
        return not self.validate()

    @property
    def entry_kinetic_energy_j(self) -> float:
        """Kinetic energy at the entry interface (J)."""
        return 0.5 * self.mass_kg * self.entry_speed_ms**2

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "mass_kg": self.mass_kg,
            "diameter_m": self.diameter_m,
            "entry_speed_ms": self.entry_speed_ms,
            "entry_altitude_m": self.entry_altitude_m,
            "target_lat_deg": self.target_lat_deg,
            "target_lng_deg": self.target_lng_deg,
            "angle_deg": self.angle_deg,
            "asteroid_type": self.asteroid_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScenarioParams':
        """
        Create a scenario from a dictionary; missing keys use defaults.

        Raises:
            ValueError: If the asteroid type is unknown.
        """
        defaults = cls()
        return cls(
            mass_kg=float(data.get("mass_kg", defaults.mass_kg)),
            diameter_m=float(data.get("diameter_m", defaults.diameter_m)),
            entry_speed_ms=float(data.get("entry_speed_ms", defaults.entry_speed_ms)),
            entry_altitude_m=float(data.get("entry_altitude_m", defaults.entry_altitude_m)),
            target_lat_deg=float(data.get("target_lat_deg", defaults.target_lat_deg)),
            target_lng_deg=float(data.get("target_lng_deg", defaults.target_lng_deg)),
            angle_deg=float(data.get("angle_deg", defaults.angle_deg)),
            asteroid_type=data.get("asteroid_type", defaults.asteroid_type),
        )

    @classmethod
    def from_json(cls, path: str) -> 'ScenarioParams':
        """Load a scenario from a JSON file."""
        scenario_path = Path(path)
        if not scenario_path.exists():
            raise FileNotFoundError(f"Scenario file not found: {path}")

        with open(scenario_path) as f:
            data = json.load(f)

        return cls.from_dict(data)


def mass_from_diameter(
    diameter_m: float,
    asteroid_type: AsteroidType = AsteroidType.ROCKY,
    density: Optional[float] = None
) -> float:
    """
    Mass of a spherical impactor.

    Args:
        diameter_m: Diameter (m)
        asteroid_type: Composition, used for density when none is given
        density: Explicit bulk density (kg/m^3)
    """
    rho = density if density is not None else get_asteroid_properties(asteroid_type).density
    return sphere_mass_from_diameter(diameter_m, rho)


# =============================================================================
# HISTORICAL PRESETS
# =============================================================================

@dataclass
class HistoricalEvent:
    """A well-known impact or airburst with approximate parameters."""
    name: str
    year: int
    description: str
    scenario: ScenarioParams = field(default_factory=ScenarioParams)


def _preset(
    diameter_m: float,
    speed_ms: float,
    angle_deg: float,
    lat: float,
    lng: float,
    asteroid_type: AsteroidType
) -> ScenarioParams:
    return ScenarioParams(
        mass_kg=mass_from_diameter(diameter_m, asteroid_type),
        diameter_m=diameter_m,
        entry_speed_ms=speed_ms,
        entry_altitude_m=120_000.0,
        target_lat_deg=lat,
        target_lng_deg=lng,
        angle_deg=angle_deg,
        asteroid_type=asteroid_type,
    )


HISTORICAL_EVENTS: Dict[str, HistoricalEvent] = {
    "chelyabinsk": HistoricalEvent(
        name="Chelyabinsk",
        year=2013,
        description="Superbolide over the southern Urals; ~500 kt airburst.",
        scenario=_preset(18.0, 19_000.0, 18.0, 54.8, 61.1, AsteroidType.ROCKY),
    ),
    "tunguska": HistoricalEvent(
        name="Tunguska",
        year=1908,
        description="Airburst over Siberia that flattened ~2000 km^2 of forest; ~15 Mt.",
        scenario=_preset(60.0, 27_000.0, 30.0, 60.9, 101.9, AsteroidType.ICY),
    ),
    "chicxulub": HistoricalEvent(
        name="Chicxulub",
        year=-66_000_000,
        description="Dinosaur-extinction impact on the Yucatan Peninsula; ~1e8 Mt.",
        scenario=_preset(10_000.0, 20_000.0, 60.0, 21.4, -89.5, AsteroidType.ROCKY),
    ),
}


def get_historical_scenario(key: str) -> ScenarioParams:
    """
    Scenario for a historical event by key.

    Raises:
        ValueError: If the key is unknown.
    """
    event = HISTORICAL_EVENTS.get(key.lower())
    if event is None:
        valid = ", ".join(sorted(HISTORICAL_EVENTS))
        raise ValueError(f"Unknown historical event '{key}' (expected one of: {valid})")
    return ScenarioParams.from_dict(event.scenario.to_dict())
