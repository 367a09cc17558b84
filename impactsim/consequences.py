"""
Impact consequence models.

Empirical, order-of-magnitude estimates of what a ground impact does:
TNT equivalent, crater size by target material, seismic shaking, air
blast, and the (negligible) velocity change imparted to the Earth.

Every function accepts any finite input and returns non-negative values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .physics import JOULES_PER_MEGATON, M_EARTH, SEA_LEVEL_AIR_DENSITY


# =============================================================================
# CONSTANTS
# =============================================================================

# Seismic
SEISMIC_MAGNITUDE_SLOPE = 0.67
SEISMIC_MAGNITUDE_OFFSET = 5.87
P_WAVE_SPEED_MS = 6000.0
MIN_INTENSITY = 1.0
MAX_INTENSITY = 12.0
MIN_DISTANCE_KM = 1e-3

# Blast
SPEED_OF_SOUND_MS = 343.0
BLAST_FIT_LIMIT = 10.0  # scaled distance, km/t^(1/3) with the yield in tons of TNT
BLAST_DAMAGE_THRESHOLD_PA = 1000.0  # building damage
FELT_INTENSITY_THRESHOLD = 3.0
BLAST_SEARCH_LIMIT_KM = 100
SEISMIC_SEARCH_LIMIT_KM = 1000

# Earth recoil
MOMENTUM_COUPLING = 1e-6
PROXY_MASS_KG = 1e9
SECONDS_PER_DAY = 86400

# Reference distances for the impact summary (km)
SEISMIC_REFERENCE_DISTANCE_KM = 100.0
BLAST_REFERENCE_DISTANCE_KM = 50.0


class TargetType(Enum):
    """Surface material at the impact site."""
    SEDIMENT = "sediment"
    HARDROCK = "hardrock"
    WATER = "water"


# (diameter coefficient k1, depth-to-diameter ratio k2)
CRATER_SCALING: dict[TargetType, tuple[float, float]] = {
    TargetType.SEDIMENT: (1.8, 0.13),
    TargetType.HARDROCK: (1.3, 0.15),
    TargetType.WATER: (3.2, 0.11),
}

RIM_HEIGHT_FRACTION = 0.15
EJECTA_RANGE_FACTOR = 2.5


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class CraterEstimate:
    """Crater dimensions in meters."""
    diameter: float
    depth: float
    rim_height: float
    ejecta_range: float


@dataclass(frozen=True)
class SeismicEffects:
    """
    Ground shaking at a distance.

    Attributes:
        magnitude: Richter-like magnitude
        intensity: Modified Mercalli-like intensity, 1..12
        arrival_time: P-wave arrival (seconds)
    """
    magnitude: float
    intensity: float
    arrival_time: float


@dataclass(frozen=True)
class BlastEffects:
    """
    Air blast at a distance.

    Attributes:
        overpressure: Peak overpressure (Pa)
        arrival_time: Shock arrival at the speed of sound (seconds)
        dynamic_pressure: Wind dynamic pressure (Pa)
        wind_speed: Peak wind speed (m/s)
    """
    overpressure: float
    arrival_time: float
    dynamic_pressure: float
    wind_speed: float


# =============================================================================
# ENERGY
# =============================================================================

def impact_energy_mt_tnt(energy_j: float) -> float:
    """Convert joules to megatons of TNT."""
    return energy_j / JOULES_PER_MEGATON


def earth_impulse_delta_v(energy_j: float) -> float:
    """
    Order-of-magnitude velocity change of the Earth (m/s).

    Uses a proxy momentum sqrt(2 m E) with a fixed coupling factor; the
    result is negligible by construction.
    """
    momentum = math.sqrt(2 * PROXY_MASS_KG * max(energy_j, 0.0)) * MOMENTUM_COUPLING
    return momentum / M_EARTH


# =============================================================================
# CRATER
# =============================================================================

def calculate_crater_diameter(
    energy_mt: float,
    target_type: Union[TargetType, str] = TargetType.SEDIMENT
) -> CraterEstimate:
    """
    Estimate crater size from impact energy.

    diameter = k1 * E_mt^(1/3) km; depth = k2 * diameter; rim height is
    15% of depth and ejecta reach 2.5 crater diameters.

    Args:
        energy_mt: Impact energy (megatons TNT)
        target_type: Surface material (enum or its string value)

    Returns:
        CraterEstimate with small positive floors on every dimension
    """
    target = TargetType(target_type) if isinstance(target_type, str) else target_type
    k1, k2 = CRATER_SCALING[target]

    energy_j = max(energy_mt, 0.0) * JOULES_PER_MEGATON
    diameter = k1 * math.cbrt(energy_j / JOULES_PER_MEGATON) * 1000
    depth = diameter * k2
    rim_height = depth * RIM_HEIGHT_FRACTION
    ejecta_range = diameter * EJECTA_RANGE_FACTOR

    return CraterEstimate(
        diameter=max(1.0, diameter),
        depth=max(0.1, depth),
        rim_height=max(0.01, rim_height),
        ejecta_range=max(diameter, ejecta_range, 1.0),
    )


# =============================================================================
# SEISMIC AND BLAST
# =============================================================================

def calculate_seismic_effects(energy_mt: float, distance_km: float) -> SeismicEffects:
    """
    Seismic magnitude, felt intensity and P-wave arrival at a distance.

    Args:
        energy_mt: Impact energy (megatons TNT)
        distance_km: Distance from ground zero (km)
    """
    energy_j = max(energy_mt * JOULES_PER_MEGATON, 1.0)
    magnitude = SEISMIC_MAGNITUDE_SLOPE * math.log10(energy_j) - SEISMIC_MAGNITUDE_OFFSET

    distance = max(distance_km, MIN_DISTANCE_KM)
    intensity = magnitude - 3 * math.log10(distance) + 2

    return SeismicEffects(
        magnitude=max(0.0, magnitude),
        intensity=max(MIN_INTENSITY, min(MAX_INTENSITY, intensity)),
        arrival_time=max(0.0, distance_km) * 1000 / P_WAVE_SPEED_MS,
    )


def calculate_blast_effects(energy_mt: float, distance_km: float) -> BlastEffects:
    """
    Air blast overpressure, arrival time and winds at a distance.

    Overpressure uses a two-term fit in scaled distance
    z = d / yield^(1/3), with d in km and the yield in tons of TNT, valid
    for z < 10; beyond that it is zero.

    Args:
        energy_mt: Impact energy (megatons TNT)
        distance_km: Distance from ground zero (km)
    """
    yield_tons = max(energy_mt, 0.0) * 1e6
    distance = max(distance_km, 0.0)

    overpressure = 0.0
    if yield_tons > 0 and distance > 0:
        scaled_distance = distance / math.cbrt(yield_tons)
        if scaled_distance < BLAST_FIT_LIMIT:
            overpressure_kpa = 808 * scaled_distance**-1.3 + 1.9 * scaled_distance**-2
            overpressure = overpressure_kpa * 1000

    dynamic_pressure = overpressure * 0.5
    wind_speed = math.sqrt(2 * dynamic_pressure / SEA_LEVEL_AIR_DENSITY)

    return BlastEffects(
        overpressure=overpressure,
        arrival_time=distance * 1000 / SPEED_OF_SOUND_MS,
        dynamic_pressure=dynamic_pressure,
        wind_speed=wind_speed,
    )


# =============================================================================
# DAMAGE RADII
# =============================================================================

def blast_damage_radius_m(energy_mt: float) -> float:
    """
    Distance (m) where overpressure first falls below building-damage level.

    Searches whole kilometers from 1 to 100 and saturates at 100 km.
    """
    for distance_km in range(1, BLAST_SEARCH_LIMIT_KM + 1):
        if calculate_blast_effects(energy_mt, distance_km).overpressure < BLAST_DAMAGE_THRESHOLD_PA:
            return distance_km * 1000.0
    return BLAST_SEARCH_LIMIT_KM * 1000.0


def seismic_felt_radius_m(energy_mt: float) -> float:
    """
    Distance (m) where shaking intensity first drops below "felt by many".

    Searches 1..1000 km in 10 km steps and saturates at 1000 km.
    """
    for distance_km in range(1, SEISMIC_SEARCH_LIMIT_KM + 1, 10):
        if calculate_seismic_effects(energy_mt, distance_km).intensity < FELT_INTENSITY_THRESHOLD:
            return distance_km * 1000.0
    return SEISMIC_SEARCH_LIMIT_KM * 1000.0


# =============================================================================
# ASSESSMENT
# =============================================================================

@dataclass(frozen=True)
class ImpactAssessment:
    """All consequence estimates for one impact energy."""
    energy_j: float
    energy_mt: float
    crater: CraterEstimate
    seismic: SeismicEffects
    blast: BlastEffects
    earth_delta_v_ms: float
    earth_displacement_per_day_m: float
    blast_radius_m: float
    seismic_radius_m: float


def assess_impact(
    energy_j: float,
    target_type: Union[TargetType, str] = TargetType.SEDIMENT,
    seismic_distance_km: float = SEISMIC_REFERENCE_DISTANCE_KM,
    blast_distance_km: float = BLAST_REFERENCE_DISTANCE_KM
) -> ImpactAssessment:
    """
    Bundle every consequence estimate for an impact.

    Args:
        energy_j: Kinetic energy at ground contact (J)
        target_type: Surface material
        seismic_distance_km: Observer distance for seismic effects
        blast_distance_km: Observer distance for blast effects
    """
    energy_mt = impact_energy_mt_tnt(max(energy_j, 0.0))
    delta_v = earth_impulse_delta_v(energy_j)
    return ImpactAssessment(
        energy_j=max(energy_j, 0.0),
        energy_mt=energy_mt,
        crater=calculate_crater_diameter(energy_mt, target_type),
        seismic=calculate_seismic_effects(energy_mt, seismic_distance_km),
        blast=calculate_blast_effects(energy_mt, blast_distance_km),
        earth_delta_v_ms=delta_v,
        earth_displacement_per_day_m=delta_v * SECONDS_PER_DAY,
        blast_radius_m=blast_damage_radius_m(energy_mt),
        seismic_radius_m=seismic_felt_radius_m(energy_mt),
    )
