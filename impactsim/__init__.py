"""Asteroid atmospheric entry and impact simulator package."""

from .asteroid import (
    # Materials
    AsteroidType,
    AsteroidProperties,
    ASTEROID_TYPES,
    get_asteroid_properties,
    # State
    Body,
)

from .consequences import (
    TargetType,
    CraterEstimate,
    SeismicEffects,
    BlastEffects,
    ImpactAssessment,
    impact_energy_mt_tnt,
    earth_impulse_delta_v,
    calculate_crater_diameter,
    calculate_seismic_effects,
    calculate_blast_effects,
    blast_damage_radius_m,
    seismic_felt_radius_m,
    assess_impact,
)

from .entry import (
    StepContext,
    StepResult,
    TrajectoryPrediction,
    step_atmospheric_entry,
    has_impacted,
    has_escaped,
    adaptive_time_step,
    predict_trajectory,
)

from .geodesy import (
    Coordinates,
    LLA,
    LocalFrame,
    llh_to_ecef,
    ecef_to_lla,
    ecef_to_lat_lng,
    local_frame,
    haversine_distance,
    vincenty_distance,
    validate_coordinate_conversion,
    normalize_longitude,
)

from .neo import (
    NEO,
    NEOClient,
)

from .physics import Vector3D

from .scenarios import (
    ScenarioParams,
    HistoricalEvent,
    HISTORICAL_EVENTS,
    get_historical_scenario,
    mass_from_diameter,
)

from .simulation import (
    ImpactSimulation,
    ImpactSummary,
    SimulationEvent,
    SimulationEventType,
    SimulationResult,
    TelemetryPoint,
)

from .targeting import (
    TargetingSolution,
    calculate_accurate_trajectory,
    launch_state,
)

__all__ = [
    # Asteroid module
    "AsteroidType",
    "AsteroidProperties",
    "ASTEROID_TYPES",
    "get_asteroid_properties",
    "Body",
    # Consequences module
    "TargetType",
    "CraterEstimate",
    "SeismicEffects",
    "BlastEffects",
    "ImpactAssessment",
    "impact_energy_mt_tnt",
    "earth_impulse_delta_v",
    "calculate_crater_diameter",
    "calculate_seismic_effects",
    "calculate_blast_effects",
    "blast_damage_radius_m",
    "seismic_felt_radius_m",
    "assess_impact",
    # Entry module
    "StepContext",
    "StepResult",
    "TrajectoryPrediction",
    "step_atmospheric_entry",
    "has_impacted",
    "has_escaped",
    "adaptive_time_step",
    "predict_trajectory",
    # Geodesy module
    "Coordinates",
    "LLA",
    "LocalFrame",
    "llh_to_ecef",
    "ecef_to_lla",
    "ecef_to_lat_lng",
    "local_frame",
    "haversine_distance",
    "vincenty_distance",
    "validate_coordinate_conversion",
    "normalize_longitude",
    # NEO catalogue module
    "NEO",
    "NEOClient",
    # Physics module
    "Vector3D",
    # Scenarios module
    "ScenarioParams",
    "HistoricalEvent",
    "HISTORICAL_EVENTS",
    "get_historical_scenario",
    "mass_from_diameter",
    # Simulation module
    "ImpactSimulation",
    "ImpactSummary",
    "SimulationEvent",
    "SimulationEventType",
    "SimulationResult",
    "TelemetryPoint",
    # Targeting module
    "TargetingSolution",
    "calculate_accurate_trajectory",
    "launch_state",
]
