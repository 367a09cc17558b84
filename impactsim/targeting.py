"""
Targeting Correction for the Impact Simulator.

Finds a launch point whose simulated impact lands on a chosen target.
Atmospheric drag and the co-rotating air push the impact downrange of the
entry point; the corrector runs the full (ablation-free) trajectory
prediction, measures the miss, and shifts the launch coordinates against
it with a decreasing gain schedule.

This is a damped fixed-point heuristic, not a rigorous root finder: it
stops after five rounds and reports whatever deviation remains. It never
moves the reported impact onto the target.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from .asteroid import Body
from .atmosphere import corotating_air_velocity
from .entry import predict_trajectory
from .geodesy import ecef_to_lat_lng, llh_to_ecef, local_frame, normalize_longitude
from .physics import Vector3D
from .scenarios import ScenarioParams


# =============================================================================
# CONSTANTS
# =============================================================================

# Gain applied to the lat/lng error on each correction round
CORRECTION_GAINS = (1.0, 0.7, 0.5, 0.4, 0.3)
MAX_CORRECTION_ITERATIONS = len(CORRECTION_GAINS)

# Stop once the predicted miss is below this (km)
CONVERGENCE_THRESHOLD_KM = 1.0

# Coarse degrees-to-kilometers factor for the inner loop
KM_PER_DEGREE = 111.0


# =============================================================================
# LAUNCH STATE
# =============================================================================

def launch_state(
    lat_deg: float,
    lng_deg: float,
    altitude_m: float,
    speed_ms: float,
    angle_deg: float
) -> tuple[Vector3D, Vector3D]:
    """
    ECEF position and inertial velocity at an entry point.

    The air-relative velocity points East, descending at ``angle_deg``
    below the local horizontal; the co-rotating air velocity is added so
    the body starts moving with the atmosphere plus its entry speed.

    Args:
        lat_deg: Entry latitude (degrees)
        lng_deg: Entry longitude (degrees)
        altitude_m: Entry altitude (m)
        speed_ms: Speed relative to the air (m/s)
        angle_deg: Entry angle below horizontal (degrees)

    Returns:
        Tuple of (position, velocity)
    """
    angle = math.radians(angle_deg)
    v_horizontal = math.cos(angle) * speed_ms
    v_down = math.sin(angle) * speed_ms

    position = llh_to_ecef(lat_deg, lng_deg, altitude_m)
    frame = local_frame(lat_deg, lng_deg)
    air_relative = frame.e * v_horizontal - frame.u * v_down
    return position, air_relative + corotating_air_velocity(position)


def body_from_scenario(
    params: ScenarioParams,
    position: Vector3D,
    velocity: Vector3D
) -> Body:
    """Fresh, intact Body for a scenario at a given state."""
    return Body(
        mass_kg=params.mass_kg,
        diameter_m=params.diameter_m,
        position_m=position,
        velocity_ms=velocity,
        asteroid_type=params.asteroid_type,
    )


# =============================================================================
# CORRECTOR
# =============================================================================

@dataclass(frozen=True)
class CorrectionStep:
    """One round of the targeting iteration."""
    launch_lat: float
    launch_lng: float
    impact_lat: float
    impact_lng: float
    deviation_km: float


@dataclass
class TargetingSolution:
    """
    Corrected launch state.

    Attributes:
        corrected_position: ECEF launch position (m)
        corrected_velocity: ECEF launch velocity (m/s)
        expected_deviation: Miss distance without correction (km), from
            the first iteration
        launch_lat: Corrected launch latitude (degrees)
        launch_lng: Corrected launch longitude (degrees)
        iterations: Per-round record of launch point and miss
    """
    corrected_position: Vector3D
    corrected_velocity: Vector3D
    expected_deviation: float
    launch_lat: float
    launch_lng: float
    iterations: list[CorrectionStep] = field(default_factory=list)

    @property
    def final_deviation(self) -> Optional[float]:
        """Miss measured on the last round, None if no round completed."""
        if not self.iterations:
            return None
        return self.iterations[-1].deviation_km

    @property
    def converged(self) -> bool:
        """Whether the last measured miss is under the threshold."""
        last = self.final_deviation
        return last is not None and last < CONVERGENCE_THRESHOLD_KM


def calculate_accurate_trajectory(
    params: ScenarioParams,
    max_iterations: int = MAX_CORRECTION_ITERATIONS
) -> TargetingSolution:
    """
    Shift the launch point so the predicted impact converges on the target.

    Starts at the target coordinates, predicts the flight to the ground,
    and nudges the launch lat/lng by ``error * gain`` each round. Stops
    early once the miss is below 1 km (after applying that round's nudge),
    or when a candidate never reaches the ground.

    Args:
        params: Scenario with target, entry conditions and impactor
        max_iterations: Number of correction rounds (at most 5 gains)

    Returns:
        TargetingSolution with the corrected launch state
    """
    launch_lat = params.target_lat_deg
    launch_lng = params.target_lng_deg
    steps: list[CorrectionStep] = []

    for iteration in range(max_iterations):
        position, velocity = launch_state(
            launch_lat, launch_lng,
            params.entry_altitude_m, params.entry_speed_ms, params.angle_deg
        )
        prediction = predict_trajectory(body_from_scenario(params, position, velocity))
        if prediction.impact_point is None:
            break

        impact = ecef_to_lat_lng(prediction.impact_point)
        lat_error = params.target_lat_deg - impact.lat
        lng_error = normalize_longitude(params.target_lng_deg - impact.lng)
        deviation_km = math.sqrt(lat_error**2 + lng_error**2) * KM_PER_DEGREE

        steps.append(CorrectionStep(
            launch_lat=launch_lat,
            launch_lng=launch_lng,
            impact_lat=impact.lat,
            impact_lng=impact.lng,
            deviation_km=deviation_km,
        ))

        gain = CORRECTION_GAINS[min(iteration, len(CORRECTION_GAINS) - 1)]
        launch_lat += lat_error * gain
        launch_lng = normalize_longitude(launch_lng + lng_error * gain)

        if deviation_km < CONVERGENCE_THRESHOLD_KM:
            break

    position, velocity = launch_state(
        launch_lat, launch_lng,
        params.entry_altitude_m, params.entry_speed_ms, params.angle_deg
    )

    return TargetingSolution(
        corrected_position=position,
        corrected_velocity=velocity,
        expected_deviation=steps[0].deviation_km if steps else 0.0,
        launch_lat=launch_lat,
        launch_lng=launch_lng,
        iterations=steps,
    )
