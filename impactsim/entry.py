#!/usr/bin/env python3
"""
Atmospheric Entry Integrator

Advances a falling body through the atmosphere one step at a time:
- Drag against co-rotating air plus central gravity
- Semi-implicit Euler integration (velocity first, then position)
- Heating, ablation-driven mass and diameter loss, thermal weakening
- One-time fragmentation when dynamic pressure exceeds strength

The step function is total: degenerate inputs are clamped or defaulted and
nothing is raised. Detecting ground contact or escape is the caller's job;
``predict_trajectory`` is the reference driving loop.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Optional

from .asteroid import Body, sphere_diameter_from_mass
from .atmosphere import (
    air_density_at_altitude,
    air_temperature_at_altitude,
    corotating_air_velocity,
    escape_velocity,
    gravity_accel_at_pos,
)
from .physics import AIR_CP, R_EARTH, Vector3D


# =============================================================================
# CONSTANTS
# =============================================================================

# Ablation only runs below this altitude and above this speed
ABLATION_CEILING_M = 150_000
ABLATION_MIN_SPEED_MS = 100.0

# Hard cap on mass lost in a single step, as a fraction of current mass
MAX_ABLATION_FRACTION_PER_STEP = 0.05

# Mass floor (kg)
MIN_BODY_MASS_KG = 0.1

# Strength may drop by at most 10% per step
MIN_STRENGTH_RETENTION_PER_STEP = 0.9

# Fragmentation
MAX_FRAGMENT_COUNT = 10
FRAGMENT_AREA_FACTOR = 1.5

# Trajectory prediction
DEFAULT_PREDICTION_STEPS = 4000


# =============================================================================
# STEP TYPES
# =============================================================================

@dataclass(frozen=True)
class StepContext:
    """
    Per-step integration settings.

    Attributes:
        dt: Time step (seconds). Must be small; no sub-stepping is done here.
        attitude_factor: Effective cross-section scaling, 0..1
        ablation_coeff: Overrides the material ablation coefficient;
            0 disables ablation
    """
    dt: float
    attitude_factor: float = 1.0
    ablation_coeff: Optional[float] = None


@dataclass(frozen=True)
class StepResult:
    """Outcome of one integration step."""
    body: Body
    dynamic_pressure_pa: float
    altitude_m: float
    speed_ms: float
    energy_j: float
    heat_flux_wm2: float
    mass_loss_kg: float
    temperature_k: float
    fragmentation_occurred: bool = False


def cross_section_area(diameter_m: float, attitude_factor: float = 1.0) -> float:
    """Frontal area (m^2) of a sphere, scaled by attitude factor."""
    r = diameter_m / 2 * math.sqrt(max(0.0, attitude_factor))
    return math.pi * r * r


# =============================================================================
# ENTRY STEP
# =============================================================================

def step_atmospheric_entry(body: Body, ctx: StepContext) -> StepResult:
    """
    Advance a body by one time step.

    Args:
        body: Current body state (not modified)
        ctx: Step settings

    Returns:
        StepResult with the new body and derived aerothermal quantities
    """
    dt = ctx.dt
    altitude = max(0.0, body.altitude_m)
    rho = air_density_at_altitude(altitude)
    ambient_temp = air_temperature_at_altitude(altitude)

    props = body.properties
    cd = body.effective_drag_coeff
    area = cross_section_area(
        body.diameter_m * math.sqrt(body.area_multiplier),
        ctx.attitude_factor
    )

    # Drag acts against the velocity relative to the co-rotating air
    rel_vel = body.velocity_ms - corotating_air_velocity(body.position_m)
    rel_speed = rel_vel.magnitude

    drag_force = 0.5 * rho * rel_speed * rel_speed * cd * area
    drag_accel_mag = drag_force / max(body.mass_kg, MIN_BODY_MASS_KG)
    if rel_speed > 0:
        drag_dir = rel_vel * (-1 / rel_speed)
    else:
        drag_dir = Vector3D.zero()
    a_drag = drag_dir * drag_accel_mag

    a_total = gravity_accel_at_pos(body.position_m) + a_drag

    # Semi-implicit Euler: velocity is updated before position
    new_vel = body.velocity_ms + a_total * dt
    new_pos = body.position_m + new_vel * dt

    speed = new_vel.magnitude
    energy = 0.5 * body.mass_kg * speed * speed
    q = 0.5 * rho * rel_speed * rel_speed

    # Adiabatic stagnation heating and simplified Sutton-Graves heat flux
    stagnation_temp = ambient_temp + rel_speed * rel_speed / (2 * AIR_CP)
    heat_transfer_coeff = 0.5 * math.sqrt(rho / (R_EARTH / 1000))
    heat_flux = heat_transfer_coeff * math.sqrt(rho) * rel_speed**3

    ablation_coeff = ctx.ablation_coeff if ctx.ablation_coeff is not None else props.ablation_coeff
    mass_loss = 0.0
    new_mass = body.mass_kg
    new_diameter = body.diameter_m
    new_strength = body.effective_strength

    if ablation_coeff > 0 and altitude < ABLATION_CEILING_M and speed > ABLATION_MIN_SPEED_MS:
        mass_loss = max(0.0, ablation_coeff * heat_flux * area * dt)
        mass_loss = min(mass_loss, body.mass_kg * MAX_ABLATION_FRACTION_PER_STEP)
        new_mass = max(MIN_BODY_MASS_KG, body.mass_kg - mass_loss)
        new_diameter = sphere_diameter_from_mass(new_mass, props.density)

        # Thermal stress (Pa) equals heat flux in this model
        new_strength = max(
            new_strength * MIN_STRENGTH_RETENTION_PER_STEP,
            new_strength - heat_flux
        )

    fragmentation_occurred = False
    fragment_count = body.fragment_count
    area_multiplier = body.area_multiplier

    if not body.fragmented and q > new_strength:
        fragmentation_occurred = True
        if new_strength > 0:
            fragment_count = min(MAX_FRAGMENT_COUNT, math.floor(2 + q / new_strength))
        else:
            fragment_count = MAX_FRAGMENT_COUNT
        area_multiplier = math.sqrt(fragment_count) * FRAGMENT_AREA_FACTOR

    new_body = replace(
        body,
        position_m=new_pos,
        velocity_ms=new_vel,
        mass_kg=new_mass,
        diameter_m=new_diameter,
        strength=new_strength,
        fragmented=body.fragmented or fragmentation_occurred,
        fragment_count=fragment_count,
        area_multiplier=area_multiplier,
    )

    return StepResult(
        body=new_body,
        dynamic_pressure_pa=q,
        altitude_m=altitude,
        speed_ms=speed,
        energy_j=energy,
        heat_flux_wm2=heat_flux,
        mass_loss_kg=mass_loss,
        temperature_k=stagnation_temp,
        fragmentation_occurred=fragmentation_occurred,
    )


# =============================================================================
# TERMINATION CHECKS
# =============================================================================

def has_impacted(body: Body) -> bool:
    """True once the body is at or below the mean Earth radius."""
    return body.radius_m <= R_EARTH


def has_escaped(body: Body) -> bool:
    """True when the body is beyond 2 Earth radii and above escape speed."""
    r = body.radius_m
    return r > 2 * R_EARTH and body.speed_ms > escape_velocity(r)


def adaptive_time_step(altitude_m: float) -> float:
    """
    Integration step (seconds) for a given altitude.

    Finer steps nearer the ground where density changes fastest.
    """
    if altitude_m < 10_000:
        return 0.02
    if altitude_m < 50_000:
        return 0.05
    if altitude_m < 150_000:
        return 0.2
    return 0.5


# =============================================================================
# TRAJECTORY PREDICTION
# =============================================================================

@dataclass
class TrajectoryPrediction:
    """
    Predicted flight to ground contact.

    Attributes:
        trajectory: ECEF positions after each step
        impact_point: ECEF ground contact point, None if no impact
        time_to_impact: Seconds to ground contact (0 if no impact)
        max_dynamic_pressure: Peak dynamic pressure along the path (Pa)
        steps: Number of integration steps taken
    """
    trajectory: list[Vector3D] = field(default_factory=list)
    impact_point: Optional[Vector3D] = None
    time_to_impact: float = 0.0
    max_dynamic_pressure: float = 0.0
    steps: int = 0

    @property
    def impacts(self) -> bool:
        """Whether the body reaches the ground."""
        return self.impact_point is not None


def predict_trajectory(
    body: Body,
    max_steps: int = DEFAULT_PREDICTION_STEPS,
    ablation: bool = False
) -> TrajectoryPrediction:
    """
    Integrate a body to the ground with the adaptive step schedule.

    Ablation is switched off by default so the prediction reflects the
    body's initial shape. Stops at ground contact, at escape, or after
    ``max_steps``.

    Args:
        body: Starting body state
        max_steps: Step budget
        ablation: Keep the material ablation model on

    Returns:
        TrajectoryPrediction (impact_point is None when the ground is not reached)
    """
    current = body
    prediction = TrajectoryPrediction()
    elapsed = 0.0

    for _ in range(max_steps):
        dt = adaptive_time_step(max(0.0, current.altitude_m))
        ctx = StepContext(dt=dt, ablation_coeff=None if ablation else 0.0)
        result = step_atmospheric_entry(current, ctx)
        current = result.body

        prediction.trajectory.append(current.position_m)
        prediction.steps += 1
        elapsed += dt
        prediction.max_dynamic_pressure = max(
            prediction.max_dynamic_pressure, result.dynamic_pressure_pa
        )

        if has_impacted(current):
            prediction.impact_point = current.position_m
            prediction.time_to_impact = elapsed
            return prediction

        if has_escaped(current):
            break

    return prediction
