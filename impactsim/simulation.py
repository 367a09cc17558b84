#!/usr/bin/env python3
"""
Impact Simulation Runner.

This module drives the entry integrator for one scenario:
- Builds the launch state (optionally via the targeting corrector)
- Steps the body at a fixed or altitude-adaptive time step
- Samples telemetry for charting and tracks peak loads
- Detects fragmentation, ground contact and escape
- Converts the final state into an impact summary

The run produces an event log; each event renders a one-line narration,
and callbacks can observe events as they happen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional

from .asteroid import Body
from .consequences import (
    BLAST_REFERENCE_DISTANCE_KM,
    SEISMIC_REFERENCE_DISTANCE_KM,
    ImpactAssessment,
    TargetType,
    assess_impact,
)
from .entry import (
    StepContext,
    StepResult,
    TrajectoryPrediction,
    adaptive_time_step,
    has_escaped,
    has_impacted,
    predict_trajectory,
    step_atmospheric_entry,
)
from .geodesy import Coordinates, ecef_to_lat_lng, vincenty_distance
from .physics import Vector3D
from .regions import location_name
from .scenarios import ScenarioParams
from .targeting import TargetingSolution, body_from_scenario, calculate_accurate_trajectory, launch_state


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_MAX_STEPS = 200_000
DEFAULT_SAMPLE_INTERVAL = 0.3  # seconds of simulated time between telemetry samples


# =============================================================================
# EVENT TYPES
# =============================================================================

class SimulationEventType(Enum):
    """Types of events that can occur during a run."""
    SIMULATION_STARTED = auto()
    TARGETING_CALIBRATED = auto()
    TRAJECTORY_PREDICTED = auto()
    NO_IMPACT_PREDICTED = auto()
    FRAGMENTATION = auto()
    IMPACT = auto()
    ESCAPED = auto()
    STEP_LIMIT_REACHED = auto()
    SIMULATION_ENDED = auto()


class SimulationState(Enum):
    """Lifecycle of a run."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"


@dataclass
class SimulationEvent:
    """
    An event that occurs during a run.

    Attributes:
        event_type: The type of event.
        timestamp: Simulation time when the event occurred (seconds).
        data: Event-specific numeric details.
    """
    event_type: SimulationEventType
    timestamp: float
    data: dict = field(default_factory=dict)

    def narrate(self) -> str:
        """Human-readable description of the event."""
        d = self.data
        if self.event_type == SimulationEventType.SIMULATION_STARTED:
            return (f"Simulation started: target {d['target_lat']:.6f}, {d['target_lng']:.6f}; "
                    f"launch {d['launch_lat']:.6f}, {d['launch_lng']:.6f}")
        if self.event_type == SimulationEventType.TARGETING_CALIBRATED:
            return (f"Targeting calibrated: uncorrected deviation {d['expected_deviation_km']:.1f} km "
                    f"after {d['iterations']} iteration(s)")
        if self.event_type == SimulationEventType.TRAJECTORY_PREDICTED:
            return (f"Predicted time to impact {d['time_to_impact']:.1f} s, "
                    f"max dynamic pressure {d['max_dynamic_pressure'] / 1e6:.1f} MPa")
        if self.event_type == SimulationEventType.NO_IMPACT_PREDICTED:
            return "Asteroid is not predicted to reach the surface"
        if self.event_type == SimulationEventType.FRAGMENTATION:
            return (f"Fragmentation into {d['fragment_count']} pieces at "
                    f"q = {d['dynamic_pressure'] / 1e6:.1f} MPa, altitude {d['altitude'] / 1000:.1f} km")
        if self.event_type == SimulationEventType.IMPACT:
            return (f"Impact at {d['lat']:.6f}, {d['lng']:.6f} ({d['location']}), "
                    f"energy {d['energy_mt']:.2f} Mt TNT")
        if self.event_type == SimulationEventType.ESCAPED:
            return "Body escaped Earth's gravity"
        if self.event_type == SimulationEventType.STEP_LIMIT_REACHED:
            return f"Step limit reached after {d['steps']} steps"
        return "Simulation ended"

    def __str__(self) -> str:
        return f"T+{self.timestamp:.1f}s {self.event_type.name}: {self.narrate()}"


# =============================================================================
# TELEMETRY AND RESULTS
# =============================================================================

@dataclass(frozen=True)
class TelemetryPoint:
    """A sampled point of the flight for charting."""
    time: float
    altitude: float
    velocity: float
    dynamic_pressure: float
    heat_flux: float
    temperature: float
    mass: float


@dataclass
class ImpactSummary:
    """
    Terminal impact report.

    Attributes:
        time_s: Simulation time of ground contact (seconds)
        position: ECEF impact point (m)
        lat: Impact latitude (degrees)
        lng: Impact longitude (degrees)
        location: Coarse region name
        distance_from_target_m: Vincenty distance to the intended target
        speed_ms: Speed at ground contact
        speed_loss_ms: Entry speed minus impact speed (floored at 0)
        peak_dynamic_pressure_pa: Highest dynamic pressure during the run
        peak_heat_flux_wm2: Highest heat flux during the run
        fragmented: Whether the body broke up
        assessment: Energy, crater, seismic and blast estimates
    """
    time_s: float
    position: Vector3D
    lat: float
    lng: float
    location: str
    distance_from_target_m: float
    speed_ms: float
    speed_loss_ms: float
    peak_dynamic_pressure_pa: float
    peak_heat_flux_wm2: float
    fragmented: bool
    assessment: ImpactAssessment

    @property
    def energy_j(self) -> float:
        return self.assessment.energy_j

    @property
    def energy_mt(self) -> float:
        return self.assessment.energy_mt


@dataclass
class SimulationResult:
    """Everything a run produced."""
    final_body: Body
    elapsed_s: float
    steps: int
    telemetry: list[TelemetryPoint]
    events: list[SimulationEvent]
    prediction: Optional[TrajectoryPrediction]
    targeting: Optional[TargetingSolution]
    impact: Optional[ImpactSummary]

    @property
    def impacted(self) -> bool:
        return self.impact is not None

    def narration(self) -> list[str]:
        """All events rendered as log lines."""
        return [str(event) for event in self.events]


# =============================================================================
# IMPACT SIMULATION
# =============================================================================

class ImpactSimulation:
    """
    Runs one scenario from entry to ground contact.

    Usage:
        sim = ImpactSimulation(ScenarioParams(target_lat_deg=55.75, target_lng_deg=37.62))
        sim.add_event_callback(print)
        result = sim.run()

    Attributes:
        params: Scenario inputs.
        time_step: Fixed step in seconds, or None for the adaptive schedule.
        accurate_targeting: Run the targeting corrector before launch.
        ablation_coeff: Ablation coefficient override (None uses material).
        attitude_factor: Cross-section scaling passed to each step.
        max_steps: Hard cap on integration steps.
        sample_interval: Simulated seconds between telemetry samples.
        target_type: Surface material for the crater estimate.
    """

    def __init__(
        self,
        params: ScenarioParams,
        time_step: Optional[float] = None,
        accurate_targeting: bool = True,
        ablation_coeff: Optional[float] = None,
        attitude_factor: float = 1.0,
        max_steps: int = DEFAULT_MAX_STEPS,
        sample_interval: float = DEFAULT_SAMPLE_INTERVAL,
        target_type: TargetType = TargetType.SEDIMENT
    ) -> None:
        """
        Initialize the simulation.

        Raises:
            ValueError: If the scenario fails validation or time_step is not positive.
        """
        problems = params.validate()
        if problems:
            raise ValueError("Invalid scenario: " + "; ".join(problems))
        if time_step is not None and time_step <= 0:
            raise ValueError(f"time_step must be positive (got {time_step})")

        self.params = params
        self.time_step = time_step
        self.accurate_targeting = accurate_targeting
        self.ablation_coeff = ablation_coeff
        self.attitude_factor = attitude_factor
        self.max_steps = max_steps
        self.sample_interval = sample_interval
        self.target_type = target_type

        self.state = SimulationState.IDLE
        self.current_time: float = 0.0
        self.steps: int = 0
        self.body: Optional[Body] = None
        self.initial_speed_ms: float = 0.0
        self.peak_dynamic_pressure_pa: float = 0.0
        self.peak_heat_flux_wm2: float = 0.0
        self.last_result: Optional[StepResult] = None

        self.telemetry: list[TelemetryPoint] = []
        self.events: list[SimulationEvent] = []
        self.prediction: Optional[TrajectoryPrediction] = None
        self.targeting: Optional[TargetingSolution] = None
        self.impact: Optional[ImpactSummary] = None

        self._next_sample_time: float = 0.0
        self._event_callbacks: list[Callable[[SimulationEvent], None]] = []

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def start(self) -> Body:
        """
        Build the launch state and predict the flight.

        Starting again discards everything the previous run recorded.

        Returns:
            The initial Body.
        """
        p = self.params
        self._reset()

        if self.accurate_targeting:
            self.targeting = calculate_accurate_trajectory(p)
            position = self.targeting.corrected_position
            velocity = self.targeting.corrected_velocity
            launch_lat, launch_lng = self.targeting.launch_lat, self.targeting.launch_lng
        else:
            position, velocity = launch_state(
                p.target_lat_deg, p.target_lng_deg,
                p.entry_altitude_m, p.entry_speed_ms, p.angle_deg
            )
            launch_lat, launch_lng = p.target_lat_deg, p.target_lng_deg

        self.body = body_from_scenario(p, position, velocity)
        self.initial_speed_ms = velocity.magnitude
        self.state = SimulationState.RUNNING

        self._log_event(SimulationEventType.SIMULATION_STARTED, {
            "target_lat": p.target_lat_deg,
            "target_lng": p.target_lng_deg,
            "launch_lat": launch_lat,
            "launch_lng": launch_lng,
        })

        if self.targeting is not None:
            self._log_event(SimulationEventType.TARGETING_CALIBRATED, {
                "expected_deviation_km": self.targeting.expected_deviation,
                "iterations": len(self.targeting.iterations),
            })

        self.prediction = predict_trajectory(self.body)
        if self.prediction.impacts:
            self._log_event(SimulationEventType.TRAJECTORY_PREDICTED, {
                "time_to_impact": self.prediction.time_to_impact,
                "max_dynamic_pressure": self.prediction.max_dynamic_pressure,
            })
        else:
            self._log_event(SimulationEventType.NO_IMPACT_PREDICTED)

        return self.body

    def _reset(self) -> None:
        self.current_time = 0.0
        self.steps = 0
        self.body = None
        self.initial_speed_ms = 0.0
        self.peak_dynamic_pressure_pa = 0.0
        self.peak_heat_flux_wm2 = 0.0
        self.last_result = None
        self.telemetry = []
        self.events = []
        self.prediction = None
        self.targeting = None
        self.impact = None
        self._next_sample_time = 0.0

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.state == SimulationState.RUNNING

    def step(self) -> StepResult:
        """
        Advance the body by one integration step.

        Raises:
            RuntimeError: If the simulation is not running.
        """
        if not self.is_running or self.body is None:
            raise RuntimeError(f"Cannot step simulation in state {self.state.value}")

        dt = self.time_step or adaptive_time_step(max(0.0, self.body.altitude_m))
        ctx = StepContext(
            dt=dt,
            attitude_factor=self.attitude_factor,
            ablation_coeff=self.ablation_coeff,
        )
        result = step_atmospheric_entry(self.body, ctx)

        self.body = result.body
        self.last_result = result
        self.current_time += dt
        self.steps += 1
        self.peak_dynamic_pressure_pa = max(self.peak_dynamic_pressure_pa, result.dynamic_pressure_pa)
        self.peak_heat_flux_wm2 = max(self.peak_heat_flux_wm2, result.heat_flux_wm2)

        if result.fragmentation_occurred:
            self._log_event(SimulationEventType.FRAGMENTATION, {
                "fragment_count": result.body.fragment_count,
                "dynamic_pressure": result.dynamic_pressure_pa,
                "altitude": result.altitude_m,
            })

        if self.current_time >= self._next_sample_time:
            self._record_telemetry(result)
            self._next_sample_time = self.current_time + self.sample_interval

        if has_impacted(self.body):
            self._record_telemetry(result)
            self._handle_impact(result)
        elif has_escaped(self.body):
            self._log_event(SimulationEventType.ESCAPED, {"speed": result.speed_ms})
            self._finish()
        elif self.steps >= self.max_steps:
            self._log_event(SimulationEventType.STEP_LIMIT_REACHED, {"steps": self.steps})
            self._finish()

        return result

    def run(self) -> SimulationResult:
        """
        Run the scenario to completion.

        Returns:
            SimulationResult with telemetry, events and the impact summary.
        """
        if self.state == SimulationState.IDLE:
            self.start()

        while self.is_running:
            self.step()

        return SimulationResult(
            final_body=self.body,
            elapsed_s=self.current_time,
            steps=self.steps,
            telemetry=list(self.telemetry),
            events=list(self.events),
            prediction=self.prediction,
            targeting=self.targeting,
            impact=self.impact,
        )

    def _record_telemetry(self, result: StepResult) -> None:
        body = result.body
        self.telemetry.append(TelemetryPoint(
            time=self.current_time,
            altitude=max(0.0, body.altitude_m),
            velocity=result.speed_ms,
            dynamic_pressure=result.dynamic_pressure_pa,
            heat_flux=result.heat_flux_wm2,
            temperature=result.temperature_k,
            mass=body.mass_kg,
        ))

    def _handle_impact(self, result: StepResult) -> None:
        body = result.body
        coords = ecef_to_lat_lng(body.position_m)
        target = Coordinates(self.params.target_lat_deg, self.params.target_lng_deg)
        assessment = assess_impact(
            result.energy_j,
            target_type=self.target_type,
            seismic_distance_km=SEISMIC_REFERENCE_DISTANCE_KM,
            blast_distance_km=BLAST_REFERENCE_DISTANCE_KM,
        )

        self.impact = ImpactSummary(
            time_s=self.current_time,
            position=body.position_m,
            lat=coords.lat,
            lng=coords.lng,
            location=location_name(coords.lat, coords.lng),
            distance_from_target_m=vincenty_distance(target, coords),
            speed_ms=result.speed_ms,
            speed_loss_ms=max(0.0, self.initial_speed_ms - result.speed_ms),
            peak_dynamic_pressure_pa=self.peak_dynamic_pressure_pa,
            peak_heat_flux_wm2=self.peak_heat_flux_wm2,
            fragmented=body.fragmented,
            assessment=assessment,
        )

        self._log_event(SimulationEventType.IMPACT, {
            "lat": coords.lat,
            "lng": coords.lng,
            "location": self.impact.location,
            "position": body.position_m.to_tuple(),
            "energy_j": assessment.energy_j,
            "energy_mt": assessment.energy_mt,
            "distance_from_target_m": self.impact.distance_from_target_m,
        })
        self._finish()

    def _finish(self) -> None:
        self.state = SimulationState.COMPLETE
        self._log_event(SimulationEventType.SIMULATION_ENDED, {"steps": self.steps})

    # -------------------------------------------------------------------------
    # Event Logging
    # -------------------------------------------------------------------------

    def add_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        """
        Register a callback to be called for each simulation event.

        Args:
            callback: Function that takes a SimulationEvent.
        """
        self._event_callbacks.append(callback)

    def remove_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        """Remove an event callback."""
        if callback in self._event_callbacks:
            self._event_callbacks.remove(callback)

    def _log_event(
        self,
        event_type: SimulationEventType,
        data: Optional[dict] = None
    ) -> SimulationEvent:
        """Log a simulation event and notify callbacks."""
        event = SimulationEvent(
            event_type=event_type,
            timestamp=self.current_time,
            data=data or {},
        )
        self.events.append(event)

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception as e:
                print(f"[SIM] Event callback error: {e}")

        return event
