#!/usr/bin/env python3
"""
Run an asteroid impact simulation.

Usage:
    python scripts/run_impact.py --preset tunguska
    python scripts/run_impact.py --diameter 200 --speed 25000 --lat 55.75 --lng 37.62
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

import httpx

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from impactsim.asteroid import AsteroidType, get_asteroid_properties
from impactsim.consequences import TargetType
from impactsim.neo import NEOClient
from impactsim.scenarios import (
    HISTORICAL_EVENTS,
    ScenarioParams,
    get_historical_scenario,
    mass_from_diameter,
)
from impactsim.simulation import ImpactSimulation, SimulationResult


def print_summary(result: SimulationResult) -> None:
    """Print the impact report."""
    print("\n" + "=" * 60)
    print("IMPACT SUMMARY")
    print("=" * 60)
    print(f"Steps: {result.steps}   Elapsed: {result.elapsed_s:.1f} s")

    impact = result.impact
    if impact is None:
        print("No ground impact.")
        return

    a = impact.assessment
    print(f"Location:            {impact.lat:.4f}, {impact.lng:.4f} ({impact.location})")
    print(f"Miss distance:       {impact.distance_from_target_m / 1000:.2f} km")
    print(f"Impact speed:        {impact.speed_ms / 1000:.2f} km/s "
          f"(lost {impact.speed_loss_ms / 1000:.2f} km/s)")
    print(f"Energy:              {a.energy_j:.3e} J ({a.energy_mt:.3f} Mt TNT)")
    print(f"Peak dynamic press.: {impact.peak_dynamic_pressure_pa / 1e6:.2f} MPa")
    print(f"Peak heat flux:      {impact.peak_heat_flux_wm2:.3e} W/m^2")
    print(f"Fragmented:          {'yes' if impact.fragmented else 'no'}")
    print(f"Crater:              {a.crater.diameter / 1000:.2f} km wide, "
          f"{a.crater.depth:.0f} m deep")
    print(f"Seismic magnitude:   {a.seismic.magnitude:.1f} "
          f"(intensity {a.seismic.intensity:.1f} at 100 km)")
    print(f"Blast at 50 km:      {a.blast.overpressure / 1000:.1f} kPa, "
          f"wind {a.blast.wind_speed:.0f} m/s")
    print(f"Damage radius:       {a.blast_radius_m / 1000:.0f} km (blast), "
          f"{a.seismic_radius_m / 1000:.0f} km (felt)")
    print(f"Earth delta-v:       {a.earth_delta_v_ms:.3e} m/s")


def build_params(args: argparse.Namespace, neo_client: Optional[NEOClient] = None) -> ScenarioParams:
    """
    Resolve the scenario from a preset, a JSON file, a NEO id or flags.

    Raises:
        ValueError: If the NEO id is unknown.
    """
    if args.preset:
        return get_historical_scenario(args.preset)
    if args.json:
        return ScenarioParams.from_json(args.json)

    asteroid_type = AsteroidType(args.type)
    params = ScenarioParams(
        mass_kg=args.mass or mass_from_diameter(args.diameter, asteroid_type),
        diameter_m=args.diameter,
        entry_speed_ms=args.speed,
        entry_altitude_m=args.altitude,
        target_lat_deg=args.lat,
        target_lng_deg=args.lng,
        angle_deg=args.angle,
        asteroid_type=asteroid_type,
    )

    if args.neo:
        client = neo_client or NEOClient()
        neo = client.fetch_neo_by_id(args.neo)
        if neo is None:
            raise ValueError(f"NEO {args.neo} not found")
        print(f"[NEO] {neo.name}: ~{neo.estimated_diameter_m:.0f} m")
        params = neo.to_scenario(params, density=get_asteroid_properties(asteroid_type).density)

    return params


def main():
    parser = argparse.ArgumentParser(
        description="Run an asteroid impact simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_impact.py --preset chelyabinsk
    python scripts/run_impact.py --json scenario.json --no-targeting
    python scripts/run_impact.py --neo 2099942 --lat 40.7 --lng -74.0
    python scripts/run_impact.py --diameter 50 --type iron --angle 60
        """,
    )

    # Scenario source
    parser.add_argument(
        "--preset",
        choices=sorted(HISTORICAL_EVENTS),
        help="Historical event to simulate",
    )
    parser.add_argument(
        "--json",
        type=str,
        help="Scenario JSON file",
    )
    parser.add_argument(
        "--neo",
        type=str,
        metavar="ID",
        help="NASA NeoWs object id; its size replaces --diameter/--mass",
    )

    # Impactor
    parser.add_argument("--diameter", type=float, default=100.0, help="Diameter in meters")
    parser.add_argument("--mass", type=float, help="Mass in kg (default: sphere of --type density)")
    parser.add_argument(
        "--type",
        choices=[t.value for t in AsteroidType],
        default="rocky",
        help="Asteroid composition",
    )

    # Entry conditions
    parser.add_argument("--speed", type=float, default=20_000.0, help="Entry speed in m/s")
    parser.add_argument("--altitude", type=float, default=120_000.0, help="Entry altitude in m")
    parser.add_argument("--angle", type=float, default=45.0, help="Entry angle below horizontal (deg)")
    parser.add_argument("--lat", type=float, default=0.0, help="Target latitude (deg)")
    parser.add_argument("--lng", type=float, default=0.0, help="Target longitude (deg)")

    # Simulation settings
    parser.add_argument(
        "--target",
        choices=[t.value for t in TargetType],
        default="sediment",
        help="Surface material at the impact site",
    )
    parser.add_argument(
        "--no-targeting",
        action="store_true",
        help="Launch straight from the target without the targeting corrector",
    )
    parser.add_argument(
        "--time-step",
        type=float,
        help="Fixed integration step in seconds (default: adaptive)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only print the summary",
    )

    args = parser.parse_args()

    try:
        params = build_params(args)
        sim = ImpactSimulation(
            params,
            time_step=args.time_step,
            accurate_targeting=not args.no_targeting,
            target_type=TargetType(args.target),
        )
    except (ValueError, FileNotFoundError, httpx.HTTPError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not args.quiet:
        sim.add_event_callback(print)

    result = sim.run()
    print_summary(result)


if __name__ == "__main__":
    main()
