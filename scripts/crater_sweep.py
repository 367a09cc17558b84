#!/usr/bin/env python3
# /// script
# requires-python = ">=3.11"
# dependencies = ["numpy"]
# ///
"""
Crater and Damage Sweep

Tabulates crater diameter, seismic magnitude and damage radii over a
log-spaced range of impact energies for each target material, with an
optional markdown table for docs.
"""

import argparse
import sys
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from impactsim.consequences import (
    TargetType,
    blast_damage_radius_m,
    calculate_crater_diameter,
    calculate_seismic_effects,
    seismic_felt_radius_m,
)


def sweep(min_mt: float, max_mt: float, points: int) -> np.ndarray:
    """
    Energies (Mt) and per-material crater diameters (km).

    Returns:
        Array of shape (points, 1 + number of target types); column 0 is energy.
    """
    energies = np.logspace(np.log10(min_mt), np.log10(max_mt), points)
    table = np.zeros((points, 1 + len(TargetType)))
    table[:, 0] = energies

    for col, target in enumerate(TargetType, start=1):
        table[:, col] = [calculate_crater_diameter(e, target).diameter / 1000 for e in energies]

    return table


def main():
    parser = argparse.ArgumentParser(description="Sweep impact energy and tabulate consequences")
    parser.add_argument("--min-mt", type=float, default=1e-3, help="Lowest energy (Mt TNT)")
    parser.add_argument("--max-mt", type=float, default=1e8, help="Highest energy (Mt TNT)")
    parser.add_argument("--points", type=int, default=12, help="Number of energies")
    parser.add_argument("--markdown", action="store_true", help="Print a markdown table")
    args = parser.parse_args()

    if args.min_mt <= 0 or args.max_mt <= args.min_mt:
        print("Error: need 0 < --min-mt < --max-mt")
        sys.exit(1)

    table = sweep(args.min_mt, args.max_mt, args.points)
    targets = [t.value for t in TargetType]

    if args.markdown:
        header = " | ".join(f"{t} crater (km)" for t in targets)
        print(f"| Energy (Mt) | {header} | Magnitude | Blast (km) | Felt (km) |")
        print("|" + "---|" * (len(targets) + 4))
    else:
        print(f"{'Energy (Mt)':>12} " + " ".join(f"{t:>10}" for t in targets)
              + f" {'Mag':>6} {'Blast':>7} {'Felt':>7}")
        print("-" * (13 + 11 * len(targets) + 24))

    for row in table:
        energy = row[0]
        magnitude = calculate_seismic_effects(energy, 100.0).magnitude
        blast_km = blast_damage_radius_m(energy) / 1000
        felt_km = seismic_felt_radius_m(energy) / 1000

        if args.markdown:
            craters = " | ".join(f"{d:.2f}" for d in row[1:])
            print(f"| {energy:.3g} | {craters} | {magnitude:.1f} | {blast_km:.0f} | {felt_km:.0f} |")
        else:
            craters = " ".join(f"{d:>10.2f}" for d in row[1:])
            print(f"{energy:>12.3g} {craters} {magnitude:>6.1f} {blast_km:>7.0f} {felt_km:>7.0f}")


if __name__ == "__main__":
    main()
