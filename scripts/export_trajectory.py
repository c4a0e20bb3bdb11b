#!/usr/bin/env python
"""Export one simulated acceleration run to CSV.

Simulates a bike preset from near rest on a constant grade and writes
the sampled trajectory to ``results/trajectory_<bike>.csv`` (or the
path given with ``--output``).

Usage
-----
::

    python scripts/export_trajectory.py --bike "Bike 2" --grade-pct 2.1
"""

from __future__ import annotations

import argparse
import math
import os
import sys

import pandas as pd

# Ensure the project root is on the import path when running as a script.
_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from bike_engine.config import load_presets  # noqa: E402
from bike_engine.core.trajectory import simulate  # noqa: E402

RESULTS_DIR: str = os.path.join(_project_root, "results")


def trajectory_frame(points) -> pd.DataFrame:
    """Convert simulation samples into a DataFrame with km/h and km columns."""
    frame = pd.DataFrame(
        {
            "time_s": [p.time for p in points],
            "velocity_ms": [p.velocity for p in points],
            "distance_m": [p.distance for p in points],
        }
    )
    frame["velocity_kmh"] = frame["velocity_ms"] * 3.6
    frame["distance_km"] = frame["distance_m"] / 1000.0
    return frame


def main(argv: list[str] | None = None) -> int:
    """Simulate the selected preset and write the CSV."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--bike", default=None, help="Bike preset name")
    parser.add_argument(
        "--grade-pct", type=float, default=0.0, help="Road grade in percent"
    )
    parser.add_argument("--max-time", type=float, default=600.0, help="Horizon in s")
    parser.add_argument("--step", type=float, default=1.0, help="Sample step in s")
    parser.add_argument("--output", default=None, help="CSV output path")
    args = parser.parse_args(argv)

    presets = load_presets()
    bike = presets.bike(args.bike or next(iter(presets.bikes)))
    grade_angle: float = math.atan(args.grade_pct / 100.0)

    points = simulate(presets.rider, bike, grade_angle, args.max_time, args.step)
    frame = trajectory_frame(points)

    output: str = args.output or os.path.join(
        RESULTS_DIR, f"trajectory_{bike.name.replace(' ', '_').lower()}.csv"
    )
    os.makedirs(os.path.dirname(os.path.abspath(output)), exist_ok=True)
    frame.to_csv(output, index=False)

    last = frame.iloc[-1]
    print(f"Bike     : {bike.name}")
    print(f"Grade    : {args.grade_pct:.2f} % ({grade_angle:.5f} rad)")
    print(f"Samples  : {len(frame)}")
    print(f"Final    : {last['velocity_kmh']:.2f} km/h after {last['distance_km']:.2f} km")
    print(f"Written to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
