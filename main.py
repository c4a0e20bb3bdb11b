"""CLI entrypoint for the bike performance comparator."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from bike_engine import __version__
from bike_engine.config import load_presets
from bike_engine.core.comparator import compare_bikes
from bike_engine.core.errors import IntegrationError, InvalidConfigurationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare two bicycles over a stop-and-go terrain profile."
    )
    parser.add_argument(
        "--presets",
        type=Path,
        default=None,
        help="YAML presets file (default: data/presets.yaml)",
    )
    parser.add_argument("--bike-a", default=None, help="Name of the first bike preset")
    parser.add_argument("--bike-b", default=None, help="Name of the second bike preset")
    parser.add_argument(
        "--power", type=float, default=None, help="Override rider power in watts"
    )
    parser.add_argument(
        "--rider-mass", type=float, default=None, help="Override rider mass in kg"
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Simulate both bikes concurrently",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _format_duration(seconds: float) -> str:
    hours, remainder = divmod(int(round(seconds)), 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}h {minutes:02d}m {secs:02d}s"


def main(argv: list[str] | None = None) -> int:
    """Run a two-bike comparison and print a report."""
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    try:
        presets = load_presets(args.presets)
        names = list(presets.bikes)
        bike_a = presets.bike(args.bike_a or names[0])
        bike_b = presets.bike(args.bike_b or names[min(1, len(names) - 1)])

        rider = presets.rider
        if args.power is not None:
            rider = replace(rider, power=args.power)
        if args.rider_mass is not None:
            rider = replace(rider, rider_mass=args.rider_mass)
        terrain = presets.terrain

        result = compare_bikes(rider, bike_a, bike_b, terrain, parallel=args.parallel)
    except (FileNotFoundError, KeyError, InvalidConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except IntegrationError as e:
        print(f"Error: simulation did not converge: {e}", file=sys.stderr)
        return 1

    print(f"Bike Performance Comparator v{__version__}")
    print("=" * 56)
    print(f"Rider  : {rider.power:.0f} W, {rider.rider_mass:.1f} kg")
    print(
        f"Route  : {terrain.total_distance:.0f} km, "
        f"{terrain.total_elevation_gain:.0f} m gain, "
        f"climb {terrain.climb_fraction:.0%} / descent {terrain.descent_fraction:.0%}, "
        f"stop every {terrain.stop_spacing:.0f} m"
    )
    print("-" * 56)

    for bike_result in result.per_bike:
        print(f"\n{bike_result.name}")
        print(f"  Cruising speed : {bike_result.final_velocity:6.2f} km/h")
        print(f"  Route time     : {_format_duration(bike_result.total_time)}")
        for section in bike_result.breakdown.sections:
            if section.segment_count == 0.0:
                continue
            print(
                f"    {section.terrain_class:<8} {section.segment_count:8.1f} x "
                f"{section.segment_time:7.2f} s = {_format_duration(section.total_time)}"
            )

    print("\n" + "-" * 56)
    diff = result.time_difference_minutes
    if result.faster is None:
        print("Both bikes finish in the same time.")
    else:
        print(f"{result.faster} is faster by {abs(diff):.1f} minutes.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
