#!/usr/bin/env python3
"""
Exercise batch analysis script.

Generates N exercises and re-checks every one with the validation monitor:

- Distribution:
    * Share of each traffic direction (target: every label >= 10%)
    * Share of VFR / IFR (target: VFR 75% +/- 5 points)
    * Clock positions seen

- Validation:
    * Pass rate of the oracle checks (clock, direction, distance,
      convergence, level change, flight rules, phraseology)
    * Number of level changes through the target level

- Geometry:
    * Min / max reported initial distance

Usage:
    python analysis.py 1000
    python analysis.py 1000 --seed 7 --out-csv summary.csv
"""

import argparse
import csv
import logging
import random
from typing import Dict

from sim.factory import generate_batch
from trafficinfo.models import Direction, FlightRule
from trafficinfo.monitor import ExerciseMonitor, ExerciseStats

VFR_SHARE_RANGE = (0.70, 0.80)
MIN_DIRECTION_SHARE = 0.10


# ---------------------------------------------------------------------------
# Metric computations
# ---------------------------------------------------------------------------

def compute_distribution(stats: ExerciseStats) -> Dict[str, float]:
    metrics = {f"frac_{d.name}": stats.share(stats.directions, d) for d in Direction}
    for rule in FlightRule:
        metrics[f"frac_{rule.value}"] = stats.share(stats.flight_rules, rule)
    metrics["distinct_clocks"] = len(stats.clocks)
    return metrics


def compute_validation(stats: ExerciseStats) -> Dict[str, float]:
    return {
        "exercises": stats.count,
        "failures": stats.failures,
        "pass_rate": stats.pass_rate,
        "level_changes": stats.level_changes,
    }


def compute_geometry(stats: ExerciseStats) -> Dict[str, float]:
    return {
        "min_distance_nm": stats.min_distance_nm if stats.count else 0.0,
        "max_distance_nm": stats.max_distance_nm,
    }


def compute_targets(stats: ExerciseStats) -> Dict[str, bool]:
    """Distribution targets over the batch."""
    lo, hi = VFR_SHARE_RANGE
    vfr = stats.share(stats.flight_rules, FlightRule.VFR)
    directions_ok = all(
        stats.share(stats.directions, d) >= MIN_DIRECTION_SHARE for d in Direction
    )
    return {
        "vfr_share_ok": lo <= vfr <= hi,
        "direction_shares_ok": directions_ok,
        "all_valid": stats.count > 0 and stats.failures == 0,
    }


# ---------------------------------------------------------------------------
# Main / reporting
# ---------------------------------------------------------------------------

def print_block(title: str, metrics: Dict[str, float]) -> None:
    print(title)
    for k in sorted(metrics.keys()):
        print(f"{k:25s}: {metrics[k]}")
    print()


def write_metrics_csv(path: str, blocks: Dict[str, Dict[str, float]]) -> None:
    """
    Flatten named metric blocks into a single-row CSV for easy comparison
    across runs (e.g., different seeds or weight settings).
    """
    flat: Dict[str, float] = {}
    for block_name, metrics in blocks.items():
        for k, v in metrics.items():
            flat[f"{block_name}.{k}"] = v

    fieldnames = sorted(flat.keys())
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerow(flat)


def analyze(count: int, seed=None) -> ExerciseStats:
    monitor = ExerciseMonitor()
    for exercise in generate_batch(count, random.Random(seed)):
        problems = monitor.observe(exercise)
        for p in problems:
            print(f"[INVALID] {exercise.solution}: {p}")
    return monitor.summary()


def main():
    parser = argparse.ArgumentParser(description="Generate and validate a batch of traffic exercises.")
    parser.add_argument("count", type=int, nargs="?", default=1000, help="Number of exercises")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible batches")
    parser.add_argument(
        "--out-csv",
        help="Optional path to write a single-row CSV summary of all metrics.",
        default=None,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log builder retries")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    stats = analyze(args.count, args.seed)

    distribution = compute_distribution(stats)
    validation = compute_validation(stats)
    geometry = compute_geometry(stats)
    targets = compute_targets(stats)

    print_block("=== Distribution ===", distribution)
    print_block("=== Validation ===", validation)
    print_block("=== Geometry ===", geometry)
    print_block("=== Targets ===", targets)

    if args.out_csv:
        all_blocks = {
            "distribution": distribution,
            "validation": validation,
            "geometry": geometry,
            "targets": targets,
        }
        write_metrics_csv(args.out_csv, all_blocks)
        print(f"Metric summary written to: {args.out_csv}")


if __name__ == "__main__":
    main()
