#!/usr/bin/env python3
"""Benchmark Wave Function Collapse solve performance."""

from __future__ import annotations

import argparse
import json
import time
from pathlib import Path

import numpy as np

from tilecollapse import ArrayAsset, GeneratorConfig, WFCSession
from tilecollapse.config import PropagationMode
from tilecollapse.solver import SolveStatus

GRID_SIZES: tuple[tuple[int, int], ...] = (
    (16, 16),
    (32, 32),
    (48, 48),
    (64, 64),
)

GRASS = (40, 160, 60, 255)
WATER = (30, 80, 200, 255)


def _striped_tile(rows: list[tuple[int, int, int, int]]) -> ArrayAsset:
    """Build a 3x3 tile whose pixel rows take the given colors."""
    pixels = np.array([[color] * 3 for color in rows], dtype=np.uint8)
    return ArrayAsset(pixels)


def build_sample() -> list[list[ArrayAsset]]:
    """A 4x4 coastline sample: grass, shore, water, shore, repeating vertically."""
    grass = _striped_tile([GRASS, GRASS, GRASS])
    shore_down = _striped_tile([GRASS, WATER, WATER])
    water = _striped_tile([WATER, WATER, WATER])
    shore_up = _striped_tile([WATER, GRASS, GRASS])
    return [[tile] * 4 for tile in (grass, shore_down, water, shore_up)]


class WFCBenchmark:
    """Benchmark runner for the session pipeline."""

    def __init__(self, iterations: int, propagation: PropagationMode) -> None:
        self.iterations = iterations
        self.propagation = propagation
        self.sample = build_sample()
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(self, width: int, height: int) -> tuple[float, float]:
        """Run one case and return (average solve ms, solved fraction)."""
        elapsed_total = 0.0
        solved = 0

        for i in range(self.iterations):
            config = GeneratorConfig(
                output_size=(width, height),
                seed=(width * 1_000_000) + (height * 1_000) + i,
                propagation=self.propagation,
            )
            session = WFCSession.from_rows(config, self.sample)
            session.create_patterns()

            start = time.perf_counter()
            session.solve()
            elapsed_total += time.perf_counter() - start

            if session.status is SolveStatus.SOLVED:
                solved += 1

        return (elapsed_total / self.iterations) * 1000.0, solved / self.iterations

    def run(self) -> None:
        """Run all configured grid-size benchmarks."""
        print(f"WFC Benchmark ({self.propagation.name.lower()} propagation)")
        print("=" * 42)
        print(f"Iterations per size: {self.iterations}")
        print()
        print(f"{'Size':>12} {'Solve (ms)':>14} {'Solved':>10}")
        print("-" * 42)

        for width, height in GRID_SIZES:
            solve_ms, solved_ratio = self._run_case(width, height)

            size_key = f"{width}x{height}"
            self.results[size_key] = {
                "solve_ms": solve_ms,
                "solved_ratio": solved_ratio,
            }

            print(f"{size_key:>12} {solve_ms:14.2f} {solved_ratio:10.0%}")

    def save_results(self, filename: str) -> None:
        """Save benchmark output to a JSON file."""
        with Path(filename).open("w") as f:
            json.dump(self.results, f, indent=2)
        print(f"\nSaved benchmark results to {filename}")

    def compare_with_baseline(self, baseline_file: str) -> None:
        """Compare current run with a saved baseline JSON file."""
        try:
            with Path(baseline_file).open() as f:
                baseline: dict[str, dict[str, float]] = json.load(f)
        except FileNotFoundError:
            print(f"\nBaseline file not found: {baseline_file}")
            return

        print(f"\nComparison vs baseline: {baseline_file}")
        print("=" * 64)

        for size_key, current in self.results.items():
            if size_key not in baseline:
                continue

            old_ms = baseline[size_key].get("solve_ms", 0.0)
            new_ms = current["solve_ms"]
            if old_ms <= 0:
                continue

            delta_pct = ((new_ms - old_ms) / old_ms) * 100.0
            speed_ratio = old_ms / new_ms if new_ms > 0 else 0.0
            trend = "faster" if speed_ratio > 1.0 else "slower"

            print(
                f"{size_key:>12}: {new_ms:8.2f}ms "
                f"vs {old_ms:8.2f}ms | {speed_ratio:5.2f}x {trend} "
                f"({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark WFC solving")
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of runs per grid size (default: 5)",
    )
    parser.add_argument(
        "--full-propagation",
        action="store_true",
        help="Propagate past immediate neighbours",
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    propagation = (
        PropagationMode.FULL if args.full_propagation else PropagationMode.LOCAL
    )
    benchmark = WFCBenchmark(iterations=args.iterations, propagation=propagation)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
