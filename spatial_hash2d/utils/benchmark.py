#!/usr/bin/env python3
"""
Performance benchmark for the spatial hash.

Compares neighbor search backends over the same random point set:
- Grid (3x3 cells + exact filter)
- Grid with adaptive ring (covers radii larger than a cell)
- Direct scan (NumPy, O(N) per query)

Also reports how many true neighbors the fixed 3x3 grid misses, which is
non-zero once the radius exceeds the cell size.

Usage:
    python -m spatial_hash2d.utils.benchmark [--points 1000] [--queries 200] [--radius 50]
"""

from __future__ import annotations

import argparse
import random
import sys
import time

import numpy as np

from spatial_hash2d.physics.neighbors import DirectScanSearch, GridNeighborSearch, NeighborSearch
from spatial_hash2d.physics.spatial_hash import SpatialHash


def generate_points(
    n: int,
    *,
    width: float = 800.0,
    height: float = 600.0,
    seed: int = 42,
) -> tuple[list[float], list[float]]:
    """Generate random point positions."""
    rng = random.Random(seed)
    xs = [rng.uniform(0.0, width) for _ in range(n)]
    ys = [rng.uniform(0.0, height) for _ in range(n)]
    return xs, ys


def generate_queries(n: int, *, width: float = 800.0, height: float = 600.0, seed: int = 7) -> list[tuple[float, float]]:
    rng = random.Random(seed)
    return [(rng.uniform(0.0, width), rng.uniform(0.0, height)) for _ in range(n)]


def benchmark_search(
    search: NeighborSearch,
    xs: list[float],
    ys: list[float],
    queries: list[tuple[float, float]],
    radius: float,
    iterations: int = 5,
) -> tuple[float, float, list[list[int]]]:
    """
    Time one rebuild plus all queries, ``iterations`` times.

    Returns:
        (mean_ms, std_ms, results of the last iteration)
    """
    times = []
    results: list[list[int]] = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        search.prepare(xs, ys)
        results = [search.search(qx, qy, radius) for qx, qy in queries]
        times.append(time.perf_counter() - t0)

    arr = np.array(times, dtype=np.float64) * 1000.0
    return float(arr.mean()), float(arr.std()), results


def count_misses(reference: list[list[int]], found: list[list[int]]) -> int:
    """True neighbors in ``reference`` that ``found`` does not report."""
    missed = 0
    for ref, got in zip(reference, found):
        missed += len(set(ref) - set(got))
    return missed


def run_benchmark(
    n_points: int,
    n_queries: int,
    *,
    radius: float,
    cell_size: float,
    iterations: int,
) -> dict[str, float]:
    """Run full benchmark suite."""
    print(f"\n{'='*60}")
    print(f"Benchmark: {n_points} points, {n_queries} queries, radius={radius:g}, cell={cell_size:g}")
    print(f"{'='*60}")

    xs, ys = generate_points(n_points)
    queries = generate_queries(n_queries)

    results: dict[str, float] = {}

    print("Direct scan (NumPy)...", end=" ", flush=True)
    direct_ms, direct_std, reference = benchmark_search(DirectScanSearch(), xs, ys, queries, radius, iterations)
    print(f"{direct_ms:.2f} ± {direct_std:.2f} ms")
    results["direct"] = direct_ms

    print("Grid (3x3)...", end=" ", flush=True)
    grid = GridNeighborSearch(SpatialHash(cell_size))
    grid_ms, grid_std, found = benchmark_search(grid, xs, ys, queries, radius, iterations)
    missed = count_misses(reference, found)
    print(f"{grid_ms:.2f} ± {grid_std:.2f} ms (missed {missed})")
    results["grid"] = grid_ms
    results["grid_missed"] = float(missed)

    print("Grid (adaptive ring)...", end=" ", flush=True)
    adaptive = GridNeighborSearch(SpatialHash(cell_size), adaptive_ring=True)
    ad_ms, ad_std, found = benchmark_search(adaptive, xs, ys, queries, radius, iterations)
    ad_missed = count_misses(reference, found)
    print(f"{ad_ms:.2f} ± {ad_std:.2f} ms (missed {ad_missed})")
    results["grid_adaptive"] = ad_ms
    results["grid_adaptive_missed"] = float(ad_missed)

    print(f"\n{'='*60}")
    print("Summary:")
    print(f"  Direct scan: {direct_ms:.2f} ms")
    if grid_ms > 0.0:
        print(f"  Grid: {grid_ms:.2f} ms ({direct_ms / grid_ms:.1f}x vs direct)")
    if ad_ms > 0.0:
        print(f"  Grid adaptive: {ad_ms:.2f} ms ({direct_ms / ad_ms:.1f}x vs direct)")
    if missed:
        print(f"  Note: radius {radius:g} > cell {cell_size:g}, the 3x3 grid missed {missed} neighbors.")

    return results


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Benchmark spatial hash neighbor queries")
    parser.add_argument("--points", "-n", type=int, default=1000, help="Number of points")
    parser.add_argument("--queries", "-q", type=int, default=200, help="Queries per iteration")
    parser.add_argument("--radius", "-r", type=float, default=50.0, help="Search radius")
    parser.add_argument("--cell-size", "-c", type=float, default=50.0, help="Grid cell size")
    parser.add_argument("--iterations", "-i", type=int, default=5, help="Benchmark iterations")
    parser.add_argument("--sweep", action="store_true", help="Run sweep over point counts")
    args = parser.parse_args(argv)

    if args.radius < 0.0 or args.cell_size <= 0.0 or args.iterations < 1:
        print("[benchmark] radius must be >= 0, cell size > 0, iterations >= 1", file=sys.stderr)
        return 2

    print("Spatial Hash Benchmark")
    print(f"Platform: {sys.platform}")
    print(f"NumPy: {np.__version__}")

    counts = [100, 500, 1000, 5000, 10000] if args.sweep else [args.points]
    for n in counts:
        run_benchmark(
            n,
            args.queries,
            radius=args.radius,
            cell_size=args.cell_size,
            iterations=args.iterations,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
