"""
Export utilities for the point simulation.

This module writes simulation state to disk:
- CSV: Positions, velocities, cell keys and neighbor flags
- Summary: Grid occupancy statistics

Usage:
    >>> from spatial_hash2d.utils.export import export_points_csv
    >>> export_points_csv(sim.points, "output.csv", grid=sim.state.grid)
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from spatial_hash2d.core.sim import Point2D
    from spatial_hash2d.physics.spatial_hash import SpatialHash


@dataclass
class ExportStats:
    """Statistics from an export operation."""
    file_path: Path
    point_count: int
    neighbor_count: int
    timestamp: str


def export_points_csv(
    points: list["Point2D"],
    output_path: str | Path,
    *,
    include_velocity: bool = True,
    grid: "SpatialHash | None" = None,
    neighbors: Iterable[int] | None = None,
    tick: int | None = None,
) -> ExportStats:
    """
    Export point data to a CSV file.

    Args:
        points: List of Point2D objects
        output_path: Path to output CSV file
        include_velocity: Include velocity columns (vx, vy)
        grid: Adds cell_x, cell_y and key columns computed with this grid
        neighbors: Indices flagged in a "neighbor" column
        tick: Optional tick number to include in output

    Returns:
        ExportStats with export details
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    header = ["index", "x", "y"]
    if include_velocity:
        header.extend(["vx", "vy"])
    if grid is not None:
        header.extend(["cell_x", "cell_y", "key"])
    neighbor_set = set(neighbors) if neighbors is not None else None
    if neighbor_set is not None:
        header.append("neighbor")
    if tick is not None:
        header.insert(0, "tick")

    timestamp = datetime.now().isoformat()
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)

        writer.writerow([f"# Spatial hash export - {timestamp}"])
        writer.writerow([f"# Points: {len(points)}"])
        writer.writerow(header)

        for i, p in enumerate(points):
            row: list[object] = []
            if tick is not None:
                row.append(tick)
            row.extend([i, f"{p.x:.6f}", f"{p.y:.6f}"])
            if include_velocity:
                row.extend([f"{p.vx:.6f}", f"{p.vy:.6f}"])
            if grid is not None:
                cx, cy = grid.cell_of(p.x, p.y)
                key = grid.key_of(p.x, p.y)
                row.extend([cx, cy, key if isinstance(key, int) else f"{key[0]}:{key[1]}"])
            if neighbor_set is not None:
                row.append(1 if i in neighbor_set else 0)
            writer.writerow(row)

    return ExportStats(
        file_path=output_path,
        point_count=len(points),
        neighbor_count=len(neighbor_set) if neighbor_set is not None else 0,
        timestamp=timestamp,
    )


def export_summary(
    grid: "SpatialHash",
    output_path: str | Path,
    *,
    radius: float | None = None,
    selection: tuple[float, float] | None = None,
    neighbor_count: int = 0,
) -> Path:
    """
    Export grid occupancy statistics to a text file.

    Args:
        grid: A built SpatialHash
        output_path: Path to output file

    Returns:
        Path to the created file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    sizes = [len(b) for b in grid.buckets.values()]
    if sizes:
        avg_bucket = sum(sizes) / len(sizes)
        max_bucket = max(sizes)
    else:
        avg_bucket = 0.0
        max_bucket = 0

    with open(output_path, "w") as f:
        f.write("Spatial Hash Summary\n")
        f.write(f"Generated: {datetime.now().isoformat()}\n")
        f.write("\n")
        f.write("Grid:\n")
        f.write(f"  Cell size: {grid.cell_size:g}\n")
        f.write(f"  Cell policy: {grid.cell_policy}\n")
        f.write(f"  Key mode: {grid.key_mode}\n")
        f.write(f"  Indexed points: {len(grid)}\n")
        f.write(f"  Buckets: {grid.bucket_count}\n")
        f.write(f"  Average bucket size: {avg_bucket:.4f}\n")
        f.write(f"  Max bucket size: {max_bucket}\n")
        f.write("\n")
        f.write("Query:\n")
        if selection is None:
            f.write("  Selection: none\n")
        else:
            f.write(f"  Selection: ({selection[0]:.4f}, {selection[1]:.4f})\n")
        if radius is not None:
            f.write(f"  Radius: {radius:g}\n")
        f.write(f"  Neighbors: {neighbor_count}\n")

    return output_path
