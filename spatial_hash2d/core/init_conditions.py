"""
Initial condition generators for the point simulation.

Available modes:
- random: Uniform positions over the window, uniform velocities
- clusters: Gaussian clumps, useful to see how crowded cells slow queries down
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spatial_hash2d.params import Sim2DParams


@dataclass(slots=True)
class InitialPoint:
    """
    Initial conditions for a single point.

    Attributes:
        x, y: Position coordinates
        vx, vy: Velocity components, in units per tick
    """
    x: float
    y: float
    vx: float
    vy: float


def sample_velocity(rng: random.Random, speed: float) -> tuple[float, float]:
    """Each component uniform in [-speed, speed]."""
    speed = max(0.0, float(speed))
    return rng.uniform(-speed, speed), rng.uniform(-speed, speed)


def create_random_points(
    params: "Sim2DParams",
    rng: random.Random,
    count: int | None = None,
) -> list[InitialPoint]:
    """
    Create points distributed uniformly over the window.

    Args:
        params: Simulation parameters (window size, point speed)
        rng: Random number generator
        count: Number of points, defaults to ``params.point_count``

    Returns:
        List of InitialPoint objects
    """
    n = int(params.point_count if count is None else count)
    w = float(params.width)
    h = float(params.height)
    points: list[InitialPoint] = []
    for _ in range(max(0, n)):
        x = rng.uniform(0.0, w)
        y = rng.uniform(0.0, h)
        vx, vy = sample_velocity(rng, params.point_speed)
        points.append(InitialPoint(x=x, y=y, vx=vx, vy=vy))
    return points


def create_clustered_points(
    params: "Sim2DParams",
    rng: random.Random,
    count: int | None = None,
) -> list[InitialPoint]:
    """
    Create points grouped around ``params.cluster_count`` random centers.

    Points are clamped into the window so the bounce rule starts from a
    valid state.
    """
    n = int(params.point_count if count is None else count)
    w = float(params.width)
    h = float(params.height)
    sigma = max(0.0, float(params.cluster_sigma))
    centers = [
        (rng.uniform(0.0, w), rng.uniform(0.0, h))
        for _ in range(max(1, int(params.cluster_count)))
    ]
    points: list[InitialPoint] = []
    for _ in range(max(0, n)):
        cx, cy = centers[rng.randrange(len(centers))]
        x = min(w, max(0.0, rng.gauss(cx, sigma)))
        y = min(h, max(0.0, rng.gauss(cy, sigma)))
        vx, vy = sample_velocity(rng, params.point_speed)
        points.append(InitialPoint(x=x, y=y, vx=vx, vy=vy))
    return points
