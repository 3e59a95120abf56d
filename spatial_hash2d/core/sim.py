from __future__ import annotations

import math
import random
from dataclasses import dataclass, field

import numpy as np

from spatial_hash2d.params import Sim2DParams
from spatial_hash2d.physics.spatial_hash import SpatialHash
from spatial_hash2d.physics.neighbors import filter_within_radius, ring_for_radius
from spatial_hash2d.core.init_conditions import create_random_points, create_clustered_points

# Below this many points the plain loop beats the NumPy round trip.
NUMPY_MIN_POINTS = 50


@dataclass(slots=True)
class Point2D:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0


@dataclass(slots=True)
class SimState:
    """
    Everything one tick reads and writes.

    ``xs``/``ys`` are the positions the grid was built from. Grid buckets
    and ``neighbors`` hold indices into ``points``, valid until the next
    ``rebuild`` or ``reset``.
    """
    points: list[Point2D]
    grid: SpatialHash
    radius: float
    selection: tuple[float, float] | None = None
    neighbors: list[int] = field(default_factory=list)
    xs: list[float] = field(default_factory=list)
    ys: list[float] = field(default_factory=list)
    tick: int = 0
    built_tick: int = -1


def make_grid(params: Sim2DParams) -> SpatialHash:
    return SpatialHash(params.cell_size, cell_policy=params.cell_policy, key_mode=params.key_mode)


def advance(state: SimState, width: float, height: float) -> None:
    """
    Move every point by its velocity and bounce off the window edges.

    A coordinate outside [0, width] (or [0, height]) flips the matching
    velocity component. Positions are not clamped, so a point can sit
    slightly outside the window for a tick.
    """
    n = len(state.points)
    if n > NUMPY_MIN_POINTS:
        _advance_numpy(state.points, float(width), float(height))
    else:
        _advance_python(state.points, float(width), float(height))
    state.tick += 1


def _advance_python(points: list[Point2D], width: float, height: float) -> None:
    for pt in points:
        pt.x += pt.vx
        pt.y += pt.vy
        if pt.x < 0.0 or pt.x > width:
            pt.vx = -pt.vx
        if pt.y < 0.0 or pt.y > height:
            pt.vy = -pt.vy


def _advance_numpy(points: list[Point2D], width: float, height: float) -> None:
    """Vectorized version of ``_advance_python``."""
    n = len(points)
    pos = np.empty((n, 2), dtype=np.float64)
    vel = np.empty((n, 2), dtype=np.float64)
    for i, pt in enumerate(points):
        pos[i, 0] = pt.x
        pos[i, 1] = pt.y
        vel[i, 0] = pt.vx
        vel[i, 1] = pt.vy

    pos += vel
    out_x = (pos[:, 0] < 0.0) | (pos[:, 0] > width)
    out_y = (pos[:, 1] < 0.0) | (pos[:, 1] > height)
    vel[out_x, 0] *= -1.0
    vel[out_y, 1] *= -1.0

    for i, pt in enumerate(points):
        pt.x = float(pos[i, 0])
        pt.y = float(pos[i, 1])
        pt.vx = float(vel[i, 0])
        pt.vy = float(vel[i, 1])


def rebuild(state: SimState) -> None:
    """Snapshot current positions and rebuild the grid from scratch."""
    n = len(state.points)
    xs = state.xs
    ys = state.ys
    for arr in (xs, ys):
        if len(arr) < n:
            arr.extend([0.0] * (n - len(arr)))
        else:
            del arr[n:]
    for i, pt in enumerate(state.points):
        xs[i] = pt.x
        ys[i] = pt.y
    state.grid.build(xs, ys)
    state.built_tick = state.tick


def query_ring(state: SimState, params: Sim2DParams) -> int:
    if params.adaptive_ring:
        return max(params.query_ring, ring_for_radius(state.radius, state.grid.cell_size))
    return params.query_ring


def refresh_neighbors(state: SimState, params: Sim2DParams) -> list[int]:
    """
    Recompute ``state.neighbors`` for the active selection.

    With no selection the neighbor list is emptied.
    """
    if state.selection is None:
        state.neighbors = []
        return state.neighbors
    tx, ty = state.selection
    candidates = state.grid.query(tx, ty, ring=query_ring(state, params))
    state.neighbors = filter_within_radius(tx, ty, candidates, state.radius, state.xs, state.ys)
    return state.neighbors


def tick(state: SimState, params: Sim2DParams) -> None:
    """One simulation tick: advance, rebuild, then re-run the selection query."""
    advance(state, params.width, params.height)
    rebuild(state)
    refresh_neighbors(state, params)


class PointSim2D:
    def __init__(self, params: Sim2DParams) -> None:
        self.params = params
        self._rng = random.Random(params.seed)
        self.state = SimState(points=[], grid=make_grid(params), radius=float(params.initial_radius))
        self.reset()

    @property
    def points(self) -> list[Point2D]:
        return self.state.points

    @property
    def radius(self) -> float:
        return self.state.radius

    @property
    def selection(self) -> tuple[float, float] | None:
        return self.state.selection

    @property
    def neighbors(self) -> list[int]:
        return self.state.neighbors

    def reset(self) -> None:
        p = self.params
        self._rng = random.Random(p.seed)
        if p.init_mode == "clusters":
            initial = create_clustered_points(p, self._rng)
        else:
            initial = create_random_points(p, self._rng)
        self.state = SimState(
            points=[Point2D(x=ip.x, y=ip.y, vx=ip.vx, vy=ip.vy) for ip in initial],
            grid=make_grid(p),
            radius=float(p.initial_radius),
        )
        print(f"[sim] Generated {len(self.state.points)} points.")
        rebuild(self.state)

    def apply_grid_params(self) -> None:
        """Swap in a grid built from the current cell params, keeping the points."""
        self.state.grid = make_grid(self.params)
        rebuild(self.state)
        refresh_neighbors(self.state, self.params)

    def step(self) -> None:
        tick(self.state, self.params)

    def add_point(self, x: float, y: float) -> int:
        """
        Append a motionless point and return its index.

        The point joins the grid at the next rebuild.
        """
        self.state.points.append(Point2D(x=float(x), y=float(y)))
        print(f"[sim] Added point at ({x:g}, {y:g})")
        return len(self.state.points) - 1

    def select(self, x: float, y: float) -> list[int]:
        """Set the query position and return its neighbors in the current grid."""
        self.state.selection = (float(x), float(y))
        return refresh_neighbors(self.state, self.params)

    def clear_selection(self) -> None:
        self.state.selection = None
        refresh_neighbors(self.state, self.params)

    def set_radius(self, radius: float) -> float:
        self.state.radius = max(float(self.params.min_radius), float(radius))
        if self.state.selection is not None:
            refresh_neighbors(self.state, self.params)
        return self.state.radius

    def grow_radius(self) -> float:
        return self.set_radius(self.state.radius + float(self.params.radius_step))

    def shrink_radius(self) -> float:
        return self.set_radius(self.state.radius - float(self.params.radius_step))

    def neighbor_positions(self) -> list[tuple[float, float]]:
        xs = self.state.xs
        ys = self.state.ys
        return [(xs[i], ys[i]) for i in self.state.neighbors]

    def counts(self) -> tuple[int, int, int]:
        """(points, grid buckets, neighbors)"""
        return len(self.state.points), self.state.grid.bucket_count, len(self.state.neighbors)

    def validate_state(self) -> list[str]:
        issues: list[str] = []
        s = self.state

        for i, pt in enumerate(s.points):
            if not (math.isfinite(pt.x) and math.isfinite(pt.y) and math.isfinite(pt.vx) and math.isfinite(pt.vy)):
                issues.append(f"point {i} has non-finite position/velocity")

        if s.built_tick == s.tick and len(s.grid) != len(s.xs):
            issues.append(f"grid holds {len(s.grid)} indices for {len(s.xs)} snapshot points")
        if s.built_tick != s.tick:
            issues.append(f"grid is stale (built at tick {s.built_tick}, now {s.tick})")

        n = len(s.xs)
        for i in s.neighbors:
            if i < 0 or i >= n:
                issues.append(f"neighbor index {i} out of range")
                break

        if not math.isfinite(s.radius) or s.radius < float(self.params.min_radius):
            issues.append(f"radius {s.radius!r} below min_radius")

        return issues
