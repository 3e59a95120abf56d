"""
Exact radius filtering on top of the spatial hash.

This module provides the neighbor filter and two search backends:
- Grid: spatial hash candidates + exact filter, O(points per cell * 9)
- Direct scan: vectorized NumPy distance test over every point, O(N)

The direct scan is the reference the grid is measured against (see
``spatial_hash2d.utils.benchmark``).

Example:
    >>> from spatial_hash2d.physics.neighbors import filter_within_radius
    >>> xs, ys = [10.0, 60.0, 110.0], [10.0, 10.0, 10.0]
    >>> filter_within_radius(10.0, 10.0, [0, 1], 55.0, xs, ys)
    [0, 1]
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable, Sequence

import numpy as np

if TYPE_CHECKING:
    from spatial_hash2d.physics.spatial_hash import SpatialHash


def _check_radius(radius: float) -> float:
    radius = float(radius)
    if not math.isfinite(radius) or radius < 0.0:
        raise ValueError(f"radius must be a non-negative finite number, got {radius!r}")
    return radius


def filter_within_radius(
    tx: float,
    ty: float,
    candidates: Iterable[int],
    radius: float,
    xs: Sequence[float],
    ys: Sequence[float],
) -> list[int]:
    """
    Keep the candidates whose position lies within ``radius`` of (tx, ty).

    Args:
        tx, ty: Target position
        candidates: Point indices, typically from ``SpatialHash.query``
        radius: Inclusive search radius (must be >= 0)
        xs, ys: Point positions indexed by candidate

    Returns:
        Matching indices in input order. Duplicates in ``candidates`` are
        kept, and a point sitting exactly on the target is a match.

    Raises:
        ValueError: If ``radius`` is negative or not finite.
    """
    r2 = _check_radius(radius) ** 2
    out: list[int] = []
    for c in candidates:
        dx = xs[c] - tx
        dy = ys[c] - ty
        if dx * dx + dy * dy <= r2:
            out.append(c)
    return out


def ring_for_radius(radius: float, cell_size: float) -> int:
    """Smallest query ring whose cells cover every point within ``radius``."""
    radius = _check_radius(radius)
    cell_size = max(1e-12, float(cell_size))
    return max(1, int(math.ceil(radius / cell_size)))


class NeighborSearch:
    """Base class for radius searches over indexed point positions."""

    name = "base"

    def prepare(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        """Called once per tick with the current positions."""

    def search(self, tx: float, ty: float, radius: float) -> list[int]:
        raise NotImplementedError


class GridNeighborSearch(NeighborSearch):
    """
    Spatial hash lookup followed by the exact filter.

    With ``adaptive_ring`` the query ring grows with the radius, so radii
    larger than a cell do not miss neighbors. Without it the search uses
    the fixed ``ring`` and can under-report for large radii.
    """

    name = "grid"

    def __init__(self, grid: "SpatialHash", *, ring: int = 1, adaptive_ring: bool = False):
        self.grid = grid
        self.ring = max(1, int(ring))
        self.adaptive_ring = adaptive_ring
        self._xs: Sequence[float] = ()
        self._ys: Sequence[float] = ()

    def prepare(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        self._xs = xs
        self._ys = ys
        self.grid.build(xs, ys)

    def ring_for(self, radius: float) -> int:
        if self.adaptive_ring:
            return max(self.ring, ring_for_radius(radius, self.grid.cell_size))
        return self.ring

    def search(self, tx: float, ty: float, radius: float) -> list[int]:
        candidates = self.grid.query(tx, ty, ring=self.ring_for(radius))
        return filter_within_radius(tx, ty, candidates, radius, self._xs, self._ys)


class DirectScanSearch(NeighborSearch):
    """Exact O(N) scan using NumPy, in index order."""

    name = "direct"

    def __init__(self) -> None:
        self._pos: np.ndarray = np.empty((0, 2), dtype=np.float64)

    def prepare(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        n = len(xs)
        pos = np.empty((n, 2), dtype=np.float64)
        if n:
            pos[:, 0] = xs
            pos[:, 1] = ys
        self._pos = pos

    def search(self, tx: float, ty: float, radius: float) -> list[int]:
        r2 = _check_radius(radius) ** 2
        if self._pos.shape[0] == 0:
            return []
        d = self._pos - np.array((tx, ty), dtype=np.float64)
        dist2 = np.einsum("ij,ij->i", d, d)
        return np.nonzero(dist2 <= r2)[0].tolist()
