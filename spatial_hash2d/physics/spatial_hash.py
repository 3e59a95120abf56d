"""
Uniform-grid spatial hash for approximate 2D neighbor lookup.

This module buckets point indices by the grid cell they fall in, so a
neighborhood query touches a constant number of cells instead of scanning
every point.

The algorithm works by:
1. Mapping a position to an integer cell coordinate (cell_x, cell_y)
2. Mixing the cell coordinate into a single integer key
3. Appending the point index to the bucket stored under that key
4. Answering a query with the buckets of the 3x3 block of cells around it

The grid never owns point data. It stores indices into the caller's
position lists, which must not change between ``build`` and the last
``query`` of a tick.

Constants:
    HASH_X, HASH_Y: Prime multipliers for the cell-key mix
    HASH_BITS: Width of the key space (keys wrap like a 32-bit int)
    CELL_POLICIES: Supported position -> cell rounding policies
    KEY_MODES: "hash" (lossy integer mix) or "pair" (exact tuple key)

Example:
    >>> from spatial_hash2d.physics.spatial_hash import SpatialHash
    >>> xs, ys = [10.0, 60.0, 110.0], [10.0, 10.0, 10.0]
    >>> grid = SpatialHash(cell_size=50.0)
    >>> grid.build(xs, ys)
    >>> sorted(grid.query(10.0, 10.0))
    [0, 1]
"""

from __future__ import annotations

import math
from typing import Hashable, Sequence


HASH_X = 73856093
HASH_Y = 19349663
HASH_BITS = 32
CELL_POLICIES = ("floor", "trunc")
KEY_MODES = ("hash", "pair")

_HASH_MASK = (1 << HASH_BITS) - 1
_HASH_SIGN = 1 << (HASH_BITS - 1)


def cell_coords(x: float, y: float, cell_size: float, policy: str = "floor") -> tuple[int, int]:
    """
    Map a position to its integer cell coordinate.

    "floor" keeps every cell exactly ``cell_size`` wide, including on the
    negative side of the axes. "trunc" rounds toward zero, which makes the
    cell straddling the origin twice as wide.
    """
    if policy == "trunc":
        return int(x / cell_size), int(y / cell_size)
    return math.floor(x / cell_size), math.floor(y / cell_size)


def cell_key(cell_x: int, cell_y: int) -> int:
    """
    Mix a cell coordinate into a signed 32-bit key.

    Distinct cells can share a key; callers treat a bucket as a superset
    of the cell it was looked up for.
    """
    h = ((cell_x * HASH_X) ^ (cell_y * HASH_Y)) & _HASH_MASK
    return h - (1 << HASH_BITS) if h & _HASH_SIGN else h


class SpatialHash:
    """
    Sparse uniform grid mapping cell keys to lists of point indices.

    Attributes:
        cell_size: Side length of a square cell
        cell_policy: Rounding policy used by ``cell_coords``
        key_mode: "hash" for ``cell_key`` integers, "pair" for (cx, cy) tuples
        buckets: Key -> indices, in insertion order
    """

    __slots__ = ("cell_size", "cell_policy", "key_mode", "buckets", "_count")

    def __init__(self, cell_size: float = 50.0, *, cell_policy: str = "floor", key_mode: str = "hash") -> None:
        cell_size = float(cell_size)
        if not math.isfinite(cell_size) or cell_size <= 0.0:
            raise ValueError(f"cell_size must be a positive finite number, got {cell_size!r}")
        if cell_policy not in CELL_POLICIES:
            raise ValueError(f"unknown cell_policy {cell_policy!r}")
        if key_mode not in KEY_MODES:
            raise ValueError(f"unknown key_mode {key_mode!r}")
        self.cell_size = cell_size
        self.cell_policy = cell_policy
        self.key_mode = key_mode
        self.buckets: dict[Hashable, list[int]] = {}
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def bucket_count(self) -> int:
        return len(self.buckets)

    def cell_of(self, x: float, y: float) -> tuple[int, int]:
        return cell_coords(x, y, self.cell_size, self.cell_policy)

    def _key(self, cell_x: int, cell_y: int) -> Hashable:
        if self.key_mode == "pair":
            return (cell_x, cell_y)
        return cell_key(cell_x, cell_y)

    def key_of(self, x: float, y: float) -> Hashable:
        cx, cy = self.cell_of(x, y)
        return self._key(cx, cy)

    def clear(self) -> None:
        self.buckets.clear()
        self._count = 0

    def insert(self, index: int, x: float, y: float) -> None:
        """Append ``index`` to the bucket of the cell containing (x, y)."""
        key = self.key_of(x, y)
        bucket = self.buckets.get(key)
        if bucket is None:
            self.buckets[key] = [index]
        else:
            bucket.append(index)
        self._count += 1

    def build(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        """Clear the grid and insert every point ``i`` at (xs[i], ys[i])."""
        self.clear()
        for i in range(len(xs)):
            self.insert(i, xs[i], ys[i])

    def query(self, x: float, y: float, *, ring: int = 1) -> list[int]:
        """
        Collect candidate indices from the cells around (x, y).

        With the default ``ring=1`` this is the 3x3 block centred on the
        query cell. Buckets are concatenated per key lookup, so a key
        reached twice through a collision contributes its bucket twice.
        """
        ring = max(0, int(ring))
        cx, cy = self.cell_of(x, y)
        buckets = self.buckets
        candidates: list[int] = []
        for dx in range(-ring, ring + 1):
            for dy in range(-ring, ring + 1):
                bucket = buckets.get(self._key(cx + dx, cy + dy))
                if bucket:
                    candidates.extend(bucket)
        return candidates
