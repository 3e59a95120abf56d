"""Tests for the uniform-grid spatial hash."""

import random
import unittest

from spatial_hash2d.physics.spatial_hash import (
    HASH_X,
    HASH_Y,
    SpatialHash,
    cell_coords,
    cell_key,
)


class TestCellCoords(unittest.TestCase):
    """Tests for position -> cell mapping."""

    def test_positive_positions(self) -> None:
        """Positive positions land in the same cell under both policies."""
        for policy in ("floor", "trunc"):
            self.assertEqual(cell_coords(10.0, 10.0, 50.0, policy), (0, 0))
            self.assertEqual(cell_coords(60.0, 10.0, 50.0, policy), (1, 0))
            self.assertEqual(cell_coords(110.0, 149.9, 50.0, policy), (2, 2))

    def test_cell_boundary_belongs_to_upper_cell(self) -> None:
        self.assertEqual(cell_coords(50.0, 100.0, 50.0), (1, 2))

    def test_floor_policy_negative(self) -> None:
        """Floor keeps negative cells the same width as positive ones."""
        self.assertEqual(cell_coords(-1.0, -1.0, 50.0, "floor"), (-1, -1))
        self.assertEqual(cell_coords(-49.0, -50.0, 50.0, "floor"), (-1, -1))
        self.assertEqual(cell_coords(-51.0, 0.0, 50.0, "floor"), (-2, 0))

    def test_trunc_policy_negative(self) -> None:
        """Truncation folds (-50, 50) into cell 0."""
        self.assertEqual(cell_coords(-1.0, -1.0, 50.0, "trunc"), (0, 0))
        self.assertEqual(cell_coords(-49.0, 49.0, 50.0, "trunc"), (0, 0))
        self.assertEqual(cell_coords(-51.0, 0.0, 50.0, "trunc"), (-1, 0))


class TestCellKey(unittest.TestCase):
    """Tests for the cell-key mix."""

    def test_axis_cells(self) -> None:
        self.assertEqual(cell_key(0, 0), 0)
        self.assertEqual(cell_key(1, 0), HASH_X)
        self.assertEqual(cell_key(0, 1), HASH_Y)
        self.assertEqual(cell_key(1, 1), HASH_X ^ HASH_Y)

    def test_wraps_like_32_bit_int(self) -> None:
        """Keys wrap to the signed 32-bit range."""
        self.assertEqual(cell_key(-1, 0), -HASH_X)
        self.assertEqual(cell_key(100, 0), 100 * HASH_X - 2 * (1 << 32))
        for cx in range(-300, 300, 7):
            for cy in range(-300, 300, 11):
                k = cell_key(cx, cy)
                self.assertGreaterEqual(k, -(1 << 31))
                self.assertLess(k, 1 << 31)

    def test_deterministic(self) -> None:
        self.assertEqual(cell_key(12, -7), cell_key(12, -7))


class TestSpatialHashBasics(unittest.TestCase):
    """Tests for clear/insert/build bookkeeping."""

    def test_rejects_bad_config(self) -> None:
        with self.assertRaises(ValueError):
            SpatialHash(0.0)
        with self.assertRaises(ValueError):
            SpatialHash(float("nan"))
        with self.assertRaises(ValueError):
            SpatialHash(50.0, cell_policy="round")
        with self.assertRaises(ValueError):
            SpatialHash(50.0, key_mode="morton")

    def test_clear_empties_grid(self) -> None:
        grid = SpatialHash(50.0)
        grid.insert(0, 10.0, 10.0)
        grid.insert(1, 300.0, 300.0)
        self.assertEqual(len(grid), 2)
        self.assertEqual(grid.bucket_count, 2)

        grid.clear()
        self.assertEqual(len(grid), 0)
        self.assertEqual(grid.bucket_count, 0)
        self.assertEqual(grid.query(10.0, 10.0), [])

    def test_every_index_in_exactly_one_bucket(self) -> None:
        rng = random.Random(3)
        xs = [rng.uniform(-100.0, 900.0) for _ in range(500)]
        ys = [rng.uniform(-100.0, 700.0) for _ in range(500)]
        grid = SpatialHash(50.0)
        grid.build(xs, ys)

        seen: list[int] = []
        for bucket in grid.buckets.values():
            seen.extend(bucket)
        self.assertEqual(sorted(seen), list(range(500)))
        for i in range(500):
            self.assertIn(i, grid.buckets[grid.key_of(xs[i], ys[i])])

    def test_insert_does_not_deduplicate(self) -> None:
        grid = SpatialHash(50.0)
        grid.insert(4, 10.0, 10.0)
        grid.insert(4, 10.0, 10.0)
        self.assertEqual(grid.query(10.0, 10.0), [4, 4])

    def test_build_discards_previous_state(self) -> None:
        grid = SpatialHash(50.0)
        grid.build([10.0], [10.0])
        grid.build([400.0], [300.0])
        self.assertEqual(grid.query(10.0, 10.0), [])
        self.assertEqual(grid.query(400.0, 300.0), [0])

    def test_pair_keys(self) -> None:
        grid = SpatialHash(50.0, key_mode="pair")
        grid.build([10.0, 60.0], [10.0, 10.0])
        self.assertEqual(set(grid.buckets), {(0, 0), (1, 0)})
        self.assertEqual(grid.key_of(-1.0, 120.0), (-1, 2))


class TestSpatialHashQuery(unittest.TestCase):
    """Tests for the 3x3 neighborhood query."""

    def test_three_points_in_a_row(self) -> None:
        """Cells 0 and 1 are in the neighborhood of cell 0, cell 2 is not."""
        grid = SpatialHash(50.0)
        grid.build([10.0, 60.0, 110.0], [10.0, 10.0, 10.0])
        self.assertEqual(sorted(grid.query(10.0, 10.0)), [0, 1])
        self.assertEqual(sorted(grid.query(60.0, 10.0)), [0, 1, 2])

    def test_no_false_negatives_in_neighborhood(self) -> None:
        """Any query inside the 3x3 block around a point's cell finds it."""
        rng = random.Random(11)
        n = 200
        xs = [rng.uniform(-50.0, 850.0) for _ in range(n)]
        ys = [rng.uniform(-50.0, 650.0) for _ in range(n)]
        for key_mode in ("hash", "pair"):
            grid = SpatialHash(50.0, key_mode=key_mode)
            grid.build(xs, ys)
            for i in range(n):
                cx, cy = grid.cell_of(xs[i], ys[i])
                for dx in (-1, 0, 1):
                    for dy in (-1, 0, 1):
                        qx = (cx + dx + 0.5) * 50.0
                        qy = (cy + dy + 0.5) * 50.0
                        self.assertIn(i, grid.query(qx, qy), f"{key_mode}: point {i} from ({qx}, {qy})")

    def test_query_is_idempotent_across_rebuilds(self) -> None:
        rng = random.Random(5)
        xs = [rng.uniform(0.0, 800.0) for _ in range(300)]
        ys = [rng.uniform(0.0, 600.0) for _ in range(300)]
        grid = SpatialHash(50.0)
        grid.build(xs, ys)
        first = grid.query(400.0, 300.0)
        grid.clear()
        for i in range(len(xs)):
            grid.insert(i, xs[i], ys[i])
        self.assertEqual(grid.query(400.0, 300.0), first)

    def test_negative_point_floor_vs_trunc(self) -> None:
        """A point just below zero is two cells away from cell 1 only under floor."""
        floor_grid = SpatialHash(50.0, cell_policy="floor")
        trunc_grid = SpatialHash(50.0, cell_policy="trunc")
        for grid in (floor_grid, trunc_grid):
            grid.build([-1.0], [10.0])
            self.assertEqual(grid.query(10.0, 10.0), [0])
        self.assertEqual(floor_grid.query(60.0, 10.0), [])
        self.assertEqual(trunc_grid.query(60.0, 10.0), [0])

    def test_wider_ring(self) -> None:
        grid = SpatialHash(50.0)
        grid.build([10.0, 60.0, 110.0, 160.0], [10.0, 10.0, 10.0, 10.0])
        self.assertEqual(sorted(grid.query(10.0, 10.0, ring=2)), [0, 1, 2])
        self.assertEqual(grid.query(10.0, 10.0, ring=0), [0])

    def test_colliding_keys_alias_buckets(self) -> None:
        """Buckets are merged by key equality, so colliding keys repeat candidates."""

        class CollidingHash(SpatialHash):
            __slots__ = ()

            def _key(self, cell_x: int, cell_y: int) -> int:
                return 0

        grid = CollidingHash(50.0)
        grid.build([10.0, 700.0], [10.0, 500.0])
        self.assertEqual(grid.bucket_count, 1)
        candidates = grid.query(10.0, 10.0)
        # Nine lookups hit the same bucket, far point included.
        self.assertEqual(len(candidates), 18)
        self.assertEqual(candidates.count(1), 9)


if __name__ == "__main__":
    unittest.main()
