"""Tests for initial condition generation."""

import random
import unittest

from spatial_hash2d.params import Sim2DParams
from spatial_hash2d.core.init_conditions import (
    create_clustered_points,
    create_random_points,
    sample_velocity,
)


class TestRandomInitialization(unittest.TestCase):
    """Tests for random initialization mode."""

    def test_random_init_point_count(self) -> None:
        """Random init should create params.point_count points unless overridden."""
        params = Sim2DParams(point_count=120).clamp()
        self.assertEqual(len(create_random_points(params, random.Random(1))), 120)
        self.assertEqual(len(create_random_points(params, random.Random(1), count=7)), 7)
        self.assertEqual(create_random_points(params, random.Random(1), count=0), [])

    def test_random_init_inside_window(self) -> None:
        """Positions fall inside the window, velocities inside [-speed, speed]."""
        params = Sim2DParams(width=400, height=200, point_speed=2.0).clamp()
        for p in create_random_points(params, random.Random(5), count=500):
            self.assertTrue(0.0 <= p.x <= 400.0)
            self.assertTrue(0.0 <= p.y <= 200.0)
            self.assertLessEqual(abs(p.vx), 2.0)
            self.assertLessEqual(abs(p.vy), 2.0)

    def test_random_init_is_seeded(self) -> None:
        params = Sim2DParams().clamp()
        a = create_random_points(params, random.Random(11), count=20)
        b = create_random_points(params, random.Random(11), count=20)
        self.assertEqual(a, b)

    def test_zero_speed_points_are_static(self) -> None:
        self.assertEqual(sample_velocity(random.Random(0), 0.0), (0.0, 0.0))


class TestClusteredInitialization(unittest.TestCase):
    """Tests for clusters initialization mode."""

    def test_points_gather_near_centers(self) -> None:
        """With a tiny sigma every point sits close to one of the centers."""
        params = Sim2DParams(init_mode="clusters", cluster_count=1, cluster_sigma=1.0).clamp()
        points = create_clustered_points(params, random.Random(3), count=200)
        mean_x = sum(p.x for p in points) / len(points)
        mean_y = sum(p.y for p in points) / len(points)
        for p in points:
            self.assertLess(abs(p.x - mean_x), 10.0)
            self.assertLess(abs(p.y - mean_y), 10.0)

    def test_clamped_into_window(self) -> None:
        params = Sim2DParams(init_mode="clusters", cluster_sigma=1000.0).clamp()
        for p in create_clustered_points(params, random.Random(8), count=300):
            self.assertTrue(0.0 <= p.x <= 800.0)
            self.assertTrue(0.0 <= p.y <= 600.0)


if __name__ == "__main__":
    unittest.main()
