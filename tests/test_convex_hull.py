"""Tests for monotone chain convex hull construction."""

import pytest
import numpy as np
from scipy.spatial import ConvexHull
from py_hull.core.convex_hull import convex_hull, cross
from py_hull.core.point_set import Point, prepare_points


def signed_area(ring):
    """Shoelace area of a closed ring, positive when counter-clockwise."""
    return 0.5 * sum(a.x * b.y - b.x * a.y for a, b in zip(ring, ring[1:]))


class TestCross:
    """Test the turn predicate."""

    def test_left_turn(self):
        assert cross(Point(0, 0), Point(1, 0), Point(1, 1)) > 0

    def test_right_turn(self):
        assert cross(Point(0, 0), Point(1, 0), Point(1, -1)) < 0

    def test_collinear(self):
        assert cross(Point(0, 0), Point(1, 1), Point(3, 3)) == 0


class TestConvexHull:
    """Test convex hull rings."""

    def test_square_with_center(self):
        """Test that the interior point is left out and the ring is closed."""
        prepared = prepare_points([
            Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1), Point(0.5, 0.5)
        ])
        ring = convex_hull(prepared.points)

        assert ring == [Point(1, 1), Point(0, 1), Point(0, 0), Point(1, 0), Point(1, 1)]

    def test_ring_is_closed_and_counter_clockwise(self):
        """Test ring closure and orientation."""
        rng = np.random.default_rng(7)
        prepared = prepare_points(Point(*p) for p in rng.uniform(-5, 5, (50, 2)))
        ring = convex_hull(prepared.points)

        assert ring[0] == ring[-1]
        assert signed_area(ring) > 0

    def test_starts_at_right_most_point(self):
        """Test where the ring starts."""
        prepared = prepare_points([Point(0, 0), Point(4, 1), Point(2, 3), Point(1, -2)])
        ring = convex_hull(prepared.points)

        assert ring[0] == Point(4, 1)

    def test_collinear_points_excluded(self):
        """Test that points on a hull edge are not hull vertices."""
        prepared = prepare_points([Point(0, 0), Point(1, 0), Point(2, 0), Point(1, 1)])
        ring = convex_hull(prepared.points)

        assert ring == [Point(2, 0), Point(1, 1), Point(0, 0), Point(2, 0)]
        assert Point(1, 0) not in ring

    def test_all_collinear(self):
        """Test that a line of points collapses to its two end points."""
        prepared = prepare_points(Point(i, 2 * i) for i in range(5))
        ring = convex_hull(prepared.points)

        assert ring == [Point(4, 8), Point(0, 0), Point(4, 8)]

    def test_tiny_inputs(self):
        """Test empty and single point inputs."""
        assert convex_hull([]) == []
        assert convex_hull([Point(1, 1)]) == [Point(1, 1), Point(1, 1)]

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_matches_qhull(self, seed):
        """Test that hull vertices agree with scipy's Qhull."""
        rng = np.random.default_rng(seed)
        coords = rng.normal(size=(200, 2))
        prepared = prepare_points(Point(*p) for p in coords)
        ring = convex_hull(prepared.points)

        qhull = ConvexHull(coords)
        expected = {Point(*coords[i]) for i in qhull.vertices}

        assert set(ring) == expected
        assert len(ring) - 1 == len(expected)
