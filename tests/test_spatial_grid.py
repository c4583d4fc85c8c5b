"""Tests for the bucketed spatial grid."""

import pytest
import numpy as np
from py_hull.core.point_set import Point
from py_hull.core.spatial_grid import BBox, SpatialGrid, bbox_around
from py_hull.exceptions import GridInvariantError, HullConfigError


@pytest.fixture
def grid():
    """Grid with unit cells over a few scattered points."""
    points = [Point(0.5, 0.5), Point(0.7, 0.2), Point(1.5, 0.5),
              Point(3.2, 3.9), Point(-0.5, 1.5)]
    return SpatialGrid(points, 1)


class TestGridConstruction:
    """Test bucketing of points."""

    def test_cells(self, grid):
        """Test that points land in floor(coord / cell_size) cells."""
        assert grid.cell_points(0, 0) == [Point(0.5, 0.5), Point(0.7, 0.2)]
        assert grid.cell_points(1, 0) == [Point(1.5, 0.5)]
        assert grid.cell_points(3, 3) == [Point(3.2, 3.9)]
        assert grid.cell_points(-1, 1) == [Point(-0.5, 1.5)]
        assert grid.cell_points(5, 5) == []

    def test_point_to_cell_floors_negatives(self):
        """Test that negative coordinates round towards minus infinity."""
        grid = SpatialGrid([], 2)
        assert grid.point_to_cell(Point(-0.1, -2.0)) == (-1, -1)
        assert grid.point_to_cell(Point(-2.1, 3.9)) == (-2, 1)

    def test_length(self, grid):
        assert len(grid) == 5

    @pytest.mark.parametrize("cell_size", [0, -1, -0.5, np.nan, np.inf])
    def test_invalid_cell_size(self, cell_size):
        """Test that a non-positive cell size is rejected up front."""
        with pytest.raises(HullConfigError):
            SpatialGrid([Point(0, 0)], cell_size)


class TestBBox:
    """Test bounding box helpers."""

    def test_bbox_around(self):
        """Test bbox of an edge in either direction."""
        expected = BBox(1, -2, 4, 3)
        assert bbox_around((Point(4, -2), Point(1, 3))) == expected
        assert bbox_around((Point(1, 3), Point(4, -2))) == expected
        assert expected.width == 3
        assert expected.height == 5

    def test_extend_bbox(self):
        """Test growth in units of cell size."""
        grid = SpatialGrid([], 2.5)
        bbox = grid.extend_bbox(BBox(0, 0, 1, 1), 2)

        assert bbox == BBox(-5, -5, 6, 6)

    def test_extend_by_zero(self):
        """Test that scale factor 0 keeps the box."""
        grid = SpatialGrid([], 1)
        assert grid.extend_bbox(BBox(0, 1, 2, 3), 0) == BBox(0, 1, 2, 3)


class TestRangePoints:
    """Test range queries."""

    def test_single_cell(self, grid):
        """Test a query inside one cell."""
        assert grid.range_points(BBox(0.1, 0.1, 0.2, 0.2)) == [Point(0.5, 0.5), Point(0.7, 0.2)]

    def test_inclusive_bounds(self, grid):
        """Test that both corner cells are included."""
        points = grid.range_points(BBox(0.0, 0.0, 1.0, 0.0))
        assert points == [Point(0.5, 0.5), Point(0.7, 0.2), Point(1.5, 0.5)]

    def test_whole_grid(self, grid):
        """Test that a box over everything returns every point."""
        points = grid.range_points(BBox(-10, -10, 10, 10))
        assert sorted(points) == sorted([Point(0.5, 0.5), Point(0.7, 0.2), Point(1.5, 0.5),
                                         Point(3.2, 3.9), Point(-0.5, 1.5)])

    def test_order_independent_of_box_size(self, grid):
        """Test that large and small boxes visit cells in the same order."""
        # 2x2 cells walks every cell, the wide box walks the buckets
        small = grid.range_points(BBox(-1, 0, 0, 1))
        large = grid.range_points(BBox(-1000, 0, 0.9, 1.9))

        assert small == large
        assert small == [Point(-0.5, 1.5), Point(0.5, 0.5), Point(0.7, 0.2)]

    def test_unbounded_box(self, grid):
        """Test that a box grown past the float range still returns every point."""
        points = grid.range_points(BBox(float("-inf"), float("-inf"), float("inf"), float("inf")))
        assert sorted(points) == sorted([Point(0.5, 0.5), Point(0.7, 0.2), Point(1.5, 0.5),
                                         Point(3.2, 3.9), Point(-0.5, 1.5)])

    def test_empty_region(self, grid):
        assert grid.range_points(BBox(5, 5, 6, 6)) == []


class TestRemovePoint:
    """Test point removal."""

    def test_remove(self, grid):
        """Test that a removed point is no longer returned."""
        grid.remove_point(Point(0.5, 0.5))

        assert grid.cell_points(0, 0) == [Point(0.7, 0.2)]
        assert len(grid) == 4

    def test_remove_last_in_cell(self, grid):
        """Test that emptied cells disappear from the grid."""
        grid.remove_point(Point(1.5, 0.5))

        assert (1, 0) not in grid.cells
        assert grid.range_points(BBox(1, 0, 1.9, 0.9)) == []

    def test_remove_one_occurrence(self):
        """Test that only one of two equal points is removed."""
        grid = SpatialGrid([Point(0.5, 0.5), Point(0.5, 0.5)], 1)
        grid.remove_point(Point(0.5, 0.5))

        assert grid.cell_points(0, 0) == [Point(0.5, 0.5)]

    def test_remove_missing_point(self, grid):
        """Test that removing an unknown point fails loudly."""
        with pytest.raises(GridInvariantError):
            grid.remove_point(Point(0.6, 0.6))
        with pytest.raises(GridInvariantError):
            grid.remove_point(Point(9, 9))

    def test_remove_twice(self, grid):
        """Test that a point cannot be consumed twice."""
        grid.remove_point(Point(3.2, 3.9))
        with pytest.raises(AssertionError):
            grid.remove_point(Point(3.2, 3.9))
