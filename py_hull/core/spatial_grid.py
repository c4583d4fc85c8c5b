"""Bucketed spatial index over the points still available to refinement."""

import math
import sys
from typing import Dict, Iterable, List, NamedTuple, Tuple

import structlog

from ..exceptions import GridInvariantError, HullConfigError
from .point_set import Edge, Point

logger = structlog.get_logger()


def _clamp(value: float) -> float:
    """Pull an overflowed coordinate back to the largest finite float."""
    return max(-sys.float_info.max, min(value, sys.float_info.max))


class BBox(NamedTuple):
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def bbox_around(edge: Edge) -> BBox:
    """Bounding box of a single edge."""
    a, b = edge
    return BBox(min(a.x, b.x), min(a.y, b.y), max(a.x, b.x), max(a.y, b.y))


class SpatialGrid:
    """
    Square-cell grid mapping (cell_x, cell_y) to the points inside the cell.

    Each point sits in exactly one bucket. Points leave the grid through
    remove_point once the refiner turns them into hull vertices.
    """

    def __init__(self, points: Iterable[Point], cell_size: float):
        """
        Build the grid.

        Args:
            points: Points to bucket
            cell_size: Side length of a cell, must be finite and > 0

        Raises:
            HullConfigError: if cell_size is not a positive finite number
        """
        if not math.isfinite(cell_size) or cell_size <= 0:
            raise HullConfigError(f"Grid cell size must be positive, got {cell_size}")

        self.cell_size = float(cell_size)
        self.cells: Dict[Tuple[int, int], List[Point]] = {}
        self._count = 0

        for point in points:
            self.cells.setdefault(self.point_to_cell(point), []).append(point)
            self._count += 1

        logger.debug("Built spatial grid", points=self._count, cells=len(self.cells),
                     cell_size=self.cell_size)

    def __len__(self) -> int:
        return self._count

    def point_to_cell(self, point) -> Tuple[int, int]:
        """Cell coordinates containing the given (x, y)."""
        return (math.floor(point[0] / self.cell_size),
                math.floor(point[1] / self.cell_size))

    def cell_points(self, cell_x: int, cell_y: int) -> List[Point]:
        """Points bucketed in one cell."""
        return self.cells.get((cell_x, cell_y), [])

    def extend_bbox(self, bbox: BBox, scale_factor: float) -> BBox:
        """Grow bbox by scale_factor cells on every side."""
        offset = scale_factor * self.cell_size
        return BBox(bbox.min_x - offset, bbox.min_y - offset,
                    bbox.max_x + offset, bbox.max_y + offset)

    def range_points(self, bbox: BBox) -> List[Point]:
        """
        All points in cells overlapping the bbox.

        Cells are visited column by column; within a cell, points keep
        insertion order.
        """
        min_cx, min_cy = self.point_to_cell((_clamp(bbox.min_x), _clamp(bbox.min_y)))
        max_cx, max_cy = self.point_to_cell((_clamp(bbox.max_x), _clamp(bbox.max_y)))

        # Large search boxes over a sparse grid: walk the buckets instead
        n_range_cells = (max_cx - min_cx + 1) * (max_cy - min_cy + 1)
        if n_range_cells > len(self.cells):
            keys = sorted(
                key for key in self.cells
                if min_cx <= key[0] <= max_cx and min_cy <= key[1] <= max_cy
            )
        else:
            keys = [(cx, cy)
                    for cx in range(min_cx, max_cx + 1)
                    for cy in range(min_cy, max_cy + 1)]

        points = []
        for key in keys:
            points.extend(self.cells.get(key, ()))
        return points

    def remove_point(self, point: Point) -> None:
        """
        Remove one occurrence of an exactly equal point.

        Raises:
            GridInvariantError: if the point is not in the grid
        """
        key = self.point_to_cell(point)
        bucket = self.cells.get(key)
        if not bucket:
            raise GridInvariantError(f"Point {tuple(point)} is not in the grid")

        try:
            bucket.remove(point)
        except ValueError:
            raise GridInvariantError(f"Point {tuple(point)} is not in the grid") from None

        if not bucket:
            del self.cells[key]
        self._count -= 1
