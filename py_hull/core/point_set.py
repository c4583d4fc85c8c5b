"""
Point set preparation for hull computation.

Reads caller input into Point tuples, removes exact duplicates, sorts the
result by x then y and measures the extents of the occupied area. The
extents drive both the spatial grid cell size and the refinement search
limit.
"""

from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Sequence, Tuple

import numpy as np

from ..exceptions import HullInputError

# Below this many points there is nothing to refine.
MIN_HULL_POINTS = 4


class Point(NamedTuple):
    """Planar point. Equality is exact float equality."""
    x: float
    y: float


Edge = Tuple[Point, Point]


@dataclass
class PreparedPoints:
    """Deduplicated, sorted points together with their bounding extents."""
    points: List[Point]
    width: float
    height: float

    @property
    def area(self) -> float:
        """Area of the axis-aligned box around the points."""
        return self.width * self.height

    def __len__(self) -> int:
        return len(self.points)


def as_points(points) -> List[Point]:
    """
    Convert caller input into a list of Points.

    Accepts an (N, 2) numpy array or any iterable of coordinate pairs.

    Raises:
        HullInputError: if the input is not a collection of 2-D pairs or
            holds NaN/infinite coordinates
    """
    if isinstance(points, np.ndarray):
        array = points.astype(np.float64, copy=False)
    else:
        try:
            array = np.asarray(list(points), dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise HullInputError(f"Points must be (x, y) pairs: {e}") from e

    if array.size == 0:
        return []
    if array.ndim != 2 or array.shape[1] != 2:
        raise HullInputError(f"Expected an (N, 2) point array, got shape {array.shape}")
    if not np.all(np.isfinite(array)):
        raise HullInputError("Point coordinates must be finite")

    return [Point(float(x), float(y)) for x, y in array]


def is_degenerate(points: Sequence) -> bool:
    """
    True when the point set is too small or too uniform to build a hull.

    That is fewer than MIN_HULL_POINTS points, or every point identical.
    """
    if len(points) < MIN_HULL_POINTS:
        return True

    first = tuple(points[0])
    return all(tuple(p) == first for p in points)


def sort_by_x(points: Iterable[Point]) -> List[Point]:
    """Sort by x ascending, then y ascending."""
    return sorted(points, key=lambda p: (p.x, p.y))


def filter_duplicates(points: Iterable[Point]) -> List[Point]:
    """Sort points and drop exact duplicates."""
    unique = []
    for point in sort_by_x(points):
        if unique and unique[-1] == point:
            continue
        unique.append(point)
    return unique


def occupied_area(points: Sequence[Point]):
    """Return (width, height) of the bounding box of the points."""
    if not points:
        return 0.0, 0.0
    coords = np.array(points, dtype=np.float64)
    width, height = np.ptp(coords, axis=0)
    return float(width), float(height)


def prepare_points(points: Iterable[Point]) -> PreparedPoints:
    """Deduplicate and sort points and compute the occupied extents."""
    unique = filter_duplicates(points)
    width, height = occupied_area(unique)
    return PreparedPoints(points=unique, width=width, height=height)
