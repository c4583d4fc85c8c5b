"""Convex hull construction using Andrew's monotone chain."""

from typing import List, Sequence

from .point_set import Point


def cross(o: Point, a: Point, b: Point) -> float:
    """Z component of (a - o) x (b - o). Positive for a left turn."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def _chain(points) -> List[Point]:
    """Half hull for points scanned in the given order, last point dropped."""
    chain = []
    for point in points:
        # Collinear triples pop as well, so points lying on a hull edge
        # never become hull vertices
        while len(chain) >= 2 and cross(chain[-2], chain[-1], point) <= 0:
            chain.pop()
        chain.append(point)
    chain.pop()
    return chain


def convex_hull(points: Sequence[Point]) -> List[Point]:
    """
    Compute the convex hull of sorted, deduplicated points.

    Args:
        points: Points sorted by x then y with no duplicates

    Returns:
        Closed counter-clockwise ring starting at the right-most point; the
        first vertex is repeated at the end
    """
    if not points:
        return []
    if len(points) == 1:
        return [points[0], points[0]]

    lower = _chain(points)
    upper = _chain(reversed(points))

    ring = upper + lower
    ring.append(ring[0])
    return ring
