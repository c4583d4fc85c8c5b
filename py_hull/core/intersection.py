"""Segment intersection predicates used to keep the hull simple."""

from typing import Sequence

from .point_set import Edge, Point


def _orientation(p: Point, q: Point, r: Point) -> int:
    """1 for counter-clockwise, -1 for clockwise, 0 for collinear."""
    value = (q.x - p.x) * (r.y - p.y) - (q.y - p.y) * (r.x - p.x)
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _on_segment(p: Point, q: Point, r: Point) -> bool:
    """True when q, known to be collinear with p and r, lies between them."""
    return (min(p.x, r.x) <= q.x <= max(p.x, r.x)
            and min(p.y, r.y) <= q.y <= max(p.y, r.y))


def segments_intersect(seg1: Edge, seg2: Edge) -> bool:
    """
    Check whether two closed segments share at least one point.

    Crossings count, and so does touching: an endpoint lying on the other
    segment, or collinear overlap.
    """
    p1, q1 = seg1
    p2, q2 = seg2

    o1 = _orientation(p1, q1, p2)
    o2 = _orientation(p1, q1, q2)
    o3 = _orientation(p2, q2, p1)
    o4 = _orientation(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, q2, q1):
        return True
    if o3 == 0 and _on_segment(p2, p1, q2):
        return True
    if o4 == 0 and _on_segment(p2, q1, q2):
        return True

    return False


def intersects_ring(segment: Edge, ring: Sequence[Point]) -> bool:
    """
    Check a segment against every edge of a closed ring.

    Edges that share the segment's first endpoint are skipped: the segment
    is anchored on the ring there.
    """
    start = segment[0]
    for i in range(len(ring) - 1):
        edge = (ring[i], ring[i + 1])
        if start == edge[0] or start == edge[1]:
            continue
        if segments_intersect(segment, edge):
            return True
    return False
