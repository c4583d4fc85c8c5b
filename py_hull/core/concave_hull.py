"""
Concave hull refinement.

Starts from the convex hull and repeatedly digs long edges inward: for an
edge A-B longer than the concavity threshold, the nearest interior point M
that keeps both endpoint angles acute and does not make the ring cross
itself is inserted between A and B. Passes repeat until one inserts
nothing.

The neighbourhood of each edge is searched through a SpatialGrid, growing
the search box one step at a time up to a fraction of the occupied area.
Edges whose whole search area turns up nothing are remembered and not
searched again.
"""

import math
import sys
from dataclasses import dataclass, replace
from typing import Dict, Hashable, List, Mapping, Optional, Set, Tuple

import numpy as np
import structlog

from ..config import settings
from ..exceptions import HullConfigError, HullError
from .convex_hull import convex_hull
from .intersection import intersects_ring
from .point_set import MIN_HULL_POINTS, Edge, Point, as_points, is_degenerate, prepare_points
from .spatial_grid import SpatialGrid, bbox_around

logger = structlog.get_logger()


@dataclass
class HullOptions:
    """Tuning options for concave hull computation.

    Fields left as None are taken from settings.
    """

    concavity: Optional[float] = None  # Max edge length left untouched
    max_concave_angle_cos: Optional[float] = None  # cos of widest angle at A or B
    max_search_area_fraction: Optional[float] = None  # Search box limit vs occupied area

    def __post_init__(self):
        if self.concavity is None:
            self.concavity = settings.default_concavity
        if self.max_concave_angle_cos is None:
            self.max_concave_angle_cos = settings.max_concave_angle_cos
        if self.max_search_area_fraction is None:
            self.max_search_area_fraction = settings.max_search_area_fraction

        if not math.isfinite(self.concavity) or self.concavity <= 0:
            raise HullConfigError(f"Concavity must be positive, got {self.concavity}")
        if not -1.0 <= self.max_concave_angle_cos < 1.0:
            raise HullConfigError(
                f"Max concave angle cosine must be in [-1, 1), got {self.max_concave_angle_cos}"
            )
        if not 0.0 < self.max_search_area_fraction <= 1.0:
            raise HullConfigError(
                f"Max search area fraction must be in (0, 1], got {self.max_search_area_fraction}"
            )

    @property
    def max_sq_edge_len(self) -> float:
        """Edges with a squared length below this are left alone."""
        return self.concavity * self.concavity


def sq_length(a: Point, b: Point) -> float:
    dx, dy = b.x - a.x, b.y - a.y
    return dx * dx + dy * dy


def angle_cos(o: Point, a: Point, b: Point) -> float:
    """Cosine of the angle at o between o->a and o->b."""
    # Unit vectors first so products of large coordinates stay finite
    ax, ay = a.x - o.x, a.y - o.y
    bx, by = b.x - o.x, b.y - o.y
    a_len, b_len = math.hypot(ax, ay), math.hypot(bx, by)
    return (ax / a_len) * (bx / b_len) + (ay / a_len) * (by / b_len)


class ConcaveRefiner:
    """Digs a convex ring into a concave one using points from a grid.

    The refiner owns the grid: points are removed from it as they become
    hull vertices, so a grid must not be shared between refiners.
    """

    def __init__(
        self,
        grid: SpatialGrid,
        max_search_area: Tuple[float, float],
        options: Optional[HullOptions] = None,
    ):
        """
        Initialize the refiner.

        Args:
            grid: Interior points still available for insertion
            max_search_area: (width, height) beyond which an edge's search
                box stops growing
            options: Hull tuning options
        """
        self.grid = grid
        self.max_search_area = max_search_area
        self.options = options or HullOptions()
        self.skip_edges: Set[Edge] = set()
        self.passes = 0

    def refine(self, hull: List[Point]) -> List[Point]:
        """
        Refine a closed ring in place until a pass inserts no point.

        Terminates because each productive pass consumes at least one of the
        finitely many grid points.

        Args:
            hull: Closed ring, first vertex repeated at the end

        Returns:
            The same list, refined
        """
        while True:
            self.passes += 1
            inserted = self._refine_pass(hull)
            logger.debug("Refinement pass complete", pass_number=self.passes,
                         inserted=inserted, vertices=len(hull) - 1, remaining=len(self.grid))
            if not inserted:
                return hull

    def _refine_pass(self, hull: List[Point]) -> int:
        """Walk every edge of the ring once. Returns the number of insertions."""
        max_sq_edge_len = self.options.max_sq_edge_len
        inserted = 0

        # The ring grows while it is walked; a freshly inserted point makes
        # the next edge examined (M, B)
        i = 0
        while i < len(hull) - 1:
            edge = (hull[i], hull[i + 1])

            if sq_length(*edge) < max_sq_edge_len or edge in self.skip_edges:
                i += 1
                continue

            mid_point = self._search_mid_point(edge, hull)
            if mid_point is None:
                self.skip_edges.add(edge)
            else:
                hull.insert(i + 1, mid_point)
                self.grid.remove_point(mid_point)
                inserted += 1
            i += 1

        return inserted

    def _search_mid_point(self, edge: Edge, hull: List[Point]) -> Optional[Point]:
        """Grow a box around the edge until it holds an acceptable mid point."""
        max_width, max_height = self.max_search_area
        bbox = bbox_around(edge)
        scale_factor = 0

        while True:
            bbox = self.grid.extend_bbox(bbox, scale_factor)
            mid_point = self._mid_point(edge, self.grid.range_points(bbox), hull)
            scale_factor += 1
            if mid_point is not None:
                return mid_point
            if bbox.width >= max_width and bbox.height >= max_height:
                return None

    def _mid_point(self, edge: Edge, candidates: List[Point], hull: List[Point]) -> Optional[Point]:
        """
        Pick the candidate closest in angle to the edge.

        A candidate replaces the current best only if it narrows the angle
        at both A and B, so exact ties keep the first one seen.
        """
        a, b = edge
        best = None
        best_a_cos = self.options.max_concave_angle_cos
        best_b_cos = self.options.max_concave_angle_cos

        for point in candidates:
            a_cos = angle_cos(a, b, point)
            b_cos = angle_cos(b, a, point)
            if not (a_cos > best_a_cos and b_cos > best_b_cos):
                continue
            if intersects_ring((a, point), hull) or intersects_ring((b, point), hull):
                continue
            best_a_cos = a_cos
            best_b_cos = b_cos
            best = point

        return best


def _hull_for_points(points: List[Point], options: HullOptions) -> List[Point]:
    """Run the full pipeline on validated, non-degenerate points."""
    prepared = prepare_points(points)
    hull = convex_hull(prepared.points)

    if len(hull) < 4:
        # Collinear points: the "ring" is a doubled segment with no inside
        logger.debug("Collinear point set, returning convex hull", points=len(prepared))
        return hull

    hull_vertices = set(hull)
    # Descending (x, y) order fixes the order candidates come out of the grid
    inner_points = sorted(
        (p for p in prepared.points if p not in hull_vertices),
        key=lambda p: (p.x, p.y),
        reverse=True,
    )

    # Extents near the float limit overflow the area to inf
    cell_size = math.ceil(min(prepared.area / len(prepared), sys.float_info.max))
    grid = SpatialGrid(inner_points, cell_size)

    max_search_area = (
        prepared.width * options.max_search_area_fraction,
        prepared.height * options.max_search_area_fraction,
    )

    refiner = ConcaveRefiner(grid, max_search_area, options)
    concave = refiner.refine(hull)

    logger.debug("Refinement finished", passes=refiner.passes,
                 convex_vertices=len(hull_vertices), vertices=len(concave) - 1,
                 skipped_edges=len(refiner.skip_edges))
    return concave


def _resolve_options(concavity: Optional[float], options: Optional[HullOptions]) -> HullOptions:
    """Merge an explicit concavity into the options, validating the result."""
    if options is None:
        return HullOptions(concavity=concavity)
    if concavity is not None:
        return replace(options, concavity=concavity)
    return options


def compute_hull(points, concavity: Optional[float] = None, options: Optional[HullOptions] = None):
    """
    Compute the concave hull of a point set.

    Args:
        points: (N, 2) numpy array or sequence of (x, y) pairs
        concavity: Overrides options.concavity; smaller values give tighter,
            more concave outlines
        options: Hull tuning options

    Returns:
        Closed ring (first vertex repeated at the end) as a list of Points,
        or as an (K, 2) float array when points is a numpy array. Inputs
        with fewer than 4 points, or whose points are all identical, are
        returned unchanged.

    Raises:
        HullConfigError: if concavity or an option is out of range
        HullInputError: if points are not finite 2-D coordinates
    """
    options = _resolve_options(concavity, options)

    if not isinstance(points, (np.ndarray, list, tuple)):
        points = list(points)

    if len(points) < MIN_HULL_POINTS:
        return points

    parsed = as_points(points)
    if is_degenerate(parsed):
        return points

    logger.info("Computing concave hull", points=len(parsed), concavity=options.concavity)
    hull = _hull_for_points(parsed, options)

    if isinstance(points, np.ndarray):
        return np.array(hull, dtype=np.float64)
    return hull


def compute_hulls(
    clusters: Mapping[Hashable, object],
    concavity: Optional[float] = None,
    options: Optional[HullOptions] = None,
) -> Dict[Hashable, object]:
    """
    Compute one hull per cluster.

    A cluster whose points cannot be hulled is logged and mapped to an
    empty list; the remaining clusters are still processed. Configuration
    errors are raised before any cluster is touched.

    Args:
        clusters: Mapping of cluster key to that cluster's points
        concavity: Passed to compute_hull
        options: Passed to compute_hull

    Returns:
        Mapping of cluster key to hull, in the order of clusters
    """
    options = _resolve_options(concavity, options)

    hulls = {}
    for key, points in clusters.items():
        try:
            hulls[key] = compute_hull(points, options=options)
        except HullConfigError:
            raise
        except HullError as e:
            logger.warning("Failed to compute cluster hull", cluster=key, error=str(e))
            hulls[key] = []

    logger.info("Computed cluster hulls", clusters=len(hulls))
    return hulls
