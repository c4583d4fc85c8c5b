"""
Core hull computation functionality.
"""

from .point_set import Point, PreparedPoints, as_points, is_degenerate, prepare_points
from .convex_hull import convex_hull
from .spatial_grid import BBox, SpatialGrid, bbox_around
from .intersection import segments_intersect, intersects_ring
from .concave_hull import ConcaveRefiner, HullOptions, compute_hull, compute_hulls

__all__ = ['Point', 'PreparedPoints', 'as_points', 'is_degenerate', 'prepare_points',
           'convex_hull', 'BBox', 'SpatialGrid', 'bbox_around',
           'segments_intersect', 'intersects_ring',
           'ConcaveRefiner', 'HullOptions', 'compute_hull', 'compute_hulls']
