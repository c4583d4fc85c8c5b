"""
Concave hull computation for clustered 2-D points.
"""

from .core import HullOptions, compute_hull, compute_hulls
from .exceptions import GridInvariantError, HullConfigError, HullError, HullInputError

__version__ = "0.1.0"

__all__ = ['HullOptions', 'compute_hull', 'compute_hulls',
           'HullError', 'HullConfigError', 'HullInputError', 'GridInvariantError']
