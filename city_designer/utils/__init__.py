"""
Utility functions for City Designer.
"""

from .math_utils import (
    distance,
    normalize_vector,
    bbox_circle_overlap,
)
from .rasterize import (
    bresenham_line,
    midpoint_circle,
)

__all__ = [
    'distance',
    'normalize_vector',
    'bbox_circle_overlap',
    'bresenham_line',
    'midpoint_circle',
]
