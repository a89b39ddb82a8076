"""
Mathematical utilities for City Designer.
"""

from typing import Tuple
import math

from ..models.geometry import BBox


def distance(x0: float, y0: float, x1: float, y1: float) -> float:
    """Euclidean distance between two coordinates."""
    dx = x1 - x0
    dy = y1 - y0
    return math.sqrt(dx * dx + dy * dy)


def normalize_vector(dx: float, dy: float) -> Tuple[float, float, float]:
    """
    Normalize a 2D vector.

    Args:
        dx, dy: Vector components

    Returns:
        (ux, uy, length); (0, 0, 0) for a zero-length vector
    """
    length = math.sqrt(dx * dx + dy * dy)
    if length <= 0.0:
        return 0.0, 0.0, 0.0
    return dx / length, dy / length, length


def bbox_circle_overlap(
    bbox: BBox,
    center_x: float,
    center_y: float,
    radius: float
) -> bool:
    """
    Closest-point test between a box and a circle.

    Strict: a circle that only touches the box does not overlap it.
    """
    closest_x, closest_y = bbox.closest_point(center_x, center_y)
    dx = closest_x - center_x
    dy = closest_y - center_y
    return dx * dx + dy * dy < radius * radius
