"""
Processing modules for City Designer.

Contains the road point spatial index and building placement validation.
"""

from .spatial_index import SpatialIndex, RoadPointIndex
from .placement import (
    PlacementRejection,
    PlacementResult,
    is_clear_of_parks_approx,
    check_placement,
    try_place,
    find_violations,
)

__all__ = [
    'SpatialIndex',
    'RoadPointIndex',
    'PlacementRejection',
    'PlacementResult',
    'is_clear_of_parks_approx',
    'check_placement',
    'try_place',
    'find_violations',
]
