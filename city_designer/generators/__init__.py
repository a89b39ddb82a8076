"""
Generators for City Designer.

Contains the road network generator and the city generator that
orchestrates roads, parks, the fountain and buildings.
"""

from .road_generator import RoadGenerator
from .city_generator import CityGenerator

__all__ = [
    'RoadGenerator',
    'CityGenerator',
]
