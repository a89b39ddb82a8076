"""
Simulation modules for City Designer.
"""

from .traffic import TrafficGenerator

__all__ = [
    'TrafficGenerator',
]
