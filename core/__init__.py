"""
geocircle Core Module

This module contains the circle evaluator, its builder and the shared
data structures used by reducers that produce circle evaluators.
"""

from .normalization import Normalization
from .angles import reduce_angle, reduce_angles
from .config import CircleConfig
from .circle import CircleEvaluator, CircleBuilder, create_circle

__all__ = [
    'Normalization',
    'reduce_angle',
    'reduce_angles',
    'CircleConfig',
    'CircleEvaluator',
    'CircleBuilder',
    'create_circle',
]
