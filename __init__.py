"""
Circular Harmonic Sums

Fast evaluation of spherical harmonic sums along a circle of constant
latitude and height, for sampling gravity or magnetic field models at
many longitudes.

A reducer performs the O(N*M) degree sum once per circle and loads the
resulting per-order coefficients into a CircleBuilder. The frozen
CircleEvaluator then gives the value, and optionally the Cartesian
gradient, at any longitude in O(M) using Clenshaw summation.

This package includes:
- CircleEvaluator: immutable, thread-safe evaluation of value and gradient
- CircleBuilder / create_circle: the loading phase used by reducers
- reduce_angle: longitude reduction exact at quadrant boundaries
- Normalization: Legendre normalizations shared with reducers
"""

from geocircle.core import (
    Normalization,
    CircleConfig,
    CircleEvaluator,
    CircleBuilder,
    create_circle,
    reduce_angle,
    reduce_angles,
)

__version__ = '0.1.0'

__all__ = [
    'Normalization',
    'CircleConfig',
    'CircleEvaluator',
    'CircleBuilder',
    'create_circle',
    'reduce_angle',
    'reduce_angles',
]
