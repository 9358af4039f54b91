"""
Angle Module

Reduction of longitudes in degrees to exact direction cosines.
"""

import math
from typing import Tuple
import numpy as np


def reduce_angle(x: float) -> Tuple[float, float]:
    """
    Compute the cosine and sine of an angle given in degrees.

    The angle is first wrapped into [-180, 180). Directions where the
    true value is zero return an exact zero instead of the residual of
    a radian-domain trig call:
    - |x| == 90 gives cos = 0
    - x == -180 gives sin = 0

    Args:
        x: Angle in degrees, within one turn of [-180, 180)

    Returns:
        Tuple of (cos(x), sin(x))
    """
    x = x - 360 if x >= 180 else (x + 360 if x < -180 else x)
    xi = math.radians(x)
    cosx = 0.0 if abs(x) == 90 else math.cos(xi)
    sinx = 0.0 if x == -180 else math.sin(xi)
    return cosx, sinx


def reduce_angles(x: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vectorized reduce_angle for an array of angles in degrees.

    Args:
        x: Array of angles in degrees

    Returns:
        Tuple of (cos, sin) arrays with the shape of x
    """
    x = np.asarray(x, dtype=np.float64)
    x = np.where(x >= 180, x - 360, np.where(x < -180, x + 360, x))
    xi = np.radians(x)
    cosx = np.where(np.abs(x) == 90, 0.0, np.cos(xi))
    sinx = np.where(x == -180, 0.0, np.sin(xi))
    return cosx, sinx
