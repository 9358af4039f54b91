"""
Normalization Module

Legendre function normalizations shared by circle evaluators and the
reducers that produce them.
"""

from enum import Enum


class Normalization(Enum):
    """
    Normalization of the associated Legendre functions.

    FULL: fully normalized, the mean square of each harmonic over the
          sphere is 1 (geodesy convention for gravity models)
    SCHMIDT: Schmidt semi-normalized, the mean square is 1/(2n+1)
             (geomagnetism convention)
    """
    FULL = 'full'
    SCHMIDT = 'schmidt'
