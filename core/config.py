"""
Config Module

Scalar parameters fixing one circle of constant radius and colatitude.
"""

from dataclasses import dataclass, field

from .normalization import Normalization


@dataclass(frozen=True)
class CircleConfig:
    """
    Configuration for a circle evaluator.

    The circle has radius u*r and lies a distance t*r above the
    equatorial plane. q, uq and uq2 are derived once at construction.
    """
    max_order: int                                    # Highest Fourier order M
    include_gradient: bool = False                    # Store derivative coefficients
    normalization: Normalization = Normalization.FULL # Must match the producing reducer
    output_scale: float = 1.0                         # Undoes upstream overflow scaling
    reference_radius: float = 1.0                     # a, reference radius of the model
    radius: float = 1.0                               # r, spherical radius of the circle
    sin_colatitude: float = 1.0                       # u
    cos_colatitude: float = 0.0                       # t

    q: float = field(init=False, repr=False)
    uq: float = field(init=False, repr=False)
    uq2: float = field(init=False, repr=False)

    def __post_init__(self):
        """Validate configuration and cache derived factors."""
        if self.max_order < 0:
            raise ValueError("Max order must be non-negative")
        if self.radius == 0:
            raise ValueError("Radius must be nonzero")
        try:
            normalization = Normalization(self.normalization)
        except ValueError:
            raise ValueError(
                f"Normalization must be 'full' or 'schmidt', got {self.normalization!r}"
            ) from None
        object.__setattr__(self, 'normalization', normalization)

        q = self.reference_radius / self.radius
        uq = self.sin_colatitude * q
        object.__setattr__(self, 'q', q)
        object.__setattr__(self, 'uq', uq)
        object.__setattr__(self, 'uq2', uq * uq)

    @property
    def num_orders(self) -> int:
        """Number of orders 0..M."""
        return self.max_order + 1
