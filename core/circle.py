"""
Circle Module

Evaluation of spherical harmonic sums on a circle of constant radius and
colatitude.

A reducer performs the degree sum once per circle, leaving one cosine
and one sine coefficient per order m. What remains is a trigonometric
series in longitude,

    V(lam) = scale * sum_{m=0}^{M} (C_m cos(m lam) + S_m sin(m lam))

which is summed here with Clenshaw's recurrence. Each evaluation costs
O(M) multiply-adds and a single (cos, sin) pair, instead of the O(N*M)
of a full spherical harmonic sum.
"""

import logging
from typing import Optional, Tuple
import numpy as np

from .angles import reduce_angle, reduce_angles
from .config import CircleConfig
from .normalization import Normalization

logger = logging.getLogger(__name__)


def _clenshaw_sum(cos_stack: np.ndarray, sin_stack: np.ndarray,
                  cl, sl) -> np.ndarray:
    """
    Sum a stack of trigonometric series sharing one base angle.

    Backward recurrence y_m = a_m + 2 cos(lam) y_{m+1} - y_{m+2}, seeded
    with y_{M+1} = y_{M+2} = 0. Then

        sum_m a_m cos(m lam) = y_0 - cos(lam) y_1
        sum_m b_m sin(m lam) = sin(lam) y_1

    Args:
        cos_stack: Cosine coefficients (num_series x M+1)
        sin_stack: Sine coefficients (num_series x M+1)
        cl: cos(lam), scalar or 1D array of longitudes
        sl: sin(lam), same shape as cl

    Returns:
        Array of shape (num_series,) + shape(cl) with each series summed
    """
    cl = np.asarray(cl, dtype=np.float64)
    sl = np.asarray(sl, dtype=np.float64)
    num_series, num_orders = cos_stack.shape
    shape = (num_series,) + cl.shape
    column = (num_series,) + (1,) * cl.ndim
    two_cl = 2 * cl

    # yc, ys hold y[m+1]; yc2, ys2 hold y[m+2]
    yc = np.zeros(shape)
    yc2 = np.zeros(shape)
    ys = np.zeros(shape)
    ys2 = np.zeros(shape)
    for m in range(num_orders - 1, -1, -1):
        yc, yc2 = cos_stack[:, m].reshape(column) + two_cl * yc - yc2, yc
        ys, ys2 = sin_stack[:, m].reshape(column) + two_cl * ys - ys2, ys

    # The sine register at m = 0 multiplies sin(0) and drops out
    return (yc - cl * yc2) + sl * ys2


def _frozen(values) -> np.ndarray:
    """Private read-only float64 copy of values."""
    array = np.array(values, dtype=np.float64)
    array.flags.writeable = False
    return array


class CircleEvaluator:
    """
    Spherical harmonic sum restricted to one circle.

    Instances are produced by CircleBuilder.build() and are immutable:
    every coefficient array is a private read-only copy, so a single
    evaluator can be shared between threads without locking.

    The gradient forms return Cartesian components in the frame whose z
    axis is the polar axis. They need derivative coefficients, i.e. a
    builder configured with include_gradient=True; otherwise the
    gradient is reported as zero.
    """

    def __init__(self, config: CircleConfig,
                 cos_coeffs: np.ndarray, sin_coeffs: np.ndarray,
                 radial_cos_coeffs: np.ndarray, radial_sin_coeffs: np.ndarray,
                 colat_cos_coeffs: np.ndarray, colat_sin_coeffs: np.ndarray):
        """
        Initialize the evaluator.

        Args:
            config: Circle parameters
            cos_coeffs: Coefficients of cos(m lam), length M+1
            sin_coeffs: Coefficients of sin(m lam), length M+1
            radial_cos_coeffs: dV/dr coefficients of cos(m lam) (length M+1 or 0)
            radial_sin_coeffs: dV/dr coefficients of sin(m lam)
            colat_cos_coeffs: dV/dtheta coefficients of cos(m lam)
            colat_sin_coeffs: dV/dtheta coefficients of sin(m lam)
        """
        self._config = config
        self.cos_coeffs = _frozen(cos_coeffs)
        self.sin_coeffs = _frozen(sin_coeffs)
        self.radial_cos_coeffs = _frozen(radial_cos_coeffs)
        self.radial_sin_coeffs = _frozen(radial_sin_coeffs)
        self.colat_cos_coeffs = _frozen(colat_cos_coeffs)
        self.colat_sin_coeffs = _frozen(colat_sin_coeffs)

        self._value_cos = _frozen(self.cos_coeffs[np.newaxis, :])
        self._value_sin = _frozen(self.sin_coeffs[np.newaxis, :])
        self._grad_cos: Optional[np.ndarray] = None
        self._grad_sin: Optional[np.ndarray] = None
        if config.include_gradient:
            self._init_gradient_stacks()

    def _init_gradient_stacks(self):
        """
        Stack the value, radial, colatitude and longitude series.

        d/dlam of C cos(m lam) + S sin(m lam) is
        m S cos(m lam) - m C sin(m lam), so the longitude series reuses
        the value coefficients weighted by m.
        """
        m = np.arange(self._config.num_orders, dtype=np.float64)
        self._grad_cos = _frozen([
            self.cos_coeffs,
            self.radial_cos_coeffs,
            self.colat_cos_coeffs,
            m * self.sin_coeffs,
        ])
        self._grad_sin = _frozen([
            self.sin_coeffs,
            self.radial_sin_coeffs,
            self.colat_sin_coeffs,
            -m * self.cos_coeffs,
        ])

    @property
    def config(self) -> CircleConfig:
        return self._config

    @property
    def max_order(self) -> int:
        return self._config.max_order

    @property
    def include_gradient(self) -> bool:
        return self._config.include_gradient

    @property
    def normalization(self) -> Normalization:
        return self._config.normalization

    @property
    def output_scale(self) -> float:
        return self._config.output_scale

    @property
    def reference_radius(self) -> float:
        return self._config.reference_radius

    @property
    def radius(self) -> float:
        return self._config.radius

    @property
    def sin_colatitude(self) -> float:
        return self._config.sin_colatitude

    @property
    def cos_colatitude(self) -> float:
        return self._config.cos_colatitude

    @property
    def q(self) -> float:
        return self._config.q

    @property
    def uq(self) -> float:
        return self._config.uq

    @property
    def uq2(self) -> float:
        return self._config.uq2

    def _sum(self, gradp: bool, cl, sl):
        """
        Evaluate the sum and, if gradp, its Cartesian gradient.

        Args:
            gradp: Whether to compute the gradient
            cl: cos(lam), scalar or array
            sl: sin(lam), scalar or array

        Returns:
            Tuple of (value, gradient) where gradient is None unless
            gradp, else a tuple (gx, gy, gz)
        """
        scale = self._config.output_scale
        if not gradp:
            sums = _clenshaw_sum(self._value_cos, self._value_sin, cl, sl)
            return scale * sums[0], None

        v, vr, vt, vl = _clenshaw_sum(self._grad_cos, self._grad_sin, cl, sl)
        u = self._config.sin_colatitude
        t = self._config.cos_colatitude
        r = self._config.radius

        # Components in circular coordinates:
        #   r:      dV/dr
        #   theta:  1/r * dV/dtheta
        #   lambda: 1/(r*u) * dV/dlambda
        gr = vr
        gt = vt / r
        gl = vl / (r * u) if u != 0 else np.zeros_like(vl)

        # Rotate into Cartesian coordinates
        gp = u * gr + t * gt
        gradx = cl * gp - sl * gl
        grady = sl * gp + cl * gl
        gradz = t * gr - u * gt
        return scale * v, (scale * gradx, scale * grady, scale * gradz)

    def evaluate(self, lon: float) -> float:
        """
        Evaluate the sum at a longitude.

        Args:
            lon: Longitude in degrees

        Returns:
            Value of the sum
        """
        cl, sl = reduce_angle(lon)
        return self.evaluate_cossin(cl, sl)

    __call__ = evaluate

    def evaluate_cossin(self, cos_lon: float, sin_lon: float) -> float:
        """
        Evaluate the sum at a longitude given by its cosine and sine.

        No reduction is applied; the caller supplies exact direction
        cosines.
        """
        value, _ = self._sum(False, cos_lon, sin_lon)
        return float(value)

    def gradient(self, lon: float) -> Tuple[float, float, float, float]:
        """
        Evaluate the sum and its gradient at a longitude.

        Args:
            lon: Longitude in degrees

        Returns:
            Tuple of (value, gradx, grady, gradz)
        """
        cl, sl = reduce_angle(lon)
        return self.gradient_cossin(cl, sl)

    def gradient_cossin(self, cos_lon: float,
                        sin_lon: float) -> Tuple[float, float, float, float]:
        """
        Evaluate the sum and its gradient at a longitude given by its
        cosine and sine.

        Returns:
            Tuple of (value, gradx, grady, gradz)
        """
        if not self._config.include_gradient:
            value, _ = self._sum(False, cos_lon, sin_lon)
            return float(value), 0.0, 0.0, 0.0
        value, (gradx, grady, gradz) = self._sum(True, cos_lon, sin_lon)
        return float(value), float(gradx), float(grady), float(gradz)

    def evaluate_many(self, lons: np.ndarray, gradient: bool = False):
        """
        Evaluate the sum at many longitudes in one pass.

        Args:
            lons: Longitudes in degrees (any shape)
            gradient: Also return the Cartesian gradient

        Returns:
            Array of values with the shape of lons, or a tuple
            (values, gradx, grady, gradz) of such arrays if gradient
        """
        lons = np.asarray(lons, dtype=np.float64)
        cl, sl = reduce_angles(lons.ravel())

        if not gradient:
            values, _ = self._sum(False, cl, sl)
            return values.reshape(lons.shape)

        if not self._config.include_gradient:
            values, _ = self._sum(False, cl, sl)
            zero = np.zeros(lons.shape)
            return values.reshape(lons.shape), zero, zero.copy(), zero.copy()

        values, grad = self._sum(True, cl, sl)
        return (values.reshape(lons.shape),) + tuple(g.reshape(lons.shape) for g in grad)

    def __repr__(self) -> str:
        return (f"CircleEvaluator(M={self.max_order}, gradient={self.include_gradient}, "
                f"norm={self.normalization.value}, r={self.radius}, "
                f"u={self.sin_colatitude:.6f}, t={self.cos_colatitude:.6f})")


class CircleBuilder:
    """
    Loading phase of a circle evaluator.

    A reducer creates a builder, stores the coefficients of each order
    with set_coefficients (any order, repeated calls overwrite), and
    calls build() to obtain the immutable CircleEvaluator. The builder
    is single-writer; evaluators it has produced are unaffected by later
    changes to it.
    """

    def __init__(self, config: CircleConfig):
        """
        Initialize the builder with zero coefficients.

        Args:
            config: Circle parameters
        """
        self.config = config
        n = config.num_orders
        ng = n if config.include_gradient else 0
        self._cos = np.zeros(n)
        self._sin = np.zeros(n)
        self._radial_cos = np.zeros(ng)
        self._radial_sin = np.zeros(ng)
        self._colat_cos = np.zeros(ng)
        self._colat_sin = np.zeros(ng)

    def set_coefficients(self, m: int, cos_coeff: float, sin_coeff: float,
                         radial_cos: Optional[float] = None,
                         radial_sin: Optional[float] = None,
                         colat_cos: Optional[float] = None,
                         colat_sin: Optional[float] = None):
        """
        Store the coefficients of the order m term.

        The derivative coefficients are stored only when the builder was
        configured with include_gradient; otherwise they are discarded.
        m must lie in [0, M].

        Args:
            m: Order of the term
            cos_coeff: Coefficient of cos(m lam)
            sin_coeff: Coefficient of sin(m lam)
            radial_cos: dV/dr coefficient of cos(m lam)
            radial_sin: dV/dr coefficient of sin(m lam)
            colat_cos: dV/dtheta coefficient of cos(m lam)
            colat_sin: dV/dtheta coefficient of sin(m lam)
        """
        derivatives = (radial_cos, radial_sin, colat_cos, colat_sin)
        given = [d is not None for d in derivatives]
        if any(given) and not all(given):
            raise TypeError("Derivative coefficients must be given all together")

        self._cos[m] = cos_coeff
        self._sin[m] = sin_coeff
        if all(given) and self.config.include_gradient:
            self._radial_cos[m] = radial_cos
            self._radial_sin[m] = radial_sin
            self._colat_cos[m] = colat_cos
            self._colat_sin[m] = colat_sin

    def set_all(self, cos_coeffs: np.ndarray, sin_coeffs: np.ndarray,
                radial_cos: Optional[np.ndarray] = None,
                radial_sin: Optional[np.ndarray] = None,
                colat_cos: Optional[np.ndarray] = None,
                colat_sin: Optional[np.ndarray] = None):
        """
        Store the coefficients of every order at once.

        Same rules as set_coefficients, with arrays of length M+1 in
        place of scalars.
        """
        derivatives = (radial_cos, radial_sin, colat_cos, colat_sin)
        given = [d is not None for d in derivatives]
        if any(given) and not all(given):
            raise TypeError("Derivative coefficients must be given all together")

        n = self.config.num_orders
        arrays = [cos_coeffs, sin_coeffs]
        if all(given) and self.config.include_gradient:
            arrays.extend(derivatives)
        arrays = [np.asarray(a, dtype=np.float64) for a in arrays]
        for array in arrays:
            if array.shape != (n,):
                raise ValueError(
                    f"Coefficient array shape {array.shape} doesn't match "
                    f"number of orders {n}"
                )

        self._cos[:] = arrays[0]
        self._sin[:] = arrays[1]
        if len(arrays) > 2:
            self._radial_cos[:] = arrays[2]
            self._radial_sin[:] = arrays[3]
            self._colat_cos[:] = arrays[4]
            self._colat_sin[:] = arrays[5]

    def build(self) -> CircleEvaluator:
        """Freeze the loaded coefficients into a CircleEvaluator."""
        logger.debug(
            "Building circle evaluator: M=%d, gradient=%s, norm=%s",
            self.config.max_order, self.config.include_gradient,
            self.config.normalization.value,
        )
        return CircleEvaluator(
            self.config,
            self._cos, self._sin,
            self._radial_cos, self._radial_sin,
            self._colat_cos, self._colat_sin,
        )


def create_circle(max_order: int, include_gradient: bool,
                  normalization: Normalization, output_scale: float,
                  reference_radius: float, radius: float,
                  sin_colatitude: float, cos_colatitude: float) -> CircleBuilder:
    """
    Create a builder for a circle evaluator.

    Args:
        max_order: Maximum order M of the sum
        include_gradient: Whether to hold coefficients for the gradient
        normalization: Normalization used by the producing reducer
        output_scale: Factor applied to the sum and gradient
        reference_radius: Reference radius a of the expansion
        radius: Spherical radius r of the circle
        sin_colatitude: Sine u of the spherical colatitude
        cos_colatitude: Cosine t of the spherical colatitude

    Returns:
        CircleBuilder with all coefficients zero
    """
    config = CircleConfig(
        max_order=max_order,
        include_gradient=include_gradient,
        normalization=normalization,
        output_scale=output_scale,
        reference_radius=reference_radius,
        radius=radius,
        sin_colatitude=sin_colatitude,
        cos_colatitude=cos_colatitude,
    )
    return CircleBuilder(config)
