"""
Tests for Circle Evaluation

Tests the Clenshaw summation of the trigonometric series in longitude:
closed-form cases, consistency between entry points and determinism.
"""

import math
import threading
import pytest
import numpy as np
from geocircle.core import Normalization, create_circle


def direct_series(cos_coeffs, sin_coeffs, lon, scale=1.0):
    """Term-by-term sum of the series at a longitude in degrees."""
    lam = math.radians(lon)
    return scale * sum(
        c * math.cos(m * lam) + s * math.sin(m * lam)
        for m, (c, s) in enumerate(zip(cos_coeffs, sin_coeffs))
    )


def make_circle(cos_coeffs, sin_coeffs, include_gradient=False, scale=1.0):
    """Evaluator with the given value coefficients and q = 1."""
    builder = create_circle(len(cos_coeffs) - 1, include_gradient,
                            Normalization.FULL, scale, 1.0, 1.0, 1.0, 0.0)
    builder.set_all(cos_coeffs, sin_coeffs)
    return builder.build()


class TestClosedForm:
    """Test sums with known closed forms."""

    def test_order_zero_invariance(self):
        """Test that an order-0 sum is independent of longitude."""
        circle = make_circle([2.5], [0.0])

        for lon in [-180.0, -90.0, 0.0, 37.0, 90.0, 179.9]:
            assert circle.evaluate(lon) == 2.5

    def test_single_cosine(self):
        """Test a single cos(lam) term."""
        circle = make_circle([0.0, 1.0], [0.0, 0.0])
        assert abs(circle.evaluate(60.0) - 0.5) < 1e-15

    def test_single_sine(self):
        """Test a single sin(lam) term."""
        circle = make_circle([0.0, 0.0], [0.0, 1.0])
        assert abs(circle.evaluate(90.0) - 1.0) < 1e-15

    def test_high_harmonic(self):
        """Test a single cos(5 lam) term."""
        circle = make_circle([0, 0, 0, 0, 0, 1.0], [0] * 6)

        for lon in [0.0, 12.0, 36.0, 100.0]:
            expected = math.cos(5 * math.radians(lon))
            assert abs(circle.evaluate(lon) - expected) < 1e-13

    def test_sine_of_order_zero_ignored(self):
        """Test that the order-0 sine coefficient does not contribute."""
        circle = make_circle([1.0, 0.0], [5.0, 0.0])
        assert circle.evaluate(45.0) == pytest.approx(1.0, abs=1e-15)

    def test_output_scale(self):
        """Test that results are multiplied by the output scale."""
        wc = [0.3, -1.2, 0.7]
        ws = [0.0, 0.4, 2.0]
        plain = make_circle(wc, ws)
        scaled = make_circle(wc, ws, scale=1e-4)

        assert scaled.evaluate(33.0) == pytest.approx(1e-4 * plain.evaluate(33.0), rel=1e-14)


class TestGenericSeries:
    """Test against a term-by-term sum."""

    @pytest.fixture
    def coefficients(self):
        """Random coefficients up to order 24."""
        rng = np.random.default_rng(7)
        return rng.standard_normal(25), rng.standard_normal(25)

    def test_matches_direct_sum(self, coefficients):
        """Test Clenshaw summation against direct summation."""
        wc, ws = coefficients
        circle = make_circle(wc, ws, scale=3.0)

        for lon in np.linspace(-180.0, 175.0, 72):
            expected = direct_series(wc, ws, lon, scale=3.0)
            assert circle.evaluate(lon) == pytest.approx(expected, rel=1e-11, abs=1e-11)

    def test_degrees_and_cossin_consistent(self, coefficients):
        """Test that both longitude forms agree away from boundaries."""
        circle = make_circle(*coefficients)

        for lon in [-151.3, -45.0, 0.5, 20.0, 123.4, 170.0]:
            lam = lon * math.pi / 180
            by_degrees = circle.evaluate(lon)
            by_cossin = circle.evaluate_cossin(math.cos(lam), math.sin(lam))
            assert by_degrees == pytest.approx(by_cossin, rel=1e-12, abs=1e-12)

    def test_call_is_evaluate(self, coefficients):
        """Test that calling the evaluator evaluates it."""
        circle = make_circle(*coefficients)
        assert circle(42.0) == circle.evaluate(42.0)

    def test_wrapped_longitudes(self, coefficients):
        """Test that longitudes one turn apart give the same value."""
        circle = make_circle(*coefficients)

        assert circle.evaluate(180.0) == circle.evaluate(-180.0)
        assert circle.evaluate(270.0) == circle.evaluate(-90.0)

    def test_idempotent(self, coefficients):
        """Test that repeated evaluation is bit-identical."""
        circle = make_circle(*coefficients, include_gradient=True)

        first = circle.gradient(77.7)
        for _ in range(5):
            assert circle.gradient(77.7) == first
            assert circle.evaluate(77.7) == first[0]

    def test_evaluate_many(self, coefficients):
        """Test that vectorized evaluation agrees with scalar evaluation."""
        circle = make_circle(*coefficients)
        lons = np.array([[-180.0, -90.0, 0.0], [45.0, 90.0, 180.0]])

        values = circle.evaluate_many(lons)

        assert values.shape == (2, 3)
        for index, lon in np.ndenumerate(lons):
            assert values[index] == pytest.approx(circle.evaluate(float(lon)), rel=1e-13, abs=1e-13)

    def test_concurrent_readers(self, coefficients):
        """Test that threads sharing one evaluator see the same results."""
        circle = make_circle(*coefficients)
        lons = np.linspace(-180.0, 179.0, 50)
        expected = [circle.evaluate(lon) for lon in lons]
        results = {}

        def worker(key):
            results[key] = [circle.evaluate(lon) for lon in lons]

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(results[i] == expected for i in range(4))


class TestZeroInput:
    """Test evaluators with all coefficients zero."""

    @pytest.fixture
    def circle(self):
        """Zero evaluator with gradient."""
        return create_circle(8, True, Normalization.SCHMIDT, 2.0,
                             1.0, 1.5, 0.6, 0.8).build()

    def test_value_exactly_zero(self, circle):
        """Test that the value is exactly zero."""
        for lon in [-180.0, -33.0, 0.0, 90.0, 150.0]:
            assert circle.evaluate(lon) == 0.0

    def test_gradient_exactly_zero(self, circle):
        """Test that value and gradient are exactly zero."""
        for lon in [-180.0, -33.0, 0.0, 90.0, 150.0]:
            assert circle.gradient(lon) == (0.0, 0.0, 0.0, 0.0)

    def test_evaluate_many_zero(self, circle):
        """Test that vectorized value and gradient are exactly zero."""
        values, gx, gy, gz = circle.evaluate_many(np.linspace(-180, 180, 9), gradient=True)

        for array in (values, gx, gy, gz):
            assert np.all(array == 0.0)


class TestGradientDisabled:
    """Test gradient requests on evaluators without derivative coefficients."""

    def test_zero_gradient_reported(self):
        """Test that the gradient is zero and the value is unaffected."""
        circle = make_circle([1.0, 2.0], [0.0, 3.0])

        value, gx, gy, gz = circle.gradient(30.0)

        assert value == circle.evaluate(30.0)
        assert (gx, gy, gz) == (0.0, 0.0, 0.0)

    def test_evaluate_many_zero_gradient(self):
        """Test the vectorized form without derivative coefficients."""
        circle = make_circle([1.0, 2.0], [0.0, 3.0])
        lons = np.array([0.0, 30.0, 60.0])

        values, gx, gy, gz = circle.evaluate_many(lons, gradient=True)

        np.testing.assert_allclose(values, circle.evaluate_many(lons))
        assert np.all(gx == 0.0) and np.all(gy == 0.0) and np.all(gz == 0.0)
