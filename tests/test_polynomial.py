"""
Tests for reference polynomial evaluation.
"""

import casadi as ca
import numpy as np
import pytest

from mpctrack.dynamics.polynomial import path_coefficients, polyeval
from mpctrack.exceptions import InvalidReferencePathError


class TestPolyeval:
    """Tests for polyeval."""

    def test_cubic(self):
        """Cubic evaluates exactly."""
        assert polyeval([1.0, 2.0, 3.0, 4.0], 2.0) == 1 + 4 + 12 + 32

    def test_constant(self):
        """A single coefficient is a constant."""
        assert polyeval([3.5], 100.0) == 3.5

    def test_higher_degree(self):
        """Degree beyond three matches numpy's evaluation."""
        coeffs = [0.5, -1.0, 0.25, 0.1, -0.02, 0.003]
        x = 1.7
        expected = np.polynomial.polynomial.polyval(x, coeffs)
        assert polyeval(coeffs, x) == pytest.approx(expected)

    def test_numpy_array_argument(self):
        """Vectorized over a numpy array of positions."""
        xs = np.array([0.0, 1.0, 2.0])
        np.testing.assert_allclose(polyeval([1.0, 1.0], xs), [1.0, 2.0, 3.0])

    def test_symbolic_position_gives_exact_derivative(self):
        """Differentiable when x is a casadi symbol."""
        x = ca.SX.sym("x")
        expr = polyeval([1.0, 2.0, 3.0], x)
        f = ca.Function("f", [x], [expr, ca.jacobian(expr, x)])
        value, slope = f(2.0)
        assert float(value) == pytest.approx(17.0)
        assert float(slope) == pytest.approx(2.0 + 2 * 3.0 * 2.0)

    def test_symbolic_coefficients(self):
        """Coefficients may be casadi parameters."""
        c = ca.SX.sym("c", 4)
        f = ca.Function("f", [c], [polyeval(c, 2.0)])
        assert float(f([1.0, 1.0, 1.0, 1.0])) == pytest.approx(15.0)


class TestPathCoefficients:
    """Tests for coefficient normalization."""

    def test_pads_to_degree(self):
        """Short inputs are zero-padded."""
        np.testing.assert_array_equal(path_coefficients([0.0, 0.0], 3), np.zeros(4))
        np.testing.assert_array_equal(path_coefficients([1.0], 2), [1.0, 0.0, 0.0])

    def test_keeps_full_length(self):
        """Full-length inputs are returned as floats."""
        coeffs = path_coefficients([1, 2, 3, 4], 3)
        assert coeffs.dtype == float
        np.testing.assert_array_equal(coeffs, [1.0, 2.0, 3.0, 4.0])

    def test_too_many_coefficients(self):
        """Higher degree than the solver was built for is rejected."""
        with pytest.raises(InvalidReferencePathError):
            path_coefficients([1, 2, 3, 4, 5], 3)

    def test_empty(self):
        """Empty input is rejected."""
        with pytest.raises(InvalidReferencePathError):
            path_coefficients([], 3)

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
    def test_non_finite(self, bad):
        """NaN and infinite coefficients are rejected."""
        with pytest.raises(InvalidReferencePathError):
            path_coefficients([0.0, bad], 3)

    def test_non_numeric(self):
        """Strings are rejected."""
        with pytest.raises(InvalidReferencePathError):
            path_coefficients(["a", "b"], 3)
