"""
Reference path polynomial helpers.

The reference path arrives as ascending-power coefficients fitted in the
vehicle frame: y = c0 + c1*x + c2*x^2 + ...
"""

import numpy as np

from mpctrack.exceptions import InvalidReferencePathError


def _length(coeffs):
    # casadi SX/MX/DM expose numel(), plain sequences and numpy arrays len()
    if hasattr(coeffs, "numel"):
        return coeffs.numel()
    return len(coeffs)


def polyeval(coeffs, x):
    """
    Evaluate sum(coeffs[i] * x**i).

    Works with floats, numpy arrays and casadi symbols for either argument,
    so the same expression can be differentiated by casadi when x is a
    decision variable.
    """
    result = 0.0
    for i in range(_length(coeffs)):
        result = result + coeffs[i] * x ** i
    return result


def path_coefficients(coeffs, degree=3):
    """
    Validate reference path coefficients and zero-pad them to degree + 1 entries.

    Args:
        coeffs: Ascending-power coefficients
        degree: Polynomial degree the solver was built for

    Returns:
        float array of length degree + 1
    """
    try:
        values = np.asarray(coeffs, dtype=float).ravel()
    except (TypeError, ValueError) as e:
        raise InvalidReferencePathError(f"coefficients are not numeric: {e}") from e

    if values.size == 0:
        raise InvalidReferencePathError("no coefficients given")
    if values.size > degree + 1:
        raise InvalidReferencePathError(
            f"got {values.size} coefficients, the controller is built for degree {degree}"
        )
    if not np.all(np.isfinite(values)):
        raise InvalidReferencePathError("coefficients must be finite")

    padded = np.zeros(degree + 1)
    padded[:values.size] = values
    return padded
