"""
Tests for the constraint encoder.
"""

import casadi as ca
import numpy as np
import pytest

from mpctrack.core.actuation.constraints import ConstraintEncoder
from mpctrack.core.actuation.layout import ACTUATOR_NAMES, STATE_NAMES

COEFFS = np.array([0.2, -0.1, 0.02, -0.001])


def _vars_from_rollout(layout, model, start, controls, coeffs):
    """Decision vector that follows the model exactly."""
    states = model.rollout(start, controls, coeffs)
    vars = np.zeros(layout.n_vars)
    for t in range(layout.horizon):
        for k, name in enumerate(STATE_NAMES):
            vars[layout.index(name, t)] = states[t, k]
    for t in range(layout.horizon - 1):
        for k, name in enumerate(ACTUATOR_NAMES):
            vars[layout.index(name, t)] = controls[t, k]
    return vars


class TestConstraintEncoder:
    """Tests for ConstraintEncoder."""

    def test_length(self, layout, model, rng):
        """One residual per state per step."""
        encoder = ConstraintEncoder(layout, model)
        residuals = encoder(rng.normal(size=layout.n_vars), COEFFS)
        assert residuals.shape == (6 * layout.horizon,)

    def test_initial_rows_are_the_initial_state(self, layout, model, rng):
        """Rows 0..5 return the initial-state variables unchanged."""
        encoder = ConstraintEncoder(layout, model)
        vars = rng.normal(size=layout.n_vars)
        residuals = encoder(vars, COEFFS)
        for k, name in enumerate(STATE_NAMES):
            assert residuals[k] == vars[layout.index(name, 0)]

    def test_model_consistent_trajectory_has_zero_residuals(self, layout, model, rng):
        """A trajectory generated by the model satisfies every dynamics row."""
        encoder = ConstraintEncoder(layout, model)
        start = np.array([0.0, 1.0, 0.1, 15.0, -0.3, 0.05])
        controls = np.column_stack([
            rng.uniform(-0.2, 0.2, layout.horizon - 1),
            rng.uniform(-1.0, 1.0, layout.horizon - 1),
        ])
        vars = _vars_from_rollout(layout, model, start, controls, COEFFS)
        residuals = encoder(vars, COEFFS)

        np.testing.assert_allclose(residuals[:6], start)
        np.testing.assert_allclose(residuals[6:], 0.0, atol=1e-12)

    def test_perturbation_shows_in_its_row(self, layout, model):
        """Moving one future state is reported in that state's row."""
        encoder = ConstraintEncoder(layout, model)
        start = np.array([0.0, 0.0, 0.0, 10.0, 0.0, 0.0])
        controls = np.zeros((layout.horizon - 1, 2))
        vars = _vars_from_rollout(layout, model, start, controls, COEFFS)
        vars[layout.index("x", 2)] += 0.5

        residuals = encoder(vars, COEFFS)
        assert residuals[layout.constraint_index(2, 0)] == pytest.approx(0.5)
        # step 3 now starts from the moved x
        assert residuals[layout.constraint_index(3, 0)] == pytest.approx(-0.5)
        assert residuals[layout.constraint_index(1, 0)] == pytest.approx(0.0, abs=1e-12)

    def test_symbolic_output(self, layout, model):
        """Symbolic inputs produce a casadi column of the same length."""
        encoder = ConstraintEncoder(layout, model)
        vars = ca.SX.sym("vars", layout.n_vars)
        coeffs = ca.SX.sym("coeffs", 4)
        g = encoder(vars, coeffs)
        assert isinstance(g, ca.SX)
        assert g.shape == (layout.n_constraints, 1)

    def test_symbolic_matches_numeric(self, layout, model, rng):
        """The casadi residuals evaluate to the numeric ones."""
        encoder = ConstraintEncoder(layout, model)
        vars = ca.SX.sym("vars", layout.n_vars)
        coeffs = ca.SX.sym("coeffs", 4)
        f = ca.Function("g", [vars, coeffs], [encoder(vars, coeffs)])

        values = rng.normal(size=layout.n_vars)
        np.testing.assert_allclose(
            f(values, COEFFS).full().ravel(), encoder(values, COEFFS), atol=1e-12
        )
