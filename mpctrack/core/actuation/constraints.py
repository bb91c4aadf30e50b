"""
Equality constraints of the MPC problem.

Rows 0..5 are the raw initial state variables; their bounds are set to the
measured state, which pins them. Every following row is
state_t - model(state_{t-1}, actuators_{t-1}) and is bounded to zero.
"""

import casadi as ca
import numpy as np

from mpctrack.core.actuation.layout import STATE_NAMES, DecisionLayout
from mpctrack.dynamics.vehicle_module import KinematicModel


class ConstraintEncoder:
    def __init__(self, layout: DecisionLayout, model: KinematicModel):
        self.layout = layout
        self.model = model

    def __call__(self, vars, coeffs):
        """
        Args:
            vars: Flat decision vector, numeric or casadi.SX
            coeffs: Reference polynomial coefficients, numeric or casadi.SX

        Returns:
            np.ndarray or casadi.SX column of length 6 * N
        """
        layout = self.layout
        residuals = [None] * layout.n_constraints

        for k, value in enumerate(layout.state_at(vars, 0)):
            residuals[layout.constraint_index(0, k)] = value

        for t in range(1, layout.horizon):
            current = layout.state_at(vars, t)
            predicted = self.model.predict(
                layout.state_at(vars, t - 1), layout.actuators_at(vars, t - 1), coeffs
            )
            for k in range(len(STATE_NAMES)):
                residuals[layout.constraint_index(t, k)] = current[k] - predicted[k]

        if isinstance(vars, (ca.SX, ca.MX)) or isinstance(coeffs, (ca.SX, ca.MX)):
            return ca.vertcat(*residuals)
        return np.array(residuals, dtype=float)
