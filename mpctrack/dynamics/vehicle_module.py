"""
Defines the vehicle's kinematic model used by the MPC.
States: [x, y, yaw (psi), speed (v), cross-track error (cte), heading error (epsi)]
Controls: [steering angle (delta), acceleration (a)]
"""

import casadi as ca
import numpy as np

from mpctrack.dynamics.polynomial import polyeval


def _is_symbolic(*values):
    for value in values:
        if isinstance(value, (ca.SX, ca.MX)):
            return True
        if isinstance(value, (list, tuple)) and _is_symbolic(*value):
            return True
    return False


class KinematicModel:
    def __init__(self, lf=2.67, dt=0.1):
        # Number of states and controls
        self.n_states = 6  # [x, y, psi, v, cte, epsi]
        self.n_controls = 2  # [delta, a]
        self.lf = lf  # Front axle to center of gravity (meters)
        self.dt = dt  # Discretization step (seconds)

    def predict(self, state, control, coeffs):
        """
        One step of the discrete kinematic bicycle model.

        cte and epsi are propagated with their own first-order update from
        the previous step instead of being recomputed from the new position.

        Args:
            state (sequence/casadi.SX): [x, y, psi, v, cte, epsi] at step t-1
            control (sequence/casadi.SX): [delta, a] applied at step t-1
            coeffs (sequence/casadi.SX): Reference polynomial coefficients

        Returns:
            tuple: State at step t, in the same order.
        """
        x0, y0, psi0, v0, _cte0, epsi0 = (state[i] for i in range(self.n_states))
        delta0, a0 = control[0], control[1]
        dt = self.dt

        if _is_symbolic(state, control, coeffs, x0, delta0):
            cos, sin, atan = ca.cos, ca.sin, ca.atan
        else:
            cos, sin, atan = np.cos, np.sin, np.arctan

        desired_y0 = polyeval(coeffs, x0)
        desired_psi0 = atan(coeffs[1])

        # Shared by the psi and epsi updates.
        heading_term = v0 * delta0 / self.lf * dt

        x1 = x0 + v0 * cos(psi0) * dt
        y1 = y0 + v0 * sin(psi0) * dt
        psi1 = psi0 + heading_term
        v1 = v0 + a0 * dt
        cte1 = (desired_y0 - y0) + v0 * sin(epsi0) * dt
        epsi1 = (psi0 - desired_psi0) + heading_term

        return x1, y1, psi1, v1, cte1, epsi1

    def rollout(self, state, controls, coeffs):
        """
        Apply predict() once per control.

        Returns:
            np.ndarray: (len(controls) + 1, 6) states, starting state included.
        """
        states = [np.asarray(state, dtype=float).ravel()]
        for control in controls:
            states.append(np.array(self.predict(states[-1], control, coeffs), dtype=float))
        return np.vstack(states)
