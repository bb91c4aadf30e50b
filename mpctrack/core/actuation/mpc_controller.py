"""
Model Predictive Controller (MPC) for vehicle trajectory tracking.
Uses CasADi for symbolic differentiation and IPOPT as the solver.
"""

import threading
import time

import casadi as ca
import numpy as np

from mpctrack.config import MPCConfig
from mpctrack.core.actuation.constraints import ConstraintEncoder
from mpctrack.core.actuation.cost import CostFunction
from mpctrack.core.actuation.layout import STATE_NAMES, DecisionLayout
from mpctrack.dynamics.polynomial import path_coefficients
from mpctrack.dynamics.vehicle_module import KinematicModel
from mpctrack.logging import get_logger
from mpctrack.types import SolveResult, VehicleState

logger = get_logger(__name__)


class MPCController:
    def __init__(self, config=None):
        """
        Build the MPC problem for a fixed configuration.
        Args:
            config (MPCConfig): Controller configuration, defaults if omitted.
        """
        self.config = (config or MPCConfig()).validate()

        # Flat decision vector layout over the horizon
        self.layout = DecisionLayout(self.config.horizon)

        # Vehicle dynamics model
        self.dynamics = KinematicModel(lf=self.config.lf, dt=self.config.dt)
        self.cost = CostFunction(self.config, self.layout)
        self.constraints = ConstraintEncoder(self.layout, self.dynamics)

        # solver.stats() describes the most recent call only
        self._lock = threading.Lock()

        # Setup MPC optimization problem
        self.setup_mpc()

    def setup_mpc(self):
        """Setup symbolic variables, the combined cost/constraint function and the IPOPT solver."""
        cfg = self.config

        # Symbolic variables
        # vars: states (6 x N) and actuators (2 x N-1), flattened by the layout
        # coeffs: reference polynomial, passed as a parameter every cycle
        self.vars = ca.SX.sym('vars', self.layout.n_vars)
        self.coeffs = ca.SX.sym('coeffs', cfg.poly_degree + 1)

        # Cost at index 0, constraints after it
        fg = ca.vertcat(self.cost(self.vars), self.constraints(self.vars, self.coeffs))
        self.fg_eval = ca.Function(
            'fg_eval', [self.vars, self.coeffs], [fg], ['vars', 'coeffs'], ['fg']
        )

        # NLP problem setup
        nlp = {
            'x': self.vars,     # Decision variables
            'p': self.coeffs,   # Parameters (reference path)
            'f': fg[0],         # Objective function
            'g': fg[1:],        # Constraints
        }

        opts = {
            'ipopt.print_level': cfg.print_level,
            'ipopt.sb': 'yes',
            'print_time': 0,
            # CPU-time budget per cycle, not wall-clock; IPOPT returns its
            # current iterate when exceeded.
            'ipopt.max_cpu_time': cfg.max_cpu_time,
        }

        self.solver = ca.nlpsol('solver', 'ipopt', nlp, opts)
        logger.debug(
            "MPC problem built: horizon=%d, %d variables, %d constraints",
            self.layout.horizon, self.layout.n_vars, self.layout.n_constraints,
        )

    def initial_guess(self, state):
        """Zero vector with the first entry of every state segment set to `state`."""
        vars0 = np.zeros(self.layout.n_vars)
        for name, value in zip(STATE_NAMES, state.to_array()):
            vars0[self.layout.index(name, 0)] = value
        return vars0

    def variable_bounds(self):
        """
        Lower and upper bounds of the decision vector.
        x, y, psi, cte and epsi are free; v, delta and a are limited.
        """
        cfg = self.config
        lbx = np.full(self.layout.n_vars, -np.inf)
        ubx = np.full(self.layout.n_vars, np.inf)

        limits = {
            'v': cfg.speed_limit,  # backward speed allowed
            'delta': cfg.max_steering,
            'a': cfg.max_acceleration,
        }
        for name, limit in limits.items():
            segment = self.layout[name].slice
            lbx[segment] = -limit
            ubx[segment] = limit
        return lbx, ubx

    def constraint_bounds(self, state):
        """
        Lower and upper bounds of the constraint vector.
        All rows are equalities: the initial state rows equal `state`, the rest zero.
        """
        lbg = np.zeros(self.layout.n_constraints)
        for k, value in enumerate(state.to_array()):
            lbg[self.layout.constraint_index(0, k)] = value
        return lbg, lbg.copy()

    def evaluate(self, vars, coeffs):
        """
        Numeric [cost, constraints...] for a decision vector.
        Args:
            vars (array-like): Decision vector.
            coeffs (array-like): Reference polynomial coefficients.
        Returns:
            np.ndarray: cost at index 0, then the 6 * N residuals.
        """
        coeffs = path_coefficients(coeffs, self.config.poly_degree)
        return self.fg_eval(np.asarray(vars, dtype=float), coeffs).full().ravel()

    def solve(self, init_state, coeffs):
        """
        Compute the actuator commands for the current cycle.
        Args:
            init_state (VehicleState or sequence): [x, y, psi, v, cte, epsi].
            coeffs (sequence): Reference polynomial coefficients, ascending powers.
        Returns:
            SolveResult: First steering/acceleration command and predicted x/y.

        Solves on one controller run one at a time. A call issued while
        another thread is solving waits for it, so its wall time can reach
        several multiples of max_cpu_time. Use one controller per thread
        when each caller needs its own time budget.
        """
        state = VehicleState.from_sequence(init_state).validate()
        coeffs = path_coefficients(coeffs, self.config.poly_degree)

        vars0 = self.initial_guess(state)
        lbx, ubx = self.variable_bounds()
        lbg, ubg = self.constraint_bounds(state)

        start = time.perf_counter()
        with self._lock:
            try:
                sol = self.solver(x0=vars0, lbx=lbx, ubx=ubx, lbg=lbg, ubg=ubg, p=coeffs)
                stats = self.solver.stats()
                solution = sol['x'].full().ravel()
                cost = float(sol['f'])
            except RuntimeError as e:
                logger.error("Solver raised, falling back to the initial guess: %s", e)
                stats = {'success': False, 'return_status': 'Solver_Exception'}
                solution, cost = vars0, float('nan')
        solve_time = time.perf_counter() - start

        success = bool(stats.get('success', False))
        status = str(stats.get('return_status', 'unknown'))
        if not success:
            # Covers the time budget too; the candidate is used either way.
            logger.warning("Solver did not converge (status: %s), using best candidate", status)

        if not np.all(np.isfinite(solution)):
            logger.error("Solver returned non-finite values (status: %s), using the initial guess", status)
            solution, success = vars0, False

        logger.debug(
            "MPC solve: status=%s cost=%.4f iterations=%s time=%.3fs",
            status, cost, stats.get('iter_count', 0), solve_time,
        )
        return self.extract(solution, success, status, cost, stats.get('iter_count', 0), solve_time)

    def extract(self, solution, success=True, status='', cost=float('nan'), iterations=0, solve_time=0.0):
        """Build the SolveResult from a decision vector."""
        cfg = self.config
        segments = self.layout.split(solution)
        steering = float(np.clip(segments['delta'][0], -cfg.max_steering, cfg.max_steering))
        acceleration = float(np.clip(segments['a'][0], -cfg.max_acceleration, cfg.max_acceleration))
        return SolveResult(
            steering=steering,
            acceleration=acceleration,
            x=segments['x'],
            y=segments['y'],
            success=success,
            status=status,
            cost=cost,
            iterations=int(iterations),
            solve_time=solve_time,
            solution=np.asarray(solution, dtype=float),
        )
