"""
MPC objective.

Every term is divided by a characteristic scale before squaring, so that the
weights in CostWeights can be compared with each other directly.
"""

from mpctrack.config import MPCConfig
from mpctrack.core.actuation.layout import DecisionLayout


class CostFunction:
    def __init__(self, config: MPCConfig, layout: DecisionLayout):
        self.config = config
        self.layout = layout

    def __call__(self, vars):
        """
        Scalar cost of a decision vector.

        Args:
            vars: Flat decision vector, numeric or casadi.SX

        Returns:
            float or casadi.SX
        """
        cfg = self.config
        w = cfg.weights
        N = self.layout.horizon
        idx = self.layout.index
        v_ref = cfg.reference_speed

        cost = 0.0

        # Tracking and speed. The cte weight grows along the horizon.
        for t in range(N):
            cost += w.cte * (t + 1) * (vars[idx("cte", t)] / cfg.scales.cte) ** 2
            cost += w.epsi * (vars[idx("epsi", t)] / cfg.scales.epsi) ** 2
            cost += w.speed * ((vars[idx("v", t)] - v_ref) / v_ref) ** 2

        # Actuator magnitude
        for t in range(N - 1):
            cost += w.steering * (vars[idx("delta", t)] / cfg.max_steering) ** 2
            cost += w.acceleration * (vars[idx("a", t)] / cfg.max_acceleration) ** 2

        # Actuator smoothness
        for t in range(N - 2):
            d_delta = vars[idx("delta", t + 1)] - vars[idx("delta", t)]
            d_a = vars[idx("a", t + 1)] - vars[idx("a", t)]
            cost += w.steering_rate * (d_delta / cfg.steering_rate_scale) ** 2
            cost += w.acceleration_rate * (d_a / cfg.acceleration_rate_scale) ** 2

        return cost
