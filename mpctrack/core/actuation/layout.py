"""
Decision vector layout.

IPOPT works on one flat vector, so all state and actuator trajectories are
stacked into it segment by segment:

    x0 .. x(N-1) | y | psi | v | cte | epsi | delta0 .. delta(N-2) | a

Every component indexes the vector through DecisionLayout instead of keeping
its own offsets.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

STATE_NAMES = ("x", "y", "psi", "v", "cte", "epsi")
ACTUATOR_NAMES = ("delta", "a")


@dataclass(frozen=True)
class Segment:
    name: str
    start: int
    length: int

    @property
    def stop(self) -> int:
        return self.start + self.length

    @property
    def slice(self) -> slice:
        return slice(self.start, self.stop)


class DecisionLayout:
    """Segment table for a horizon of N steps."""

    def __init__(self, horizon: int):
        if horizon < 2:
            raise ValueError(f"horizon must be >= 2, got {horizon}")
        self.horizon = horizon

        segments = []
        start = 0
        for name in STATE_NAMES:
            segments.append(Segment(name, start, horizon))
            start += horizon
        # Actuators act on transitions, hence N - 1 values each.
        for name in ACTUATOR_NAMES:
            segments.append(Segment(name, start, horizon - 1))
            start += horizon - 1

        self.segments: Tuple[Segment, ...] = tuple(segments)
        self._by_name: Dict[str, Segment] = {s.name: s for s in segments}
        self.n_vars = start
        self.n_constraints = len(STATE_NAMES) * horizon

    def __getitem__(self, name: str) -> Segment:
        return self._by_name[name]

    def index(self, name: str, t: int) -> int:
        """Position of quantity `name` at step t in the decision vector."""
        segment = self._by_name[name]
        if not 0 <= t < segment.length:
            raise IndexError(f"step {t} outside segment '{name}' of length {segment.length}")
        return segment.start + t

    def state_at(self, vars, t: int) -> list:
        """[x, y, psi, v, cte, epsi] at step t."""
        return [vars[self.index(name, t)] for name in STATE_NAMES]

    def actuators_at(self, vars, t: int) -> list:
        """[delta, a] applied between step t and t + 1."""
        return [vars[self.index(name, t)] for name in ACTUATOR_NAMES]

    def constraint_index(self, t: int, k: int) -> int:
        """
        Row of the residual of state k at step t.

        Rows 0..5 pin the initial state, then one block of six rows per
        future step.
        """
        if not 0 <= t < self.horizon or not 0 <= k < len(STATE_NAMES):
            raise IndexError(f"no constraint row for step {t}, state {k}")
        return len(STATE_NAMES) * t + k

    def split(self, vars) -> Dict[str, np.ndarray]:
        """Numeric decision vector to one array per segment."""
        vars = np.asarray(vars, dtype=float).ravel()
        if vars.size != self.n_vars:
            raise ValueError(f"expected {self.n_vars} values, got {vars.size}")
        return {s.name: vars[s.slice].copy() for s in self.segments}
