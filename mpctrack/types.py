"""
Data types exchanged with the controller each cycle.
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Sequence, Tuple

import numpy as np

from mpctrack.exceptions import InvalidStateError


@dataclass(frozen=True)
class VehicleState:
    """
    Vehicle state at the start of a control cycle.

    Attributes:
        x, y: Position [m]
        psi: Heading [rad]
        v: Speed [m/s]
        cte: Cross-track error [m]
        epsi: Heading error [rad]
    """
    x: float
    y: float
    psi: float
    v: float
    cte: float
    epsi: float

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.psi, self.v, self.cte, self.epsi], dtype=float)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "VehicleState":
        """Build a state from [x, y, psi, v, cte, epsi]."""
        if isinstance(values, cls):
            return values
        try:
            values = [float(value) for value in values]
        except (TypeError, ValueError) as e:
            raise InvalidStateError("init_state", f"not a sequence of numbers: {e}") from e
        if len(values) != 6:
            raise InvalidStateError(
                "init_state", f"expected 6 values (x, y, psi, v, cte, epsi), got {len(values)}"
            )
        return cls(*values)

    def validate(self) -> "VehicleState":
        """Reject NaN and infinite entries."""
        for f in fields(self):
            if not np.isfinite(getattr(self, f.name)):
                raise InvalidStateError(f.name, f"must be finite, got {getattr(self, f.name)}")
        return self


@dataclass
class SolveResult:
    """
    Output of one MPC solve.

    `x` and `y` are the predicted positions over the horizon, current step
    included. `success` is False when IPOPT stopped without converging
    (including on the time budget); the commands are still the best
    candidate it produced.
    """
    steering: float
    acceleration: float
    x: np.ndarray
    y: np.ndarray
    success: bool = True
    status: str = ""
    cost: float = float("nan")
    iterations: int = 0
    solve_time: float = 0.0
    solution: Optional[np.ndarray] = field(default=None, repr=False)

    def as_tuple(self) -> Tuple[float, float, np.ndarray, np.ndarray]:
        """(next steering, next acceleration, predicted x, predicted y)."""
        return self.steering, self.acceleration, self.x, self.y
