"""
mpctrack - Model Predictive Control for reference path tracking.

Solves, every control cycle, a short-horizon nonlinear program over a
kinematic bicycle model (CasADi + IPOPT) and returns the first steering and
acceleration command together with the predicted trajectory.

Basic Usage:
    from mpctrack import MPCController, MPCConfig

    controller = MPCController(MPCConfig(horizon=12, dt=0.1))
    result = controller.solve([x, y, psi, v, cte, epsi], coeffs)
    steering, acceleration, xs, ys = result.as_tuple()
"""

__version__ = "0.1.0"

from mpctrack.config import (
    MPS_TO_MPH,
    CostScales,
    CostWeights,
    MPCConfig,
    load_config,
    load_yaml,
)
from mpctrack.core.actuation.constraints import ConstraintEncoder
from mpctrack.core.actuation.controller import ControlManager
from mpctrack.core.actuation.cost import CostFunction
from mpctrack.core.actuation.layout import DecisionLayout, Segment
from mpctrack.core.actuation.mpc_controller import MPCController
from mpctrack.dynamics.polynomial import path_coefficients, polyeval
from mpctrack.dynamics.vehicle_module import KinematicModel
from mpctrack.exceptions import (
    ConfigNotFoundError,
    ConfigurationError,
    ConfigValidationError,
    InvalidReferencePathError,
    InvalidStateError,
    MPCTrackError,
    PlanningError,
)
from mpctrack.logging import get_logger, setup_logging
from mpctrack.types import SolveResult, VehicleState

__all__ = [
    "__version__",
    # Config
    "MPS_TO_MPH",
    "CostScales",
    "CostWeights",
    "MPCConfig",
    "load_config",
    "load_yaml",
    # Controller
    "ConstraintEncoder",
    "ControlManager",
    "CostFunction",
    "DecisionLayout",
    "Segment",
    "MPCController",
    # Dynamics
    "KinematicModel",
    "path_coefficients",
    "polyeval",
    # Types
    "SolveResult",
    "VehicleState",
    # Logging
    "get_logger",
    "setup_logging",
    # Exceptions
    "MPCTrackError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "PlanningError",
    "InvalidStateError",
    "InvalidReferencePathError",
]
