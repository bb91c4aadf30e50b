"""
Config-driven entry point for the MPC controller.
"""

from mpctrack.config import MPCConfig, load_yaml
from mpctrack.exceptions import ConfigValidationError, InvalidStateError
from mpctrack.types import VehicleState


class ControlManager:
    def __init__(self, control_config):
        """
        Initialize the MPC controller.
        Args:
            control_config (dict): Control section of the configuration, the
                controller parameters under 'args'.
        """
        from mpctrack.core.actuation.mpc_controller import MPCController

        control_type = control_config.get('type', 'mpc')
        if control_type != 'mpc':
            raise ConfigValidationError('control.type', "only 'mpc' is supported", control_type)

        self.controller = MPCController(MPCConfig.from_dict(control_config.get('args')))
        self.ego_state = None

    @classmethod
    def from_yaml(cls, path):
        """Create the manager from the 'control' section of a YAML file."""
        data = load_yaml(path)
        if 'control' not in data:
            raise ConfigValidationError('control', 'missing section', path)
        return cls(data['control'])

    def update_info(self, ego_state):
        """
        Update the controller with the vehicle's current state.
        Args:
            ego_state (VehicleState or sequence): [x, y, psi, v, cte, epsi].
        """
        self.ego_state = VehicleState.from_sequence(ego_state).validate()

    def run_step(self, coeffs):
        """
        Execute one control step.
        Args:
            coeffs (sequence): Reference polynomial coefficients in the vehicle frame.
        Returns:
            SolveResult: Steering and acceleration commands plus predicted trajectory.
        """
        if self.ego_state is None:
            raise InvalidStateError('ego_state', 'update_info() has not been called')
        return self.controller.solve(self.ego_state, coeffs)
