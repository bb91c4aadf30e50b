"""
Pytest configuration and shared fixtures for mpctrack tests.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from mpctrack.config import MPCConfig
from mpctrack.core.actuation.layout import DecisionLayout
from mpctrack.core.actuation.mpc_controller import MPCController
from mpctrack.dynamics.vehicle_module import KinematicModel
from mpctrack.types import VehicleState

TARGET_SPEED = 20.0


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def config() -> MPCConfig:
    """Default configuration cruising below the speed limit, with a generous time budget."""
    return MPCConfig(target_speed=TARGET_SPEED, max_cpu_time=5.0)


@pytest.fixture(scope="session")
def scenario_yaml() -> Path:
    """Sample controller configuration shipped with the repository."""
    return Path(__file__).resolve().parents[1] / "scenarios" / "mpc_test.yaml"


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def controller(config) -> MPCController:
    """Controller built once for the whole session; solves are independent."""
    return MPCController(config)


@pytest.fixture
def layout(config) -> DecisionLayout:
    return DecisionLayout(config.horizon)


@pytest.fixture
def model(config) -> KinematicModel:
    return KinematicModel(lf=config.lf, dt=config.dt)


# =============================================================================
# State Fixtures
# =============================================================================


@pytest.fixture
def on_path_state() -> VehicleState:
    """On a straight path at y = 0, at target speed."""
    return VehicleState(x=0.0, y=0.0, psi=0.0, v=TARGET_SPEED, cte=0.0, epsi=0.0)


@pytest.fixture
def offset_state() -> VehicleState:
    """One meter left of a straight path at y = 0."""
    return VehicleState(x=0.0, y=1.0, psi=0.0, v=TARGET_SPEED, cte=1.0, epsi=0.0)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(7)
