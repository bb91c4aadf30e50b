"""
Configuration for the MPC trajectory tracker.

This module provides:
- CostWeights / CostScales: per-term multipliers and normalization scales
- MPCConfig: immutable controller configuration
- load_yaml / load_config: YAML loading
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from mpctrack.exceptions import ConfigNotFoundError, ConfigValidationError

MPS_TO_MPH = 2.23694

# 25 degrees
DEFAULT_MAX_STEERING = 0.436332


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def _check_positive(key: str, value: Any) -> None:
    if not _is_finite_number(value) or not value > 0:
        raise ConfigValidationError(key, "must be a finite number > 0", value)


def _mph_to_mps(key: str, value: Any) -> float:
    if not _is_finite_number(value):
        raise ConfigValidationError(key, "must be a finite speed in mph", value)
    return value / MPS_TO_MPH


@dataclass(frozen=True)
class CostWeights:
    """Multipliers of the normalized, squared cost terms."""

    cte: float = 50.0
    epsi: float = 2.0
    speed: float = 50.0
    steering: float = 5.0
    acceleration: float = 1.0
    steering_rate: float = 50.0
    acceleration_rate: float = 1.0


@dataclass(frozen=True)
class CostScales:
    """Characteristic magnitudes the raw cost terms are divided by.

    |value| / scale is expected to stay below 1 most of the time. The rate
    scales default to a fraction of the matching actuator limit.
    """

    cte: float = 4.0
    epsi: float = math.pi / 5
    steering_rate: Optional[float] = None
    acceleration_rate: Optional[float] = None


@dataclass(frozen=True)
class MPCConfig:
    """Controller configuration. Units: m, rad, s, m/s."""

    horizon: int = 12
    dt: float = 0.1

    # Distance from the front axle to the center of gravity. Tuned until the
    # turning radius of the kinematic model matched the vehicle's.
    lf: float = 2.67

    max_steering: float = DEFAULT_MAX_STEERING
    max_acceleration: float = 1.0
    speed_limit: float = 70 / MPS_TO_MPH
    target_speed: Optional[float] = None

    poly_degree: int = 3

    weights: CostWeights = field(default_factory=CostWeights)
    scales: CostScales = field(default_factory=CostScales)

    # IPOPT
    max_cpu_time: float = 0.5
    print_level: int = 0

    @property
    def reference_speed(self) -> float:
        """Cruising speed the speed term tracks."""
        if self.target_speed is None:
            return self.speed_limit
        return self.target_speed

    @property
    def steering_rate_scale(self) -> float:
        if self.scales.steering_rate is None:
            return self.max_steering / 4
        return self.scales.steering_rate

    @property
    def acceleration_rate_scale(self) -> float:
        if self.scales.acceleration_rate is None:
            return self.max_acceleration / 2
        return self.scales.acceleration_rate

    def validate(self) -> "MPCConfig":
        """Check types and value ranges, raising ConfigValidationError on the first bad key."""
        for key, value in (
            ("horizon", self.horizon),
            ("poly_degree", self.poly_degree),
            ("print_level", self.print_level),
        ):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigValidationError(key, "must be an integer", value)
        if self.horizon < 2:
            raise ConfigValidationError("horizon", "must be >= 2", self.horizon)
        if self.poly_degree < 1:
            raise ConfigValidationError("poly_degree", "must be >= 1", self.poly_degree)

        _check_positive("dt", self.dt)
        _check_positive("max_cpu_time", self.max_cpu_time)
        _check_positive("lf", self.lf)
        _check_positive("max_steering", self.max_steering)
        _check_positive("max_acceleration", self.max_acceleration)
        _check_positive("speed_limit", self.speed_limit)
        _check_positive("target_speed", self.reference_speed)
        _check_positive("scales.cte", self.scales.cte)
        _check_positive("scales.epsi", self.scales.epsi)
        # derived from the actuator limits checked above
        _check_positive("scales.steering_rate", self.steering_rate_scale)
        _check_positive("scales.acceleration_rate", self.acceleration_rate_scale)

        if self.reference_speed > self.speed_limit:
            raise ConfigValidationError(
                "target_speed", "must not exceed speed_limit", self.reference_speed
            )

        for weight in fields(self.weights):
            value = getattr(self.weights, weight.name)
            if not _is_finite_number(value) or value < 0:
                raise ConfigValidationError(
                    f"weights.{weight.name}", "must be a finite number >= 0", value
                )
        return self

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MPCConfig":
        """Create a validated MPCConfig from a (YAML-shaped) dictionary.

        Speeds may be given in mph through `speed_limit_mph` and
        `target_speed_mph`; they are converted to m/s here.
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}

        if "speed_limit_mph" in data:
            data["speed_limit"] = _mph_to_mps("speed_limit_mph", data.pop("speed_limit_mph"))
        if "target_speed_mph" in data:
            mph = data.pop("target_speed_mph")
            data["target_speed"] = None if mph is None else _mph_to_mps("target_speed_mph", mph)

        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                sorted(unknown)[0], f"unknown key, expected one of {sorted(known)}"
            )

        try:
            if "weights" in data:
                data["weights"] = CostWeights(**(data["weights"] or {}))
            if "scales" in data:
                data["scales"] = CostScales(**(data["scales"] or {}))
        except TypeError as e:
            raise ConfigValidationError("weights/scales", str(e)) from e

        return cls(**data).validate()


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML file into a dictionary."""
    path = Path(path)
    if not path.exists():
        raise ConfigNotFoundError(str(path))
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(path: Union[str, Path]) -> MPCConfig:
    """Load an MPCConfig from a YAML file holding the config keys at top level."""
    return MPCConfig.from_dict(load_yaml(path))
