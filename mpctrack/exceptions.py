"""
mpctrack exception hierarchy.

Solver convergence problems are not exceptions here: the controller logs them
and still returns its best candidate. These classes cover configuration
mistakes and malformed inputs rejected before a solve starts.
"""

from typing import Any, Optional


class MPCTrackError(Exception):
    """Base exception for all mpctrack errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MPCTrackError):
    """Error in configuration loading or validation."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Configuration file not found."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file not found: {config_path}",
            details={"path": config_path},
        )


class ConfigValidationError(ConfigurationError):
    """Configuration validation failed."""

    def __init__(self, key: str, reason: str, value: Any = None):
        details = {"key": key, "reason": reason}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            f"Invalid configuration for '{key}': {reason}",
            details=details,
        )


# =============================================================================
# Planning Errors
# =============================================================================


class PlanningError(MPCTrackError):
    """Base class for errors in the per-cycle solve inputs."""

    pass


class InvalidStateError(PlanningError):
    """Invalid vehicle state provided to the controller."""

    def __init__(self, state_name: str, reason: str):
        super().__init__(
            f"Invalid state '{state_name}': {reason}",
            details={"state": state_name, "reason": reason},
        )


class InvalidReferencePathError(PlanningError):
    """Reference path coefficients are invalid or malformed."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid reference path: {reason}",
            details={"reason": reason},
        )
