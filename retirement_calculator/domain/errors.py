"""Error kinds raised by the compounding and glidepath engines."""

from __future__ import annotations

from typing import Any, Optional


class ErrorCode:
    """Machine-readable codes attached to every engine error and validation issue."""

    NEGATIVE_AGE = "NEGATIVE_AGE"
    INVALID_AGE_RANGE = "INVALID_AGE_RANGE"
    INSUFFICIENT_TIME_HORIZON = "INSUFFICIENT_TIME_HORIZON"

    NEGATIVE_BALANCE = "NEGATIVE_BALANCE"
    NEGATIVE_CONTRIBUTION = "NEGATIVE_CONTRIBUTION"
    INVALID_FREQUENCY = "INVALID_FREQUENCY"

    IMPOSSIBLE_LOSS = "IMPOSSIBLE_LOSS"
    RETURN_OUT_OF_RANGE = "RETURN_OUT_OF_RANGE"
    INVALID_ALLOCATION = "INVALID_ALLOCATION"

    UNKNOWN_GLIDEPATH_MODE = "UNKNOWN_GLIDEPATH_MODE"
    INVALID_CONFIG_STRUCTURE = "INVALID_CONFIG_STRUCTURE"
    INVALID_CONTRIBUTION_TIMING = "INVALID_CONTRIBUTION_TIMING"

    EMPTY_WAYPOINTS = "EMPTY_WAYPOINTS"
    INVALID_WAYPOINT_AGE = "INVALID_WAYPOINT_AGE"
    MISSING_EQUITY_RETURN = "MISSING_EQUITY_RETURN"
    MISSING_BOND_RETURN = "MISSING_BOND_RETURN"

    LONG_SIMULATION_WARNING = "LONG_SIMULATION_WARNING"
    LARGE_CONTRIBUTION_WARNING = "LARGE_CONTRIBUTION_WARNING"
    UNUSUAL_ALLOCATION_PROGRESSION = "UNUSUAL_ALLOCATION_PROGRESSION"
    EXTREME_RETURN_WARNING = "EXTREME_RETURN_WARNING"
    EXTREME_LOSS_WARNING = "EXTREME_LOSS_WARNING"
    WAYPOINTS_OUTSIDE_RANGE = "WAYPOINTS_OUTSIDE_RANGE"
    WAYPOINT_GAP_WARNING = "WAYPOINT_GAP_WARNING"


class GlidepathError(ValueError):
    """Base class for deterministic input errors raised by the engines."""

    default_code = ErrorCode.INVALID_CONFIG_STRUCTURE

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code, "field": self.field}


class InvalidAgeError(GlidepathError):
    default_code = ErrorCode.INVALID_AGE_RANGE


class InvalidFinancialParameterError(GlidepathError):
    default_code = ErrorCode.NEGATIVE_BALANCE


class InvalidFrequencyError(GlidepathError):
    default_code = ErrorCode.INVALID_FREQUENCY


class InvalidReturnRateError(GlidepathError):
    default_code = ErrorCode.IMPOSSIBLE_LOSS


class InvalidContributionTimingError(GlidepathError):
    default_code = ErrorCode.INVALID_CONTRIBUTION_TIMING


class InvalidWaypointsError(GlidepathError):
    default_code = ErrorCode.EMPTY_WAYPOINTS


class UnsupportedGlidepathModeError(GlidepathError):
    default_code = ErrorCode.UNKNOWN_GLIDEPATH_MODE


class GlidepathValidationError(GlidepathError):
    """Raised when the input validator collected one or more blocking issues."""

    def __init__(self, issues: list):
        messages = [issue.message for issue in issues]
        super().__init__("; ".join(messages), code=issues[0].code if issues else None)
        self.issues = issues
        self.errors = messages
