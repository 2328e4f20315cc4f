from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, List, Optional

from retirement_calculator.constants import (
    GLIDEPATH_PERFORMANCE,
    GLIDEPATH_VALIDATION,
)
from retirement_calculator.domain.errors import ErrorCode, GlidepathValidationError
from retirement_calculator.formatting import format_number_with_commas
from retirement_calculator.schemas.glidepath import (
    AllocationBasedGlidepath,
    CustomWaypointsGlidepath,
    FixedReturnGlidepath,
    SteppedReturnGlidepath,
)


@dataclass
class ValidationIssue:
    code: str
    field: str
    message: str
    value: Any = None
    severity: str = "error"


@dataclass
class ValidationResult:
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error(self, code: str, field_name: str, message: str, value: Any = None) -> None:
        self.errors.append(ValidationIssue(code, field_name, message, value, "error"))

    def warn(self, code: str, field_name: str, message: str, value: Any = None) -> None:
        self.warnings.append(ValidationIssue(code, field_name, message, value, "warning"))

    def raise_for_errors(self) -> None:
        if self.errors:
            raise GlidepathValidationError(self.errors)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": [asdict(issue) for issue in self.errors],
            "warnings": [asdict(issue) for issue in self.warnings],
        }


def _check_return(result: ValidationResult, field_name: str, value: Optional[float]) -> None:
    if value is None:
        return
    limits = GLIDEPATH_VALIDATION["returns"]
    if value <= -1.0:
        result.error(
            ErrorCode.IMPOSSIBLE_LOSS,
            field_name,
            f"{field_name} must be greater than -1.0 (cannot lose more than 100%)",
            value,
        )
    elif value > limits["max_return"]:
        result.error(
            ErrorCode.RETURN_OUT_OF_RANGE,
            field_name,
            f"{field_name} must be at most {limits['max_return']}",
            value,
        )
    elif value > limits["extreme_return_threshold"]:
        result.warn(
            ErrorCode.EXTREME_RETURN_WARNING,
            field_name,
            f"{field_name} of {value:.2%} is unusually high (typical range 4% to 15%)",
            value,
        )
    elif value < limits["extreme_loss_threshold"]:
        result.warn(
            ErrorCode.EXTREME_LOSS_WARNING,
            field_name,
            f"{field_name} of {value:.2%} is a very large loss",
            value,
        )


def _check_weight(result: ValidationResult, field_name: str, value: float) -> None:
    limits = GLIDEPATH_VALIDATION["allocations"]
    if not limits["min_weight"] <= value <= limits["max_weight"]:
        hint = f" (did you mean {value / 100:.2f}?)" if value > 1 else ""
        result.error(
            ErrorCode.INVALID_ALLOCATION,
            field_name,
            f"{field_name} must be between 0.0 and 1.0 inclusive{hint}",
            value,
        )


def _check_ages(result: ValidationResult, start_age: float, end_age: float) -> None:
    limits = GLIDEPATH_VALIDATION["ages"]
    for name, age in (("start_age", start_age), ("end_age", end_age)):
        if age <= 0:
            result.error(ErrorCode.NEGATIVE_AGE, name, f"{name} must be greater than 0", age)
        elif not limits["min_age"] <= age <= limits["max_age"]:
            result.error(
                ErrorCode.INVALID_AGE_RANGE,
                name,
                f"{name} must be between {limits['min_age']} and {limits['max_age']}",
                age,
            )

    if start_age >= end_age:
        result.error(
            ErrorCode.INVALID_AGE_RANGE,
            "start_age",
            "start_age must be less than end_age",
            start_age,
        )
    elif end_age - start_age < limits["min_age_difference"]:
        result.warn(
            ErrorCode.INSUFFICIENT_TIME_HORIZON,
            "end_age",
            f"horizon of {end_age - start_age:.2f} years is shorter than "
            f"{limits['min_age_difference']} year",
            end_age - start_age,
        )
    elif (end_age - start_age) * 12 > GLIDEPATH_PERFORMANCE["large_simulation_months"]:
        result.warn(
            ErrorCode.LONG_SIMULATION_WARNING,
            "end_age",
            "very long simulation may impact performance",
            end_age - start_age,
        )


def _check_waypoints(
    result: ValidationResult,
    config: CustomWaypointsGlidepath,
    start_age: float,
    end_age: float,
) -> None:
    if not config.waypoints:
        result.error(
            ErrorCode.EMPTY_WAYPOINTS,
            "waypoints",
            "waypoints must contain at least one waypoint",
            [],
        )
        return

    for index, point in enumerate(config.waypoints):
        label = f"waypoints[{index}]"
        if point.age <= 0:
            result.error(
                ErrorCode.INVALID_WAYPOINT_AGE, f"{label}.age", f"{label}.age must be positive", point.age
            )
        if config.value_type == "return":
            _check_return(result, f"{label}.value", point.value)
        else:
            _check_weight(result, f"{label}.value", point.value)

    ages = sorted(point.age for point in config.waypoints)
    if ages[-1] < start_age or ages[0] > end_age:
        result.warn(
            ErrorCode.WAYPOINTS_OUTSIDE_RANGE,
            "waypoints",
            f"all waypoints fall outside ages {start_age}-{end_age}; the curve will be flat",
        )

    max_gap = GLIDEPATH_VALIDATION["waypoints"]["max_gap_years"]
    for lower, upper in zip(ages, ages[1:]):
        if upper - lower > max_gap:
            result.warn(
                ErrorCode.WAYPOINT_GAP_WARNING,
                "waypoints",
                f"gap of {upper - lower:g} years between waypoints at ages {lower:g} and {upper:g}",
            )

    if config.value_type == "equityWeight":
        if config.equity_return is None:
            result.warn(
                ErrorCode.MISSING_EQUITY_RETURN,
                "equity_return",
                "equity_return not set; defaulting to 10%",
            )
        if config.bond_return is None:
            result.warn(
                ErrorCode.MISSING_BOND_RETURN,
                "bond_return",
                "bond_return not set; defaulting to 4%",
            )
        _check_return(result, "equity_return", config.equity_return)
        _check_return(result, "bond_return", config.bond_return)
        weights = [point.value for point in sorted(config.waypoints, key=lambda p: p.age)]
        if weights[-1] > weights[0]:
            result.warn(
                ErrorCode.UNUSUAL_ALLOCATION_PROGRESSION,
                "waypoints",
                "equity allocation increases with age (unusual pattern)",
            )


def _check_config(result: ValidationResult, config: Any, start_age: float, end_age: float) -> None:
    if isinstance(config, FixedReturnGlidepath):
        _check_return(result, "start_return", config.start_return)
        _check_return(result, "end_return", config.end_return)
    elif isinstance(config, SteppedReturnGlidepath):
        _check_return(result, "base_return", config.base_return)
        _check_return(result, "terminal_return", config.terminal_return)
        if config.decline_rate < 0:
            result.error(
                ErrorCode.INVALID_CONFIG_STRUCTURE,
                "decline_rate",
                "decline_rate must be non-negative",
                config.decline_rate,
            )
        if config.decline_start_age <= 0:
            result.error(
                ErrorCode.NEGATIVE_AGE,
                "decline_start_age",
                "decline_start_age must be greater than 0",
                config.decline_start_age,
            )
        if config.terminal_age <= config.decline_start_age:
            result.error(
                ErrorCode.INVALID_AGE_RANGE,
                "terminal_age",
                "terminal_age must be greater than decline_start_age",
                config.terminal_age,
            )
    elif isinstance(config, AllocationBasedGlidepath):
        _check_weight(result, "start_equity_weight", config.start_equity_weight)
        _check_weight(result, "end_equity_weight", config.end_equity_weight)
        _check_return(result, "equity_return", config.equity_return)
        _check_return(result, "bond_return", config.bond_return)
        if config.end_equity_weight > config.start_equity_weight:
            result.warn(
                ErrorCode.UNUSUAL_ALLOCATION_PROGRESSION,
                "end_equity_weight",
                "equity allocation increases with age (unusual pattern)",
                config.end_equity_weight,
            )
    elif isinstance(config, CustomWaypointsGlidepath):
        _check_waypoints(result, config, start_age, end_age)
    else:
        result.error(
            ErrorCode.UNKNOWN_GLIDEPATH_MODE,
            "mode",
            "mode must be one of: fixed-return, stepped-return, allocation-based, custom-waypoints",
            getattr(config, "mode", None),
        )


def validate_glidepath_inputs(
    initial_balance: float,
    contribution_amount: float,
    start_age: float,
    end_age: float,
    config: Any,
    contribution_frequency: int = 12,
    compounding_frequency: int = 12,
    contribution_timing: str = "start",
) -> ValidationResult:
    """Collect every problem with a glidepath request instead of stopping at the first.

    Errors block the simulation; warnings flag plausible-but-unusual inputs.
    """
    result = ValidationResult()

    _check_ages(result, start_age, end_age)

    if initial_balance < 0:
        result.error(
            ErrorCode.NEGATIVE_BALANCE,
            "initial_balance",
            "initial_balance must be non-negative",
            initial_balance,
        )
    if contribution_amount < 0:
        result.error(
            ErrorCode.NEGATIVE_CONTRIBUTION,
            "contribution_amount",
            "contribution_amount must be non-negative",
            contribution_amount,
        )
    elif contribution_amount > GLIDEPATH_VALIDATION["contributions"]["large_contribution_threshold"]:
        result.warn(
            ErrorCode.LARGE_CONTRIBUTION_WARNING,
            "contribution_amount",
            f"contribution of {format_number_with_commas(contribution_amount)} per period is very large",
            contribution_amount,
        )

    for name, frequency in (
        ("contribution_frequency", contribution_frequency),
        ("compounding_frequency", compounding_frequency),
    ):
        if frequency <= 0:
            result.error(ErrorCode.INVALID_FREQUENCY, name, f"{name} must be positive", frequency)

    if contribution_timing not in ("start", "end"):
        result.error(
            ErrorCode.INVALID_CONTRIBUTION_TIMING,
            "contribution_timing",
            "contribution_timing must be 'start' or 'end'",
            contribution_timing,
        )

    _check_config(result, config, start_age, end_age)
    return result
