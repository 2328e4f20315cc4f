"""Age-dependent annual return resolution for the four glidepath strategies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import BaseModel, TypeAdapter

from retirement_calculator.constants import GLIDEPATH_DEFAULTS
from retirement_calculator.domain.errors import (
    InvalidReturnRateError,
    InvalidWaypointsError,
    UnsupportedGlidepathModeError,
)
from retirement_calculator.schemas.glidepath import (
    AllocationBasedGlidepath,
    CustomWaypointsGlidepath,
    FixedReturnGlidepath,
    GlidepathConfig,
    GlidepathWaypoint,
    SteppedReturnGlidepath,
)

DEFAULT_EQUITY_RETURN = GLIDEPATH_DEFAULTS["custom_waypoints"]["equity_return"]
DEFAULT_BOND_RETURN = GLIDEPATH_DEFAULTS["custom_waypoints"]["bond_return"]

SUPPORTED_MODES = (
    "fixed-return",
    "stepped-return",
    "allocation-based",
    "custom-waypoints",
)

_config_adapter = TypeAdapter(GlidepathConfig)


@dataclass(frozen=True)
class ResolvedReturn:
    annual_return: float
    equity_weight: Optional[float] = None


def coerce_glidepath_config(config: Any) -> BaseModel:
    """Accept a config model or a plain mapping (decoded JSON) and return the model."""
    if isinstance(
        config,
        (FixedReturnGlidepath, SteppedReturnGlidepath, AllocationBasedGlidepath, CustomWaypointsGlidepath),
    ):
        return config

    mode = config.get("mode") if isinstance(config, Mapping) else getattr(config, "mode", None)
    if mode not in SUPPORTED_MODES:
        raise UnsupportedGlidepathModeError(
            f"Unsupported glidepath mode: {mode!r}; expected one of {', '.join(SUPPORTED_MODES)}",
            field="mode",
            value=mode,
        )
    return _config_adapter.validate_python(config)


def annual_to_monthly_rate(annual_return: float) -> float:
    """Monthly rate that compounds to `annual_return` over twelve months."""
    if annual_return < -1:
        raise InvalidReturnRateError(
            "Return rates must be greater than -1.0 (cannot lose more than 100%)",
            field="annual_return",
            value=annual_return,
        )
    return (1 + annual_return) ** (1 / 12) - 1


def blend_returns(equity_weight: float, equity_return: float, bond_return: float) -> float:
    return equity_weight * equity_return + (1 - equity_weight) * bond_return


def age_progress(age: float, start_age: float, end_age: float) -> float:
    """Fraction of the way from start_age to end_age, clamped to [0, 1]."""
    span = end_age - start_age
    if span <= 0:
        return 1.0 if age >= end_age else 0.0
    return min(1.0, max(0.0, (age - start_age) / span))


def interpolate_waypoints(age: float, waypoints: Sequence[GlidepathWaypoint]) -> float:
    """Piecewise-linear value at `age`, flat beyond the first and last waypoint.

    Waypoints are stable-sorted by age; with repeated ages the first bracket
    that contains `age` wins.
    """
    points: List[GlidepathWaypoint] = sorted(waypoints, key=lambda point: point.age)
    if not points:
        raise InvalidWaypointsError(
            "Custom waypoints configuration must contain at least one waypoint",
            field="waypoints",
            value=[],
        )
    if len(points) == 1:
        return points[0].value

    if age <= points[0].age:
        return points[0].value
    if age >= points[-1].age:
        return points[-1].value

    for lower, upper in zip(points, points[1:]):
        if lower.age <= age <= upper.age:
            span = upper.age - lower.age
            if span == 0:
                return lower.value
            fraction = (age - lower.age) / span
            return lower.value + (upper.value - lower.value) * fraction

    return points[-1].value


def resolve_annual_return(
    age: float, config: Any, start_age: float, end_age: float
) -> ResolvedReturn:
    """Annual return (and equity weight where the mode has one) at `age`."""
    config = coerce_glidepath_config(config)

    if isinstance(config, FixedReturnGlidepath):
        progress = age_progress(age, start_age, end_age)
        return ResolvedReturn(
            annual_return=config.start_return + (config.end_return - config.start_return) * progress
        )

    if isinstance(config, SteppedReturnGlidepath):
        if age < config.decline_start_age:
            return ResolvedReturn(annual_return=config.base_return)
        if age >= config.terminal_age:
            return ResolvedReturn(annual_return=config.terminal_return)
        declined = config.base_return - (age - config.decline_start_age) * config.decline_rate
        return ResolvedReturn(annual_return=max(declined, config.terminal_return))

    if isinstance(config, AllocationBasedGlidepath):
        progress = age_progress(age, start_age, end_age)
        weight = config.start_equity_weight + (
            config.end_equity_weight - config.start_equity_weight
        ) * progress
        return ResolvedReturn(
            annual_return=blend_returns(weight, config.equity_return, config.bond_return),
            equity_weight=weight,
        )

    if isinstance(config, CustomWaypointsGlidepath):
        value = interpolate_waypoints(age, config.waypoints)
        if config.value_type == "return":
            return ResolvedReturn(annual_return=value)
        equity_return = (
            config.equity_return if config.equity_return is not None else DEFAULT_EQUITY_RETURN
        )
        bond_return = config.bond_return if config.bond_return is not None else DEFAULT_BOND_RETURN
        return ResolvedReturn(
            annual_return=blend_returns(value, equity_return, bond_return),
            equity_weight=value,
        )

    raise UnsupportedGlidepathModeError(
        f"Unsupported glidepath mode: {getattr(config, 'mode', None)!r}",
        field="mode",
        value=getattr(config, "mode", None),
    )
