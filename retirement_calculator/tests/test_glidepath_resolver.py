from __future__ import annotations

from math import isclose

import pytest

from retirement_calculator.core.glidepath import (
    annual_to_monthly_rate,
    coerce_glidepath_config,
    interpolate_waypoints,
    resolve_annual_return,
)
from retirement_calculator.domain.errors import (
    InvalidReturnRateError,
    InvalidWaypointsError,
    UnsupportedGlidepathModeError,
)
from retirement_calculator.schemas.glidepath import (
    AllocationBasedGlidepath,
    CustomWaypointsGlidepath,
    FixedReturnGlidepath,
    GlidepathWaypoint,
    SteppedReturnGlidepath,
)


def waypoints(*pairs: tuple) -> list:
    return [GlidepathWaypoint(age=age, value=value) for age, value in pairs]


def test_fixed_return_interpolates_and_clamps():
    config = FixedReturnGlidepath(start_return=0.10, end_return=0.05)

    assert resolve_annual_return(25, config, 25, 65).annual_return == 0.10
    assert isclose(resolve_annual_return(45, config, 25, 65).annual_return, 0.075)
    assert isclose(resolve_annual_return(65, config, 25, 65).annual_return, 0.05)
    # ages outside the span never extrapolate
    assert resolve_annual_return(20, config, 25, 65).annual_return == 0.10
    assert isclose(resolve_annual_return(80, config, 25, 65).annual_return, 0.05)
    assert resolve_annual_return(45, config, 25, 65).equity_weight is None


def test_stepped_return_phases():
    config = SteppedReturnGlidepath(
        base_return=0.10,
        decline_rate=0.001,
        terminal_return=0.055,
        decline_start_age=20,
        terminal_age=65,
    )

    assert resolve_annual_return(18, config, 18, 70).annual_return == 0.10
    assert resolve_annual_return(20, config, 18, 70).annual_return == 0.10
    assert isclose(resolve_annual_return(25, config, 18, 70).annual_return, 0.095)
    assert resolve_annual_return(65, config, 18, 70).annual_return == 0.055
    assert resolve_annual_return(70, config, 18, 70).annual_return == 0.055


def test_stepped_return_never_declines_below_terminal():
    config = SteppedReturnGlidepath(
        base_return=0.10,
        decline_rate=0.01,
        terminal_return=0.055,
        decline_start_age=20,
        terminal_age=65,
    )

    # 0.10 - 20 * 0.01 would be -0.10
    assert resolve_annual_return(40, config, 20, 65).annual_return == 0.055


def test_allocation_based_blends_equity_and_bonds():
    config = AllocationBasedGlidepath(
        start_equity_weight=0.9, end_equity_weight=0.3, equity_return=0.12, bond_return=0.04
    )

    start = resolve_annual_return(30, config, 30, 65)
    middle = resolve_annual_return(47.5, config, 30, 65)
    end = resolve_annual_return(65, config, 30, 65)

    assert isclose(start.annual_return, 0.112)
    assert isclose(start.equity_weight, 0.9)
    assert isclose(middle.equity_weight, 0.6)
    assert isclose(end.annual_return, 0.064)
    assert isclose(end.equity_weight, 0.3)


def test_waypoints_are_sorted_and_interpolated():
    points = waypoints((40, 0.06), (20, 0.10), (30, 0.08))

    assert isclose(interpolate_waypoints(25, points), 0.09)
    assert isclose(interpolate_waypoints(35, points), 0.07)
    assert isclose(interpolate_waypoints(30, points), 0.08)


def test_waypoints_clamp_outside_range():
    points = waypoints((25, 0.12), (45, 0.08), (60, 0.04))

    assert interpolate_waypoints(18, points) == 0.12
    assert interpolate_waypoints(25, points) == 0.12
    assert interpolate_waypoints(70, points) == 0.04


def test_single_waypoint_is_constant():
    points = waypoints((40, 0.08))

    for age in (18, 40, 65, 90):
        assert interpolate_waypoints(age, points) == 0.08


def test_duplicate_waypoint_ages_take_first_bracket():
    points = waypoints((30, 0.08), (30, 0.07), (40, 0.05))

    assert isclose(interpolate_waypoints(30, points), 0.08)
    assert isclose(interpolate_waypoints(35, points), 0.06)


def test_empty_waypoints_raise():
    config = CustomWaypointsGlidepath(value_type="return", waypoints=[])

    with pytest.raises(InvalidWaypointsError, match="at least one waypoint"):
        resolve_annual_return(30, config, 25, 65)


def test_equity_weight_waypoints_use_default_returns():
    config = CustomWaypointsGlidepath(value_type="equityWeight", waypoints=waypoints((40, 0.7)))

    resolved = resolve_annual_return(25, config, 25, 65)

    assert isclose(resolved.annual_return, 0.7 * 0.10 + 0.3 * 0.04)
    assert resolved.equity_weight == 0.7


def test_equity_weight_waypoints_use_configured_returns():
    config = CustomWaypointsGlidepath(
        value_type="equityWeight",
        waypoints=waypoints((20, 1.0), (35, 0.8), (65, 0.3)),
        equity_return=0.11,
        bond_return=0.035,
    )

    resolved = resolve_annual_return(27.5, config, 20, 65)

    assert isclose(resolved.equity_weight, 0.9)
    assert isclose(resolved.annual_return, 0.9 * 0.11 + 0.1 * 0.035)


def test_return_waypoints_have_no_equity_weight():
    config = CustomWaypointsGlidepath(value_type="return", waypoints=waypoints((25, 0.12), (65, 0.05)))

    assert resolve_annual_return(30, config, 25, 65).equity_weight is None


def test_plain_mappings_are_accepted():
    config = coerce_glidepath_config({"mode": "fixed-return", "start_return": 0.08, "end_return": 0.06})

    assert isinstance(config, FixedReturnGlidepath)
    assert resolve_annual_return(25, config, 25, 65).annual_return == 0.08


def test_unknown_mode_is_rejected():
    with pytest.raises(UnsupportedGlidepathModeError, match="Unsupported glidepath mode"):
        resolve_annual_return(30, {"mode": "invalid-mode"}, 25, 65)


def test_monthly_rate_compounds_back_to_annual():
    monthly = annual_to_monthly_rate(0.12)

    assert monthly < 0.12 / 12
    assert isclose((1 + monthly) ** 12 - 1, 0.12)
    assert annual_to_monthly_rate(0.0) == 0.0


def test_monthly_rate_rejects_losses_beyond_total():
    with pytest.raises(InvalidReturnRateError):
        annual_to_monthly_rate(-1.5)
