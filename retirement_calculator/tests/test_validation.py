from __future__ import annotations

import pytest

from retirement_calculator.domain.errors import ErrorCode, GlidepathValidationError
from retirement_calculator.domain.validation import validate_glidepath_inputs
from retirement_calculator.schemas.glidepath import (
    AllocationBasedGlidepath,
    CustomWaypointsGlidepath,
    FixedReturnGlidepath,
    GlidepathWaypoint,
    SteppedReturnGlidepath,
)

FLAT = FixedReturnGlidepath(start_return=0.08, end_return=0.06)


def codes(issues) -> set:
    return {issue.code for issue in issues}


def test_reasonable_request_is_clean():
    result = validate_glidepath_inputs(10000, 500, 25, 65, FLAT)

    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []
    result.raise_for_errors()


def test_collects_every_error_instead_of_stopping():
    result = validate_glidepath_inputs(
        -1, -5, 65, 25, FLAT, contribution_frequency=0, contribution_timing="middle"
    )

    assert not result.is_valid
    assert codes(result.errors) >= {
        ErrorCode.NEGATIVE_BALANCE,
        ErrorCode.NEGATIVE_CONTRIBUTION,
        ErrorCode.INVALID_AGE_RANGE,
        ErrorCode.INVALID_FREQUENCY,
        ErrorCode.INVALID_CONTRIBUTION_TIMING,
    }


def test_raise_for_errors_carries_every_message():
    result = validate_glidepath_inputs(-1, -5, 25, 65, FLAT)

    with pytest.raises(GlidepathValidationError) as excinfo:
        result.raise_for_errors()

    assert excinfo.value.code == ErrorCode.NEGATIVE_BALANCE
    assert len(excinfo.value.errors) == 2
    assert "initial_balance must be non-negative" in excinfo.value.errors


@pytest.mark.parametrize(
    "start_age, end_age, code",
    [
        (0, 65, ErrorCode.NEGATIVE_AGE),
        (25, 200, ErrorCode.INVALID_AGE_RANGE),
        (40, 40, ErrorCode.INVALID_AGE_RANGE),
    ],
)
def test_age_errors(start_age, end_age, code):
    result = validate_glidepath_inputs(10000, 500, start_age, end_age, FLAT)

    assert code in codes(result.errors)


def test_short_and_long_horizons_warn():
    short = validate_glidepath_inputs(10000, 500, 25, 25.5, FLAT)
    long = validate_glidepath_inputs(10000, 500, 1, 140, FLAT)

    assert short.is_valid
    assert codes(short.warnings) == {ErrorCode.INSUFFICIENT_TIME_HORIZON}
    assert long.is_valid
    assert ErrorCode.LONG_SIMULATION_WARNING in codes(long.warnings)


def test_large_contribution_warning_formats_amount():
    result = validate_glidepath_inputs(10000, 75000, 25, 65, FLAT)

    assert result.is_valid
    (warning,) = result.warnings
    assert warning.code == ErrorCode.LARGE_CONTRIBUTION_WARNING
    assert "75,000.00" in warning.message


def test_return_bounds():
    impossible = validate_glidepath_inputs(
        10000, 500, 25, 65, FixedReturnGlidepath(start_return=-1.0, end_return=0.05)
    )
    too_high = validate_glidepath_inputs(
        10000, 500, 25, 65, FixedReturnGlidepath(start_return=1.5, end_return=0.05)
    )
    extreme = validate_glidepath_inputs(
        10000, 500, 25, 65, FixedReturnGlidepath(start_return=0.30, end_return=-0.6)
    )

    assert codes(impossible.errors) == {ErrorCode.IMPOSSIBLE_LOSS}
    assert codes(too_high.errors) == {ErrorCode.RETURN_OUT_OF_RANGE}
    assert extreme.is_valid
    assert codes(extreme.warnings) == {
        ErrorCode.EXTREME_RETURN_WARNING,
        ErrorCode.EXTREME_LOSS_WARNING,
    }


def test_percentage_weights_get_a_hint():
    config = AllocationBasedGlidepath(
        start_equity_weight=90, end_equity_weight=0.3, equity_return=0.10, bond_return=0.04
    )
    result = validate_glidepath_inputs(10000, 500, 25, 65, config)

    (error,) = result.errors
    assert error.code == ErrorCode.INVALID_ALLOCATION
    assert error.field == "start_equity_weight"
    assert "did you mean 0.90?" in error.message


def test_rising_allocation_warns():
    config = AllocationBasedGlidepath(
        start_equity_weight=0.3, end_equity_weight=0.9, equity_return=0.10, bond_return=0.04
    )
    result = validate_glidepath_inputs(10000, 500, 25, 65, config)

    assert result.is_valid
    assert codes(result.warnings) == {ErrorCode.UNUSUAL_ALLOCATION_PROGRESSION}


def test_stepped_structure_errors():
    config = SteppedReturnGlidepath(
        base_return=0.10,
        decline_rate=-0.001,
        terminal_return=0.05,
        decline_start_age=60,
        terminal_age=50,
    )
    result = validate_glidepath_inputs(10000, 500, 25, 65, config)

    assert codes(result.errors) == {
        ErrorCode.INVALID_CONFIG_STRUCTURE,
        ErrorCode.INVALID_AGE_RANGE,
    }


def test_empty_waypoints_error():
    config = CustomWaypointsGlidepath(value_type="return", waypoints=[])
    result = validate_glidepath_inputs(10000, 500, 25, 65, config)

    assert codes(result.errors) == {ErrorCode.EMPTY_WAYPOINTS}


def test_waypoint_warnings():
    config = CustomWaypointsGlidepath(
        value_type="equityWeight",
        waypoints=[
            GlidepathWaypoint(age=70, value=0.4),
            GlidepathWaypoint(age=100, value=0.6),
        ],
    )
    result = validate_glidepath_inputs(10000, 500, 25, 65, config)

    assert result.is_valid
    assert codes(result.warnings) == {
        ErrorCode.WAYPOINTS_OUTSIDE_RANGE,
        ErrorCode.WAYPOINT_GAP_WARNING,
        ErrorCode.MISSING_EQUITY_RETURN,
        ErrorCode.MISSING_BOND_RETURN,
        ErrorCode.UNUSUAL_ALLOCATION_PROGRESSION,
    }


def test_waypoint_value_errors():
    config = CustomWaypointsGlidepath(
        value_type="equityWeight",
        waypoints=[
            GlidepathWaypoint(age=-5, value=0.9),
            GlidepathWaypoint(age=65, value=1.5),
        ],
        equity_return=0.10,
        bond_return=0.04,
    )
    result = validate_glidepath_inputs(10000, 500, 25, 65, config)

    fields = {issue.field for issue in result.errors}
    assert fields == {"waypoints[0].age", "waypoints[1].value"}


def test_to_dict_shape():
    payload = validate_glidepath_inputs(10000, 75000, 25, 65, FLAT).to_dict()

    assert payload["is_valid"] is True
    assert payload["errors"] == []
    assert payload["warnings"][0]["severity"] == "warning"
    assert payload["warnings"][0]["field"] == "contribution_amount"
