"""Default rates, validation thresholds and named glidepath presets."""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel

from retirement_calculator.schemas.glidepath import (
    AllocationBasedGlidepath,
    CustomWaypointsGlidepath,
    FixedReturnGlidepath,
    GlidepathWaypoint,
    SteppedReturnGlidepath,
)

GLIDEPATH_DEFAULTS = {
    "fixed_return": {"start_return": 0.10, "end_return": 0.055},
    "allocation_based": {
        "start_equity_weight": 0.90,
        "end_equity_weight": 0.30,
        "equity_return": 0.12,
        "bond_return": 0.04,
    },
    "custom_waypoints": {"equity_return": 0.10, "bond_return": 0.04},
}

GLIDEPATH_VALIDATION = {
    "ages": {"min_age": 0.1, "max_age": 150, "min_age_difference": 1},
    "returns": {
        "max_return": 1.0,
        "extreme_return_threshold": 0.25,
        "extreme_loss_threshold": -0.5,
    },
    "allocations": {"min_weight": 0.0, "max_weight": 1.0},
    "contributions": {"large_contribution_threshold": 50_000},
    "waypoints": {"max_gap_years": 20},
}

GLIDEPATH_MATH = {
    "currency_multiplier": 100,
    "months_per_year": 12,
}

GLIDEPATH_PERFORMANCE = {
    # months; longer simulations still run but earn a warning
    "large_simulation_months": 1200,
}

GLIDEPATH_TEMPLATES = {
    "conservative": {
        "fixed_return": FixedReturnGlidepath(start_return=0.07, end_return=0.04),
        "allocation_based": AllocationBasedGlidepath(
            start_equity_weight=0.60, end_equity_weight=0.20, equity_return=0.10, bond_return=0.035
        ),
    },
    "moderate": {
        "fixed_return": FixedReturnGlidepath(**GLIDEPATH_DEFAULTS["fixed_return"]),
        "allocation_based": AllocationBasedGlidepath(**GLIDEPATH_DEFAULTS["allocation_based"]),
    },
    "aggressive": {
        "fixed_return": FixedReturnGlidepath(start_return=0.12, end_return=0.07),
        "allocation_based": AllocationBasedGlidepath(
            start_equity_weight=1.0, end_equity_weight=0.50, equity_return=0.12, bond_return=0.045
        ),
    },
}


def _minus_age_waypoints(base: int) -> list:
    """Equity weight of (base - age)% sampled every ten years from 20 to 90."""
    return [
        GlidepathWaypoint(age=age, value=min(1.0, max(0.0, (base - age) / 100)))
        for age in range(20, 91, 10)
    ]


GLIDEPATH_PRESETS: Dict[str, BaseModel] = {
    "money_guy_show": SteppedReturnGlidepath(
        base_return=0.10,
        decline_rate=0.001,
        terminal_return=0.055,
        decline_start_age=20,
        terminal_age=65,
    ),
    "bogleheads_100_minus_age": CustomWaypointsGlidepath(
        value_type="equityWeight",
        waypoints=_minus_age_waypoints(100),
        equity_return=0.10,
        bond_return=0.04,
    ),
    "bogleheads_110_minus_age": CustomWaypointsGlidepath(
        value_type="equityWeight",
        waypoints=_minus_age_waypoints(110),
        equity_return=0.10,
        bond_return=0.04,
    ),
    "bogleheads_120_minus_age": CustomWaypointsGlidepath(
        value_type="equityWeight",
        waypoints=_minus_age_waypoints(120),
        equity_return=0.10,
        bond_return=0.04,
    ),
}
