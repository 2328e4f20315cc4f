"""Data contracts for glidepath configurations and monthly simulations."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ContributionTiming = Literal["start", "end"]
GlidepathMode = Literal["fixed-return", "stepped-return", "allocation-based", "custom-waypoints"]


class FixedReturnGlidepath(BaseModel):
    """Annual return moves linearly from start_return to end_return across the age span."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: Literal["fixed-return"] = "fixed-return"
    start_return: float = Field(..., description="Annual return at the starting age.")
    end_return: float = Field(..., description="Annual return at the ending age.")


class SteppedReturnGlidepath(BaseModel):
    """Flat base return, then a linear yearly decline, then a flat terminal floor."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: Literal["stepped-return"] = "stepped-return"
    base_return: float
    decline_rate: float = Field(..., description="Return lost per year of age once the decline starts.")
    terminal_return: float
    decline_start_age: float
    terminal_age: float = 65


class AllocationBasedGlidepath(BaseModel):
    """Equity weight moves linearly across the age span; returns blend equity and bonds."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: Literal["allocation-based"] = "allocation-based"
    start_equity_weight: float
    end_equity_weight: float
    equity_return: float
    bond_return: float


class GlidepathWaypoint(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    age: float
    value: float


class CustomWaypointsGlidepath(BaseModel):
    """Piecewise-linear curve through (age, value) points.

    Waypoints may arrive unsorted or with repeated ages; the resolver sorts a
    copy. When value_type is "equityWeight" the interpolated value is an equity
    weight blended with equity_return/bond_return.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: Literal["custom-waypoints"] = "custom-waypoints"
    value_type: Literal["return", "equityWeight"]
    waypoints: List[GlidepathWaypoint]
    equity_return: Optional[float] = None
    bond_return: Optional[float] = None


GlidepathConfig = Annotated[
    Union[
        FixedReturnGlidepath,
        SteppedReturnGlidepath,
        AllocationBasedGlidepath,
        CustomWaypointsGlidepath,
    ],
    Field(discriminator="mode"),
]


class MonthlyTimelineEntry(BaseModel):
    """State of the account at the end of one simulated month."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    month: int = Field(..., ge=1)
    age: float
    current_balance: float
    cumulative_contributions: float
    cumulative_interest: float
    monthly_interest_earned: float
    current_annual_return: float
    current_monthly_return: float
    # None when the mode has no notion of an equity weight
    current_equity_weight: Optional[float] = None


class SimulationResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    final_balance: float
    total_contributions: float
    total_interest_earned: float
    total_months: int
    start_age: float
    end_age: float
    glidepath_mode: GlidepathMode
    contribution_timing: ContributionTiming
    monthly_timeline: List[MonthlyTimelineEntry]
    effective_annual_return: float
    average_annual_interest_rate: float
    average_monthly_return: float


class GlidepathRequest(BaseModel):
    """Inputs for a glidepath simulation submitted over the API."""

    model_config = ConfigDict(extra="forbid")

    initial_balance: float = Field(..., description="Balance at start_age.")
    contribution_amount: float = Field(0.0, description="Amount added per contribution period.")
    start_age: float
    end_age: float
    glidepath: GlidepathConfig
    contribution_frequency: int = 12
    compounding_frequency: int = 12
    contribution_timing: ContributionTiming = "start"


class GlidepathResponse(SimulationResult):
    warnings: List[str] = []
