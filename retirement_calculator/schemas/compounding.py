"""Data contracts for fixed-rate compounding calculations."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

# daily is the finest cadence accepted over the API
MAX_PERIODS_PER_YEAR = 365


class PeriodDetail(BaseModel):
    """Single row of a period-by-period projection ledger."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    period: int = Field(..., ge=1)
    balance: float
    contribution_total: float
    interest_total: float
    interest_earned_this_period: float
    balance_from_contributions: float
    # balance minus contributions, so it includes the starting balance
    balance_from_interest: float


class ProjectionResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    balance: float
    total_contributions: float
    total_interest_earned: float
    years: float
    contribution_frequency: int
    compounding_frequency: int
    period_details: List[PeriodDetail]
    effective_annual_return: float = 0.0
    average_annual_interest_rate: float = 0.0


class YearlyDetail(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., ge=1)
    cumulative_contributions: float
    cumulative_interest: float
    end_of_year_balance: float


class ContributionSizing(BaseModel):
    """Per-period contribution needed to reach a target, plus inflation views of the target."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    contribution_needed_per_period: float
    contribution_needed_per_period_with_inflation: float
    desired_balance: float
    desired_balance_with_inflation: float
    desired_balance_value_after_inflation: float


class ContributionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    starting_balance: float = Field(..., description="Balance today.")
    desired_balance: float = Field(..., description="Target balance in today's dollars.")
    years: float = Field(..., gt=0, description="Years until the target date.")
    annual_rate: float = Field(..., gt=-1, description="Annual return as a decimal (0.05 for 5%).")
    contribution_frequency: int = Field(12, gt=0, le=MAX_PERIODS_PER_YEAR)
    compounding_frequency: int = Field(12, gt=0, le=MAX_PERIODS_PER_YEAR)
    inflation_rate: float = Field(0.02, gt=-1)


class ProjectionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    initial_balance: float = Field(..., ge=0, description="Balance at period 0.")
    contribution_amount: float = Field(0.0, ge=0, description="Amount added per contribution period.")
    years: float = Field(..., gt=0)
    annual_rate: float = Field(..., gt=-1)
    contribution_frequency: int = Field(12, gt=0, le=MAX_PERIODS_PER_YEAR)
    compounding_frequency: int = Field(12, gt=0, le=MAX_PERIODS_PER_YEAR)


class ProjectionResponse(ProjectionResult):
    yearly: List[YearlyDetail] = []
