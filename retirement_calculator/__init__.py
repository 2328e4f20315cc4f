"""Retirement savings projections under fixed rates and age-based glidepaths."""

from retirement_calculator.core.compounding import (
    aggregate_by_year,
    project_balance,
    size_contribution,
)
from retirement_calculator.core.frequency import ContributionFrequency
from retirement_calculator.core.glidepath import resolve_annual_return
from retirement_calculator.core.simulation import simulate_glidepath

__all__ = [
    "ContributionFrequency",
    "aggregate_by_year",
    "project_balance",
    "resolve_annual_return",
    "simulate_glidepath",
    "size_contribution",
]
