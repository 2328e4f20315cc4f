"""Month-by-month glidepath simulation."""

from __future__ import annotations

import logging
import math
from typing import Any, List

from retirement_calculator.constants import GLIDEPATH_MATH
from retirement_calculator.core.compounding import summarize_returns
from retirement_calculator.core.frequency import compound_multiplier, how_often_to_compound
from retirement_calculator.core.glidepath import (
    annual_to_monthly_rate,
    coerce_glidepath_config,
    resolve_annual_return,
)
from retirement_calculator.domain.errors import (
    ErrorCode,
    InvalidAgeError,
    InvalidContributionTimingError,
    InvalidFinancialParameterError,
    InvalidFrequencyError,
)
from retirement_calculator.schemas.glidepath import MonthlyTimelineEntry, SimulationResult

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = GLIDEPATH_MATH["months_per_year"]


def round_to_cents(value: float) -> float:
    """Round half up to the nearest cent."""
    cents = GLIDEPATH_MATH["currency_multiplier"]
    return math.floor(value * cents + 0.5) / cents


def _validate_inputs(
    initial_balance: float,
    contribution_amount: float,
    start_age: float,
    end_age: float,
    contribution_frequency: int,
    compounding_frequency: int,
    contribution_timing: str,
) -> None:
    if initial_balance < 0:
        raise InvalidFinancialParameterError(
            "Initial balance must be non-negative",
            field="initial_balance",
            value=initial_balance,
            code=ErrorCode.NEGATIVE_BALANCE,
        )
    if contribution_amount < 0:
        raise InvalidFinancialParameterError(
            "Contribution amount must be non-negative",
            field="contribution_amount",
            value=contribution_amount,
            code=ErrorCode.NEGATIVE_CONTRIBUTION,
        )
    if start_age <= 0 or end_age <= 0:
        raise InvalidAgeError(
            "Ages must be positive",
            field="start_age" if start_age <= 0 else "end_age",
            value=start_age if start_age <= 0 else end_age,
            code=ErrorCode.NEGATIVE_AGE,
        )
    if start_age >= end_age:
        raise InvalidAgeError(
            "Start age must be less than end age", field="start_age", value=start_age
        )
    if contribution_frequency <= 0 or compounding_frequency <= 0:
        raise InvalidFrequencyError(
            "Frequencies must be positive",
            field="contribution_frequency" if contribution_frequency <= 0 else "compounding_frequency",
            value=contribution_frequency if contribution_frequency <= 0 else compounding_frequency,
        )
    if contribution_timing not in ("start", "end"):
        raise InvalidContributionTimingError(
            "Contribution timing must be 'start' or 'end'",
            field="contribution_timing",
            value=contribution_timing,
        )


def simulate_glidepath(
    initial_balance: float,
    contribution_amount: float,
    start_age: float,
    end_age: float,
    config: Any,
    contribution_frequency: int = 12,
    compounding_frequency: int = 12,
    contribution_timing: str = "start",
) -> SimulationResult:
    """
    Compound a balance one calendar month at a time along a glidepath.

    Conventions:
      - Month m (1-based) runs at age start_age + (m - 1) / 12.
      - The annual rate for that age converts to the equivalent monthly rate
        (1 + r) ** (1/12) - 1, not r / 12.
      - Contributions land on months where m % how_often_to_compound == 0,
        scaled by compound_multiplier.
      - "start" timing adds the contribution before the month's interest,
        "end" timing after it.

    Raises a GlidepathError subclass for invalid inputs, an empty waypoint
    list or an unknown mode; no partial result is ever returned.
    """
    _validate_inputs(
        initial_balance,
        contribution_amount,
        start_age,
        end_age,
        contribution_frequency,
        compounding_frequency,
        contribution_timing,
    )
    config = coerce_glidepath_config(config)

    # float noise in the age span must not add a month (30.7 -> 40.7 is 120)
    total_months = math.ceil(round((end_age - start_age) * MONTHS_PER_YEAR, 9))
    every = how_often_to_compound(contribution_frequency, compounding_frequency)
    contribution = contribution_amount * compound_multiplier(
        contribution_frequency, compounding_frequency
    )

    balance = float(initial_balance)
    total_contributions = 0.0
    total_interest = 0.0
    monthly_return_sum = 0.0
    timeline: List[MonthlyTimelineEntry] = []

    for month in range(1, total_months + 1):
        age = start_age + (month - 1) / MONTHS_PER_YEAR
        resolved = resolve_annual_return(age, config, start_age, end_age)
        monthly_return = annual_to_monthly_rate(resolved.annual_return)
        contributes = month % every == 0

        if contributes and contribution_timing == "start":
            balance += contribution
            total_contributions += contribution

        interest = balance * monthly_return
        balance += interest
        total_interest += interest

        if contributes and contribution_timing == "end":
            balance += contribution
            total_contributions += contribution

        monthly_return_sum += monthly_return
        timeline.append(
            MonthlyTimelineEntry(
                month=month,
                age=age,
                current_balance=balance,
                cumulative_contributions=total_contributions,
                cumulative_interest=total_interest,
                monthly_interest_earned=interest,
                current_annual_return=resolved.annual_return,
                current_monthly_return=monthly_return,
                current_equity_weight=resolved.equity_weight,
            )
        )

    final_balance = round_to_cents(balance)
    total_years = end_age - start_age
    effective, average = summarize_returns(
        final_balance, initial_balance, total_contributions, total_interest, total_years
    )

    logger.debug(
        "simulated %s glidepath over %d months: final=%.2f contributions=%.2f interest=%.2f",
        config.mode,
        total_months,
        final_balance,
        total_contributions,
        total_interest,
    )

    return SimulationResult(
        final_balance=final_balance,
        total_contributions=total_contributions,
        total_interest_earned=total_interest,
        total_months=total_months,
        start_age=start_age,
        end_age=end_age,
        glidepath_mode=config.mode,
        contribution_timing=contribution_timing,
        monthly_timeline=timeline,
        effective_annual_return=effective,
        average_annual_interest_rate=average,
        average_monthly_return=monthly_return_sum / total_months,
    )
