"""Fixed-rate compounding: contribution sizing and period-by-period projections."""

from __future__ import annotations

import logging
from typing import List

from retirement_calculator.core.frequency import (
    adjust_for_inflation,
    compound_multiplier,
    how_often_to_compound,
    normalize_balance_across_frequencies,
    rate_per_period,
    total_periods,
    value_after_inflation,
)
from retirement_calculator.schemas.compounding import (
    ContributionSizing,
    PeriodDetail,
    ProjectionResult,
    YearlyDetail,
)

logger = logging.getLogger(__name__)


def geometric_growth_multiplier(rate: float, periods: float) -> float:
    """Sum of (1 + rate)**i for i = 1..periods.

    This is the value of one unit contributed at the start of every period.
    The closed form divides by rate, so rate == 0 returns the period count.
    """
    if rate == 0:
        return periods
    growth = 1 + rate
    return (growth ** (periods + 1) - growth) / rate


def annualized_growth(ending: float, base: float, years: float) -> float:
    """Compound annual growth rate taking `base` to `ending` over `years`."""
    ratio = ending / base
    if ratio <= 0:
        # no real root; the account lost everything relative to its base
        return -1.0
    return ratio ** (1 / years) - 1


def summarize_returns(
    balance: float,
    initial_balance: float,
    total_contributions: float,
    total_interest: float,
    years: float,
) -> tuple[float, float]:
    """Return (effective_annual_return, average_annual_interest_rate)."""
    if total_interest == 0 or years <= 0:
        effective = 0.0
    elif initial_balance == 0:
        effective = annualized_growth(balance, total_contributions, years)
    else:
        effective = annualized_growth(balance, initial_balance, years)

    principal = initial_balance + total_contributions
    if principal > 0 and total_interest > 0:
        average = total_interest / years / principal
    else:
        average = 0.0
    return effective, average


def size_contribution(
    starting_balance: float,
    desired_balance: float,
    years: float,
    annual_rate: float,
    contribution_frequency: int,
    compounding_frequency: int,
    inflation_rate: float = 0.02,
) -> ContributionSizing:
    """Contribution per period needed to grow starting_balance into desired_balance.

    A target the starting balance already covers yields 0, not a negative
    contribution.
    """
    periods = total_periods(years, compounding_frequency)
    period_rate = rate_per_period(annual_rate, compounding_frequency)
    grown_start = starting_balance * (1 + period_rate) ** periods
    multiplier = geometric_growth_multiplier(period_rate, periods)

    desired_with_inflation = adjust_for_inflation(desired_balance, years, inflation_rate)
    desired_after_inflation = value_after_inflation(desired_balance, inflation_rate, years)

    needed = normalize_balance_across_frequencies(
        (desired_balance - grown_start) / multiplier,
        contribution_frequency,
        compounding_frequency,
    )
    needed_with_inflation = normalize_balance_across_frequencies(
        (desired_with_inflation - grown_start) / multiplier,
        contribution_frequency,
        compounding_frequency,
    )

    return ContributionSizing(
        contribution_needed_per_period=needed,
        contribution_needed_per_period_with_inflation=needed_with_inflation,
        desired_balance=desired_balance,
        desired_balance_with_inflation=desired_with_inflation,
        desired_balance_value_after_inflation=desired_after_inflation,
    )


def project_balance(
    initial_balance: float,
    contribution_amount: float,
    years: float,
    annual_rate: float,
    contribution_frequency: int,
    compounding_frequency: int,
) -> ProjectionResult:
    """
    Compound a constant annual rate period by period.

    Order of operations (per compounding period):
      1) Add the contribution when one falls in this period.
      2) Apply one period of interest to the whole balance.
      3) Record a PeriodDetail snapshot.
    """
    periods = int(total_periods(years, compounding_frequency))
    period_rate = rate_per_period(annual_rate, compounding_frequency)
    every = how_often_to_compound(contribution_frequency, compounding_frequency)
    contribution = contribution_amount * compound_multiplier(
        contribution_frequency, compounding_frequency
    )

    balance = initial_balance
    total_contributions = 0.0
    total_interest = 0.0
    details: List[PeriodDetail] = []

    for period in range(1, periods + 1):
        if period % every == 0:
            total_contributions += contribution
            balance += contribution

        interest = balance * period_rate
        total_interest += interest
        balance += interest

        details.append(
            PeriodDetail(
                period=period,
                balance=balance,
                contribution_total=total_contributions,
                interest_total=total_interest,
                interest_earned_this_period=interest,
                balance_from_contributions=total_contributions,
                balance_from_interest=balance - total_contributions,
            )
        )

    effective, average = summarize_returns(
        balance, initial_balance, total_contributions, total_interest, years
    )
    logger.debug(
        "projected %d periods at %.4f: balance=%.2f contributions=%.2f interest=%.2f",
        periods,
        annual_rate,
        balance,
        total_contributions,
        total_interest,
    )

    return ProjectionResult(
        balance=balance,
        total_contributions=total_contributions,
        total_interest_earned=total_interest,
        years=years,
        contribution_frequency=contribution_frequency,
        compounding_frequency=compounding_frequency,
        period_details=details,
        effective_annual_return=effective,
        average_annual_interest_rate=average,
    )


def aggregate_by_year(projection: ProjectionResult) -> List[YearlyDetail]:
    """Collapse a period ledger into one row per year.

    Totals are cumulative through the end of each year: the year's first
    period contributes its running total and later periods add their deltas.
    """
    details = projection.period_details
    per_year = projection.compounding_frequency
    rows: List[YearlyDetail] = []

    contributions = 0.0
    interest = 0.0
    for year in range(1, int(projection.years) + 1):
        first = (year - 1) * per_year
        last = min(year * per_year, len(details))
        if first >= last:
            break

        for index in range(first, last):
            detail = details[index]
            if index == first:
                contributions = detail.contribution_total
                interest = detail.interest_total
            else:
                previous = details[index - 1]
                contributions += detail.contribution_total - previous.contribution_total
                interest += detail.interest_total - previous.interest_total

        rows.append(
            YearlyDetail(
                year=year,
                cumulative_contributions=contributions,
                cumulative_interest=interest,
                end_of_year_balance=details[last - 1].balance,
            )
        )

    return rows


def desired_balance_by_yearly_spend(yearly_spend: float, withdrawal_rate: float = 0.04) -> float:
    """Balance needed to fund `yearly_spend` under a fixed withdrawal-rate rule."""
    return yearly_spend / withdrawal_rate


def yearly_withdrawal_by_balance(balance: float, withdrawal_rate: float) -> float:
    return balance * withdrawal_rate
