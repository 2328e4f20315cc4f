"""Period arithmetic shared by the fixed-rate and glidepath engines.

Contribution cadence and compounding cadence are independent inputs (weekly
contributions with monthly compounding, say), so every calculation first
agrees on one normalized period unit using these helpers.
"""

from __future__ import annotations

import math
from enum import IntEnum


class ContributionFrequency(IntEnum):
    YEARLY = 1
    MONTHLY = 12
    WEEKLY = 52


def total_periods(years: float, periods_per_year: float) -> float:
    return years * periods_per_year


def rate_per_period(annual_rate: float, periods_per_year: float) -> float:
    return annual_rate / periods_per_year


def how_often_to_compound(contribution_frequency: int, compounding_frequency: int) -> int:
    """Number of compounding periods between two contributions."""
    if contribution_frequency == ContributionFrequency.YEARLY:
        return compounding_frequency
    if compounding_frequency >= contribution_frequency:
        return math.floor(compounding_frequency / contribution_frequency)
    return math.ceil(contribution_frequency / compounding_frequency)


def compound_multiplier(contribution_frequency: int, compounding_frequency: int) -> float:
    """Scale applied to one contribution when it lands on a compounding period.

    Contributing more often than compounding collapses several contributions
    into one period, so the amount shrinks by compounding/contribution.
    """
    if contribution_frequency == ContributionFrequency.YEARLY:
        return 1.0
    return min(1.0, compounding_frequency / contribution_frequency)


def normalize_balance_across_frequencies(
    balance: float, contribution_frequency: int, compounding_frequency: int
) -> float:
    """Rescale a per-compounding-period amount into per-contribution-period terms.

    Negative amounts (a target already covered by the starting balance) clamp to 0.
    """
    if balance < 0:
        return 0.0
    if compounding_frequency > contribution_frequency:
        return balance * compounding_frequency / contribution_frequency
    if contribution_frequency > compounding_frequency:
        return balance / math.floor(contribution_frequency / compounding_frequency)
    return balance


def adjust_for_inflation(amount: float, years: float, inflation_rate: float) -> float:
    """Future nominal value of `amount` after `years` of inflation."""
    return amount * (1 + inflation_rate) ** years


def value_after_inflation(amount: float, inflation_rate: float, years: float) -> float:
    """Today's purchasing power of `amount` received after `years`."""
    return amount / (1 + inflation_rate) ** years
