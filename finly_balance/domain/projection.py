"""Spending-rate estimation and end-of-period balance projection"""

from datetime import date
from decimal import Decimal
from typing import Sequence

from finly_balance.domain.models import DailyBalancePoint, ProjectionResult
from finly_balance.utils.date_utils import days_remaining_in_period


def estimate_daily_spending_rate(points: Sequence[DailyBalancePoint], window: int = 7) -> Decimal:
    """
    Average size of the balance drops within the most recent `window` points.

    Only days where the balance went down count; income days are ignored, so
    the rate tracks typical burn rather than net cash flow.

    Args:
        points: Balance series, oldest first
        window: Number of trailing points to inspect

    Returns:
        Non-negative daily rate, 0 when there were no drops or fewer than 2 points
    """
    recent = list(points[-window:]) if window > 0 else []

    total_spending = Decimal("0")
    days_with_spending = 0

    for prev, nxt in zip(recent, recent[1:]):
        change = prev.balance - nxt.balance
        if change > 0:
            total_spending += change
            days_with_spending += 1

    if days_with_spending == 0:
        return Decimal("0")

    return total_spending / days_with_spending


def project_balance(
    points: Sequence[DailyBalancePoint],
    current_balance: Decimal,
    today: date,
    window: int = 7,
    period: str = "month",
) -> ProjectionResult:
    """
    Straight-line projection of the balance at the end of the current period.

    end_of_period = current_balance - daily_spending_rate * days_remaining

    No smoothing, seasonality or trend detection is applied.
    """
    rate = estimate_daily_spending_rate(points, window)
    days_remaining = days_remaining_in_period(today, period)
    end_of_period = current_balance - rate * days_remaining

    return ProjectionResult(
        end_of_period=end_of_period,
        days_remaining=days_remaining,
        daily_spending_rate=rate,
        is_positive=end_of_period >= 0,
    )
