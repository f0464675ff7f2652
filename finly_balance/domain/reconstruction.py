"""Backward balance reconstruction - derive past end-of-day balances from today's anchor"""

from datetime import date, timedelta
from decimal import Decimal
from typing import List, Mapping

from finly_balance.domain.models import DailyBalancePoint, DailyTotals
from finly_balance.utils.date_utils import generate_date_range


def reconstruct_daily_balances(
    current_balance: Decimal,
    totals: Mapping[date, DailyTotals],
    today: date,
    days: int = 30,
) -> List[DailyBalancePoint]:
    """
    Walk backward from today, undoing each day's net effect.

    Forward identity:  end_of_day = start_of_day + income - expense
    Reversed:          start_of_day = end_of_day - income + expense

    A day starts where the previous day ended, so a single running value is
    enough. Today's point is always exactly current_balance.

    Args:
        current_balance: End-of-day balance for today (the anchor)
        totals: Per-day totals keyed by calendar date; missing days are zero
        today: Calendar date of the anchor
        days: Number of days to emit, counting today

    Returns:
        Exactly `days` points, oldest first
    """
    if days < 1:
        raise ValueError(f"days must be at least 1, got {days}")

    running = current_balance
    newest_first: List[DailyBalancePoint] = []

    oldest = today - timedelta(days=days - 1)
    for day in reversed(generate_date_range(oldest, today)):
        newest_first.append(DailyBalancePoint(date=day, balance=running))

        day_totals = totals.get(day)
        if day_totals is not None:
            running = running - day_totals.income + day_totals.expense

    newest_first.reverse()
    return newest_first
