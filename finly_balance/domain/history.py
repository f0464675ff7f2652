"""Balance history pipeline - fetch, aggregate, reconstruct, project, annotate, assemble"""

import asyncio
from datetime import datetime, timedelta
from typing import Sequence, Tuple

from finly_balance.domain.models import (
    BalanceHistoryResult,
    DailyBalancePoint,
    ProjectionResult,
    Insight,
)
from finly_balance.domain.interfaces import TransactionSource
from finly_balance.domain.insights import InsightBuilderAdapter, InsightsOutcome
from finly_balance.domain.aggregation import aggregate_daily_totals
from finly_balance.domain.reconstruction import reconstruct_daily_balances
from finly_balance.domain.projection import project_balance
from finly_balance.utils.date_utils import Clock


def assemble_result(
    daily_balances: Sequence[DailyBalancePoint],
    projection: ProjectionResult,
    insights: Sequence[Insight],
    generated_at: datetime | None = None,
) -> BalanceHistoryResult:
    """Freeze pipeline output into a single immutable result"""
    return BalanceHistoryResult(
        daily_balances=tuple(daily_balances),
        monthly_balances=(),  # reserved for monthly rollups
        projection=projection,
        insights=tuple(insights),
        generated_at=generated_at,
    )


async def reconstruct_balance_history(
    source: TransactionSource,
    insight_adapter: InsightBuilderAdapter,
    clock: Clock,
    history_days: int = 30,
    fetch_window_days: int = 31,
    spending_window_days: int = 7,
    projection_period: str = "month",
) -> Tuple[BalanceHistoryResult, InsightsOutcome]:
    """
    Run the full pipeline once.

    Flow:
    1. Fetch current balance and transactions concurrently
    2. Bucket transactions by local calendar day
    3. Rebuild `history_days` end-of-day balances backward from the anchor
    4. Project the balance at the end of the current period
    5. Ask the insight builder (degrades to no insights on failure)
    6. Assemble the immutable result

    Raises:
        TransactionSourceError: If either fetch fails or the batch is malformed
    """
    today = clock.today()
    start = today - timedelta(days=fetch_window_days)

    current_balance, transactions = await asyncio.gather(
        source.get_current_balance(),
        source.get_transactions(start, today),
    )

    totals = aggregate_daily_totals(transactions, clock)
    daily_balances = reconstruct_daily_balances(current_balance, totals, today, days=history_days)
    projection = project_balance(
        daily_balances,
        current_balance,
        today,
        window=spending_window_days,
        period=projection_period,
    )

    outcome = await insight_adapter.build(daily_balances, projection)

    result = assemble_result(daily_balances, projection, outcome.insights, generated_at=clock.now())
    return result, outcome
