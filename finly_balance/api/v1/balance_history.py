"""GET /v1/balance-history and POST /v1/balance-history/refresh"""

import logging
from fastapi import APIRouter, BackgroundTasks, Depends, Request

from finly_balance.api.v1.schemas import (
    BalanceHistoryStateResponse,
    BalanceHistorySchema,
    DailyBalanceSchema,
    MonthlyBalanceSchema,
    ProjectionSchema,
    InsightSchema,
    RefreshResponse,
)
from finly_balance.api.dependencies import get_balance_history_service, get_request_id
from finly_balance.domain.models import BalanceHistoryResult
from finly_balance.service import BalanceHistoryService

router = APIRouter()


def to_schema(result: BalanceHistoryResult) -> BalanceHistorySchema:
    return BalanceHistorySchema(
        daily_balances=[
            DailyBalanceSchema(date=p.date, balance=p.balance) for p in result.daily_balances
        ],
        monthly_balances=[
            MonthlyBalanceSchema(month=m.month, balance=m.balance, income=m.income, expenses=m.expenses)
            for m in result.monthly_balances
        ],
        projection=ProjectionSchema(
            end_of_period=result.projection.end_of_period,
            days_remaining=result.projection.days_remaining,
            daily_spending_rate=result.projection.daily_spending_rate,
            is_positive=result.projection.is_positive,
        ),
        insights=[
            InsightSchema(
                insight_id=i.insight_id,
                kind=i.kind.value,
                title=i.title,
                description=i.description,
                icon=i.icon,
            )
            for i in result.insights
        ],
        generated_at=result.generated_at,
    )


@router.get("/balance-history", response_model=BalanceHistoryStateResponse)
def get_balance_history(service: BalanceHistoryService = Depends(get_balance_history_service)):
    """
    Current reconstruction state.

    Returns:
        Status, loading flag, latest result (possibly stale) and last error
    """
    state = service.current_state()

    return BalanceHistoryStateResponse(
        status=state.status.value,
        loading=state.loading,
        result=to_schema(state.result) if state.result is not None else None,
        error=state.error,
    )


@router.post("/balance-history/refresh", response_model=RefreshResponse, status_code=202)
async def refresh_balance_history(
    background_tasks: BackgroundTasks,
    request: Request,
    service: BalanceHistoryService = Depends(get_balance_history_service),
):
    """Schedule a reconstruction; poll GET /v1/balance-history for the outcome"""
    logging.info("Reconstruction requested", extra={"request_id": get_request_id(request)})
    background_tasks.add_task(service.trigger_reconstruction)
    return RefreshResponse(status="accepted")
