"""Pydantic schemas for API response serialization"""

from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


class DailyBalanceSchema(BaseModel):
    """End-of-day balance for one calendar day"""

    date: date
    balance: Decimal


class MonthlyBalanceSchema(BaseModel):
    month: str
    balance: Decimal
    income: Decimal
    expenses: Decimal


class ProjectionSchema(BaseModel):
    """Linear end-of-period forecast"""

    end_of_period: Decimal
    days_remaining: int
    daily_spending_rate: Decimal
    is_positive: bool


class InsightSchema(BaseModel):
    insight_id: str
    kind: str
    title: str
    description: str
    icon: str


class BalanceHistorySchema(BaseModel):
    """Full reconstruction result"""

    daily_balances: List[DailyBalanceSchema]
    monthly_balances: List[MonthlyBalanceSchema]
    projection: ProjectionSchema
    insights: List[InsightSchema]
    generated_at: Optional[datetime] = None


class BalanceHistoryStateResponse(BaseModel):
    """Response for GET /v1/balance-history"""

    status: str  # idle | loading | ready | failed
    loading: bool
    result: Optional[BalanceHistorySchema] = None
    error: Optional[str] = None


class RefreshResponse(BaseModel):
    """Response for POST /v1/balance-history/refresh"""

    status: str
