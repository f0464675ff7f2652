"""Collaborator interfaces the balance history pipeline depends on"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import List, Sequence

from finly_balance.domain.models import Transaction, DailyBalancePoint, ProjectionResult, Insight


class TransactionSource(ABC):
    """
    Supplier of the anchor balance and the dated transactions behind it.

    Implementations raise TransactionSourceError when they cannot answer.
    """

    @abstractmethod
    async def get_current_balance(self) -> Decimal:
        """End-of-day balance for today in the accounting currency"""

    @abstractmethod
    async def get_transactions(self, start: date, end: date) -> List[Transaction]:
        """
        Transactions dated between start and end (inclusive).

        May return entries slightly outside the window and in any order.
        """


class InsightBuilder(ABC):
    """Turns a balance series and its projection into advisory records"""

    @abstractmethod
    async def build_insights(
        self,
        daily_balances: Sequence[DailyBalancePoint],
        projection: ProjectionResult,
    ) -> Sequence[Insight]:
        """May raise anything; callers go through InsightBuilderAdapter"""
