"""Domain models - pure Python dataclasses representing balance history entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class InsightKind(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"


@dataclass
class Transaction:
    """Dated income or expense entry supplied by a transaction source"""

    transaction_id: str
    type: TransactionType
    amount: Decimal  # always >= 0, sign comes from type
    occurred_at: datetime
    description: str = ""


@dataclass
class DailyTotals:
    """Income and expense reduced to a single calendar day"""

    date_key: date
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class DailyBalancePoint:
    """End-of-day balance for one calendar day"""

    date: date
    balance: Decimal


@dataclass(frozen=True)
class MonthlyBalance:
    """Monthly rollup of the balance series"""

    month: str  # YYYY-MM
    balance: Decimal
    income: Decimal
    expenses: Decimal


@dataclass(frozen=True)
class ProjectionResult:
    """Linear forecast of the balance at the end of the current period"""

    end_of_period: Decimal
    days_remaining: int
    daily_spending_rate: Decimal
    is_positive: bool


@dataclass(frozen=True)
class Insight:
    """Advisory record produced by an insight builder"""

    insight_id: str
    kind: InsightKind
    title: str
    description: str
    icon: str


@dataclass(frozen=True)
class BalanceHistoryResult:
    """Immutable output of one reconstruction run"""

    daily_balances: Tuple[DailyBalancePoint, ...]
    monthly_balances: Tuple[MonthlyBalance, ...]
    projection: ProjectionResult
    insights: Tuple[Insight, ...]
    generated_at: Optional[datetime] = field(default=None, compare=False)
