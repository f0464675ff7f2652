"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Generator, List, Sequence
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finly_balance.api.main import create_app
from finly_balance.domain.interfaces import TransactionSource, InsightBuilder
from finly_balance.domain.models import (
    Transaction,
    TransactionType,
    DailyBalancePoint,
    ProjectionResult,
    Insight,
    InsightKind,
)
from finly_balance.domain.exceptions import TransactionSourceError
from finly_balance.infrastructure.database.models import Base
from finly_balance.service import BalanceHistoryService
from finly_balance.utils.date_utils import FixedClock


# Test database
TEST_DATABASE_URL = "sqlite:///./test_repository.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Thursday 20 June 2024, noon UTC: 10 days left in the month
TODAY = date(2024, 6, 20)


class StubTransactionSource(TransactionSource):
    """In-memory source with optional failure injection"""

    def __init__(self, balance: Decimal, transactions: List[Transaction] | None = None, error: Exception | None = None):
        self.balance = balance
        self.transactions = transactions or []
        self.error = error
        self.requested_windows = []

    async def get_current_balance(self) -> Decimal:
        if self.error:
            raise self.error
        return self.balance

    async def get_transactions(self, start: date, end: date) -> List[Transaction]:
        self.requested_windows.append((start, end))
        if self.error:
            raise self.error
        return list(self.transactions)


class StubInsightBuilder(InsightBuilder):
    """Returns canned insights or raises the configured error"""

    def __init__(self, insights: Sequence[Insight] = (), error: Exception | None = None):
        self.insights = list(insights)
        self.error = error
        self.calls = []

    async def build_insights(self, daily_balances: Sequence[DailyBalancePoint], projection: ProjectionResult):
        self.calls.append((list(daily_balances), projection))
        if self.error:
            raise self.error
        return self.insights


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 6, 20, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_txn() -> Callable[..., Transaction]:
    """Factory for transactions dated relative to TODAY"""
    counter = {"n": 0}

    def _make(kind: str, amount: str, days_ago: int = 0, hour: int = 12) -> Transaction:
        counter["n"] += 1
        occurred = datetime.combine(TODAY - timedelta(days=days_ago), datetime.min.time(), tzinfo=timezone.utc)
        return Transaction(
            transaction_id=f"tx_{counter['n']}",
            type=TransactionType(kind),
            amount=Decimal(amount),
            occurred_at=occurred + timedelta(hours=hour),
            description=f"{kind} {amount}",
        )

    return _make


@pytest.fixture
def sample_insight() -> Insight:
    return Insight(
        insight_id="ins_1",
        kind=InsightKind.WARNING,
        title="Spending is up",
        description="You spent more this week than last week.",
        icon="trending-down",
    )


@pytest.fixture
def sample_transactions(make_txn) -> List[Transaction]:
    """Salary two weeks ago, rent the day after, groceries every third day"""
    transactions = [make_txn("income", "2500.00", days_ago=14)]
    transactions.append(make_txn("expense", "900.00", days_ago=13))
    for days_ago in range(0, 28, 3):
        transactions.append(make_txn("expense", "45.50", days_ago=days_ago))
    return transactions


@pytest.fixture
def make_service(clock) -> Callable[..., BalanceHistoryService]:
    def _make(source: TransactionSource, builder: InsightBuilder | None = None) -> BalanceHistoryService:
        return BalanceHistoryService(source, builder or StubInsightBuilder(), clock=clock)

    return _make


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(make_service, sample_transactions, sample_insight) -> TestClient:
    """FastAPI test client wired to stub collaborators"""
    source = StubTransactionSource(Decimal("1500.00"), sample_transactions)
    service = make_service(source, StubInsightBuilder([sample_insight]))
    return TestClient(create_app(service=service))


@pytest.fixture
def failing_source() -> StubTransactionSource:
    return StubTransactionSource(Decimal("0"), error=TransactionSourceError("connection refused"))


@pytest.fixture
def stub_source() -> type:
    return StubTransactionSource


@pytest.fixture
def stub_builder() -> type:
    return StubInsightBuilder
