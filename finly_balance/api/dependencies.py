"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from finly_balance.config import settings
from finly_balance.domain.interfaces import TransactionSource
from finly_balance.infrastructure.clients.finance_api import FinanceApiClient
from finly_balance.infrastructure.clients.insights import InsightsClient
from finly_balance.infrastructure.database.repositories import RepositoryTransactionSource
from finly_balance.infrastructure.database.session import SessionLocal
from finly_balance.service import BalanceHistoryService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def build_transaction_source() -> TransactionSource:
    """Pick the configured transaction source"""
    if settings.source_backend == "api":
        return FinanceApiClient()
    return RepositoryTransactionSource(SessionLocal)


def build_balance_history_service() -> BalanceHistoryService:
    """Session-scoped service instance; one per application"""
    return BalanceHistoryService(
        source=build_transaction_source(),
        insight_builder=InsightsClient(),
    )


def get_balance_history_service(request: Request) -> BalanceHistoryService:
    """Provide the application's balance history service"""
    return request.app.state.balance_history_service
