"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finly_balance.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finly_balance.api.v1 import balance_history
from finly_balance.api.dependencies import build_balance_history_service
from finly_balance.infrastructure.database.session import init_db
from finly_balance.infrastructure.observability.logging import setup_logging
from finly_balance.service import BalanceHistoryService
from finly_balance.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app(service: BalanceHistoryService | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finly Balance History",
        description="Balance history reconstruction and end-of-period projection service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if service is None:
        service = build_balance_history_service()

        @app.on_event("startup")
        def create_tables():
            init_db()

    app.state.balance_history_service = service

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(balance_history.router, prefix="/v1", tags=["balance-history"])

    return app


app = create_app()
