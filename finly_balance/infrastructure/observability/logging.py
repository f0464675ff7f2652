"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from finly_balance.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_reconstruction(
    outcome: str,
    points: int,
    duration_ms: float,
    end_of_period: Decimal | None = None,
    insight_status: str | None = None,
) -> None:
    """Log structured reconstruction outcome for analysis"""
    logging.info(
        "Balance history reconstruction completed",
        extra={
            "step": "reconstruction_complete",
            "outcome": outcome,
            "points": points,
            "projected_end_of_period": str(end_of_period) if end_of_period is not None else None,
            "insight_status": insight_status,
            "duration_ms": duration_ms,
        },
    )
