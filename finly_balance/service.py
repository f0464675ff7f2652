"""Caller-facing balance history service holding the (loading, result) state"""

import time
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from finly_balance.config import Settings, settings as default_settings
from finly_balance.domain.models import BalanceHistoryResult
from finly_balance.domain.interfaces import TransactionSource, InsightBuilder
from finly_balance.domain.insights import InsightBuilderAdapter
from finly_balance.domain.history import reconstruct_balance_history
from finly_balance.domain.exceptions import TransactionSourceError
from finly_balance.infrastructure.observability.metrics import record_reconstruction, source_failures_counter
from finly_balance.infrastructure.observability.logging import log_reconstruction
from finly_balance.utils.date_utils import Clock

logger = logging.getLogger(__name__)


class HistoryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class BalanceHistoryState:
    """Snapshot of the service state; result may be stale when status is failed or loading"""

    status: HistoryStatus
    result: Optional[BalanceHistoryResult] = None
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status is HistoryStatus.LOADING


class BalanceHistoryService:
    """
    Owns the latest reconstruction result for one caller context.

    trigger_reconstruction() never raises; callers observe outcomes through
    current_state(). Overlapping triggers run independently and the last one to
    finish wins. A failed run leaves the previous result in place.
    """

    def __init__(
        self,
        source: TransactionSource,
        insight_builder: InsightBuilder,
        clock: Clock | None = None,
        config: Settings | None = None,
    ):
        self.config = config or default_settings
        self.source = source
        self.insight_adapter = InsightBuilderAdapter(insight_builder)
        self.clock = clock or Clock(self.config.timezone)

        self._result: Optional[BalanceHistoryResult] = None
        self._settled_status = HistoryStatus.IDLE
        self._error: Optional[str] = None
        self._in_flight = 0

    def current_state(self) -> BalanceHistoryState:
        status = HistoryStatus.LOADING if self._in_flight else self._settled_status
        return BalanceHistoryState(status=status, result=self._result, error=self._error)

    async def trigger_reconstruction(self) -> None:
        start_time = time.perf_counter()
        self._in_flight += 1

        try:
            result, outcome = await reconstruct_balance_history(
                self.source,
                self.insight_adapter,
                self.clock,
                history_days=self.config.history_days,
                fetch_window_days=self.config.fetch_window_days,
                spending_window_days=self.config.spending_window_days,
                projection_period=self.config.projection_period,
            )

        except TransactionSourceError as e:
            source_failures_counter.inc()
            self._fail(f"Transaction source unavailable: {e}", start_time)

        except Exception as e:
            logger.exception("Unexpected reconstruction error")
            self._fail(f"Unexpected error: {e}", start_time)

        else:
            self._result = result
            self._settled_status = HistoryStatus.READY
            self._error = None

            duration_ms = (time.perf_counter() - start_time) * 1000
            record_reconstruction("ready", duration_ms / 1000, result.projection, outcome.status.value)
            log_reconstruction(
                outcome="ready",
                points=len(result.daily_balances),
                end_of_period=result.projection.end_of_period,
                insight_status=outcome.status.value,
                duration_ms=duration_ms,
            )

        finally:
            self._in_flight -= 1

    def _fail(self, message: str, start_time: float) -> None:
        self._settled_status = HistoryStatus.FAILED
        self._error = message

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.error(message, extra={"step": "reconstruction"})
        record_reconstruction("failed", duration_ms / 1000)
        log_reconstruction(outcome="failed", points=0, duration_ms=duration_ms)
