"""Insight builder adapter - never lets an insight failure reach the pipeline"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from finly_balance.domain.interfaces import InsightBuilder
from finly_balance.domain.models import DailyBalancePoint, ProjectionResult, Insight, InsightKind
from finly_balance.domain.exceptions import InsightBuilderError

logger = logging.getLogger(__name__)


class InsightStatus(str, Enum):
    REQUESTING = "requesting"
    FULFILLED = "fulfilled"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class InsightsOutcome:
    """Typed result of one insight request: insights on success, the error otherwise"""

    status: InsightStatus
    insights: Tuple[Insight, ...] = ()
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status is InsightStatus.FULFILLED


def check_insights(raw: Sequence[Insight]) -> Tuple[Insight, ...]:
    """Shape check on builder output; the content itself is opaque"""
    if raw is None or isinstance(raw, (str, bytes, dict)):
        raise InsightBuilderError(f"Expected a sequence of insights, got {type(raw).__name__}")

    checked = []
    for item in raw:
        if not isinstance(item, Insight):
            raise InsightBuilderError(f"Expected Insight, got {type(item).__name__}")
        if not isinstance(item.kind, InsightKind):
            raise InsightBuilderError(f"Insight {item.insight_id}: unknown kind {item.kind!r}")
        checked.append(item)
    return tuple(checked)


class InsightBuilderAdapter:
    """
    Wraps an InsightBuilder so callers always receive a valid outcome.

    One attempt per call: requesting -> fulfilled | degraded.
    Retry, if any, belongs to the builder's own transport.
    """

    def __init__(self, builder: InsightBuilder):
        self.builder = builder

    async def build(
        self,
        daily_balances: Sequence[DailyBalancePoint],
        projection: ProjectionResult,
    ) -> InsightsOutcome:
        logger.debug("Insight request started", extra={"step": "insights", "insight_status": InsightStatus.REQUESTING.value})

        try:
            raw = await self.builder.build_insights(daily_balances, projection)
            insights = check_insights(raw)
        except Exception as e:
            logger.warning(
                f"Insight builder failed, continuing without insights: {e}",
                extra={"step": "insights", "insight_status": InsightStatus.DEGRADED.value},
            )
            return InsightsOutcome(status=InsightStatus.DEGRADED, error=e)

        return InsightsOutcome(status=InsightStatus.FULFILLED, insights=insights)
