"""Insights service HTTP client"""

import httpx
from typing import Any, Dict, List, Sequence
from finly_balance.config import settings
from finly_balance.domain.interfaces import InsightBuilder
from finly_balance.domain.models import DailyBalancePoint, ProjectionResult, Insight, InsightKind
from finly_balance.domain.exceptions import InsightBuilderError


def build_payload(daily_balances: Sequence[DailyBalancePoint], projection: ProjectionResult) -> Dict[str, Any]:
    """Request body in the shape the insights service expects"""
    return {
        "dailyBalances": [
            {"date": point.date.isoformat(), "balance": float(point.balance)}
            for point in daily_balances
        ],
        "monthlyBalances": [],
        "projection": {
            "endOfMonth": float(projection.end_of_period),
            "daysRemaining": projection.days_remaining,
            "dailySpendingRate": float(projection.daily_spending_rate),
            "isPositive": projection.is_positive,
        },
    }


def parse_insight(item: Dict[str, Any]) -> Insight:
    return Insight(
        insight_id=str(item["id"]),
        kind=InsightKind(item["type"]),
        title=item["title"],
        description=item["description"],
        icon=item.get("icon", ""),
    )


class InsightsClient(InsightBuilder):
    """Client for the remote insights service (AI with rule-based fallback on its side)"""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.insights_api_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def build_insights(
        self,
        daily_balances: Sequence[DailyBalancePoint],
        projection: ProjectionResult,
    ) -> List[Insight]:
        """
        Request insights for a balance series and its projection.

        Single attempt, no retry.

        Raises:
            InsightBuilderError: On timeout, HTTP errors, or malformed response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(self.url, json=build_payload(daily_balances, projection))
                response.raise_for_status()
                data = response.json()

                # an explicit null means no insights; a missing key is a malformed answer
                items = data if isinstance(data, list) else data["insights"] or []
                return [parse_insight(item) for item in items]

            except httpx.TimeoutException as e:
                raise InsightBuilderError(f"Insights service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise InsightBuilderError(f"Insights service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise InsightBuilderError(f"Insights service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                raise InsightBuilderError(f"Invalid insights payload: {e!r}") from e
