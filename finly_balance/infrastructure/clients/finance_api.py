"""Finance API HTTP client for fetching the current balance and transaction history"""

import httpx
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List
from zoneinfo import ZoneInfo
from finly_balance.domain.interfaces import TransactionSource
from finly_balance.domain.models import Transaction, TransactionType
from finly_balance.domain.exceptions import TransactionSourceError, InvalidTransactionDataError
from finly_balance.config import settings

TRANSACTION_FETCH_LIMIT = 2000


def parse_timestamp(value: str) -> datetime:
    # fromisoformat rejects a trailing "Z" before Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def format_timestamp(moment: datetime) -> str:
    """UTC ISO timestamp with millisecond precision and a "Z" suffix"""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_transaction(txn: Dict[str, Any]) -> Transaction:
    return Transaction(
        transaction_id=str(txn["id"]),
        type=TransactionType(txn["type"]),
        amount=Decimal(str(txn["amount"])),
        occurred_at=parse_timestamp(txn["date"]),
        description=txn.get("description") or "",
    )


class FinanceApiClient(TransactionSource):
    """Client for the remote finance API that owns the transaction store"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        tz_name: str | None = None,
    ):
        self.base_url = base_url or settings.finance_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport
        self.tz = ZoneInfo(tz_name or settings.timezone)

    def window_bounds(self, start: date, end: date) -> Dict[str, str]:
        """First instant of start and last instant of end, both local calendar days"""
        return {
            "startDate": format_timestamp(datetime.combine(start, time.min, tzinfo=self.tz)),
            "endDate": format_timestamp(datetime.combine(end, time.max, tzinfo=self.tz)),
        }

    async def _get_json(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", params=params)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise TransactionSourceError(f"Finance API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise TransactionSourceError(f"Finance API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise TransactionSourceError(f"Finance API unreachable: {e}") from e
            except ValueError as e:
                raise TransactionSourceError(f"Finance API returned invalid JSON: {e}") from e

    async def get_current_balance(self) -> Decimal:
        """
        Fetch the current aggregate balance from the stats endpoint.

        Raises:
            TransactionSourceError: On timeout, HTTP errors, or invalid response
        """
        data = await self._get_json("/analytics/stats")
        try:
            balance = Decimal(str(data["balance"]))
        except (KeyError, TypeError, InvalidOperation) as e:
            raise TransactionSourceError(f"Invalid stats payload from finance API: {e!r}") from e

        if not balance.is_finite():
            raise TransactionSourceError(f"Invalid balance from finance API: {balance}")
        return balance

    async def get_transactions(self, start: date, end: date) -> List[Transaction]:
        """
        Fetch income and expense transactions between start and end.

        Both days are sent as full timestamps so the whole of `end` (today,
        usually) is inside the window. The endpoint answers with either a bare
        list or a paginated object carrying a "transactions" key.

        Raises:
            TransactionSourceError: On timeout or HTTP errors
            InvalidTransactionDataError: If any transaction cannot be parsed
        """
        data = await self._get_json(
            "/analytics/transactions",
            params={
                **self.window_bounds(start, end),
                "type": "all",
                "limit": TRANSACTION_FETCH_LIMIT,
            },
        )

        try:
            items = data if isinstance(data, list) else data["transactions"]
            return [parse_transaction(txn) for txn in items]
        except (KeyError, ValueError, TypeError, InvalidOperation) as e:
            raise InvalidTransactionDataError(f"Invalid transaction data from finance API: {e!r}") from e
