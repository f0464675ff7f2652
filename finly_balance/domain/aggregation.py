"""Daily delta aggregation - reduce raw transactions to per-day income/expense totals"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable

from finly_balance.domain.models import Transaction, TransactionType, DailyTotals
from finly_balance.domain.exceptions import InvalidTransactionDataError
from finly_balance.utils.date_utils import Clock


def validate_transaction(txn: Transaction) -> None:
    """
    Reject entries that would corrupt the reconstruction.

    A single bad entry fails the whole batch; skipping it would shift every
    balance older than that day.
    """
    if not isinstance(txn.amount, Decimal) or not txn.amount.is_finite():
        raise InvalidTransactionDataError(
            f"Transaction {txn.transaction_id}: amount must be a finite decimal, got {txn.amount!r}"
        )
    if txn.amount < 0:
        raise InvalidTransactionDataError(
            f"Transaction {txn.transaction_id}: negative amount {txn.amount}"
        )
    if not isinstance(txn.occurred_at, datetime):
        raise InvalidTransactionDataError(
            f"Transaction {txn.transaction_id}: missing or invalid timestamp {txn.occurred_at!r}"
        )
    try:
        TransactionType(txn.type)
    except ValueError as e:
        raise InvalidTransactionDataError(
            f"Transaction {txn.transaction_id}: unknown type {txn.type!r}"
        ) from e


def aggregate_daily_totals(transactions: Iterable[Transaction], clock: Clock) -> Dict[date, DailyTotals]:
    """
    Group transactions by local calendar day and sum income and expense.

    Days without activity get no bucket; readers treat a missing key as zero.
    Duplicates are summed as given.

    Raises:
        InvalidTransactionDataError: If any entry is malformed
    """
    totals: Dict[date, DailyTotals] = {}

    for txn in transactions:
        validate_transaction(txn)
        day = clock.local_date(txn.occurred_at)

        bucket = totals.get(day)
        if bucket is None:
            bucket = totals[day] = DailyTotals(date_key=day)

        if TransactionType(txn.type) is TransactionType.INCOME:
            bucket.income += txn.amount
        else:
            bucket.expense += txn.amount

    return totals
