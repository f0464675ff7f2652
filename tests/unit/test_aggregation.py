"""Unit tests for daily delta aggregation"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from finly_balance.domain.aggregation import aggregate_daily_totals
from finly_balance.domain.models import Transaction, TransactionType
from finly_balance.domain.exceptions import InvalidTransactionDataError, TransactionSourceError
from finly_balance.utils.date_utils import Clock


def test_aggregate_groups_by_calendar_day(make_txn, clock):
    """Income and expense are summed separately per day"""
    transactions = [
        make_txn("expense", "12.50", days_ago=0, hour=8),
        make_txn("expense", "7.25", days_ago=0, hour=19),
        make_txn("income", "100.00", days_ago=0, hour=9),
        make_txn("income", "2000.00", days_ago=3),
    ]

    totals = aggregate_daily_totals(transactions, clock)

    assert set(totals) == {date(2024, 6, 20), date(2024, 6, 17)}
    assert totals[date(2024, 6, 20)].income == Decimal("100.00")
    assert totals[date(2024, 6, 20)].expense == Decimal("19.75")
    assert totals[date(2024, 6, 20)].net == Decimal("80.25")
    assert totals[date(2024, 6, 17)].income == Decimal("2000.00")
    assert totals[date(2024, 6, 17)].expense == Decimal("0")


def test_aggregate_empty_input(clock):
    assert aggregate_daily_totals([], clock) == {}


def test_aggregate_keeps_duplicates(make_txn, clock):
    """Duplicate ids are not deduplicated here"""
    txn = make_txn("expense", "30.00")
    totals = aggregate_daily_totals([txn, txn], clock)

    assert totals[date(2024, 6, 20)].expense == Decimal("60.00")


def test_aggregate_order_independent(make_txn, clock):
    transactions = [make_txn("expense", str(i), days_ago=i % 4) for i in range(1, 12)]

    forward = aggregate_daily_totals(transactions, clock)
    backward = aggregate_daily_totals(list(reversed(transactions)), clock)

    assert forward == backward


def test_aggregate_uses_clock_timezone():
    """Late-evening New York spending belongs to the local day, not the UTC one"""
    txn = Transaction(
        transaction_id="late",
        type=TransactionType.EXPENSE,
        amount=Decimal("40"),
        occurred_at=datetime(2024, 6, 21, 2, 30, tzinfo=timezone.utc),  # 22:30 on the 20th in New York
    )

    assert set(aggregate_daily_totals([txn], Clock("UTC"))) == {date(2024, 6, 21)}
    assert set(aggregate_daily_totals([txn], Clock("America/New_York"))) == {date(2024, 6, 20)}


def test_aggregate_naive_timestamp_is_local(clock):
    txn = Transaction("naive", TransactionType.INCOME, Decimal("5"), datetime(2024, 6, 19, 23, 59))

    assert set(aggregate_daily_totals([txn], clock)) == {date(2024, 6, 19)}


@pytest.mark.parametrize(
    "amount, occurred_at, kind",
    [
        (Decimal("-1.00"), datetime(2024, 6, 20, 12, tzinfo=timezone.utc), TransactionType.EXPENSE),
        (Decimal("NaN"), datetime(2024, 6, 20, 12, tzinfo=timezone.utc), TransactionType.EXPENSE),
        (10.0, datetime(2024, 6, 20, 12, tzinfo=timezone.utc), TransactionType.INCOME),
        (Decimal("1.00"), "2024-06-20", TransactionType.INCOME),
        (Decimal("1.00"), datetime(2024, 6, 20, 12, tzinfo=timezone.utc), "transfer"),
    ],
)
def test_aggregate_rejects_malformed_batch(make_txn, clock, amount, occurred_at, kind):
    """One bad entry fails the whole batch instead of being skipped"""
    bad = Transaction("bad", kind, amount, occurred_at)
    good = make_txn("expense", "10.00")

    with pytest.raises(InvalidTransactionDataError):
        aggregate_daily_totals([good, bad], clock)


def test_malformed_batch_is_source_class_error(clock):
    bad = Transaction("bad", TransactionType.EXPENSE, Decimal("-5"), datetime(2024, 6, 20))

    with pytest.raises(TransactionSourceError):
        aggregate_daily_totals([bad], clock)
