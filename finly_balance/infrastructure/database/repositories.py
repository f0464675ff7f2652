"""Data access layer for locally stored transactions"""

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Callable, List
from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from finly_balance.infrastructure.database.models import LedgerTransaction
from finly_balance.domain.interfaces import TransactionSource
from finly_balance.domain.models import Transaction, TransactionType
from finly_balance.domain.exceptions import TransactionSourceError, InvalidTransactionDataError

AMOUNT_SCALE = Decimal("0.01")


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is written as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class TransactionRepository:
    """Repository for income and expense entries"""

    def __init__(self, db: Session):
        self.db = db

    def add_transaction(self, transaction: Transaction) -> LedgerTransaction:
        """Persist a transaction without committing"""
        db_txn = LedgerTransaction(
            id=transaction.transaction_id,
            type=TransactionType(transaction.type).value,
            amount=transaction.amount,
            occurred_at=_as_utc(transaction.occurred_at),
            description=transaction.description,
        )
        self.db.add(db_txn)
        self.db.flush()
        return db_txn

    def list_between(self, start: date, end: date) -> List[Transaction]:
        """
        Fetch transactions from the start of `start` to the end of `end` (UTC).

        The window is padded by a day on each side so every local calendar day
        inside it is complete whatever the reader's timezone.
        """
        lower = datetime.combine(start - timedelta(days=1), time.min, tzinfo=timezone.utc)
        upper = datetime.combine(end + timedelta(days=2), time.min, tzinfo=timezone.utc)

        rows = (
            self.db.query(LedgerTransaction)
            .filter(LedgerTransaction.occurred_at >= lower)
            .filter(LedgerTransaction.occurred_at < upper)
            .order_by(LedgerTransaction.occurred_at.asc())
            .all()
        )

        return [
            Transaction(
                transaction_id=row.id,
                type=TransactionType(row.type),
                amount=Decimal(str(row.amount)),
                occurred_at=_as_utc(row.occurred_at),
                description=row.description or "",
            )
            for row in rows
        ]

    def current_balance(self) -> Decimal:
        """Total income minus total expenses across every stored transaction"""
        signed_amount = case(
            (LedgerTransaction.type == TransactionType.INCOME.value, LedgerTransaction.amount),
            else_=-LedgerTransaction.amount,
        )
        total = self.db.query(func.coalesce(func.sum(signed_amount), 0)).scalar()
        # SQLite sums NUMERIC columns as floats
        return Decimal(str(total)).quantize(AMOUNT_SCALE)


class RepositoryTransactionSource(TransactionSource):
    """
    Transaction source backed by the local store.

    Opens one session per call so the source can outlive any single request.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    async def get_current_balance(self) -> Decimal:
        try:
            with self.session_factory() as db:
                return TransactionRepository(db).current_balance()
        except SQLAlchemyError as e:
            raise TransactionSourceError(f"Transaction store unavailable: {e}") from e

    async def get_transactions(self, start: date, end: date) -> List[Transaction]:
        try:
            with self.session_factory() as db:
                return TransactionRepository(db).list_between(start, end)
        except SQLAlchemyError as e:
            raise TransactionSourceError(f"Transaction store unavailable: {e}") from e
        except ValueError as e:
            raise InvalidTransactionDataError(f"Invalid stored transaction: {e}") from e
