"""SQLAlchemy ORM models for the local transaction store"""

from sqlalchemy import Column, String, Numeric, DateTime, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class LedgerTransaction(Base):
    """Income or expense entry; amount is non-negative, direction comes from type"""

    __tablename__ = "ledger_transaction"

    id = Column(String(64), primary_key=True)
    type = Column(String(16), nullable=False)  # income | expense
    amount = Column(Numeric(14, 2), nullable=False)
    occurred_at = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
