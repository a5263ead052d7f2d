"""Petty cash ledger models."""

import uuid
from datetime import date as date_type
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from dailyledger.core.db import Base
from dailyledger.utils.datetime import now_utc


class PettyCashEntry(Base):
    """Small cash expense paid out of the till.

    There is no foreign key to DailyRecord: a daily record picks up the sum of
    entries sharing its date when it is saved or edited.
    """

    __tablename__ = "petty_cash_entries"
    __table_args__ = (CheckConstraint("amount > 0", name="petty_cash_amount_positive"),)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    date: Mapped[date_type] = mapped_column(nullable=False, index=True)

    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    description: Mapped[str] = mapped_column(String(255), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        default=now_utc,
    )

    @validates("amount")
    def validate_amount(self, key: str, value: Decimal) -> Decimal:
        """Validate that amount is strictly positive."""
        if value is None or value <= 0:
            raise ValueError("Petty cash amount must be greater than 0")
        return value

    def __repr__(self) -> str:
        return f"<PettyCashEntry(id={self.id}, date={self.date}, amount={self.amount})>"


class PettyCashCategory(Base):
    """Operator-extensible list of petty cash categories."""

    __tablename__ = "petty_cash_categories"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        default=now_utc,
    )

    def __repr__(self) -> str:
        return f"<PettyCashCategory(name={self.name})>"
