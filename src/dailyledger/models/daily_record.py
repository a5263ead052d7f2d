"""DailyRecord model and its line item children."""

import uuid
from datetime import date as date_type
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dailyledger.core.db import Base
from dailyledger.utils.datetime import now_utc


class DailyRecord(Base):
    """One day's reconciliation entry. Amounts live in the line item tables.

    Date uniqueness is not enforced: a second record for the same date is
    allowed after the operator confirms the duplicate warning.
    """

    __tablename__ = "daily_records"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    date: Mapped[date_type] = mapped_column(
        nullable=False,
        index=True,
    )

    day_name: Mapped[str] = mapped_column(String(20), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        default=now_utc,
    )

    created_by: Mapped[str] = mapped_column(String(100), nullable=False)

    last_modified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False),
        nullable=True,
    )

    last_modified_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # When the petty cash total in the summary was read from the ledger
    petty_cash_computed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False),
        nullable=True,
    )

    sales: Mapped[list["SalesLine"]] = relationship(
        "SalesLine",
        back_populates="record",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    payments: Mapped[list["PaymentLine"]] = relationship(
        "PaymentLine",
        back_populates="record",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    summary: Mapped[list["SummaryLine"]] = relationship(
        "SummaryLine",
        back_populates="record",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<DailyRecord(id={self.id}, date={self.date}, day_name={self.day_name})>"


class SalesLine(Base):
    """Sales line item (gross, surcharges, net, collected)."""

    __tablename__ = "sales_data"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("daily_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    category: Mapped[str] = mapped_column(String(40), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    record: Mapped["DailyRecord"] = relationship("DailyRecord", back_populates="sales")

    def __repr__(self) -> str:
        return f"<SalesLine(record_id={self.record_id}, category={self.category}, amount={self.amount})>"


class PaymentLine(Base):
    """Payment-method line item (cash, ATH, debit, credit)."""

    __tablename__ = "payment_methods"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("daily_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    method: Mapped[str] = mapped_column(String(40), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    record: Mapped["DailyRecord"] = relationship("DailyRecord", back_populates="payments")

    def __repr__(self) -> str:
        return f"<PaymentLine(record_id={self.record_id}, method={self.method}, amount={self.amount})>"


class SummaryLine(Base):
    """Summary line item. ``is_calculated`` separates derived figures from operator input."""

    __tablename__ = "summary_data"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("daily_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    label: Mapped[str] = mapped_column(String(40), nullable=False)

    # Balance may be negative, so no non-negative constraint here
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    is_calculated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    record: Mapped["DailyRecord"] = relationship("DailyRecord", back_populates="summary")

    def __repr__(self) -> str:
        return f"<SummaryLine(record_id={self.record_id}, label={self.label}, amount={self.amount})>"
