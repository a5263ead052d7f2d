"""Employee and employee payment models."""

import uuid
from datetime import date as date_type
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dailyledger.core.db import Base
from dailyledger.utils.datetime import now_utc


class Employee(Base):
    """Shop employee receiving payments."""

    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        default=now_utc,
    )

    payments: Mapped[list["EmployeePayment"]] = relationship(
        "EmployeePayment",
        back_populates="employee",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, name={self.name})>"


class EmployeePayment(Base):
    """A single payment to an employee, in cash or by bank transfer."""

    __tablename__ = "employee_payments"
    __table_args__ = (CheckConstraint("amount > 0", name="employee_payment_amount_positive"),)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    date: Mapped[date_type] = mapped_column(nullable=False, index=True)

    payment_type: Mapped[str] = mapped_column(String(20), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        default=now_utc,
    )

    employee: Mapped["Employee"] = relationship("Employee", back_populates="payments")

    def __repr__(self) -> str:
        return (
            f"<EmployeePayment(employee_id={self.employee_id}, date={self.date}, "
            f"payment_type={self.payment_type}, amount={self.amount})>"
        )
