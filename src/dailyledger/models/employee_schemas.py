"""Pydantic schemas for the employee API."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dailyledger.core.validators import validate_positive_amount, validate_text
from dailyledger.models.enums import PaymentType


class EmployeeCreate(BaseModel):
    """Schema for adding an employee."""

    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_text(v, "Name", max_length=100)


class EmployeeRead(BaseModel):
    id: UUID
    name: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EmployeePaymentCreate(BaseModel):
    """Schema for recording a payment to an employee."""

    employee_id: UUID
    date: date_type
    payment_type: PaymentType
    amount: Decimal

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v) -> Decimal:
        """Amount must be strictly positive."""
        return validate_positive_amount(v, "Amount")


class EmployeePaymentRead(BaseModel):
    id: UUID
    employee_id: UUID
    employee_name: str
    date: date_type
    payment_type: PaymentType
    amount: Decimal
    created_at: datetime


class EmployeePaymentList(BaseModel):
    payments: list[EmployeePaymentRead]
    total: Decimal


class EmployeeTotals(BaseModel):
    """Payments to one employee, split by payment type."""

    employee_id: UUID
    employee_name: str
    cash: Decimal
    bank_transfer: Decimal
    total: Decimal
