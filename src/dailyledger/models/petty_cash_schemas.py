"""Pydantic schemas for the petty cash API."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dailyledger.core.validators import validate_positive_amount, validate_text


class PettyCashCreate(BaseModel):
    """Schema for recording a petty cash expense."""

    date: date_type
    category: str = Field(..., max_length=100)
    description: str = Field(..., max_length=255)
    amount: Decimal

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v) -> Decimal:
        """Amount must be strictly positive."""
        return validate_positive_amount(v, "Amount")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return validate_text(v, "Category", max_length=100)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return validate_text(v, "Description", max_length=255)


class PettyCashUpdate(BaseModel):
    """Schema for editing a petty cash expense in place. Omitted fields are kept."""

    date: date_type | None = None
    category: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=255)
    amount: Decimal | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v) -> Decimal | None:
        if v is None:
            return None
        return validate_positive_amount(v, "Amount")

    @field_validator("category", "description")
    @classmethod
    def validate_texts(cls, v: str | None, info) -> str | None:
        if v is None:
            return None
        max_length = 100 if info.field_name == "category" else 255
        return validate_text(v, info.field_name.capitalize(), max_length=max_length)


class PettyCashRead(BaseModel):
    """Schema for reading a petty cash expense."""

    id: UUID
    date: date_type
    category: str
    description: str
    amount: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PettyCashList(BaseModel):
    """Filtered expenses with their total."""

    entries: list[PettyCashRead]
    total: Decimal


class PettyCashDateSum(BaseModel):
    date: date_type
    total: Decimal


class CategoryCreate(BaseModel):
    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_text(v, "Category name", max_length=100)


class CategoryRead(BaseModel):
    """Schema for reading a petty cash category."""

    id: UUID
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
