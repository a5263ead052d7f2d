"""Pydantic schemas for the DailyRecord API."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from dailyledger.core.reconciliation import EntryForm
from dailyledger.models.enums import WarningCode


class DailyRecordCreate(EntryForm):
    """Raw form input plus the warning codes the operator has confirmed."""

    confirm: list[WarningCode] = Field(
        default_factory=list,
        description="Warning codes acknowledged by the operator",
    )


class DailyRecordUpdate(DailyRecordCreate):
    """Full replacement of a record's inputs. Send CONFIRM_CHANGES to persist."""


class DailyRecordDelete(BaseModel):
    """Body of a delete request. Send CONFIRM_DELETE to persist."""

    confirm: list[WarningCode] = Field(default_factory=list)


class DerivedFiguresRead(BaseModel):
    """Computed figures, rounded to cents for display."""

    collected_amount: Decimal
    total_by_payment_method: Decimal
    petty_cash_total: Decimal
    balance: Decimal


class DailyInputsRead(BaseModel):
    gross_sales: Decimal
    surcharges: Decimal
    net_sales: Decimal
    cash: Decimal
    ath: Decimal
    debit: Decimal
    credit: Decimal
    deposit: Decimal
    fixed_float: Decimal


class AuditEntryRead(BaseModel):
    """One audit trail entry."""

    id: UUID
    actor: str
    action: str
    changes: dict
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DailyRecordSummary(BaseModel):
    """Row of the record list."""

    id: UUID
    date: date_type
    day_name: str
    collected_amount: Decimal
    total_by_payment_method: Decimal
    balance: Decimal
    created_by: str
    created_at: datetime


class DailyRecordRead(BaseModel):
    """Full detail of a record.

    ``figures.petty_cash_total`` is the snapshot taken when the record was last
    saved; ``live_petty_cash_total`` is the current ledger sum for the date.
    """

    id: UUID
    date: date_type
    day_name: str
    inputs: DailyInputsRead
    figures: DerivedFiguresRead
    petty_cash_computed_at: datetime | None
    live_petty_cash_total: Decimal
    petty_cash_stale: bool
    created_at: datetime
    created_by: str
    last_modified_at: datetime | None
    last_modified_by: str | None
    audit_trail: list[AuditEntryRead]


class DailyRecordSaved(BaseModel):
    id: UUID
    changes: dict[str, dict[str, str]] | None = None
