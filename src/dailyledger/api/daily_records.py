"""Daily record API: list, detail, live preview, create, edit and delete."""

from datetime import date as date_type
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from dailyledger.api.auth import get_current_user
from dailyledger.core.db import get_db
from dailyledger.core.ledger import create_entry, delete_entry, preview_entry, update_entry
from dailyledger.core.reconciliation import DerivedFigures, EntryForm, entry_from_line_items
from dailyledger.core.store import LedgerStore, record_line_items, stored_figures
from dailyledger.core.validators import to_cents
from dailyledger.models.daily_record_schemas import (
    AuditEntryRead,
    DailyInputsRead,
    DailyRecordCreate,
    DailyRecordDelete,
    DailyRecordRead,
    DailyRecordSaved,
    DailyRecordSummary,
    DailyRecordUpdate,
    DerivedFiguresRead,
)
from dailyledger.models.user import User

router = APIRouter(prefix="/api/daily-records", tags=["daily-records"])


def get_store(db: AsyncSession = Depends(get_db)) -> LedgerStore:
    return LedgerStore(db)


def _figures_read(figures: DerivedFigures) -> DerivedFiguresRead:
    return DerivedFiguresRead(
        collected_amount=to_cents(figures.collected_amount),
        total_by_payment_method=to_cents(figures.total_by_payment_method),
        petty_cash_total=to_cents(figures.petty_cash_total),
        balance=to_cents(figures.balance),
    )


def _form(payload: DailyRecordCreate) -> EntryForm:
    return EntryForm.model_validate(payload.model_dump(exclude={"confirm"}))


@router.get("", response_model=list[DailyRecordSummary])
async def list_daily_records(
    start: date_type | None = Query(None),
    end: date_type | None = Query(None),
    store: LedgerStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Records in the date range, newest first."""
    records = await store.list_records(start, end)
    rows = []
    for record in records:
        figures = _figures_read(stored_figures(record))
        rows.append(
            DailyRecordSummary(
                id=record.id,
                date=record.date,
                day_name=record.day_name,
                collected_amount=figures.collected_amount,
                total_by_payment_method=figures.total_by_payment_method,
                balance=figures.balance,
                created_by=record.created_by,
                created_at=record.created_at,
            )
        )
    return rows


@router.post("/preview", response_model=DerivedFiguresRead)
async def preview_daily_record(
    form: EntryForm,
    store: LedgerStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Recompute the derived figures for a form in progress. Bad amounts count as 0."""
    return _figures_read(await preview_entry(store, form))


@router.post("", response_model=DailyRecordSaved, status_code=status.HTTP_201_CREATED)
async def create_daily_record(
    payload: DailyRecordCreate,
    store: LedgerStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Save a new daily record.

    Responds 409 CONFIRMATION_REQUIRED with the pending warnings until every
    one of them is listed in ``confirm``.
    """
    record_id = await create_entry(
        store, _form(payload), current_user.actor_name, acknowledged=payload.confirm
    )
    return DailyRecordSaved(id=record_id)


@router.get("/{record_id}", response_model=DailyRecordRead)
async def get_daily_record(
    record_id: UUID,
    store: LedgerStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Record detail with the audit trail, newest first."""
    record = await store.get_record(record_id)
    entry = entry_from_line_items(record.date, record_line_items(record))
    figures = _figures_read(stored_figures(record))
    live_total = await store.query_petty_cash_sum(record.date)
    audit_trail = await store.audit_trail(record.id)

    return DailyRecordRead(
        id=record.id,
        date=record.date,
        day_name=record.day_name,
        inputs=DailyInputsRead(
            **{name: to_cents(getattr(entry, name)) for name in DailyInputsRead.model_fields}
        ),
        figures=figures,
        petty_cash_computed_at=record.petty_cash_computed_at,
        live_petty_cash_total=live_total,
        petty_cash_stale=to_cents(live_total) != figures.petty_cash_total,
        created_at=record.created_at,
        created_by=record.created_by,
        last_modified_at=record.last_modified_at,
        last_modified_by=record.last_modified_by,
        audit_trail=[AuditEntryRead.model_validate(a) for a in audit_trail],
    )


@router.put("/{record_id}", response_model=DailyRecordSaved)
async def update_daily_record(
    record_id: UUID,
    payload: DailyRecordUpdate,
    store: LedgerStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Edit a record. Needs CONFIRM_CHANGES; an edit that changes nothing is rejected."""
    changes = await update_entry(
        store, record_id, _form(payload), current_user.actor_name, acknowledged=payload.confirm
    )
    return DailyRecordSaved(id=record_id, changes=changes)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_daily_record(
    record_id: UUID,
    payload: DailyRecordDelete | None = None,
    store: LedgerStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Delete a record with its sales, payments, summary and audit trail. Needs CONFIRM_DELETE."""
    acknowledged = payload.confirm if payload else []
    await delete_entry(store, record_id, current_user.actor_name, acknowledged=acknowledged)
