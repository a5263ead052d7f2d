"""Save, edit and delete workflows for daily records.

Each workflow runs the local checks first, then reads what it needs from the
store, asks for confirmation of every soft warning, and only then writes.
All writes share one transaction which is committed once at the end.
"""

import uuid
from decimal import Decimal
from typing import Callable, Iterable

from dailyledger.core.errors import DatabaseError, NotFoundError, ValidationError
from dailyledger.core.logging import get_logger
from dailyledger.core.reconciliation import (
    DailyEntry,
    DerivedFigures,
    EntryForm,
    ValidationWarning,
    apply_edit,
    changes_warning,
    confirm_all,
    delete_warning,
    parse_entry,
    preview,
    require_confirmations,
    snapshot,
    to_line_items,
    validate_for_save,
)
from dailyledger.core.store import LedgerStore
from dailyledger.models.enums import AuditAction, WarningCode
from dailyledger.utils.datetime import day_name, now_utc, parse_local_date

logger = get_logger(__name__)

Confirm = Callable[[ValidationWarning], bool]


def _confirm(
    warnings: list[ValidationWarning],
    acknowledged: Iterable[WarningCode | str],
    confirm: Confirm | None,
) -> None:
    if confirm is not None:
        confirm_all(warnings, confirm)
    else:
        require_confirmations(warnings, acknowledged)


def _check_form(form: EntryForm) -> DailyEntry:
    """Hard checks that need no data from the store."""
    entry, error, details = parse_entry(form, Decimal("0"))
    if entry is None:
        raise ValidationError(error, details=details)
    return entry


async def preview_entry(store: LedgerStore, form: EntryForm) -> DerivedFigures:
    """Live figures for a half-filled form. Never fails on bad amounts."""
    try:
        entry_date = parse_local_date(form.date)
    except ValueError:
        petty_cash_total = Decimal("0")
    else:
        petty_cash_total = await store.query_petty_cash_sum(entry_date)
    return preview(form, petty_cash_total)


async def create_entry(
    store: LedgerStore,
    form: EntryForm,
    actor: str,
    acknowledged: Iterable[WarningCode | str] = (),
    confirm: Confirm | None = None,
) -> uuid.UUID:
    """Validate and persist a new daily record.

    Raises:
        ValidationError: A hard check failed; nothing was read or written
        ConfirmationRequiredError: Soft warnings are still unacknowledged
        SaveDeclinedError: The confirm callback declined a warning
        DatabaseError: A write failed; the transaction was rolled back
    """
    entry_date = _check_form(form).date

    petty_cash_total = await store.query_petty_cash_sum(entry_date)
    computed_at = now_utc()
    exists = await store.record_exists_for_date(entry_date)

    outcome = validate_for_save(form, petty_cash_total, exists)
    outcome.raise_for_error()
    _confirm(outcome.warnings, acknowledged, confirm)

    entry, derived = outcome.entry, outcome.derived
    try:
        record_id = await store.insert_daily_record(
            entry.date, day_name(entry.date), actor, petty_cash_computed_at=computed_at
        )
        await store.insert_line_items(record_id, to_line_items(entry, derived))
        await store.append_audit_entry(record_id, actor, AuditAction.CREATE, snapshot(entry))
        await store.commit()
    except DatabaseError:
        await store.rollback()
        logger.error("daily_record.create_failed", date=entry.date.isoformat(), actor=actor)
        raise

    logger.info(
        "daily_record.created",
        record_id=str(record_id),
        date=entry.date.isoformat(),
        balance=str(derived.balance),
        actor=actor,
    )
    return record_id


async def update_entry(
    store: LedgerStore,
    record_id: uuid.UUID,
    form: EntryForm,
    actor: str,
    acknowledged: Iterable[WarningCode | str] = (),
    confirm: Confirm | None = None,
) -> dict[str, dict[str, str]]:
    """Apply an edit and return the field-level changes that were saved.

    The petty cash total is re-read for the (possibly new) date and the balance
    recomputed, so the stored summary always matches the current inputs.
    """
    _check_form(form)

    original = await store.load_entry(record_id)
    if original is None:
        raise NotFoundError("DailyRecord", str(record_id))

    edited_date = parse_local_date(form.date)
    petty_cash_total = await store.query_petty_cash_sum(edited_date)
    computed_at = now_utc()
    edited, error, details = parse_entry(form, petty_cash_total)
    if edited is None:
        # Only the balance can fail here, once the real petty cash total is in
        raise ValidationError(error, details=details)

    changeset = apply_edit(original, edited)
    _confirm([changes_warning(changeset)], acknowledged, confirm)

    derived = edited.derived()
    try:
        if changeset.date_changed:
            await store.update_record_date(record_id, edited.date, day_name(edited.date))
        for item in to_line_items(edited, derived):
            await store.update_line_item(record_id, item)
        await store.mark_saved(record_id, actor, computed_at)
        await store.append_audit_entry(record_id, actor, AuditAction.UPDATE, changeset.changes)
        await store.commit()
    except DatabaseError:
        await store.rollback()
        logger.error("daily_record.update_failed", record_id=str(record_id), actor=actor)
        raise

    logger.info(
        "daily_record.updated",
        record_id=str(record_id),
        changed_fields=sorted(changeset.changes),
        actor=actor,
    )
    return changeset.changes


async def delete_entry(
    store: LedgerStore,
    record_id: uuid.UUID,
    actor: str,
    acknowledged: Iterable[WarningCode | str] = (),
    confirm: Confirm | None = None,
) -> None:
    """Delete a record and everything attached to it.

    The DELETE audit entry is appended before the parent goes, so it is the last
    trace of the record in the log stream even though the row cascades away.
    """
    entry = await store.load_entry(record_id)
    if entry is None:
        raise NotFoundError("DailyRecord", str(record_id))

    day = day_name(entry.date)
    _confirm([delete_warning(entry, day)], acknowledged, confirm)

    deleted = {"date": entry.date.isoformat(), "day_name": day}
    try:
        await store.append_audit_entry(
            record_id, actor, AuditAction.DELETE, {"deleted_record": deleted}
        )
        await store.delete_record(record_id)
        await store.commit()
    except DatabaseError:
        await store.rollback()
        logger.error("daily_record.delete_failed", record_id=str(record_id), actor=actor)
        raise

    logger.info("daily_record.deleted", record_id=str(record_id), actor=actor, **deleted)
