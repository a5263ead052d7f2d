"""SQLAlchemy persistence adapter for the reconciliation engine.

All writes of one operation share the request's transaction; the ledger
service commits once at the end or rolls back, so a failed child insert never
leaves a stranded parent row. Audit inserts run in a SAVEPOINT and are
best-effort.
"""

import uuid
from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable

from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dailyledger.core.errors import DatabaseError, NotFoundError
from dailyledger.core.logging import get_logger
from dailyledger.core.reconciliation import (
    DailyEntry,
    DerivedFigures,
    LineItem,
    entry_from_line_items,
)
from dailyledger.core.validators import to_cents
from dailyledger.models.audit_log import AuditLogEntry
from dailyledger.models.daily_record import DailyRecord, PaymentLine, SalesLine, SummaryLine
from dailyledger.models.enums import AuditAction, LineKind, SalesCategory, SummaryLabel
from dailyledger.models.petty_cash import PettyCashEntry
from dailyledger.utils.datetime import now_utc

logger = get_logger(__name__)

# Postgres SQLSTATE for "relation does not exist"
UNDEFINED_TABLE = "42P01"


def raw_error_message(exc: BaseException) -> str:
    """The driver's own error text, shown to the operator unchanged."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def is_missing_table(exc: BaseException) -> bool:
    """True if the error means the queried table has not been created yet."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNDEFINED_TABLE:
        return True
    message = str(exc).lower()
    return "no such table" in message or ("relation" in message and "does not exist" in message)


def record_line_items(record: DailyRecord) -> list[LineItem]:
    """Child rows of a loaded record as engine line items."""
    items = [LineItem(kind=LineKind.SALES, key=s.category, amount=s.amount) for s in record.sales]
    items += [LineItem(kind=LineKind.PAYMENT, key=p.method, amount=p.amount) for p in record.payments]
    items += [
        LineItem(kind=LineKind.SUMMARY, key=s.label, amount=s.amount, is_calculated=s.is_calculated)
        for s in record.summary
    ]
    return items


def stored_figures(record: DailyRecord) -> DerivedFigures:
    """Derived figures as frozen in the record's summary rows at its last save."""
    amounts = {(item.kind, item.key): item.amount for item in record_line_items(record)}

    def amount(kind: LineKind, key: str) -> Decimal:
        return Decimal(amounts.get((kind, key), 0))

    return DerivedFigures(
        collected_amount=amount(LineKind.SALES, SalesCategory.COLLECTED_AMOUNT.value),
        total_by_payment_method=amount(
            LineKind.SUMMARY, SummaryLabel.TOTAL_BY_PAYMENT_METHOD.value
        ),
        petty_cash_total=amount(LineKind.SUMMARY, SummaryLabel.PETTY_CASH_EXPENSES.value),
        balance=amount(LineKind.SUMMARY, SummaryLabel.BALANCE.value),
    )


class LedgerStore:
    """Persistence adapter over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _flush(self) -> None:
        try:
            await self.db.flush()
        except SQLAlchemyError as exc:
            raise DatabaseError(raw_error_message(exc)) from exc

    async def _execute(self, stmt):
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise DatabaseError(raw_error_message(exc)) from exc

    # ─────── WRITES ────────

    async def insert_daily_record(
        self,
        entry_date: date_type,
        day_name: str,
        actor: str,
        petty_cash_computed_at: datetime | None = None,
    ) -> uuid.UUID:
        """Create the parent row and return its id."""
        record = DailyRecord(
            date=entry_date,
            day_name=day_name,
            created_by=actor,
            petty_cash_computed_at=petty_cash_computed_at,
        )
        self.db.add(record)
        await self._flush()
        return record.id

    async def insert_line_items(self, record_id: uuid.UUID, items: Iterable[LineItem]) -> None:
        """Insert sales, payment and summary children of a record."""
        for item in items:
            self.db.add(_line_row(record_id, item))
        await self._flush()

    async def update_line_item(self, record_id: uuid.UUID, item: LineItem) -> None:
        """Update the amount of the line item matching (record, kind, key).

        Records saved before a line item existed get the row inserted instead.
        """
        model, key_column = _line_table(item.kind)
        stmt = (
            update(model)
            .where(model.record_id == record_id, key_column == item.key)
            .values(amount=to_cents(item.amount))
        )
        result = await self._execute(stmt)
        if result.rowcount == 0:
            self.db.add(_line_row(record_id, item))
            await self._flush()

    async def update_record_date(
        self, record_id: uuid.UUID, entry_date: date_type, day_name: str
    ) -> None:
        record = await self.get_record(record_id)
        record.date = entry_date
        record.day_name = day_name
        await self._flush()

    async def mark_saved(
        self, record_id: uuid.UUID, actor: str, petty_cash_computed_at: datetime
    ) -> None:
        """Stamp last modification and the time the petty cash snapshot was taken."""
        record = await self.get_record(record_id)
        record.last_modified_at = now_utc()
        record.last_modified_by = actor
        record.petty_cash_computed_at = petty_cash_computed_at
        await self._flush()

    async def delete_record(self, record_id: uuid.UUID) -> None:
        """Delete a record with its sales, payment and summary rows.

        Audit entries are removed by the ON DELETE CASCADE of their foreign key.
        """
        record = await self.get_record(record_id)
        await self.db.delete(record)
        await self._flush()

    async def append_audit_entry(
        self,
        record_id: uuid.UUID,
        actor: str,
        action: AuditAction,
        changes: dict[str, Any],
    ) -> bool:
        """Append to the audit trail. Failures are logged and swallowed."""
        try:
            async with self.db.begin_nested():
                self.db.add(
                    AuditLogEntry(
                        record_id=record_id,
                        actor=actor,
                        action=action.value,
                        changes=changes,
                        created_at=now_utc(),
                    )
                )
                await self.db.flush()
        except SQLAlchemyError as exc:
            logger.warning(
                "audit.append_failed",
                record_id=str(record_id),
                action=action.value,
                error=raw_error_message(exc),
            )
            return False
        return True

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            raise DatabaseError(raw_error_message(exc)) from exc

    async def rollback(self) -> None:
        await self.db.rollback()

    # ─────── READS ────────

    async def get_record(self, record_id: uuid.UUID) -> DailyRecord:
        """Load a record with its children, refreshed from the database."""
        stmt = (
            select(DailyRecord)
            .where(DailyRecord.id == record_id)
            .execution_options(populate_existing=True)
        )
        record = (await self._execute(stmt)).scalar_one_or_none()
        if record is None:
            raise NotFoundError("DailyRecord", str(record_id))
        return record

    async def load_entry(self, record_id: uuid.UUID) -> DailyEntry | None:
        """Rebuild the stored entry, or None if the record does not exist."""
        try:
            record = await self.get_record(record_id)
        except NotFoundError:
            return None
        return entry_from_line_items(record.date, record_line_items(record))

    async def audit_trail(self, record_id: uuid.UUID) -> list[AuditLogEntry]:
        """Audit entries of a record, newest first. Empty if the audit table is absent."""
        stmt = (
            select(AuditLogEntry)
            .where(AuditLogEntry.record_id == record_id)
            .order_by(AuditLogEntry.created_at.desc())
        )
        try:
            async with self.db.begin_nested():
                entries = (await self.db.execute(stmt)).scalars().all()
        except (ProgrammingError, OperationalError) as exc:
            if is_missing_table(exc):
                logger.warning("audit.table_missing", record_id=str(record_id))
                return []
            raise DatabaseError(raw_error_message(exc)) from exc
        return list(entries)

    async def record_exists_for_date(
        self, entry_date: date_type, exclude_id: uuid.UUID | None = None
    ) -> bool:
        stmt = select(DailyRecord.id).where(DailyRecord.date == entry_date)
        if exclude_id is not None:
            stmt = stmt.where(DailyRecord.id != exclude_id)
        result = await self._execute(stmt.limit(1))
        return result.first() is not None

    async def query_petty_cash_sum(self, entry_date: date_type) -> Decimal:
        """Sum of petty cash amounts for an exact date. 0 if none, or if the table is absent."""
        stmt = select(func.sum(PettyCashEntry.amount)).where(PettyCashEntry.date == entry_date)
        try:
            async with self.db.begin_nested():
                total = (await self.db.execute(stmt)).scalar()
        except (ProgrammingError, OperationalError) as exc:
            if is_missing_table(exc):
                logger.info("petty_cash.table_missing", date=entry_date.isoformat())
                return Decimal("0.00")
            raise DatabaseError(raw_error_message(exc)) from exc
        except SQLAlchemyError as exc:
            raise DatabaseError(raw_error_message(exc)) from exc

        if total is None:
            return Decimal("0.00")
        return to_cents(Decimal(str(total)))

    async def list_records(
        self, start: date_type | None = None, end: date_type | None = None
    ) -> list[DailyRecord]:
        """Records in a date range, newest first."""
        stmt = select(DailyRecord).execution_options(populate_existing=True)
        if start is not None:
            stmt = stmt.where(DailyRecord.date >= start)
        if end is not None:
            stmt = stmt.where(DailyRecord.date <= end)
        stmt = stmt.order_by(DailyRecord.date.desc(), DailyRecord.created_at.desc())
        result = await self._execute(stmt)
        return list(result.scalars().all())


def _line_table(kind: LineKind):
    if kind == LineKind.SALES:
        return SalesLine, SalesLine.category
    if kind == LineKind.PAYMENT:
        return PaymentLine, PaymentLine.method
    return SummaryLine, SummaryLine.label


def _line_row(record_id: uuid.UUID, item: LineItem):
    amount = to_cents(item.amount)
    if item.kind == LineKind.SALES:
        return SalesLine(record_id=record_id, category=item.key, amount=amount)
    if item.kind == LineKind.PAYMENT:
        return PaymentLine(record_id=record_id, method=item.key, amount=amount)
    return SummaryLine(
        record_id=record_id,
        label=item.key,
        amount=amount,
        is_calculated=item.is_calculated,
    )
