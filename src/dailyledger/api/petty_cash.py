"""Petty cash ledger and category endpoints."""

from datetime import date as date_type
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dailyledger.api.auth import get_current_user
from dailyledger.core.db import get_db
from dailyledger.core.errors import ConflictError, NotFoundError
from dailyledger.core.logging import get_logger
from dailyledger.core.store import LedgerStore
from dailyledger.core.validators import to_cents
from dailyledger.models.petty_cash import PettyCashCategory, PettyCashEntry
from dailyledger.models.petty_cash_schemas import (
    CategoryCreate,
    CategoryRead,
    PettyCashCreate,
    PettyCashDateSum,
    PettyCashList,
    PettyCashRead,
    PettyCashUpdate,
)
from dailyledger.models.user import User

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/petty-cash",
    tags=["petty-cash"],
    dependencies=[Depends(get_current_user)],
)


async def _get_entry(db: AsyncSession, entry_id: UUID) -> PettyCashEntry:
    entry = await db.get(PettyCashEntry, entry_id)
    if entry is None:
        raise NotFoundError("PettyCashEntry", str(entry_id))
    return entry


# ─────── CATEGORIES ────────
# Registered before /{entry_id} so the path is not read as an id


@router.get("/categories", response_model=list[CategoryRead])
async def list_categories(db: AsyncSession = Depends(get_db)):
    """All categories, alphabetical."""
    result = await db.execute(select(PettyCashCategory).order_by(PettyCashCategory.name))
    return result.scalars().all()


@router.post("/categories", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
):
    """Add a category. Names are unique, compared case-insensitively."""
    result = await db.execute(
        select(PettyCashCategory).where(
            func.lower(PettyCashCategory.name) == payload.name.lower()
        )
    )
    if result.scalar_one_or_none():
        raise ConflictError(
            f"Category '{payload.name}' already exists",
            details={"name": payload.name},
        )

    category = PettyCashCategory(name=payload.name)
    db.add(category)
    await db.commit()
    await db.refresh(category)

    logger.info("petty_cash.category_created", name=category.name)
    return category


# ─────── ENTRIES ────────


@router.get("/sum", response_model=PettyCashDateSum)
async def petty_cash_sum(
    date: date_type = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Total petty cash for one date, as a daily record would pick it up."""
    total = await LedgerStore(db).query_petty_cash_sum(date)
    return PettyCashDateSum(date=date, total=total)


@router.get("", response_model=PettyCashList)
async def list_petty_cash(
    start: date_type | None = Query(None),
    end: date_type | None = Query(None),
    category: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Expenses matching the filters, newest first, with their total."""
    query = select(PettyCashEntry)
    if start is not None:
        query = query.where(PettyCashEntry.date >= start)
    if end is not None:
        query = query.where(PettyCashEntry.date <= end)
    if category:
        query = query.where(PettyCashEntry.category == category)

    result = await db.execute(
        query.order_by(PettyCashEntry.date.desc(), PettyCashEntry.created_at.desc())
    )
    entries = result.scalars().all()
    total = sum((entry.amount for entry in entries), Decimal("0"))

    return PettyCashList(
        entries=[PettyCashRead.model_validate(e) for e in entries],
        total=to_cents(total),
    )


@router.post("", response_model=PettyCashRead, status_code=status.HTTP_201_CREATED)
async def create_petty_cash(
    payload: PettyCashCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Record an expense paid out of the till."""
    entry = PettyCashEntry(
        date=payload.date,
        category=payload.category,
        description=payload.description,
        amount=to_cents(payload.amount),
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    logger.info(
        "petty_cash.created",
        entry_id=str(entry.id),
        date=entry.date.isoformat(),
        amount=str(entry.amount),
        actor=current_user.actor_name,
    )
    return entry


@router.get("/{entry_id}", response_model=PettyCashRead)
async def get_petty_cash(entry_id: UUID, db: AsyncSession = Depends(get_db)):
    return await _get_entry(db, entry_id)


@router.patch("/{entry_id}", response_model=PettyCashRead)
async def update_petty_cash(
    entry_id: UUID,
    payload: PettyCashUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit an expense in place.

    Daily records already saved for the old or new date keep their snapshot
    until they are edited again.
    """
    entry = await _get_entry(db, entry_id)

    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "amount" in updates:
        updates["amount"] = to_cents(updates["amount"])
    for field, value in updates.items():
        setattr(entry, field, value)

    await db.commit()
    await db.refresh(entry)

    logger.info(
        "petty_cash.updated",
        entry_id=str(entry.id),
        fields=sorted(updates),
        actor=current_user.actor_name,
    )
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_petty_cash(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = await _get_entry(db, entry_id)
    await db.delete(entry)
    await db.commit()

    logger.info("petty_cash.deleted", entry_id=str(entry_id), actor=current_user.actor_name)
