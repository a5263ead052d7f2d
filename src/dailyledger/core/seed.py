"""Seed default petty cash categories for new installations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dailyledger.core.logging import get_logger
from dailyledger.models.petty_cash import PettyCashCategory

logger = get_logger(__name__)

DEFAULT_CATEGORIES = ("Payroll",)


async def seed_categories(db: AsyncSession) -> list[str]:
    """Create the default categories that are missing. Returns the names added."""
    result = await db.execute(select(PettyCashCategory.name))
    existing = {name.lower() for name in result.scalars().all()}

    added = [name for name in DEFAULT_CATEGORIES if name.lower() not in existing]
    db.add_all(PettyCashCategory(name=name) for name in added)
    await db.commit()

    logger.info("seed.categories", added=added)
    return added
