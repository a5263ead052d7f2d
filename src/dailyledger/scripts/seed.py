"""Seed reference data (petty cash categories)."""

import asyncio
import sys

from dailyledger.core.db import AsyncSessionLocal
from dailyledger.core.logging import configure_logging, get_logger
from dailyledger.core.seed import seed_categories

logger = get_logger(__name__)


async def seed() -> None:
    async with AsyncSessionLocal() as db:
        added = await seed_categories(db)

    if added:
        print(f"✅ Seeded categories: {', '.join(added)}")
    else:
        print("ℹ️  Categories already seeded, skipping...")


def main() -> None:
    configure_logging()
    try:
        asyncio.run(seed())
    except KeyboardInterrupt:
        print("\n❌ Cancelled")
        sys.exit(1)


if __name__ == "__main__":
    main()
