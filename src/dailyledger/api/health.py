"""
Health check endpoint for monitoring and container orchestration.

Reports uptime and database connectivity. Always answers 200 so a degraded
database shows up in the payload instead of taking the service out of rotation.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dailyledger.core.db import get_db
from dailyledger.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# Set in lifespan
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """Run ``SELECT 1``. Returns status, response time and the error class if down."""
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("health.database_down", error=type(e).__name__)
        return {
            "status": "down",
            "response_time_ms": int((time.perf_counter() - start) * 1000),
            "error": type(e).__name__,
        }
    return {
        "status": "ok",
        "response_time_ms": int((time.perf_counter() - start) * 1000),
    }


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """
    Example response:
        {
            "status": "ok",
            "uptime_seconds": 3600,
            "checks": {"database": {"status": "ok", "response_time_ms": 5}}
        }
    """
    db_check = await check_database(db)

    return JSONResponse(
        content={
            "status": "ok" if db_check["status"] == "ok" else "degraded",
            "uptime_seconds": get_uptime_seconds(),
            "checks": {"database": db_check},
        },
        status_code=status.HTTP_200_OK,
    )
