"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from dailyledger.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", timestamp=start_time.isoformat())

    from dailyledger.api.health import set_app_start_time
    from dailyledger.core.sentry import init_sentry

    set_app_start_time(start_time)
    init_sentry()

    yield

    logger.info("app.shutdown")


def _setup_middleware(app: FastAPI, environment: str, session_secret_key: str) -> None:
    """Configure middleware. Last added runs first."""
    from dailyledger.middleware.logging import RequestIDMiddleware
    from dailyledger.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    # The auth payload carries its own expiry; the cookie just must not outlive it
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret_key,
        max_age=int(float(os.getenv("SESSION_TTL_HOURS", "24")) * 60 * 60),
        https_only=environment == "production",
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    from dailyledger.api.auth import router as auth_router
    from dailyledger.api.daily_records import router as daily_records_router
    from dailyledger.api.employees import router as employees_router
    from dailyledger.api.health import router as health_router
    from dailyledger.api.petty_cash import router as petty_cash_router
    from dailyledger.api.reports import router as reports_router

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(daily_records_router)
    app.include_router(petty_cash_router)
    app.include_router(employees_router)
    app.include_router(reports_router)


def create_app() -> FastAPI:
    """Application factory for the daily ledger."""
    app = FastAPI(
        title="Daily Ledger API",
        description="Daily cash reconciliation for a small retail shop",
        version="0.1.0",
        lifespan=lifespan,
    )

    from dailyledger.core.exception_handlers import register_exception_handlers

    register_exception_handlers(app)

    session_secret_key = os.getenv("SESSION_SECRET_KEY", "dev-secret-key-change-in-production")
    environment = os.getenv("ENVIRONMENT", "development")

    _setup_middleware(app, environment, session_secret_key)
    _register_routers(app)

    logger.info("app.configured", environment=environment)

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "dailyledger.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") == "development",
    )
