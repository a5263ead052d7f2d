"""Sentry error tracking setup."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from dailyledger.core.logging import get_logger

logger = get_logger(__name__)

_sentry_initialized = False


def init_sentry() -> None:
    """
    Initialize Sentry when ``SENTRY_DSN`` holds a real DSN.

    No DSN, or a placeholder that is not an http(s) URL, leaves error tracking
    off. Performance tracing and the SQLAlchemy integration stay disabled so
    query text never leaves the server. Calling this twice is a no-op.
    """
    global _sentry_initialized

    if _sentry_initialized:
        return

    sentry_dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not sentry_dsn.startswith(("https://", "http://")):
        logger.info("sentry.disabled", configured=bool(sentry_dsn))
        return

    environment = os.getenv("ENVIRONMENT", "development")

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                # structlog already writes the logs
                LoggingIntegration(level=None, event_level=None),
            ],
            before_send=scrub_event,
        )
    except BadDsn as exc:
        logger.warning("sentry.init_failed", error=str(exc))
        return

    _sentry_initialized = True
    logger.info("sentry.initialized", environment=environment)


def scrub_event(event: dict, hint: dict) -> dict:
    """Drop extras and breadcrumbs that carry SQL. Store errors quote the statement."""
    extra = event.get("extra")
    if isinstance(extra, dict):
        event["extra"] = {
            key: value
            for key, value in extra.items()
            if "sql" not in str(key).lower() and "sql" not in str(value).lower()
        }

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict):
        # Newer SDKs wrap the list as {"values": [...]}
        values = breadcrumbs.get("values", [])
        breadcrumbs["values"] = [b for b in values if not _mentions_sql(b)]
    elif isinstance(breadcrumbs, list):
        event["breadcrumbs"] = [b for b in breadcrumbs if not _mentions_sql(b)]

    return event


def _mentions_sql(breadcrumb) -> bool:
    if isinstance(breadcrumb, dict):
        text = f"{breadcrumb.get('category', '')} {breadcrumb.get('message', '')}"
    else:
        text = str(breadcrumb)
    return "sql" in text.lower()
