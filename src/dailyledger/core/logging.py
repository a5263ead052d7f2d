"""structlog setup and the per-request ID context.

``LOG_LEVEL`` (default INFO) sets the threshold; ``LOG_FORMAT=console`` swaps
the JSON renderer for a readable one when working locally.
"""

import contextvars
import logging
import logging.config
import os

import structlog

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID and bind it to every log line of this context."""
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def _renderer(log_format: str):
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def configure_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog and route stdlib loggers (uvicorn, sqlalchemy) through it."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.getenv("LOG_FORMAT", "json")).lower()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        level_name, numeric_level = "INFO", logging.INFO

    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]

    structlog.configure(
        processors=shared + [structlog.processors.format_exc_info, _renderer(log_format)],
        context_class=dict,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared,
                    "processor": _renderer(log_format),
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "structlog",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["stdout"], "level": level_name},
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
