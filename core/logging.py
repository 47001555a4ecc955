from __future__ import annotations

import logging
import sys

import structlog

from core.config import settings


def configure_logging(level: str | int = "INFO", json_logs: bool | None = None) -> None:
    """Route stdlib and structlog output to stdout.

    JSON lines in production, key=value console output elsewhere.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    if json_logs is None:
        json_logs = settings.app_env == "production"

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )
    # Requests are already logged by the trace middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
