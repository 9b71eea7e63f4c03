from __future__ import annotations

import logging
import sys
from typing import Any, Callable, MutableMapping, Optional, cast

import structlog

from bank_sync.config import LOG_FORMAT, LOG_LEVEL

Processor = Callable[[Any, str, MutableMapping[str, Any]], Any]

# Provider HTTP traffic, SQL and access logs are reported through our own events
QUIET_LOGGERS = ("urllib3", "requests", "uvicorn.access", "sqlalchemy.engine")


def _renderer(log_format: str) -> list[Processor]:
    if log_format == "console":
        return [cast(Processor, structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))]
    return [
        cast(Processor, structlog.processors.format_exc_info),
        cast(Processor, structlog.processors.JSONRenderer()),
    ]


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog and the stdlib root logger for the API and the CLI job.

    LOG_FORMAT=json (default) emits one JSON object per event for log
    aggregation; LOG_FORMAT=console emits human-readable lines. Events bound
    through structlog.contextvars (request_id) are merged into every event.

    Args:
        level: Overrides LOG_LEVEL, e.g. from a command-line flag
    """
    log_level = (level or LOG_LEVEL).upper()

    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s:%(lineno)d: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        level=log_level,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            *_renderer(LOG_FORMAT),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
