"""
Structured logging for source-store, built on structlog.

Production renders one JSON object per line; every other environment gets
the coloured console renderer. Standard library loggers (the storage layer,
asyncpg, uvicorn) are routed through the same stdout handler, so the CLI
and the API produce a single stream.

Context bound with ``bind_context`` (the CLI command, the HTTP request ID,
the source id being worked on) is merged into every event until
``clear_context`` is called.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from source_store.config.settings import get_settings

# Chatty third-party loggers held at WARNING regardless of the app level
_QUIET_LOGGERS = ("asyncio", "asyncpg")


def setup_logging(log_level: str | None = None) -> None:
    """
    Configure structlog and stdlib logging for the CLI and the API.

    Args:
        log_level: Overrides ``Settings.log_level`` (the CLI's ``--debug``
            passes ``"DEBUG"``)
    """
    settings = get_settings()
    level = getattr(logging, (log_level or settings.log_level).upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.is_production:
        renderer: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    # basicConfig is a no-op once a handler exists
    logging.getLogger().setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_context(**kwargs) -> None:
    """Attach fields such as ``command`` or ``request_id`` to later events."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop every field attached by ``bind_context``."""
    structlog.contextvars.clear_contextvars()
