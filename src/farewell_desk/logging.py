"""Structured logging for farewell_desk.

Every engine logs through a module-level ``logger = get_logger(__name__)``
with a snake_case event name and keyword context, for example
``logger.info("farewell_booked", slot_key=..., removal_code=...)``.
Background sweeps and chat timers run on the event loop without a caller
to report to, so their failures only surface here.

Logging configures itself with console output on import; services call
`configure_logging(json_output=True)` to ship events as JSON lines.
"""

import logging
import sys
from typing import Any

import structlog

__all__ = [
    "configure_logging",
    "get_logger",
]


def _event_processors(add_timestamp: bool) -> list[Any]:
    processors: list[Any] = [
        # context bound with structlog.contextvars (e.g. a request id) comes first
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        # client and pet names are not ASCII-only
        structlog.processors.UnicodeDecoder(),
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))
    return processors


def _renderer(json_output: bool) -> list[Any]:
    if json_output:
        # tracebacks become a string field instead of multi-line output
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    level: int = logging.INFO,
    json_output: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for the coordination engines.

    Args:
        level: Logging level (default: INFO)
        json_output: Emit JSON lines instead of console output
        add_timestamp: Prefix every event with an ISO timestamp
    """
    structlog.configure(
        processors=_event_processors(add_timestamp) + _renderer(json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    # loop.call_later timers trip asyncio's slow-callback warnings in debug mode
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return the structlog logger for a farewell_desk module."""
    return structlog.get_logger(name)


_configured = False


def _ensure_configured() -> None:
    global _configured
    if not _configured:
        configure_logging()
        _configured = True


_ensure_configured()
