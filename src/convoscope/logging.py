"""Structured logging for convoscope.

Every module logs through ``get_logger(__name__)`` with snake_case event
names and keyword context, e.g. ``logger.info("ingest_completed",
messages=12)``. Output goes to stderr: readable console lines by default,
one JSON object per line when ``json_output`` is set.
"""

import logging
import sys
from typing import Any

import structlog

__all__ = [
    "QUIET_LOGGERS",
    "configure_logging",
    "get_logger",
]

# HTTP clients used by the embedding providers log every request at INFO
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "openai")


def _processors(json_output: bool, add_timestamp: bool) -> list[Any]:
    chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if add_timestamp:
        chain.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return chain


def configure_logging(
    level: int | str = logging.INFO,
    json_output: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog and the stdlib root handler for convoscope.

    Args:
        level: Logging level, as a number or a name such as ``"DEBUG"``
        json_output: Render JSON lines instead of console output
        add_timestamp: Prefix events with an ISO timestamp
    """
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    structlog.configure(
        processors=_processors(json_output, add_timestamp),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdout is left for exported data
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)


_configured = False


def _ensure_configured() -> None:
    global _configured
    if not _configured:
        configure_logging()
        _configured = True


_ensure_configured()
