"""
Structured logging for entityspine.

Library modules obtain loggers through :func:`get_logger` and emit events
with key/value context (``schema``, ``operation``, ``sql``). Events travel
through the standard :mod:`logging` tree under the ``entityspine`` logger,
which carries a ``NullHandler``: an application that never configures
logging sees nothing. Applications call :func:`configure_logging` once at
startup; the CLI does so from settings.

Architecture::

    get_logger(__name__)            structlog BoundLogger over logging.getLogger
        │ filter_by_level           drops events below the stdlib level
        │ wrap_for_formatter
        ▼
    logging "entityspine.*"         NullHandler until configured
        ▼
    root handler (stderr)           ProcessorFormatter → console or JSON

Examples:
    >>> from entityspine.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> logger.debug("schema_generated", schema="post", statements=2)

Output (JSON format)::

    {"event": "schema_generated", "schema": "post", "statements": 2,
     "log.level": "debug", "@timestamp": "2026-10-19T10:00:00Z"}

Tags:
    logging, structlog, observability, entityspine
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

HANDLER_NAME = "entityspine"

logging.getLogger("entityspine").addHandler(logging.NullHandler())

_LOGGER_PROCESSORS: list[Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Make field names Elasticsearch/ECS compatible."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")
    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Installs one stderr handler on the root logger, replacing the one a
    previous call installed.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        add_timestamp: Include ISO timestamp in logs
    """
    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(_elasticsearch_compatible)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                *shared_processors,
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper()))

    # Application code calling structlog.get_logger() shares the same pipeline
    structlog.configure(
        processors=_LOGGER_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``).

    The logger writes through stdlib logging whether or not
    :func:`configure_logging` has run.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_LOGGER_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


__all__ = ["HANDLER_NAME", "configure_logging", "get_logger"]
