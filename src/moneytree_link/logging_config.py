"""Structured logging for the Moneytree LINK client.

Every module logs through ``structlog.get_logger(__name__)`` with keyword
events. Nothing is configured on import: an application that already set up
structlog gets the client's events in its own pipeline. configure_logging is
a convenience for scripts and services that have not.

Output is attached to the ``moneytree_link`` logger only; the root logger and
the host application's handlers are left alone.
"""

import logging
import sys
from typing import IO, Any, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from moneytree_link.http.redaction import sanitize_text

LIBRARY_LOGGER = "moneytree_link"


def add_library_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every log event with the emitting library."""
    event_dict.setdefault("library", "moneytree-link")
    return event_dict


def redact_secrets(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Scrub OAuth secrets from string values before rendering."""
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = sanitize_text(value)
    return event_dict


def build_processors(environment: str) -> tuple[list[Processor], Processor]:
    """Return (pre-render chain, renderer) for the given environment."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_library_context,
        redact_secrets,
    ]

    if environment.lower() == "production":
        processors.append(structlog.processors.format_exc_info)
        return processors, structlog.processors.JSONRenderer()

    return processors, structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    stream: Optional[IO[Any]] = None,
) -> logging.Logger:
    """Route client log events to ``stream`` (stdout by default).

    Args:
        log_level: DEBUG logs every attempt and backoff delay; WARNING keeps
            only rate-limit retries and failures
        environment: ``production`` renders JSON lines, anything else
            renders key=value console output
        stream: Destination for rendered events

    Returns:
        The configured ``moneytree_link`` stdlib logger
    """
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)
    processors, renderer = build_processors(environment)

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)
    )

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    library_logger.handlers.clear()
    library_logger.addHandler(handler)
    library_logger.setLevel(log_level_int)
    library_logger.propagate = False

    # httpx logs full request URLs, query strings included, at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return library_logger
