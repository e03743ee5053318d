"""
Unit tests for structlog configuration.
"""

import io
import json
import logging

import pytest
import structlog

from moneytree_link.logging_config import (
    LIBRARY_LOGGER,
    add_library_context,
    configure_logging,
    redact_secrets,
)


@pytest.fixture
def restore_logging():
    """Restore library/httpx logger and structlog state after configure_logging."""
    library_logger = logging.getLogger(LIBRARY_LOGGER)
    handlers = list(library_logger.handlers)
    level = library_logger.level
    propagate = library_logger.propagate
    httpx_level = logging.getLogger("httpx").level
    yield
    library_logger.handlers[:] = handlers
    library_logger.setLevel(level)
    library_logger.propagate = propagate
    logging.getLogger("httpx").setLevel(httpx_level)
    structlog.reset_defaults()


def test_add_library_context():
    event_dict = add_library_context(None, "info", {"event": "Sending request"})

    assert event_dict == {"event": "Sending request", "library": "moneytree-link"}


def test_add_library_context_keeps_existing_value():
    event_dict = add_library_context(None, "info", {"event": "x", "library": "app"})

    assert event_dict["library"] == "app"


def test_redact_secrets():
    event_dict = redact_secrets(
        None,
        "error",
        {
            "event": "Transport error",
            "error": "connect failed for https://x.test/oauth/token?client_secret=s3cr3t&a=1",
            "attempt": 2,
        },
    )

    assert event_dict["error"] == (
        "connect failed for https://x.test/oauth/token?client_secret=REDACTED&a=1"
    )
    assert event_dict["attempt"] == 2


@pytest.mark.parametrize("environment", ["development", "production"])
def test_configure_logging_scoped_to_library(restore_logging, environment):
    library_logger = configure_logging("DEBUG", environment)

    assert library_logger.name == LIBRARY_LOGGER
    assert library_logger.level == logging.DEBUG
    assert library_logger.propagate is False
    assert len(library_logger.handlers) == 1
    assert isinstance(library_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
    assert logging.getLogger("httpx").level == logging.WARNING


def test_production_renders_redacted_json(restore_logging):
    stream = io.StringIO()
    configure_logging("INFO", "production", stream=stream)

    structlog.get_logger("moneytree_link.http.executor").warning(
        "Rate limited, retrying after backoff",
        url="https://x.test/oauth/token?refresh_token=r3fr3sh",
        attempt=0,
    )

    event = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert event["event"] == "Rate limited, retrying after backoff"
    assert event["url"] == "https://x.test/oauth/token?refresh_token=REDACTED"
    assert event["library"] == "moneytree-link"
    assert event["level"] == "warning"
    assert "r3fr3sh" not in stream.getvalue()


def test_level_filters_events(restore_logging):
    stream = io.StringIO()
    configure_logging("WARNING", "production", stream=stream)

    structlog.get_logger("moneytree_link.http.executor").debug("Sending request", attempt=0)

    assert stream.getvalue() == ""


def test_unknown_level_falls_back_to_info(restore_logging):
    assert configure_logging("verbose").level == logging.INFO
