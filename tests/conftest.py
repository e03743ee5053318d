"""Shared test fixtures and configuration for all tests.

This conftest.py provides settings and retry fixtures used across the suite.
"""

import random

import pytest

from moneytree_link.config import Settings
from moneytree_link.retry.config import RetryConfig


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.RETRY_MAX_RETRIES = 5
    """
    return Settings(
        # === Application ===
        APP_NAME="moneytree-link (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Moneytree LINK ===
        MONEYTREE_ACCOUNT_NAME="jp-api-staging",
        MONEYTREE_BASE_URL=None,

        # === Retry ===
        RETRY_MAX_RETRIES=3,
        RETRY_BASE_DELAY_MS=3000,
        RETRY_ENABLED=True,
    )


@pytest.fixture
def retry_config() -> RetryConfig:
    """Default retry config (3 retries, 3s base delay, enabled)."""
    return RetryConfig()


@pytest.fixture
def seeded_rng() -> random.Random:
    """Deterministic random source for backoff jitter."""
    return random.Random(1234)
