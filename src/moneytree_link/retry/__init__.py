"""
Retry policy for rate-limited (HTTP 429) requests.

Main Components:
    - RetryConfig: Immutable per-client retry settings
    - BackoffPolicy: Exponential backoff with jitter and an injectable random source

Usage:
    >>> from moneytree_link.retry import BackoffPolicy, RetryConfig
    >>> config = RetryConfig(max_retries=5, base_delay=5.0)
    >>> policy = BackoffPolicy(config.base_delay)
    >>> policy.delay(0)  # somewhere in [5.0, 10.0)
"""

from moneytree_link.retry.backoff import BackoffPolicy, calculate_backoff_delay
from moneytree_link.retry.config import RetryConfig

__all__ = [
    "BackoffPolicy",
    "RetryConfig",
    "calculate_backoff_delay",
]
