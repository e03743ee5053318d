"""
Async Python client for the Moneytree LINK API.

Every call flows through one resilient request-execution layer:
- Requests are resolved against the account's base URL and decorated with options
- HTTP 429 responses are retried with exponential backoff and jitter
- Request bodies are captured once and replayed byte-for-byte on retries
- 4xx responses become structured APIError exceptions
- Successful bodies are decoded into pydantic models (or any type)

Architecture: httpx transport + pydantic codec + structlog logging + Prometheus metrics
"""

__version__ = "0.1.0"

from moneytree_link.client import (
    ClientConfig,
    ClientOption,
    MoneytreeClient,
    validate_date_format,
    with_base_url,
    with_codec,
    with_http_client,
    with_limits,
    with_random,
    with_retry_config,
    with_timeout,
)
from moneytree_link.http import (
    APIError,
    InvalidBaseURLError,
    InvalidContextError,
    MoneytreeError,
    ResponseDecodeError,
    TransportError,
    with_bearer_token,
    with_header,
)
from moneytree_link.retry import RetryConfig

__all__ = [
    "MoneytreeClient",
    "ClientConfig",
    "ClientOption",
    "RetryConfig",
    "validate_date_format",
    "with_base_url",
    "with_codec",
    "with_http_client",
    "with_limits",
    "with_random",
    "with_retry_config",
    "with_timeout",
    "with_bearer_token",
    "with_header",
    "MoneytreeError",
    "APIError",
    "InvalidBaseURLError",
    "InvalidContextError",
    "ResponseDecodeError",
    "TransportError",
]
