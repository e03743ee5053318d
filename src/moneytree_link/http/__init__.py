"""
Resilient request-execution layer.

Components:
- RequestBuilder: Resolves paths against the base URL, encodes bodies, applies request options
- Executor: Sends requests with HTTP 429 retries, classification and decoding
- clone_request: Fresh, replayable copy of a request for retries
- check_response_error: Maps 4xx responses to APIError
- sanitize_url: Redacts OAuth secrets from URLs
- PydanticJSONCodec: Default payload codec
- exceptions: Client error hierarchy
"""

from moneytree_link.http.builder import (
    RequestBuilder,
    RequestOption,
    with_bearer_token,
    with_header,
)
from moneytree_link.http.classifier import check_response_error, is_error_status_code
from moneytree_link.http.cloning import clone_request
from moneytree_link.http.codec import Codec, PydanticJSONCodec
from moneytree_link.http.exceptions import (
    APIError,
    InvalidBaseURLError,
    InvalidContextError,
    MoneytreeError,
    ResponseDecodeError,
    TransportError,
)
from moneytree_link.http.executor import Executor
from moneytree_link.http.redaction import sanitize_text, sanitize_url

__all__ = [
    "RequestBuilder",
    "RequestOption",
    "with_bearer_token",
    "with_header",
    "Executor",
    "clone_request",
    "check_response_error",
    "is_error_status_code",
    "sanitize_text",
    "sanitize_url",
    "Codec",
    "PydanticJSONCodec",
    "MoneytreeError",
    "APIError",
    "InvalidBaseURLError",
    "InvalidContextError",
    "ResponseDecodeError",
    "TransportError",
]
