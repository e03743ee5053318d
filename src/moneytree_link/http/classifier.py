"""
Response classification.

Maps a raw httpx response to "no error" or a structured APIError.

Only 4xx responses are errors at this layer. 5xx responses are passed
through as successes and surface later, typically as a ResponseDecodeError
when their body does not match the requested type. Changing that is a
product decision; tests pin the current behaviour.
"""

import json

import httpx
import structlog

from moneytree_link.http.exceptions import APIError

logger = structlog.get_logger(__name__)

HTTP_BAD_REQUEST = 400
HTTP_TOO_MANY_REQUESTS = 429
HTTP_INTERNAL_SERVER_ERROR = 500


def is_error_status_code(status_code: int) -> bool:
    """True iff ``400 <= status_code <= 499``."""
    return HTTP_BAD_REQUEST <= status_code < HTTP_INTERNAL_SERVER_ERROR


def is_rate_limit_error(error: BaseException | None) -> bool:
    return isinstance(error, APIError) and error.status_code == HTTP_TOO_MANY_REQUESTS


async def check_response_error(response: httpx.Response | None) -> APIError | None:
    """
    Classify a response.

    On an error status the body is read in full. A JSON envelope of the form
    ``{"error": ..., "error_description": ...}`` fills ``error_type`` and
    ``error_description``; ``raw_message`` always keeps the body text.

    Args:
        response: Response to classify (body may still be unread)

    Returns:
        None for a non-error response, otherwise an APIError

    Raises:
        ValueError: If response is None
    """
    if response is None:
        raise ValueError("response cannot be nil")

    status_code = response.status_code
    if not is_error_status_code(status_code):
        return None

    try:
        body = await response.aread()
    except (httpx.HTTPError, httpx.StreamError) as e:
        logger.warning(
            "Failed to read error response body",
            status_code=status_code,
            error=str(e),
            error_type=type(e).__name__,
        )
        return APIError(
            status_code=status_code,
            error_description=f"unable to read response from moneytree: {e}",
        )

    raw_message = body.decode(response.encoding or "utf-8", errors="replace")

    # "null" is an empty envelope; an empty body fails to decode like any non-JSON body.
    try:
        envelope = json.loads(body)
        if envelope is None:
            envelope = {}
        if not isinstance(envelope, dict):
            raise TypeError(f"expected a JSON object, got {type(envelope).__name__}")
        error_type = _string_field(envelope, "error")
        error_description = _string_field(envelope, "error_description")
    except (ValueError, TypeError, RecursionError) as e:
        logger.debug(
            "Error response is not a JSON error envelope",
            status_code=status_code,
            error=str(e),
        )
        return APIError(
            status_code=status_code,
            error_description=f"unable to decode response from moneytree: {e}",
            raw_message=raw_message,
        )

    return APIError(
        status_code=status_code,
        error_type=error_type,
        error_description=error_description,
        raw_message=raw_message,
    )


def _string_field(envelope: dict, key: str) -> str | None:
    value = envelope.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value
