"""
Redaction of secrets carried in request URLs.

Transport errors embed the request URL. OAuth flows put client secrets and
tokens into query strings, so every URL that can end up in an exception or a
log line goes through sanitize_url first. Free-form text that may quote a URL
(exception messages from the transport) goes through sanitize_text.
"""

import re

import httpx
import structlog

logger = structlog.get_logger(__name__)

SENSITIVE_PARAMS: tuple[str, ...] = ("client_secret", "refresh_token", "access_token")
REDACTED = "REDACTED"

# name=value pairs inside arbitrary text; the value ends at a query or fragment
# delimiter, whitespace, a quote or closing punctuation.
_SENSITIVE_PAIR_PATTERN = re.compile(
    r"\b(" + "|".join(SENSITIVE_PARAMS) + r")=([^&#\s'\"<>),]+)"
)


def sanitize_url(url: httpx.URL | str | None) -> httpx.URL | None:
    """
    Replace sensitive query parameter values with ``REDACTED``.

    Only parameters that are present with a non-empty value are rewritten;
    everything else in the URL is left untouched.

    Examples:
        >>> str(sanitize_url("https://x.test/oauth/token?client_secret=s3cr3t&a=1"))
        'https://x.test/oauth/token?client_secret=REDACTED&a=1'
    """
    if url is None:
        return None

    url = httpx.URL(url)
    redacted_count = 0
    for param in SENSITIVE_PARAMS:
        if url.params.get(param):
            url = url.copy_set_param(param, REDACTED)
            redacted_count += 1

    if redacted_count:
        logger.debug("Redacted sensitive URL parameters", redacted_count=redacted_count)
    return url


def sanitize_request_error(exc: httpx.RequestError) -> httpx.URL | None:
    """
    Sanitize an httpx error in place.

    The message text and the attached request are both scrubbed. Returns the
    sanitized URL, or None when the error carries no request.
    """
    exc.args = tuple(sanitize_text(arg) if isinstance(arg, str) else arg for arg in exc.args)

    try:
        request = exc.request
    except RuntimeError:
        return None

    url = sanitize_url(request.url)
    exc.request = httpx.Request(request.method, url)
    return url


def sanitize_text(text: str) -> str:
    """
    Redact sensitive ``name=value`` query pairs appearing anywhere in ``text``.

    Examples:
        >>> sanitize_text("failed: https://x.test/t?refresh_token=abc&a=1")
        'failed: https://x.test/t?refresh_token=REDACTED&a=1'
    """
    return _SENSITIVE_PAIR_PATTERN.sub(lambda m: f"{m.group(1)}={REDACTED}", text)
