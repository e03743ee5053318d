"""
Request cloning for retries.

An httpx request built from a generator or file-like body can only be
streamed once. Retries therefore send a clone whose body is a brand-new
stream over the bytes captured before the first attempt.
"""

import httpx


def clone_request(request: httpx.Request, body: bytes) -> httpx.Request:
    """
    Build a structurally identical request with a fresh body stream.

    Method, URL, headers and extensions are copied; the body is an
    independent ``httpx.ByteStream`` over ``body``, so no clone shares
    stream state with the original or with another clone.

    Args:
        request: Original request
        body: Body bytes captured from the original request (may be empty)

    Returns:
        New httpx.Request ready to be sent
    """
    return httpx.Request(
        method=request.method,
        url=request.url,
        headers=request.headers.copy(),
        stream=httpx.ByteStream(body),
        extensions=dict(request.extensions),
    )
