"""
Request construction.

RequestBuilder resolves API paths against the client's base URL, serializes
bodies through the codec and applies caller-supplied request options (auth
headers and the like). Options run last so they can override defaults.
"""

import asyncio
from typing import Any, Callable, Mapping
from urllib.parse import urlencode

import httpx
import structlog

from moneytree_link.http.codec import Codec, PydanticJSONCodec
from moneytree_link.http.exceptions import InvalidBaseURLError, InvalidContextError

logger = structlog.get_logger(__name__)

RequestOption = Callable[[httpx.Request], None]

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def with_bearer_token(token: str) -> RequestOption:
    """Set ``Authorization: Bearer <token>`` on the request."""
    def apply(request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {token}"

    return apply


def with_header(name: str, value: str) -> RequestOption:
    def apply(request: httpx.Request) -> None:
        request.headers[name] = value

    return apply


def _require_running_loop() -> None:
    try:
        asyncio.get_running_loop()
    except RuntimeError as e:
        raise InvalidContextError() from e


class RequestBuilder:
    """
    Builds httpx requests relative to a base URL.

    Attributes:
        base_url: Base URL; its path must end with '/'
        codec: Codec used to serialize JSON bodies
    """

    def __init__(self, base_url: httpx.URL | str, codec: Codec | None = None):
        self.base_url = httpx.URL(base_url)
        self.codec = codec or PydanticJSONCodec()

    def _resolve(self, path: str) -> httpx.URL:
        _require_running_loop()
        if not self.base_url.path.endswith("/"):
            raise InvalidBaseURLError(str(self.base_url))
        return self.base_url.join(path)

    def new_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *options: RequestOption,
    ) -> httpx.Request:
        """
        Create an API request.

        Relative paths are resolved against the base URL and should be given
        without a leading slash. If ``body`` is not None it is JSON encoded
        and sent with ``Content-Type: application/json``.

        Raises:
            InvalidContextError: No running event loop
            InvalidBaseURLError: Base URL path lacks a trailing slash
        """
        url = self._resolve(path)

        content: bytes | None = None
        if body is not None:
            content = self.codec.encode(body)

        request = httpx.Request(method.upper(), url, content=content)
        if body is not None:
            request.headers["Content-Type"] = self.codec.content_type

        for option in options:
            option(request)

        logger.debug(
            "Built request",
            method=request.method,
            path=url.path,
            has_body=body is not None,
            options_count=len(options),
        )
        return request

    def new_form_request(
        self,
        path: str,
        body: str | bytes | Mapping[str, Any] | None = None,
        *options: RequestOption,
    ) -> httpx.Request:
        """
        Create a POST request with a url-encoded form body.

        ``body`` may be pre-encoded (str/bytes) or a mapping, which is encoded
        with ``urllib.parse.urlencode``.

        Raises:
            InvalidContextError: No running event loop
            InvalidBaseURLError: Base URL path lacks a trailing slash
        """
        url = self._resolve(path)

        if isinstance(body, Mapping):
            body = urlencode(body, doseq=True)
        if isinstance(body, str):
            body = body.encode("utf-8")

        request = httpx.Request("POST", url, content=body)
        request.headers["Content-Type"] = FORM_CONTENT_TYPE

        for option in options:
            option(request)

        logger.debug(
            "Built form request",
            method=request.method,
            path=url.path,
            options_count=len(options),
        )
        return request
