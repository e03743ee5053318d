"""
Custom exceptions for the request-execution layer.

Every error raised by the client derives from MoneytreeError so callers can
catch any library failure with a single except clause, while still being
able to tell configuration mistakes, transport failures, API errors and
decode failures apart.
"""


class MoneytreeError(Exception):
    """
    Base exception for all Moneytree client errors.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidContextError(MoneytreeError):
    """
    Raised when a request is built outside of a running event loop.

    Requests are bound to an async client; without a running loop there is
    no task to carry cancellation or deadlines for the call.
    """
    def __init__(self, message: str = "a running event loop is required to build requests"):
        super().__init__(message)


class InvalidBaseURLError(MoneytreeError):
    """
    Raised when the configured base URL does not end with a trailing slash.

    Relative paths would otherwise resolve against the parent segment and
    silently hit the wrong endpoint.
    """
    def __init__(self, base_url: str):
        super().__init__(
            f"baseURL must have a trailing slash, but {base_url!r} does not",
            details={"base_url": base_url},
        )
        self.base_url = base_url


class TransportError(MoneytreeError):
    """
    Raised when the request never produced a response.

    Includes DNS, TLS, connection and timeout errors from httpx. The URL is
    always the sanitized one. Transport errors are never retried.
    """
    def __init__(self, message: str, method: str, url: str):
        super().__init__(message, details={"method": method, "url": url})
        self.method = method
        self.url = url


class ResponseDecodeError(MoneytreeError):
    """
    Raised when a successful response body does not match the requested shape.
    """
    pass


class APIError(MoneytreeError):
    """
    Error returned by the Moneytree LINK API (HTTP 4xx).

    Attributes:
        status_code: HTTP status code of the failed response
        error_type: Value of the ``error`` field, if the body carried one
        error_description: Value of the ``error_description`` field, or a
            library-provided message when the body could not be read/decoded
        raw_message: Unparsed response body text
    """

    def __init__(
        self,
        status_code: int,
        error_type: str | None = None,
        error_description: str | None = None,
        raw_message: str = "",
    ):
        self.status_code = status_code
        self.error_type = error_type or None
        self.error_description = error_description or None
        self.raw_message = raw_message
        super().__init__(
            self._render(),
            details={
                "status_code": status_code,
                "error_type": self.error_type,
                "error_description": self.error_description,
            },
        )

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    def _render(self) -> str:
        if self.error_description:
            if self.error_type:
                return f"{self.status_code}: {self.error_type} - {self.error_description}"
            return f"{self.status_code}: {self.error_description}"
        if self.error_type:
            return f"{self.status_code}: {self.error_type}"
        return f"{self.status_code}"

    def __str__(self) -> str:
        return self._render()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"status_code={self.status_code}, "
            f"error_type={self.error_type!r}, "
            f"error_description={self.error_description!r})"
        )
