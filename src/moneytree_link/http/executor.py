"""
Resilient request execution.

Every API call flows through Executor.do, which:

1. Captures the request body once, so every attempt sends identical bytes
2. Sends up to ``max_retries + 1`` attempts through the injected httpx client
3. Classifies each response (4xx -> APIError, everything else -> success)
4. Retries HTTP 429 with exponential backoff and jitter
5. Decodes the successful response into the caller's destination

Transport failures are never retried and never leak URL secrets. Each
response is closed before the next attempt starts and before ``do`` returns
or raises, on every path.

Usage:
    executor = Executor(http_client, RetryConfig())
    details = await executor.do(request, AccountBalanceDetails)
"""

import asyncio
import time
from typing import Any

import httpx
import structlog

from moneytree_link.http.classifier import check_response_error, is_rate_limit_error
from moneytree_link.http.cloning import clone_request
from moneytree_link.http.codec import Codec, PydanticJSONCodec
from moneytree_link.http.exceptions import (
    APIError,
    MoneytreeError,
    ResponseDecodeError,
    TransportError,
)
from moneytree_link.http.redaction import sanitize_request_error, sanitize_text, sanitize_url
from moneytree_link.monitoring.metrics import (
    request_latency_seconds,
    requests_total,
    retries_total,
)
from moneytree_link.retry.backoff import BackoffPolicy
from moneytree_link.retry.config import RetryConfig

logger = structlog.get_logger(__name__)


class Executor:
    """
    Executes built requests with rate-limit retries.

    The executor holds no per-call state; concurrent ``do`` calls only share
    the immutable RetryConfig, the backoff policy and the httpx client.

    Attributes:
        http_client: Injected httpx.AsyncClient used for transport
        retry_config: Retry settings for HTTP 429
        backoff: Backoff policy computing inter-retry waits
        codec: Codec decoding successful response bodies
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        retry_config: RetryConfig | None = None,
        backoff: BackoffPolicy | None = None,
        codec: Codec | None = None,
    ):
        self.http_client = http_client
        self.retry_config = retry_config or RetryConfig()
        self.backoff = backoff or BackoffPolicy(self.retry_config.base_delay)
        self.codec = codec or PydanticJSONCodec()

    async def do(self, request: httpx.Request, into: Any = None) -> Any:
        """
        Execute a request to completion.

        Args:
            request: Request built by RequestBuilder (or any httpx.Request)
            into: Decode destination. None discards the body; an object with
                a ``write`` method receives the raw body bytes; anything else
                is a type the JSON body is decoded into.

        Returns:
            The decoded value for a type destination (None for an empty
            body), otherwise None

        Raises:
            APIError: 4xx response, or 429 after the retry budget is spent
            TransportError: The request never produced a response
            ResponseDecodeError: The body does not match ``into``
            asyncio.CancelledError: The calling task was cancelled
        """
        start_time = time.perf_counter()
        outcome = "success"
        try:
            return await self._execute(request, into)
        except BaseException as e:
            outcome = _outcome_for(e)
            raise
        finally:
            requests_total.labels(method=request.method, outcome=outcome).inc()
            request_latency_seconds.labels(method=request.method).observe(
                time.perf_counter() - start_time
            )

    async def _execute(self, request: httpx.Request, into: Any) -> Any:
        # Capture once; afterwards request.stream replays the same bytes.
        try:
            body = await request.aread()
        except httpx.StreamError as e:
            raise MoneytreeError(
                f"failed to read request body: {e}",
                details={"method": request.method},
            ) from e

        url = sanitize_url(request.url)
        max_retries = self.retry_config.max_retries

        for attempt in range(max_retries + 1):
            current = request if attempt == 0 else clone_request(request, body)

            logger.debug(
                "Sending request",
                method=current.method,
                url=str(url),
                attempt=attempt,
                body_length=len(body),
            )

            try:
                response = await self.http_client.send(current, stream=True)
            except httpx.RequestError as e:
                _raise_if_cancelling(e)
                raise self._transport_error(current, e) from e

            try:
                error = await check_response_error(response)
                if error is None:
                    logger.debug(
                        "Request succeeded",
                        method=current.method,
                        url=str(url),
                        status_code=response.status_code,
                        attempts=attempt + 1,
                    )
                    return await self._decode(response, into)

                if not self._should_retry(error, attempt):
                    logger.info(
                        "Request failed with API error",
                        method=current.method,
                        url=str(url),
                        status_code=error.status_code,
                        error_type=error.error_type,
                        attempts=attempt + 1,
                        retries_exhausted=is_rate_limit_error(error) and attempt >= max_retries,
                    )
                    raise error

                delay = self.backoff.delay(attempt)
            finally:
                await response.aclose()

            retries_total.labels(status=str(error.status_code)).inc()
            logger.warning(
                "Rate limited, retrying after backoff",
                method=current.method,
                url=str(url),
                status_code=error.status_code,
                attempt=attempt,
                next_attempt=attempt + 1,
                max_retries=max_retries,
                delay_seconds=round(delay, 3),
            )
            # Cancellation during the wait propagates from here; no further attempt.
            await asyncio.sleep(delay)

        # The final attempt always returns or raises inside the loop.
        raise MoneytreeError("Request failed after all retries")

    def _should_retry(self, error: APIError, attempt: int) -> bool:
        return (
            is_rate_limit_error(error)
            and self.retry_config.enabled
            and attempt < self.retry_config.max_retries
        )

    async def _decode(self, response: httpx.Response, into: Any) -> Any:
        if into is None:
            return None

        try:
            if not isinstance(into, type) and hasattr(into, "write"):
                async for chunk in response.aiter_bytes():
                    into.write(chunk)
                return None

            data = await response.aread()
        except httpx.RequestError as e:
            _raise_if_cancelling(e)
            raise self._transport_error(response.request, e) from e

        # Empty 200/204 bodies are not decode failures.
        if not data.strip():
            return None
        return self.codec.decode(data, into)

    def _transport_error(self, request: httpx.Request, error: httpx.RequestError) -> TransportError:
        url = sanitize_request_error(error) or sanitize_url(request.url)
        detail = sanitize_text(str(error)) or type(error).__name__
        logger.error(
            "Transport error",
            method=request.method,
            url=str(url),
            error=detail,
            error_type=type(error).__name__,
        )
        return TransportError(
            f"{request.method} {url}: {detail}",
            method=request.method,
            url=str(url),
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"max_retries={self.retry_config.max_retries}, "
            f"base_delay={self.retry_config.base_delay}s, "
            f"enabled={self.retry_config.enabled})"
        )


def _raise_if_cancelling(error: BaseException) -> None:
    """Prefer a pending cancellation of the current task over ``error``."""
    task = asyncio.current_task()
    if task is not None and task.cancelling():
        raise asyncio.CancelledError() from error


def _outcome_for(error: BaseException) -> str:
    if isinstance(error, APIError):
        return "api_error"
    if isinstance(error, TransportError):
        return "transport_error"
    if isinstance(error, ResponseDecodeError):
        return "decode_error"
    if isinstance(error, (asyncio.CancelledError, TimeoutError)):
        return "cancelled"
    return "error"
