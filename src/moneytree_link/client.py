"""
Moneytree LINK API client.

MoneytreeClient wires the request builder and the resilient executor
together and exposes the endpoint methods. Construction follows an
options pattern: a ClientConfig value is created with defaults for the
account, then each ClientOption (a pure ClientConfig -> ClientConfig
function) is applied in order.

Usage:
    async with MoneytreeClient(
        "jp-api-staging",
        with_retry_config(RetryConfig(max_retries=5, base_delay=5.0)),
    ) as client:
        details = await client.get_account_balance_details(token, "account_key_123")
"""

import random
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx
import structlog

from moneytree_link.config import Settings
from moneytree_link.http.builder import RequestBuilder, RequestOption, with_bearer_token
from moneytree_link.http.codec import Codec, PydanticJSONCodec
from moneytree_link.http.executor import Executor
from moneytree_link.models.accounts import AccountBalanceDetails
from moneytree_link.models.institutions import Institutions
from moneytree_link.retry.backoff import BackoffPolicy
from moneytree_link.retry.config import RetryConfig

logger = structlog.get_logger(__name__)


def default_timeout() -> httpx.Timeout:
    return httpx.Timeout(30.0, connect=5.0)


def default_limits() -> httpx.Limits:
    return httpx.Limits(
        max_connections=100,
        max_keepalive_connections=100,
        keepalive_expiry=90.0,
    )


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable client configuration.

    Attributes:
        base_url: API base URL; must end with '/'
        retry_config: Retry settings for HTTP 429
        http_client: Injected transport; when None the client creates and owns one
        timeout: Timeout for the owned http client
        limits: Connection pool limits for the owned http client
        codec: Payload codec (defaults to PydanticJSONCodec)
        rng: Random source for backoff jitter
    """

    base_url: str
    retry_config: RetryConfig = field(default_factory=RetryConfig)
    http_client: Optional[httpx.AsyncClient] = None
    timeout: httpx.Timeout = field(default_factory=default_timeout)
    limits: httpx.Limits = field(default_factory=default_limits)
    codec: Optional[Codec] = None
    rng: Optional[random.Random] = None


ClientOption = Callable[[ClientConfig], ClientConfig]


def with_retry_config(retry_config: RetryConfig) -> ClientOption:
    """
    Customize retry behaviour for rate-limited requests.

    Reference: https://docs.link.getmoneytree.com/docs/faq-rate-limiting
    """
    return lambda config: replace(config, retry_config=retry_config)


def with_base_url(base_url: str) -> ClientOption:
    return lambda config: replace(config, base_url=base_url)


def with_http_client(http_client: httpx.AsyncClient) -> ClientOption:
    """Use a caller-owned httpx client; the caller is responsible for closing it."""
    return lambda config: replace(config, http_client=http_client)


def with_timeout(timeout: httpx.Timeout) -> ClientOption:
    return lambda config: replace(config, timeout=timeout)


def with_limits(limits: httpx.Limits) -> ClientOption:
    return lambda config: replace(config, limits=limits)


def with_codec(codec: Codec) -> ClientOption:
    return lambda config: replace(config, codec=codec)


def with_random(rng: random.Random) -> ClientOption:
    return lambda config: replace(config, rng=rng)


def validate_date_format(date: str) -> None:
    """Raise ValueError unless ``date`` is formatted as YYYY-MM-DD."""
    try:
        datetime.strptime(date, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(
            f"date must be in format YYYY-MM-DD (e.g., 2020-11-08), got: {date}"
        ) from e


class MoneytreeClient:
    """
    Async client for the Moneytree LINK API.

    All endpoint methods build a request with ``builder`` and run it through
    ``executor``; callers can do the same for endpoints not wrapped here.

    Attributes:
        config: Resolved ClientConfig
        http_client: httpx client used for transport
        builder: RequestBuilder bound to the base URL
        executor: Executor applying the retry policy
    """

    def __init__(self, account_name: str, *options: ClientOption):
        if not account_name:
            raise ValueError("account name is required")

        config = ClientConfig(base_url=f"https://{account_name}.getmoneytree.com/")
        for option in options:
            config = option(config)

        self.account_name = account_name
        self.config = config
        self._owns_http_client = config.http_client is None
        self.http_client = config.http_client or httpx.AsyncClient(
            timeout=config.timeout,
            limits=config.limits,
        )

        codec = config.codec or PydanticJSONCodec()
        self.builder = RequestBuilder(config.base_url, codec)
        self.executor = Executor(
            self.http_client,
            config.retry_config,
            BackoffPolicy(config.retry_config.base_delay, config.rng),
            codec,
        )

        logger.info(
            "Moneytree client initialized",
            base_url=config.base_url,
            max_retries=config.retry_config.max_retries,
            base_delay=config.retry_config.base_delay,
            retry_enabled=config.retry_config.enabled,
            owns_http_client=self._owns_http_client,
        )

    @classmethod
    def from_settings(cls, settings: Settings, *options: ClientOption) -> "MoneytreeClient":
        """Build a client from environment-backed Settings; ``options`` apply last."""
        settings_options: list[ClientOption] = [
            with_retry_config(settings.retry_config()),
            with_timeout(httpx.Timeout(settings.HTTP_TIMEOUT, connect=settings.HTTP_CONNECT_TIMEOUT)),
            with_limits(
                httpx.Limits(
                    max_connections=settings.HTTP_MAX_CONNECTIONS,
                    max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS,
                    keepalive_expiry=settings.HTTP_KEEPALIVE_EXPIRY,
                )
            ),
        ]
        if settings.MONEYTREE_BASE_URL:
            settings_options.append(with_base_url(settings.MONEYTREE_BASE_URL))
        return cls(settings.MONEYTREE_ACCOUNT_NAME, *settings_options, *options)

    def new_request(
        self, method: str, path: str, body: Any = None, *options: RequestOption
    ) -> httpx.Request:
        return self.builder.new_request(method, path, body, *options)

    def new_form_request(self, path: str, body: Any = None, *options: RequestOption) -> httpx.Request:
        return self.builder.new_form_request(path, body, *options)

    async def do(self, request: httpx.Request, into: Any = None) -> Any:
        return await self.executor.do(request, into)

    async def get_account_balance_details(
        self, access_token: str, account_id: str
    ) -> AccountBalanceDetails:
        """
        Retrieve detailed balance information for an account.

        Requires the ``accounts_read`` OAuth scope.
        Reference: https://docs.link.getmoneytree.com/reference/get-link-account-balance-details-1
        """
        if not access_token:
            raise ValueError("access token is required")
        if not account_id:
            raise ValueError("account ID is required")

        path = f"link/accounts/{quote(account_id, safe='')}/balances/details.json"
        request = self.new_request("GET", path, None, with_bearer_token(access_token))
        result = await self.do(request, AccountBalanceDetails)
        return result or AccountBalanceDetails()

    async def get_institutions(
        self, access_token: str | None = None, since: str | None = None
    ) -> Institutions:
        """
        Retrieve the list of financial institutions.

        Institutions in every state are returned (maintenance, merged banks, ...);
        check ``status`` and ``status_reason``. Pass ``since`` (YYYY-MM-DD) to
        fetch only institutions updated after that date.
        Reference: https://docs.link.getmoneytree.com/reference/get-institutions
        """
        if since is not None:
            validate_date_format(since)

        options: list[RequestOption] = []
        if access_token:
            options.append(with_bearer_token(access_token))

        path = "link/institutions.json"
        if since is not None:
            path = f"{path}?since={quote(since)}"

        request = self.new_request("GET", path, None, *options)
        result = await self.do(request, Institutions)
        return result or Institutions()

    async def close(self) -> None:
        """Close the http client if this client created it."""
        if self._owns_http_client and not self.http_client.is_closed:
            await self.http_client.aclose()
            logger.debug("Closed Moneytree http client")

    async def __aenter__(self) -> "MoneytreeClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.config.base_url})"
