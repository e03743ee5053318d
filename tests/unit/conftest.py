"""Unit test fixtures (fake transport and executor factories).

Provides a scripted httpx transport so the executor can be exercised without
network access. The fake server records every request it receives and counts
response-body opens and closes, which is how resource safety is asserted.
"""

import json
import random
from typing import Any

import httpx
import pytest

from moneytree_link.http.executor import Executor
from moneytree_link.retry.backoff import BackoffPolicy
from moneytree_link.retry.config import RetryConfig

BASE_URL = "https://jp-api-staging.getmoneytree.com/"


class TrackingStream(httpx.AsyncByteStream):
    """Response body stream reporting its close to the owning server."""

    def __init__(self, content: bytes, server: "ScriptedServer"):
        self._content = content
        self._server = server

    async def __aiter__(self):
        if self._content:
            yield self._content

    async def aclose(self) -> None:
        self._server.closed += 1


class ScriptedServer:
    """
    httpx.MockTransport handler replaying a script of responses.

    Script items are ``(status_code, body)`` tuples (body as str, bytes or a
    JSON-serializable value) or exception instances, which are raised as
    transport failures.
    """

    def __init__(self, script: list[Any]):
        self.script = list(script)
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []
        self.opened = 0
        self.closed = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(request.content)

        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, BaseException):
            raise item

        status_code, body = item
        headers = {}
        if isinstance(body, str):
            body = body.encode("utf-8")
        elif not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        self.opened += 1
        return httpx.Response(
            status_code,
            headers=headers,
            stream=TrackingStream(body, self),
        )

    @property
    def attempts(self) -> int:
        return len(self.requests)


@pytest.fixture
def scripted_server():
    """Factory fixture for ScriptedServer.

    Usage:
        def test_something(scripted_server):
            server = scripted_server([(429, ""), (200, {"ok": True})])

    The last script item repeats once the script is exhausted.
    """
    def _create(script: list[Any]) -> ScriptedServer:
        return ScriptedServer(script)

    return _create


@pytest.fixture
def make_executor():
    """Factory fixture building an Executor over a scripted server.

    Usage:
        def test_something(scripted_server, make_executor):
            executor = make_executor(server, RetryConfig(max_retries=1))
    """
    def _create(
        server: ScriptedServer,
        retry_config: RetryConfig | None = None,
        rng: random.Random | None = None,
    ) -> Executor:
        retry_config = retry_config or RetryConfig()
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(server))
        return Executor(
            http_client,
            retry_config,
            BackoffPolicy(retry_config.base_delay, rng or random.Random(42)),
        )

    return _create


@pytest.fixture
def base_url() -> str:
    return BASE_URL
