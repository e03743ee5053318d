"""
Unit tests for request cloning.
"""

import httpx
import pytest

from moneytree_link.http.cloning import clone_request


@pytest.mark.asyncio
async def test_clone_copies_structure_and_body():
    original = httpx.Request(
        "POST",
        "https://x.test/link/transactions.json?page=2",
        headers={"Authorization": "Bearer token", "Content-Type": "application/json"},
        content=b'{"amount":1500}',
        extensions={"timeout": {"connect": 1.0}},
    )

    clone = clone_request(original, original.content)

    assert clone is not original
    assert clone.method == "POST"
    assert clone.url == original.url
    assert clone.headers["Authorization"] == "Bearer token"
    assert clone.headers["Content-Type"] == "application/json"
    assert clone.extensions == original.extensions
    assert await clone.aread() == b'{"amount":1500}'


@pytest.mark.asyncio
async def test_clones_are_independent():
    original = httpx.Request("PUT", "https://x.test/link/profile.json", content=b"payload")

    first = clone_request(original, b"payload")
    second = clone_request(original, b"payload")
    first.headers["X-Attempt"] = "1"

    assert "X-Attempt" not in original.headers
    assert "X-Attempt" not in second.headers
    assert first.stream is not second.stream
    assert await first.aread() == await second.aread() == b"payload"


@pytest.mark.asyncio
async def test_clone_of_bodyless_request():
    original = httpx.Request("GET", "https://x.test/link/institutions.json")

    clone = clone_request(original, b"")

    assert await clone.aread() == b""
