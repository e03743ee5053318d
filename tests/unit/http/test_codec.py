"""
Unit tests for PydanticJSONCodec.
"""

import pytest
from pydantic import BaseModel, Field

from moneytree_link.http.codec import PydanticJSONCodec
from moneytree_link.http.exceptions import ResponseDecodeError
from moneytree_link.models.accounts import AccountBalanceDetails


class Token(BaseModel):
    access_token: str
    expires_in: int = Field(alias="expiresIn")


@pytest.fixture
def codec() -> PydanticJSONCodec:
    return PydanticJSONCodec()


def test_content_type(codec):
    assert codec.content_type == "application/json"


def test_encode_keeps_special_characters(codec):
    assert codec.encode({"q": "a&b<c>"}) == b'{"q":"a&b<c>"}'
    assert codec.encode({"name": "東京"}) == '{"name":"東京"}'.encode("utf-8")


def test_encode_model_by_alias(codec):
    token = Token(access_token="abc", expiresIn=3600)

    assert codec.encode(token) == b'{"access_token":"abc","expiresIn":3600}'


def test_decode_into_model(codec):
    data = (
        b'{"account_balances": [{"id": 1, "account_id": 10, "date": "2023-01-01",'
        b' "balance": 1000.5, "balance_in_base": 1000.5, "balance_type": 0}]}'
    )

    result = codec.decode(data, AccountBalanceDetails)

    assert len(result.account_balances) == 1
    assert result.account_balances[0].balance == 1000.5
    assert result.account_balances[0].balance_type == 0


def test_decode_into_builtin_type(codec):
    assert codec.decode(b"[1, 2, 3]", list[int]) == [1, 2, 3]


def test_decode_mismatch(codec):
    with pytest.raises(ResponseDecodeError) as exc_info:
        codec.decode(b'{"access_token": "abc"}', Token)

    assert "Token" in str(exc_info.value)
    assert exc_info.value.details["body_length"] == len(b'{"access_token": "abc"}')
    assert exc_info.value.details["errors"]


def test_decode_invalid_json(codec):
    with pytest.raises(ResponseDecodeError):
        codec.decode(b"<html>oops</html>", Token)
