"""
Pluggable JSON codec for request and response payloads.

The executor never inspects payload shapes itself; it hands bytes to a codec.
The default codec uses pydantic so response types can be plain pydantic
models, dataclasses, TypedDicts or builtin containers.
"""

from functools import lru_cache
from typing import Any, Protocol

import pydantic_core
from pydantic import TypeAdapter, ValidationError

from moneytree_link.http.exceptions import ResponseDecodeError


class Codec(Protocol):
    """
    Protocol for payload codecs.

    ``encode`` must not HTML-escape text fields; ``decode`` raises
    ResponseDecodeError when the payload does not match ``into``.
    """

    content_type: str

    def encode(self, value: Any) -> bytes:
        ...

    def decode(self, data: bytes, into: Any) -> Any:
        ...


@lru_cache(maxsize=256)
def _adapter(into: Any) -> TypeAdapter:
    return TypeAdapter(into)


class PydanticJSONCodec:
    """JSON codec backed by pydantic-core."""

    content_type = "application/json"

    def __init__(self, by_alias: bool = True, exclude_none: bool = False):
        self.by_alias = by_alias
        self.exclude_none = exclude_none

    def encode(self, value: Any) -> bytes:
        # pydantic-core emits '&', '<' and '>' verbatim and never escapes non-ASCII
        return pydantic_core.to_json(
            value, by_alias=self.by_alias, exclude_none=self.exclude_none
        )

    def decode(self, data: bytes, into: Any) -> Any:
        try:
            return _adapter(into).validate_json(data)
        except ValidationError as e:
            raise ResponseDecodeError(
                f"unable to decode response into {getattr(into, '__name__', into)!s}",
                details={"errors": e.errors(include_url=False), "body_length": len(data)},
            ) from e

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(by_alias={self.by_alias})"
