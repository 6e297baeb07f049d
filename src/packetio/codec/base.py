"""Encoding strategy interface."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Encoding(Protocol):
    """Converts application values to and from frame bodies.

    Implementations must be pure: no I/O and no state shared between calls.

    ``encode`` raises ``EncodingError`` and ``decode`` raises
    ``DecodingError``; any other exception type escaping an encoding is a bug
    in that encoding.
    """

    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes, expected: type[T]) -> T: ...
