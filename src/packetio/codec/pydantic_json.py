"""JSON encoding backed by pydantic.

Any type pydantic can validate works as ``expected``: models, dataclasses,
``TypedDict``, ``dict[str, Any]``, lists and scalars.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ..exceptions import DecodingError, EncodingError

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


class JsonEncoding:
    """UTF-8 JSON bodies produced with pydantic's serializer.

    Args:
        value_type: Type used to serialize values. ``None`` (default) uses
            each value's runtime type.

    Examples:
        ```python
        from packetio.codec import JsonEncoding

        encoding = JsonEncoding()
        data = encoding.encode({"id": 42, "name": "abc"})
        value = encoding.decode(data, dict)
        ```
    """

    def __init__(self, value_type: Optional[Any] = None) -> None:
        self.value_type = value_type

    def encode(self, value: Any) -> bytes:
        """Serialize ``value`` to JSON bytes.

        Raises:
            EncodingError: If pydantic cannot serialize the value
        """
        tp = self.value_type if self.value_type is not None else type(value)
        try:
            return _adapter(tp).dump_json(value)
        except (PydanticSerializationError, ValueError, TypeError) as e:
            raise EncodingError(f"Cannot encode {type(value).__name__} as JSON: {e}") from e

    def decode(self, data: bytes, expected: type[T]) -> T:
        """Parse JSON bytes and validate them as ``expected``.

        Raises:
            DecodingError: If the bytes are not valid JSON for ``expected``
        """
        try:
            adapter = _adapter(expected)
        except TypeError as e:
            raise DecodingError(f"Cannot decode into {expected!r}: {e}") from e

        try:
            return adapter.validate_json(data)
        except ValidationError as e:
            raise DecodingError(
                f"Invalid JSON body for {getattr(expected, '__name__', expected)}: {e}"
            ) from e

    def __repr__(self) -> str:
        return f"JsonEncoding(value_type={self.value_type!r})"
