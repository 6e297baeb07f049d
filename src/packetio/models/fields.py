"""Field helpers for fixed-width integers.

``BinaryEncoding`` writes every integer as a varint; bounds decide whether it
is unsigned or zigzag-signed and reject out-of-range values on both ends.
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo


def _check_bits(bits: int) -> None:
    if bits not in (8, 16, 32, 64, 128):
        raise ValueError(f"bits must be one of 8, 16, 32, 64, 128, got {bits}")


def UInt(bits: int = 64, **kwargs: Any) -> FieldInfo:
    """Create an unsigned integer field of the given width.

    Args:
        bits: Integer width (8, 16, 32, 64 or 128)
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo with ``ge=0`` and ``le=2**bits - 1``

    Example:
        >>> class Message(Packet):
        ...     id: int = UInt(32)
    """
    _check_bits(bits)
    return cast(FieldInfo, Field(ge=0, le=(1 << bits) - 1, **kwargs))


def Int(bits: int = 64, **kwargs: Any) -> FieldInfo:
    """Create a signed integer field of the given width.

    Args:
        bits: Integer width (8, 16, 32, 64 or 128)
        **kwargs: Additional Field() arguments

    Returns:
        Pydantic FieldInfo with two's complement bounds for ``bits``

    Example:
        >>> class Message(Packet):
        ...     offset: int = Int(16)
    """
    _check_bits(bits)
    return cast(FieldInfo, Field(ge=-(1 << (bits - 1)), le=(1 << (bits - 1)) - 1, **kwargs))
