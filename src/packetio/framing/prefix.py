"""Length prefix codec shared by the frame writer and reader."""

from __future__ import annotations

from typing import Optional

from ..exceptions import FramingError, FrameTooLarge
from .config import DEFAULT_CONFIG, FramingConfig


def encode_length(length: int, *, config: Optional[FramingConfig] = None) -> bytes:
    """Encode a body length as a fixed-width prefix.

    Args:
        length: Number of body bytes that follow the prefix
        config: Framing parameters (defaults to 8-byte little-endian)

    Returns:
        ``config.prefix_width`` bytes

    Raises:
        ValueError: If length is negative
        FrameTooLarge: If length exceeds ``config.max_length``

    Example:
        >>> encode_length(5)
        b'\\x05\\x00\\x00\\x00\\x00\\x00\\x00\\x00'
    """
    config = config if config is not None else DEFAULT_CONFIG
    if length < 0:
        raise ValueError(f"Frame length must be non-negative, got {length}")
    if length > config.max_length:
        raise FrameTooLarge(length, config.max_length)
    return length.to_bytes(config.prefix_width, config.byteorder)


def parse_length(prefix: bytes, *, config: Optional[FramingConfig] = None) -> int:
    """Decode a fixed-width length prefix.

    The value is not checked against ``max_frame_size``; callers that are
    about to allocate a body do that themselves.

    Args:
        prefix: Exactly ``config.prefix_width`` bytes
        config: Framing parameters (defaults to 8-byte little-endian)

    Returns:
        Body length

    Raises:
        FramingError: If prefix has the wrong size
    """
    config = config if config is not None else DEFAULT_CONFIG
    if len(prefix) != config.prefix_width:
        raise FramingError(
            f"Length prefix must be {config.prefix_width} bytes, got {len(prefix)} bytes"
        )
    return int.from_bytes(prefix, config.byteorder)


def frame_size(payload_length: int, *, config: Optional[FramingConfig] = None) -> int:
    """Total bytes a frame occupies on the wire for a body of ``payload_length`` bytes."""
    config = config if config is not None else DEFAULT_CONFIG
    return config.prefix_width + payload_length
