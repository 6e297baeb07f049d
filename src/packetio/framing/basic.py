"""In-memory framing utilities.

This module frames and unframes complete byte buffers, for callers that
manage their own I/O (datagram transports, captured streams, event loops
that hand over arbitrary chunks).
"""

from __future__ import annotations

from typing import Optional

from ..exceptions import FramingError, FrameTooLarge, TruncatedFrame
from .config import DEFAULT_CONFIG, FramingConfig
from .prefix import encode_length, parse_length


def frame_message(payload: bytes, *, config: Optional[FramingConfig] = None) -> bytes:
    """Prefix a payload with its length.

    The frame structure is:
    - [Length (prefix_width bytes)] [Payload]

    Args:
        payload: Encoded message body
        config: Framing parameters (defaults to 8-byte little-endian)

    Returns:
        Framed message

    Raises:
        FrameTooLarge: If payload exceeds ``config.max_length``

    Example:
        >>> framed = frame_message(b"Hello")
        >>> len(framed)
        13
    """
    return encode_length(len(payload), config=config) + bytes(payload)


def unframe_message(framed: bytes, *, config: Optional[FramingConfig] = None) -> bytes:
    """Strip the length prefix from exactly one frame.

    Args:
        framed: A complete frame, nothing more
        config: Framing parameters (defaults to 8-byte little-endian)

    Returns:
        Frame body

    Raises:
        TruncatedFrame: If the buffer holds fewer body bytes than announced
        FramingError: If the buffer is shorter than a prefix or has trailing bytes
        FrameTooLarge: If the announced length exceeds ``config.max_length``

    Example:
        >>> unframe_message(frame_message(b"Hello"))
        b'Hello'
    """
    config = config if config is not None else DEFAULT_CONFIG
    width = config.prefix_width

    if len(framed) < width:
        raise FramingError(f"Frame too short for length prefix: {len(framed)} bytes")

    length = parse_length(framed[:width], config=config)
    if length > config.max_length:
        raise FrameTooLarge(length, config.max_length)

    body = framed[width:]
    if len(body) < length:
        raise TruncatedFrame(length, len(body))
    if len(body) > length:
        raise FramingError(
            f"Length mismatch: prefix says {length} bytes, but got {len(body)} bytes"
        )

    return bytes(body)


def split_frames(
    buffer: bytes, *, config: Optional[FramingConfig] = None
) -> tuple[list[bytes], bytes]:
    """Extract every complete frame from the front of a buffer.

    Feed the returned remainder back in, with more data appended, on the
    next call.

    Args:
        buffer: Bytes received so far
        config: Framing parameters (defaults to 8-byte little-endian)

    Returns:
        Tuple of (complete frame bodies in order, unconsumed remainder)

    Raises:
        FrameTooLarge: If a prefix announces more than ``config.max_length``

    Example:
        >>> data = frame_message(b"a") + frame_message(b"bc")[:5]
        >>> split_frames(data)
        ([b'a'], b'\\x02\\x00\\x00\\x00\\x00')
    """
    config = config if config is not None else DEFAULT_CONFIG
    width = config.prefix_width
    view = memoryview(buffer)
    bodies: list[bytes] = []
    offset = 0

    while len(view) - offset >= width:
        length = parse_length(bytes(view[offset : offset + width]), config=config)
        if length > config.max_length:
            raise FrameTooLarge(length, config.max_length)

        start = offset + width
        end = start + length
        if end > len(view):
            break

        bodies.append(bytes(view[start:end]))
        offset = end

    return bodies, bytes(view[offset:])
