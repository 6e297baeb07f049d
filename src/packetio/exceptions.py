"""Exception hierarchy for packetio.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from PacketioError for easy catching of any packetio-specific error.
"""

from __future__ import annotations


class PacketioError(Exception):
    """Base exception for all packetio errors."""

    pass


class SchemaError(PacketioError):
    """Raised when a type cannot be described by the binary encoding.

    Examples:
        - Unsupported field annotation (e.g. ``object``, unions of several types)
        - Invalid integer bounds (ge > le)
        - Empty enum
    """

    pass


class EncodingError(PacketioError):
    """Raised when a value cannot be turned into bytes.

    Nothing is written to the stream when this is raised.

    Examples:
        - Value contains a type the encoding does not support
        - Integer out of bounds for an unsigned field
        - Message exceeds packet_max_bytes
    """

    pass


class DecodingError(PacketioError):
    """Raised when a frame body is not a valid encoding of the expected type.

    Examples:
        - Corrupted data
        - Trailing bytes after the value
        - Receiver expecting an incompatible type
    """

    pass


class FramingError(PacketioError):
    """Raised when a frame is structurally invalid.

    Examples:
        - Length prefix inconsistent with the buffer
        - Trailing bytes after an in-memory frame
    """

    pass


class FrameTooLarge(FramingError):
    """Raised when a frame body exceeds the configured limit.

    On the sending side this happens before any byte is written. On the
    receiving side the prefix has already been consumed, so the stream is
    no longer positioned at a frame boundary.
    """

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(f"Frame body of {length} bytes exceeds limit of {limit} bytes")
        self.length = length
        self.limit = limit


class TruncatedFrame(FramingError):
    """Raised when a stream ends after a length prefix but before the body completes."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            f"Truncated frame: prefix announced {expected} bytes, "
            f"stream ended after {received} bytes"
        )
        self.expected = expected
        self.received = received


class EndOfStream(PacketioError):
    """Raised when a stream ends before a complete length prefix arrives.

    ``bytes_read`` is 0 for a clean close between frames.
    """

    def __init__(self, bytes_read: int = 0) -> None:
        if bytes_read:
            message = f"End of stream after {bytes_read} prefix bytes"
        else:
            message = "End of stream"
        super().__init__(message)
        self.bytes_read = bytes_read


class TransportError(PacketioError):
    """Raised when the underlying stream fails.

    The original ``OSError`` is available as ``__cause__``. After a failed
    write, part of the frame may already have reached the transport.
    ``bytes_read`` counts the bytes a failed read delivered before the error.
    """

    def __init__(self, message: str, bytes_read: int = 0) -> None:
        super().__init__(message)
        self.bytes_read = bytes_read


# Alias matching the wire protocol's error taxonomy
IoError = TransportError
