"""Frame writer and reader over blocking byte streams.

Each call is self-contained: it borrows the stream, moves exactly one frame,
and keeps nothing afterwards. A stream must not be written by two threads at
once (or read by two threads at once); interleaved bytes corrupt framing.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, TypeVar

from ..codec import DEFAULT_ENCODING, Encoding
from ..exceptions import EndOfStream, FrameTooLarge, TransportError, TruncatedFrame
from ..streams import ByteReader, ByteWriter, flush, read_exact, write_all
from .config import DEFAULT_CONFIG, FramingConfig
from .prefix import encode_length, parse_length

logger = logging.getLogger(__name__)

T = TypeVar("T")


def write_frame(
    stream: ByteWriter, payload: bytes, *, config: Optional[FramingConfig] = None
) -> None:
    """Write one frame carrying an already-encoded payload.

    Prefix and payload are handed to the stream as a single buffer.

    Args:
        stream: Writable stream
        payload: Frame body
        config: Framing parameters (defaults to 8-byte little-endian)

    Raises:
        FrameTooLarge: If payload exceeds ``config.max_length``; nothing is written
        TransportError: If the stream fails. Part of the frame may have been
            written, leaving the stream unusable for further frames.
    """
    config = config if config is not None else DEFAULT_CONFIG
    prefix = encode_length(len(payload), config=config)

    write_all(stream, prefix + bytes(payload))
    flush(stream)
    logger.debug("Wrote frame with %d byte body", len(payload))


def read_frame(stream: ByteReader, *, config: Optional[FramingConfig] = None) -> bytes:
    """Read one frame and return its body.

    Args:
        stream: Readable stream
        config: Framing parameters (defaults to 8-byte little-endian)

    Returns:
        Frame body; the stream is left at the start of the next frame

    Raises:
        EndOfStream: If the stream ends before a complete prefix
        FrameTooLarge: If the prefix announces more than ``config.max_length``
            bytes; the body is left unread
        TruncatedFrame: If the stream ends or fails before the body completes;
            a failure is chained as ``__cause__``
        TransportError: If the stream fails before a prefix is complete
    """
    config = config if config is not None else DEFAULT_CONFIG

    prefix = read_exact(stream, config.prefix_width)
    if len(prefix) < config.prefix_width:
        if prefix:
            logger.warning(
                "Stream ended inside a length prefix (%d of %d bytes)",
                len(prefix),
                config.prefix_width,
            )
        else:
            logger.debug("End of stream")
        raise EndOfStream(len(prefix))

    length = parse_length(prefix, config=config)
    if length > config.max_length:
        logger.warning("Rejecting frame of %d bytes (limit %d)", length, config.max_length)
        raise FrameTooLarge(length, config.max_length)

    try:
        body = read_exact(stream, length)
    except TransportError as exc:
        logger.warning(
            "Transport failed inside a frame: expected %d bytes, got %d", length, exc.bytes_read
        )
        raise TruncatedFrame(length, exc.bytes_read) from exc

    if len(body) < length:
        logger.warning("Truncated frame: expected %d bytes, got %d", length, len(body))
        raise TruncatedFrame(length, len(body))

    logger.debug("Read frame with %d byte body", length)
    return body


def send_packet(
    stream: ByteWriter,
    value: Any,
    *,
    encoding: Optional[Encoding] = None,
    config: Optional[FramingConfig] = None,
) -> None:
    """Encode a value and write it as one frame.

    Args:
        stream: Writable stream
        value: Value to send
        encoding: Encoding for the body (defaults to ``BinaryEncoding``)
        config: Framing parameters (defaults to 8-byte little-endian)

    Raises:
        EncodingError: If the value cannot be encoded; nothing is written
        FrameTooLarge: If the encoded value exceeds ``config.max_length``;
            nothing is written
        TransportError: If the stream fails

    Example:
        ```python
        import io
        from packetio import send_packet, recv_packet, JsonEncoding

        buffer = io.BytesIO()
        send_packet(buffer, {"id": 42, "name": "abc"}, encoding=JsonEncoding())
        buffer.seek(0)
        recv_packet(buffer, dict, encoding=JsonEncoding())
        ```
    """
    encoding = encoding if encoding is not None else DEFAULT_ENCODING
    write_frame(stream, encoding.encode(value), config=config)


def recv_packet(
    stream: ByteReader,
    expected: type[T],
    *,
    encoding: Optional[Encoding] = None,
    config: Optional[FramingConfig] = None,
) -> T:
    """Read one frame and decode its body as ``expected``.

    Blocks until a whole frame has arrived.

    Args:
        stream: Readable stream
        expected: Type to decode the body into
        encoding: Encoding for the body (defaults to ``BinaryEncoding``)
        config: Framing parameters (defaults to 8-byte little-endian)

    Returns:
        Decoded value

    Raises:
        EndOfStream: If the peer closed the stream between frames
        TruncatedFrame: If the stream ended mid-frame
        FrameTooLarge: If the prefix announces more than ``config.max_length`` bytes
        DecodingError: If the body is not a valid ``expected``
        TransportError: If the stream fails
    """
    encoding = encoding if encoding is not None else DEFAULT_ENCODING
    return encoding.decode(read_frame(stream, config=config), expected)


def iter_packets(
    stream: ByteReader,
    expected: type[T],
    *,
    encoding: Optional[Encoding] = None,
    config: Optional[FramingConfig] = None,
) -> Iterator[T]:
    """Yield decoded values until the stream closes cleanly.

    Only a clean ``EndOfStream`` (zero prefix bytes) ends the iteration;
    every other error, including a stream that stops inside a prefix, is
    raised to the caller.

    Example:
        ```python
        for reading in iter_packets(stream, Reading):
            handle(reading)
        ```
    """
    while True:
        try:
            value = recv_packet(stream, expected, encoding=encoding, config=config)
        except EndOfStream as e:
            if e.bytes_read:
                raise
            return
        yield value
