"""Framing over asyncio streams.

Same wire format and error semantics as ``packetio.framing``, for
``asyncio.StreamReader`` / ``asyncio.StreamWriter`` pairs such as those
returned by ``asyncio.open_connection``.

Example:
    ```python
    import asyncio
    from packetio import JsonEncoding
    from packetio.aio import recv_packet_async, send_packet_async

    async def main():
        reader, writer = await asyncio.open_connection("127.0.0.1", 9000)
        await send_packet_async(writer, {"id": 42}, encoding=JsonEncoding())
        reply = await recv_packet_async(reader, dict, encoding=JsonEncoding())
    ```
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Optional, TypeVar

from .codec import DEFAULT_ENCODING, Encoding
from .exceptions import EndOfStream, FrameTooLarge, TransportError, TruncatedFrame
from .framing.config import DEFAULT_CONFIG, FramingConfig
from .framing.prefix import encode_length, parse_length

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def write_frame_async(
    writer: asyncio.StreamWriter, payload: bytes, *, config: Optional[FramingConfig] = None
) -> None:
    """Write one frame and wait for the transport buffer to drain.

    Raises:
        FrameTooLarge: If payload exceeds ``config.max_length``; nothing is written
        TransportError: If the connection fails
    """
    config = config if config is not None else DEFAULT_CONFIG
    prefix = encode_length(len(payload), config=config)

    try:
        writer.write(prefix + bytes(payload))
        await writer.drain()
    except OSError as exc:
        raise TransportError(f"Write failed: {exc}") from exc

    logger.debug("Wrote frame with %d byte body", len(payload))


async def read_frame_async(
    reader: asyncio.StreamReader, *, config: Optional[FramingConfig] = None
) -> bytes:
    """Read one frame and return its body.

    Raises:
        EndOfStream: If the stream ends before a complete prefix
        FrameTooLarge: If the prefix announces more than ``config.max_length`` bytes
        TruncatedFrame: If the stream ends or fails before the body completes
        TransportError: If the connection fails before a prefix is complete
    """
    config = config if config is not None else DEFAULT_CONFIG

    try:
        prefix = await reader.readexactly(config.prefix_width)
    except asyncio.IncompleteReadError as exc:
        if exc.partial:
            logger.warning(
                "Stream ended inside a length prefix (%d of %d bytes)",
                len(exc.partial),
                config.prefix_width,
            )
        raise EndOfStream(len(exc.partial)) from exc
    except OSError as exc:
        raise TransportError(f"Read failed: {exc}") from exc

    length = parse_length(prefix, config=config)
    if length > config.max_length:
        logger.warning("Rejecting frame of %d bytes (limit %d)", length, config.max_length)
        raise FrameTooLarge(length, config.max_length)

    try:
        body = await reader.readexactly(length)
    except asyncio.IncompleteReadError as exc:
        logger.warning("Truncated frame: expected %d bytes, got %d", length, len(exc.partial))
        raise TruncatedFrame(length, len(exc.partial)) from exc
    except OSError as exc:
        logger.warning("Transport failed inside a frame of %d bytes: %s", length, exc)
        raise TruncatedFrame(length, 0) from exc

    logger.debug("Read frame with %d byte body", length)
    return body


async def send_packet_async(
    writer: asyncio.StreamWriter,
    value: Any,
    *,
    encoding: Optional[Encoding] = None,
    config: Optional[FramingConfig] = None,
) -> None:
    """Encode a value and write it as one frame.

    Raises:
        EncodingError: If the value cannot be encoded; nothing is written
        FrameTooLarge: If the encoded value is too large; nothing is written
        TransportError: If the connection fails
    """
    encoding = encoding if encoding is not None else DEFAULT_ENCODING
    await write_frame_async(writer, encoding.encode(value), config=config)


async def recv_packet_async(
    reader: asyncio.StreamReader,
    expected: type[T],
    *,
    encoding: Optional[Encoding] = None,
    config: Optional[FramingConfig] = None,
) -> T:
    """Read one frame and decode it as ``expected``.

    Raises:
        EndOfStream, TruncatedFrame, FrameTooLarge, DecodingError, TransportError
    """
    encoding = encoding if encoding is not None else DEFAULT_ENCODING
    return encoding.decode(await read_frame_async(reader, config=config), expected)


async def iter_packets_async(
    reader: asyncio.StreamReader,
    expected: type[T],
    *,
    encoding: Optional[Encoding] = None,
    config: Optional[FramingConfig] = None,
) -> AsyncIterator[T]:
    """Yield decoded values until the stream closes cleanly between frames."""
    while True:
        try:
            value = await recv_packet_async(reader, expected, encoding=encoding, config=config)
        except EndOfStream as e:
            if e.bytes_read:
                raise
            return
        yield value
