"""Byte stream capabilities consumed by the framing layer.

The framing functions accept any object that satisfies ``ByteReader`` and/or
``ByteWriter``: binary files, ``io.BytesIO``, pipes opened in binary mode,
``socket.socket.makefile("rwb")``, or the in-memory pipe from
``packetio.memory``. Raw sockets are adapted with ``SocketStream``.

Errors raised by the stream itself (``OSError`` and subclasses such as
``TimeoutError`` or ``BrokenPipeError``) are wrapped in ``TransportError``.
"""

from __future__ import annotations

import socket
from typing import Optional, Protocol, Union, runtime_checkable

from .exceptions import TransportError

BytesLike = Union[bytes, bytearray, memoryview]


@runtime_checkable
class ByteReader(Protocol):
    """Anything with a blocking ``read(n)``.

    ``read`` may return fewer than ``n`` bytes; an empty result means the
    stream has ended.
    """

    def read(self, n: int, /) -> Optional[bytes]: ...


@runtime_checkable
class ByteWriter(Protocol):
    """Anything with a blocking ``write(data)``.

    ``write`` may accept only part of the data and report the count, or
    return ``None`` when it always consumes everything (buffered files).
    """

    def write(self, data: bytes, /) -> Optional[int]: ...


class ByteStream(ByteReader, ByteWriter, Protocol):
    """A duplex stream."""


class SocketStream:
    """Adapt a connected ``socket.socket`` to ``ByteStream``.

    The adapter keeps no buffer; the socket's own timeout applies to every
    read and write.

    Example:
        ```python
        import socket
        from packetio import SocketStream, send_packet

        sock = socket.create_connection(("127.0.0.1", 9000))
        send_packet(SocketStream(sock), {"id": 42})
        ```
    """

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock

    def read(self, n: int) -> bytes:
        return self.sock.recv(n)

    def write(self, data: bytes) -> int:
        self.sock.sendall(data)
        return len(data)

    def close(self) -> None:
        self.sock.close()

    def __repr__(self) -> str:
        return f"SocketStream({self.sock!r})"


def read_exact(reader: ByteReader, n: int) -> bytes:
    """Read ``n`` bytes, blocking until they arrive or the stream ends.

    Args:
        reader: Stream to read from
        n: Number of bytes wanted

    Returns:
        Exactly ``n`` bytes, or fewer if the stream ended first. Callers
        decide what a short result means.

    Raises:
        TransportError: If the stream raises, or is non-blocking and has no data
    """
    chunks = bytearray()
    while len(chunks) < n:
        try:
            chunk = reader.read(n - len(chunks))
        except OSError as exc:
            raise TransportError(
                f"Read failed after {len(chunks)} of {n} bytes: {exc}", len(chunks)
            ) from exc

        if chunk is None:
            raise TransportError("Stream is non-blocking and has no data available", len(chunks))
        if not chunk:
            break

        chunks.extend(chunk)

    return bytes(chunks)


def write_all(writer: ByteWriter, data: BytesLike) -> None:
    """Write every byte of ``data``, retrying partial writes.

    Args:
        writer: Stream to write to
        data: Bytes to write

    Raises:
        TransportError: If the stream raises or stops accepting data. Some
            bytes may already have been written.
    """
    view = memoryview(data)
    written = 0
    while written < len(view):
        try:
            count = writer.write(view[written:])
        except OSError as exc:
            raise TransportError(
                f"Write failed after {written} of {len(view)} bytes: {exc}"
            ) from exc

        if count is None:
            # Buffered writers consume everything or raise
            return
        if count <= 0:
            raise TransportError(f"Stream accepted no data after {written} of {len(view)} bytes")

        written += count


def flush(writer: ByteWriter) -> None:
    """Flush ``writer`` if it buffers, wrapping transport errors."""
    flush_method = getattr(writer, "flush", None)
    if flush_method is None:
        return
    try:
        flush_method()
    except OSError as exc:
        raise TransportError(f"Flush failed: {exc}") from exc
