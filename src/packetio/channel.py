"""Convenience wrapper binding a stream to an encoding and framing config."""

from __future__ import annotations

from typing import Any, Iterator, Optional, TypeVar

from .codec import DEFAULT_ENCODING, Encoding
from .framing.config import DEFAULT_CONFIG, FramingConfig
from .framing.stream import iter_packets, read_frame, recv_packet, send_packet, write_frame
from .streams import ByteStream

T = TypeVar("T")


class PacketChannel:
    """Send and receive framed values on one duplex stream.

    The channel holds references only; every call delegates to the
    stateless functions in ``packetio.framing``. The stream stays owned by
    the caller and is not closed by the channel.

    Attributes:
        stream: Underlying duplex stream
        encoding: Encoding for frame bodies
        config: Framing parameters

    Examples:
        ```python
        import socket
        from packetio import JsonEncoding, PacketChannel, SocketStream

        sock = socket.create_connection(("127.0.0.1", 9000))
        channel = PacketChannel(SocketStream(sock), encoding=JsonEncoding())

        channel.send({"id": 42, "name": "abc"})
        reply = channel.recv(dict)

        for message in channel.receive_all(dict):
            print(message)
        ```
    """

    def __init__(
        self,
        stream: ByteStream,
        *,
        encoding: Optional[Encoding] = None,
        config: Optional[FramingConfig] = None,
    ) -> None:
        self.stream = stream
        self.encoding = encoding if encoding is not None else DEFAULT_ENCODING
        self.config = config if config is not None else DEFAULT_CONFIG

    def send(self, value: Any) -> None:
        """Encode and send one value. See ``packetio.send_packet``."""
        send_packet(self.stream, value, encoding=self.encoding, config=self.config)

    def recv(self, expected: type[T]) -> T:
        """Receive and decode one value. See ``packetio.recv_packet``."""
        return recv_packet(self.stream, expected, encoding=self.encoding, config=self.config)

    def receive_all(self, expected: type[T]) -> Iterator[T]:
        """Yield values until the peer closes cleanly."""
        return iter_packets(self.stream, expected, encoding=self.encoding, config=self.config)

    def send_frame(self, payload: bytes) -> None:
        """Send an already-encoded body."""
        write_frame(self.stream, payload, config=self.config)

    def recv_frame(self) -> bytes:
        """Receive a raw body without decoding it."""
        return read_frame(self.stream, config=self.config)

    def __repr__(self) -> str:
        return (
            f"PacketChannel(stream={self.stream!r}, encoding={self.encoding!r}, "
            f"config={self.config!r})"
        )
