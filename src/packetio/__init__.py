"""packetio: Length-Prefixed Packet Framing

A Python library for sending and receiving discrete messages over any byte
stream. Each message travels as a frame: a fixed-width length prefix
followed by exactly that many body bytes, so message boundaries survive
whatever fragmentation or coalescing the transport applies.

Key Features:
- Works over sockets, files, pipes and in-memory streams
- Pluggable body encodings (compact binary, pydantic JSON)
- Configurable prefix width, byte order and frame size limit
- Blocking and asyncio variants with the same error semantics

Quick Start:
    >>> import io
    >>> from packetio import Packet, UInt, send_packet, recv_packet
    >>>
    >>> class Hello(Packet):
    ...     id: int = UInt(32)
    ...     name: str
    >>>
    >>> stream = io.BytesIO()
    >>> send_packet(stream, Hello(id=42, name="abc"))
    >>> _ = stream.seek(0)
    >>> recv_packet(stream, Hello)
    Hello(id=42, name='abc')

Wire format:
    Frame := Prefix(8 bytes, little-endian, unsigned) || Body(Prefix bytes)
"""

from __future__ import annotations

from .channel import PacketChannel
from .codec import DEFAULT_ENCODING, BinaryEncoding, Encoding, JsonEncoding
from .exceptions import (
    DecodingError,
    EncodingError,
    EndOfStream,
    FrameTooLarge,
    FramingError,
    IoError,
    PacketioError,
    SchemaError,
    TransportError,
    TruncatedFrame,
)
from .framing import (
    DEFAULT_CONFIG,
    LEGACY_CONFIG,
    FramingConfig,
    encode_length,
    frame_message,
    frame_size,
    iter_packets,
    parse_length,
    read_frame,
    recv_packet,
    send_packet,
    split_frames,
    unframe_message,
    write_frame,
)
from .memory import MemoryPipeConfig, MemoryStream, memory_pipe
from .models import Int, Packet, UInt
from .streams import ByteReader, ByteStream, ByteWriter, SocketStream, read_exact, write_all

__version__ = "0.2.0"

__all__ = [
    # Core API
    "send_packet",
    "recv_packet",
    "iter_packets",
    "write_frame",
    "read_frame",
    "PacketChannel",
    # Configuration
    "FramingConfig",
    "DEFAULT_CONFIG",
    "LEGACY_CONFIG",
    # Encodings
    "Encoding",
    "BinaryEncoding",
    "JsonEncoding",
    "DEFAULT_ENCODING",
    # Models
    "Packet",
    "UInt",
    "Int",
    # Streams
    "ByteReader",
    "ByteWriter",
    "ByteStream",
    "SocketStream",
    "read_exact",
    "write_all",
    "MemoryStream",
    "MemoryPipeConfig",
    "memory_pipe",
    # Buffers
    "frame_message",
    "unframe_message",
    "split_frames",
    "encode_length",
    "parse_length",
    "frame_size",
    # Exceptions
    "PacketioError",
    "EncodingError",
    "DecodingError",
    "SchemaError",
    "FramingError",
    "FrameTooLarge",
    "TruncatedFrame",
    "EndOfStream",
    "TransportError",
    "IoError",
    # Version
    "__version__",
]
