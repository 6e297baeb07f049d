"""Tests for framing over asyncio streams."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from packetio import JsonEncoding, frame_message
from packetio.aio import (
    iter_packets_async,
    read_frame_async,
    recv_packet_async,
    send_packet_async,
    write_frame_async,
)
from packetio.exceptions import EndOfStream, FrameTooLarge, TruncatedFrame
from packetio.framing import FramingConfig


async def _read_frame_from(data: bytes, **kwargs: Any) -> bytes:
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return await read_frame_async(reader, **kwargs)


def _reader_with(data: bytes) -> asyncio.StreamReader:
    """Build a fed reader; must be called inside a running loop."""
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return reader


class TestAsyncReader:
    """Tests for reading frames from an asyncio.StreamReader."""

    def test_read_frames(self) -> None:
        """Test consecutive frames are split correctly."""

        async def scenario() -> list[bytes]:
            reader = _reader_with(frame_message(b"one") + frame_message(b"") + frame_message(b"3"))
            return [await read_frame_async(reader) for _ in range(3)]

        assert asyncio.run(scenario()) == [b"one", b"", b"3"]

    def test_clean_eof(self) -> None:
        """Test EOF with no bytes raises EndOfStream."""
        with pytest.raises(EndOfStream) as exc_info:
            asyncio.run(_read_frame_from(b""))

        assert exc_info.value.bytes_read == 0

    def test_prefix_only_is_truncated(self) -> None:
        """Test EOF after a prefix raises TruncatedFrame."""
        with pytest.raises(TruncatedFrame):
            asyncio.run(_read_frame_from((3).to_bytes(8, "little")))

    def test_oversize_prefix(self) -> None:
        """Test oversize prefixes are rejected."""
        config = FramingConfig(max_frame_size=4)
        with pytest.raises(FrameTooLarge):
            asyncio.run(_read_frame_from(frame_message(b"12345"), config=config))

    def test_iter_packets(self) -> None:
        """Test async iteration stops at a clean close."""

        async def scenario() -> list[Any]:
            encoding = JsonEncoding()
            data = b"".join(frame_message(encoding.encode(v)) for v in ({"a": 1}, {"b": 2}))
            return [v async for v in iter_packets_async(_reader_with(data), dict, encoding=encoding)]

        assert asyncio.run(scenario()) == [{"a": 1}, {"b": 2}]


    def test_failure_inside_body_is_truncation(self) -> None:
        """Test a connection error after the prefix raises TruncatedFrame."""

        async def scenario() -> bytes:
            reader = asyncio.StreamReader()
            reader.feed_data((10).to_bytes(8, "little") + b"ab")
            asyncio.get_running_loop().call_soon(
                reader.set_exception, ConnectionResetError("peer reset")
            )
            return await read_frame_async(reader)

        with pytest.raises(TruncatedFrame) as exc_info:
            asyncio.run(scenario())

        assert exc_info.value.expected == 10
        assert isinstance(exc_info.value.__cause__, ConnectionResetError)


class TestAsyncRoundTrip:
    """Tests for sending and receiving over a real asyncio connection."""

    def test_tcp_roundtrip(self, sample_record: Any, record_type: Any) -> None:
        """Test a value echoed by an asyncio TCP server."""

        async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            body = await read_frame_async(reader)
            await write_frame_async(writer, body)
            writer.close()

        async def scenario() -> Any:
            server = await asyncio.start_server(handle, "127.0.0.1", 0)
            port = server.sockets[0].getsockname()[1]
            async with server:
                reader, writer = await asyncio.open_connection("127.0.0.1", port)
                await send_packet_async(writer, sample_record)
                echoed = await recv_packet_async(reader, record_type)
                writer.close()
                await writer.wait_closed()
                return echoed

        assert asyncio.run(scenario()) == sample_record
