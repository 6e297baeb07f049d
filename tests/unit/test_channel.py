"""Tests for PacketChannel."""

from __future__ import annotations

from typing import Any

from packetio import DEFAULT_CONFIG, DEFAULT_ENCODING, JsonEncoding, PacketChannel, memory_pipe
from packetio.framing import LEGACY_CONFIG


class TestPacketChannel:
    """Tests for the stream convenience wrapper."""

    def test_defaults(self) -> None:
        """Test default encoding and config."""
        left, _right = memory_pipe()
        channel = PacketChannel(left)

        assert channel.encoding is DEFAULT_ENCODING
        assert channel.config is DEFAULT_CONFIG

    def test_send_recv(self, sample_record: Any, record_type: Any) -> None:
        """Test values cross a pair of channels."""
        left, right = memory_pipe()
        sender = PacketChannel(left)
        receiver = PacketChannel(right)

        sender.send(sample_record)
        assert receiver.recv(record_type) == sample_record

    def test_receive_all(self) -> None:
        """Test iteration until the peer closes."""
        left, right = memory_pipe()
        sender = PacketChannel(left, encoding=JsonEncoding())
        for index in range(3):
            sender.send({"index": index})
        left.close()

        receiver = PacketChannel(right, encoding=JsonEncoding())
        assert list(receiver.receive_all(dict)) == [{"index": 0}, {"index": 1}, {"index": 2}]

    def test_raw_frames_with_legacy_config(self) -> None:
        """Test raw frames honor the channel's config."""
        left, right = memory_pipe()
        PacketChannel(left, config=LEGACY_CONFIG).send_frame(b"raw")

        assert right.read(7) == b"\x00\x00\x00\x03raw"

        PacketChannel(right, config=LEGACY_CONFIG).send_frame(b"back")
        assert PacketChannel(left, config=LEGACY_CONFIG).recv_frame() == b"back"

    def test_channel_does_not_close_stream(self) -> None:
        """Test the channel leaves stream ownership with the caller."""
        left, _right = memory_pipe()
        channel = PacketChannel(left)
        channel.send(1)
        del channel

        assert not left.closed
