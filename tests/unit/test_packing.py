"""Unit tests for byte packing primitives."""

from __future__ import annotations

import pytest

from packetio.codec.packing import BytePacker, ByteUnpacker, unzigzag, zigzag


class TestVarint:
    """Test variable-length integer layout."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, b"\x00"),
            (250, b"\xfa"),
            (251, b"\xfb\xfb\x00"),
            (0xFFFF, b"\xfb\xff\xff"),
            (0x10000, b"\xfc\x00\x00\x01\x00"),
            (0xFFFFFFFF, b"\xfc\xff\xff\xff\xff"),
            (0x100000000, b"\xfd\x00\x00\x00\x00\x01\x00\x00\x00"),
            (2**64, b"\xfe" + (2**64).to_bytes(16, "little")),
        ],
    )
    def test_varint_layout(self, value: int, expected: bytes) -> None:
        """Test marker selection at each width boundary."""
        packer = BytePacker()
        packer.write_varint(value)
        assert packer.to_bytes() == expected

        unpacker = ByteUnpacker(expected)
        assert unpacker.read_varint() == value
        assert unpacker.remaining() == 0

    def test_varint_rejects_negative(self) -> None:
        """Test negative values are not varints."""
        with pytest.raises(ValueError, match="non-negative"):
            BytePacker().write_varint(-1)

    def test_varint_rejects_too_wide(self) -> None:
        """Test values beyond 128 bits are rejected."""
        with pytest.raises(ValueError, match="128 bits"):
            BytePacker().write_varint(2**128)

    def test_invalid_marker(self) -> None:
        """Test marker byte 255 is invalid."""
        with pytest.raises(ValueError, match="Invalid varint marker"):
            ByteUnpacker(b"\xff").read_varint()

    def test_truncated_varint(self) -> None:
        """Test a marker without its payload raises IndexError."""
        with pytest.raises(IndexError, match="Not enough bytes"):
            ByteUnpacker(b"\xfc\x01").read_varint()


class TestZigzag:
    """Test signed integer mapping."""

    def test_zigzag_order(self) -> None:
        """Test small magnitudes map to small codes."""
        assert [zigzag(v) for v in (0, -1, 1, -2, 2)] == [0, 1, 2, 3, 4]

    @pytest.mark.parametrize("value", [0, 1, -1, 127, -128, 2**63 - 1, -(2**63)])
    def test_zigzag_inverse(self, value: int) -> None:
        """Test unzigzag inverts zigzag."""
        assert unzigzag(zigzag(value)) == value

    def test_signed_roundtrip(self) -> None:
        """Test write_signed / read_signed."""
        packer = BytePacker()
        packer.write_signed(-300)
        assert ByteUnpacker(packer.to_bytes()).read_signed() == -300

    def test_signed_rejects_out_of_range(self) -> None:
        """Test values outside i128 are rejected."""
        with pytest.raises(ValueError, match="signed 128-bit"):
            BytePacker().write_signed(2**127)


class TestPrimitives:
    """Test fixed-size and sized primitives."""

    def test_u8_bounds(self) -> None:
        """Test u8 accepts 0-255 only."""
        packer = BytePacker()
        packer.write_u8(0)
        packer.write_u8(255)
        assert packer.to_bytes() == b"\x00\xff"

        with pytest.raises(ValueError, match="0-255"):
            packer.write_u8(256)

    def test_f64_little_endian(self) -> None:
        """Test doubles are little-endian."""
        packer = BytePacker()
        packer.write_f64(1.0)
        assert packer.to_bytes() == b"\x00\x00\x00\x00\x00\x00\xf0\x3f"
        assert ByteUnpacker(packer.to_bytes()).read_f64() == 1.0

    def test_sized_bytes(self) -> None:
        """Test length-prefixed byte strings."""
        packer = BytePacker()
        packer.write_sized(b"abc")
        assert packer.to_bytes() == b"\x03abc"
        assert len(packer) == 4

        unpacker = ByteUnpacker(packer.to_bytes())
        assert unpacker.read_sized() == b"abc"
        assert unpacker.position() == 4

    def test_sized_bytes_truncated(self) -> None:
        """Test a length beyond the buffer raises IndexError."""
        with pytest.raises(IndexError):
            ByteUnpacker(b"\x05ab").read_sized()
