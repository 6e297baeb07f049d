"""Unit tests for the length prefix codec and framing configuration."""

from __future__ import annotations

import pytest

from packetio.exceptions import FramingError, FrameTooLarge
from packetio.framing import (
    DEFAULT_CONFIG,
    DEFAULT_MAX_FRAME_SIZE,
    LEGACY_CONFIG,
    FramingConfig,
    encode_length,
    frame_size,
    parse_length,
)


class TestFramingConfig:
    """Tests for FramingConfig validation."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = FramingConfig()

        assert config.prefix_width == 8
        assert config.byteorder == "little"
        assert config.max_frame_size == DEFAULT_MAX_FRAME_SIZE
        assert config == DEFAULT_CONFIG

    def test_legacy_config(self) -> None:
        """Test the 4-byte big-endian compatibility config."""
        assert LEGACY_CONFIG.prefix_width == 4
        assert LEGACY_CONFIG.byteorder == "big"

    def test_prefix_max(self) -> None:
        """Test largest value each prefix width can express."""
        assert FramingConfig(prefix_width=1).prefix_max == 255
        assert FramingConfig(prefix_width=2).prefix_max == 65535
        assert FramingConfig(prefix_width=4).prefix_max == 2**32 - 1
        assert FramingConfig(prefix_width=8).prefix_max == 2**64 - 1

    def test_max_length_uses_smaller_limit(self) -> None:
        """Test effective limit is the smaller of max_frame_size and prefix range."""
        assert FramingConfig(prefix_width=1, max_frame_size=1000).max_length == 255
        assert FramingConfig(prefix_width=4, max_frame_size=1000).max_length == 1000
        assert FramingConfig(prefix_width=2, max_frame_size=None).max_length == 65535

    def test_invalid_prefix_width_raises(self) -> None:
        """Test unsupported prefix widths are rejected."""
        with pytest.raises(ValueError, match="prefix_width must be one of"):
            FramingConfig(prefix_width=3)

        with pytest.raises(ValueError, match="prefix_width must be one of"):
            FramingConfig(prefix_width=0)

    def test_invalid_byteorder_raises(self) -> None:
        """Test unknown byte orders are rejected."""
        with pytest.raises(ValueError, match="byteorder must be"):
            FramingConfig(byteorder="middle")  # type: ignore[arg-type]

    def test_invalid_max_frame_size_raises(self) -> None:
        """Test non-positive frame size limits are rejected."""
        with pytest.raises(ValueError, match="max_frame_size must be > 0"):
            FramingConfig(max_frame_size=0)

        with pytest.raises(ValueError, match="max_frame_size must be > 0"):
            FramingConfig(max_frame_size=-5)


class TestLengthPrefix:
    """Tests for encode_length / parse_length."""

    def test_default_is_little_endian_u64(self) -> None:
        """Test default prefix layout."""
        assert encode_length(5) == b"\x05\x00\x00\x00\x00\x00\x00\x00"
        assert encode_length(0x0102) == b"\x02\x01\x00\x00\x00\x00\x00\x00"

    def test_legacy_is_big_endian_u32(self) -> None:
        """Test legacy prefix layout."""
        assert encode_length(5, config=LEGACY_CONFIG) == b"\x00\x00\x00\x05"

    def test_zero_length(self) -> None:
        """Test zero-length bodies encode as an all-zero prefix."""
        assert encode_length(0) == bytes(8)
        assert parse_length(bytes(8)) == 0

    @pytest.mark.parametrize("width", [1, 2, 4, 8])
    @pytest.mark.parametrize("byteorder", ["little", "big"])
    def test_parse_inverts_encode(self, width: int, byteorder: str) -> None:
        """Test parse_length recovers every encoded length."""
        config = FramingConfig(prefix_width=width, byteorder=byteorder, max_frame_size=None)  # type: ignore[arg-type]
        for length in (0, 1, 200, config.prefix_max):
            prefix = encode_length(length, config=config)
            assert len(prefix) == width
            assert parse_length(prefix, config=config) == length

    def test_encode_rejects_oversize(self) -> None:
        """Test lengths beyond the prefix range raise FrameTooLarge."""
        config = FramingConfig(prefix_width=1)

        with pytest.raises(FrameTooLarge) as exc_info:
            encode_length(256, config=config)

        assert exc_info.value.length == 256
        assert exc_info.value.limit == 255

    def test_encode_rejects_over_max_frame_size(self) -> None:
        """Test lengths beyond max_frame_size raise FrameTooLarge."""
        with pytest.raises(FrameTooLarge):
            encode_length(11, config=FramingConfig(max_frame_size=10))

    def test_encode_rejects_negative(self) -> None:
        """Test negative lengths are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            encode_length(-1)

    def test_parse_wrong_size(self) -> None:
        """Test prefixes of the wrong size are rejected."""
        with pytest.raises(FramingError, match="must be 8 bytes"):
            parse_length(b"\x00\x01")

    def test_frame_size(self) -> None:
        """Test on-wire frame size includes the prefix."""
        assert frame_size(10) == 18
        assert frame_size(0) == 8
        assert frame_size(10, config=LEGACY_CONFIG) == 14
