"""Configuration for length-prefixed framing.

Both peers must agree on the prefix width and byte order; nothing on the
wire identifies them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

ByteOrder = Literal["little", "big"]

SUPPORTED_PREFIX_WIDTHS = (1, 2, 4, 8)

DEFAULT_MAX_FRAME_SIZE = 64 * 1024 * 1024  # 64 MiB


@dataclass(frozen=True)
class FramingConfig:
    """Wire parameters for a framed stream.

    Attributes:
        prefix_width: Size of the length prefix in bytes (1, 2, 4 or 8, default 8).
            The largest body a frame can carry is ``2 ** (8 * prefix_width) - 1``.

        byteorder: Byte order of the length prefix, "little" (default) or "big".

        max_frame_size: Largest body accepted in bytes (default 64 MiB).
            Readers reject larger prefixes before allocating the body, writers
            reject larger values before writing anything. ``None`` leaves only
            the prefix range as a limit.

    Examples:
        ```python
        from packetio.framing import FramingConfig

        # Default: 8-byte little-endian prefix, 64 MiB cap
        config = FramingConfig()

        # Small embedded peer: 2-byte big-endian prefix
        config = FramingConfig(prefix_width=2, byteorder="big")

        # Trust the peer completely
        config = FramingConfig(max_frame_size=None)
        ```
    """

    prefix_width: int = 8
    byteorder: ByteOrder = "little"
    max_frame_size: Optional[int] = DEFAULT_MAX_FRAME_SIZE

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.prefix_width not in SUPPORTED_PREFIX_WIDTHS:
            raise ValueError(
                f"prefix_width must be one of {SUPPORTED_PREFIX_WIDTHS}, got {self.prefix_width}"
            )

        if self.byteorder not in ("little", "big"):
            raise ValueError(f"byteorder must be 'little' or 'big', got {self.byteorder!r}")

        if self.max_frame_size is not None and self.max_frame_size <= 0:
            raise ValueError(f"max_frame_size must be > 0, got {self.max_frame_size}")

    @property
    def prefix_max(self) -> int:
        """Largest value the length prefix can express."""
        return (1 << (8 * self.prefix_width)) - 1

    @property
    def max_length(self) -> int:
        """Largest body length this configuration accepts."""
        if self.max_frame_size is None:
            return self.prefix_max
        return min(self.max_frame_size, self.prefix_max)


DEFAULT_CONFIG = FramingConfig()

# 4-byte big-endian prefix used by the Rust packetio crate
LEGACY_CONFIG = FramingConfig(prefix_width=4, byteorder="big")
