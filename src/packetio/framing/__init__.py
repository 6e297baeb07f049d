"""Length-prefixed framing for packetio.

This module provides the frame writer and reader for blocking streams, the
length prefix codec they share, and in-memory helpers for complete buffers.
"""

from __future__ import annotations

from .basic import frame_message, split_frames, unframe_message
from .config import (
    DEFAULT_CONFIG,
    DEFAULT_MAX_FRAME_SIZE,
    LEGACY_CONFIG,
    SUPPORTED_PREFIX_WIDTHS,
    FramingConfig,
)
from .prefix import encode_length, frame_size, parse_length
from .stream import iter_packets, read_frame, recv_packet, send_packet, write_frame

__all__ = [
    # Configuration
    "FramingConfig",
    "DEFAULT_CONFIG",
    "LEGACY_CONFIG",
    "DEFAULT_MAX_FRAME_SIZE",
    "SUPPORTED_PREFIX_WIDTHS",
    # Stream framing
    "send_packet",
    "recv_packet",
    "iter_packets",
    "write_frame",
    "read_frame",
    # Buffers
    "frame_message",
    "unframe_message",
    "split_frames",
    # Prefix codec
    "encode_length",
    "parse_length",
    "frame_size",
]
