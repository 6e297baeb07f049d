"""Frame dump CLI command."""

from __future__ import annotations

import json
from pathlib import Path

from ..exceptions import EndOfStream
from ..framing.config import FramingConfig
from ..framing.stream import read_frame

PREVIEW_BYTES = 16


def _preview(body: bytes, as_json: bool) -> str:
    """Render a frame body for display."""
    if as_json:
        try:
            return json.dumps(json.loads(body.decode("utf-8")), separators=(",", ":"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return "<not JSON>"

    preview = body[:PREVIEW_BYTES].hex(" ")
    if len(body) > PREVIEW_BYTES:
        preview += " ..."
    return preview


def dump_file(file_path: Path, config: FramingConfig, *, as_json: bool = False) -> int:
    """Print every frame in a captured stream file.

    Args:
        file_path: File holding consecutive frames
        config: Framing parameters the file was written with
        as_json: Decode bodies as JSON instead of showing hex

    Returns:
        Number of frames read

    Raises:
        EndOfStream: If the file ends inside a length prefix
        TruncatedFrame: If the file ends inside a body
        FrameTooLarge: If a prefix exceeds ``config.max_length``
    """
    print("|" * 7, "packetio: Length-Prefixed Framing", "|" * 7)
    print(
        f"{file_path}: {config.prefix_width}-byte {config.byteorder}-endian prefix, "
        f"limit {config.max_length} bytes"
    )
    print()

    count = 0
    offset = 0
    with file_path.open("rb") as stream:
        while True:
            try:
                body = read_frame(stream, config=config)
            except EndOfStream as e:
                if e.bytes_read:
                    raise
                break

            print(f"#{count:<5} offset {offset:<10} length {len(body):<10} {_preview(body, as_json)}")
            count += 1
            offset += config.prefix_width + len(body)

    print()
    print(f"{count} frame{'s' if count != 1 else ''}, {offset} bytes")
    return count
