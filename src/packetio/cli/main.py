"""Main CLI entry point for packetio."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..cli.dump import dump_file
from ..exceptions import PacketioError
from ..framing.config import (
    DEFAULT_MAX_FRAME_SIZE,
    LEGACY_CONFIG,
    SUPPORTED_PREFIX_WIDTHS,
    FramingConfig,
)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the packetio CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="packetio: Length-Prefixed Framing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  packetio --dump capture.bin                    List frames (8-byte little-endian prefix)
  packetio --dump capture.bin --legacy           4-byte big-endian prefix
  packetio --dump capture.bin --json             Show JSON bodies
  packetio --version                             Show version
        """,
    )

    parser.add_argument(
        "--dump",
        metavar="FILE",
        type=str,
        help="List the frames stored in a captured stream file",
    )

    parser.add_argument(
        "--prefix-width",
        type=int,
        choices=SUPPORTED_PREFIX_WIDTHS,
        default=8,
        help="Length prefix size in bytes (default: 8)",
    )

    parser.add_argument(
        "--byteorder",
        choices=("little", "big"),
        default="little",
        help="Length prefix byte order (default: little)",
    )

    parser.add_argument(
        "--legacy",
        action="store_true",
        help="Use the 4-byte big-endian prefix of the Rust packetio crate",
    )

    parser.add_argument(
        "--max-frame-size",
        type=int,
        default=DEFAULT_MAX_FRAME_SIZE,
        help=f"Reject frames larger than this many bytes (default: {DEFAULT_MAX_FRAME_SIZE})",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Decode frame bodies as JSON",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"packetio {__version__}",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Handle --dump
    if args.dump:
        file_path = Path(args.dump)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            if args.legacy:
                config = FramingConfig(
                    prefix_width=LEGACY_CONFIG.prefix_width,
                    byteorder=LEGACY_CONFIG.byteorder,
                    max_frame_size=args.max_frame_size,
                )
            else:
                config = FramingConfig(
                    prefix_width=args.prefix_width,
                    byteorder=args.byteorder,
                    max_frame_size=args.max_frame_size,
                )
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

        try:
            dump_file(file_path, config, as_json=args.json)
            return 0
        except (PacketioError, OSError) as e:
            print(f"Error reading frames: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
