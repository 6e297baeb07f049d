"""Command line tools for packetio."""
