"""Pydantic message modeling for packetio.

This module provides the Packet base class and integer field helpers.
"""

from __future__ import annotations

from .base import Packet
from .fields import Int, UInt

__all__ = [
    "Packet",
    "Int",
    "UInt",
]
