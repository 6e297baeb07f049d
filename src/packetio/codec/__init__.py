"""Pluggable encodings for frame bodies.

This module provides the ``Encoding`` interface consumed by the framing
layer, a compact binary implementation and a JSON implementation.
"""

from __future__ import annotations

from .base import Encoding
from .binary import BinaryEncoding
from .pydantic_json import JsonEncoding

DEFAULT_ENCODING: Encoding = BinaryEncoding()

__all__ = [
    "Encoding",
    "BinaryEncoding",
    "JsonEncoding",
    "DEFAULT_ENCODING",
]
