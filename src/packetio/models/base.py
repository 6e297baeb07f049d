"""Base message class for framed packets.

This module provides the Packet class that wire messages should inherit from.
Plain pydantic models work with every encoding too; Packet only adds strict
field handling and the packet_max_bytes limit.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Packet(BaseModel):
    """Base class for packetio messages.

    Fields are encoded in declaration order by ``BinaryEncoding``, so adding,
    removing or reordering fields changes the wire format.

    Example:
        >>> from pydantic import Field
        >>> class Hello(Packet):
        ...     id: int = Field(ge=0)
        ...     name: str
        ...
        ...     packet_max_bytes: ClassVar[Optional[int]] = 64

    Attributes:
        packet_max_bytes: Maximum encoded body size in bytes (optional, checked on encode)
    """

    model_config = ConfigDict(
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    packet_max_bytes: ClassVar[int | None] = None
