#!/usr/bin/env python3
"""Basic usage example for packetio.

This example demonstrates:
1. Defining a message with pydantic
2. Sending and receiving it through an in-memory buffer
3. Inspecting the wire bytes of a frame
"""

from __future__ import annotations

import enum
import io
from typing import Optional

from pydantic import Field

from packetio import LEGACY_CONFIG, JsonEncoding, Packet, UInt, recv_packet, send_packet


class Priority(enum.Enum):
    """Order priority."""

    LOW = "low"
    NORMAL = "normal"
    URGENT = "urgent"


class Order(Packet):
    """Order placed by a client."""

    order_id: int = UInt(32)
    sku: str
    quantity: int = Field(ge=1, le=1000)
    priority: Priority = Priority.NORMAL
    note: Optional[str] = None


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("packetio Basic Usage Example")
    print("=" * 60)
    print()

    order = Order(order_id=42, sku="AB-100", quantity=3, priority=Priority.URGENT)
    print(f"1. Message: {order}")
    print()

    # Binary encoding (default)
    stream = io.BytesIO()
    send_packet(stream, order)
    wire = stream.getvalue()
    print("2. Binary frame:")
    print(f"   Prefix: {wire[:8].hex(' ')}  ({int.from_bytes(wire[:8], 'little')} bytes)")
    print(f"   Body:   {wire[8:].hex(' ')}")
    print()

    stream.seek(0)
    received = recv_packet(stream, Order)
    print(f"3. Received: {received}")
    print(f"   Match: {received == order}")
    print()

    # JSON encoding, legacy 4-byte big-endian prefix
    stream = io.BytesIO()
    send_packet(stream, order, encoding=JsonEncoding(), config=LEGACY_CONFIG)
    wire = stream.getvalue()
    print("4. JSON frame with legacy prefix:")
    print(f"   Prefix: {wire[:4].hex(' ')}")
    print(f"   Body:   {wire[4:].decode()}")
    print()

    stream.seek(0)
    received = recv_packet(stream, Order, encoding=JsonEncoding(), config=LEGACY_CONFIG)
    print(f"5. Received: {received}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
