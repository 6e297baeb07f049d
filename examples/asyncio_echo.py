#!/usr/bin/env python3
"""asyncio echo example for packetio.

Same exchange as ``socket_echo.py`` using ``asyncio.start_server`` and the
coroutines in ``packetio.aio``.
"""

from __future__ import annotations

import asyncio

from packetio import Packet, UInt
from packetio.aio import iter_packets_async, recv_packet_async, send_packet_async


class Ping(Packet):
    """Ping carrying a sequence number."""

    seq: int = UInt(32)
    payload: bytes = b""


async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    """Echo every ping until the client closes."""
    async for ping in iter_packets_async(reader, Ping):
        await send_packet_async(writer, ping)
    writer.close()
    await writer.wait_closed()


async def main() -> None:
    """Run the asyncio echo example."""
    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]

    async with server:
        reader, writer = await asyncio.open_connection("127.0.0.1", port)
        for seq in range(5):
            await send_packet_async(writer, Ping(seq=seq, payload=bytes(seq * 1000)))
            reply = await recv_packet_async(reader, Ping)
            print(f"seq={reply.seq} payload={len(reply.payload)} bytes")

        writer.close()
        await writer.wait_closed()


if __name__ == "__main__":
    asyncio.run(main())
