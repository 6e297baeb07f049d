#!/usr/bin/env python3
"""TCP echo example for packetio.

A server thread echoes every message back until the client closes its
side of the connection. The client sends several JSON messages, including
one large enough to be split across many TCP segments.
"""

from __future__ import annotations

import logging
import socket
import threading

from packetio import JsonEncoding, PacketChannel, SocketStream

logger = logging.getLogger("socket_echo")


def serve_one(listener: socket.socket) -> None:
    """Echo messages on a single accepted connection."""
    conn, addr = listener.accept()
    logger.info("Accepted connection from %s:%d", *addr)
    with conn:
        channel = PacketChannel(SocketStream(conn), encoding=JsonEncoding())
        count = 0
        for message in channel.receive_all(dict):
            channel.send(message)
            count += 1
    logger.info("Client closed after %d messages", count)


def main() -> None:
    """Run the echo example."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    with socket.create_server(("127.0.0.1", 0)) as listener:
        host, port = listener.getsockname()
        server = threading.Thread(target=serve_one, args=(listener,))
        server.start()

        with socket.create_connection((host, port)) as sock:
            channel = PacketChannel(SocketStream(sock), encoding=JsonEncoding())
            messages = [
                {"id": 1, "text": "hello"},
                {"id": 2, "text": "world"},
                {"id": 3, "text": "x" * 200_000},
            ]
            for message in messages:
                channel.send(message)
                echoed = channel.recv(dict)
                print(f"id={echoed['id']}: {len(echoed['text'])} chars echoed intact: {echoed == message}")

            sock.shutdown(socket.SHUT_WR)

        server.join()


if __name__ == "__main__":
    main()
