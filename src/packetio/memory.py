"""In-memory duplex byte streams for tests and same-process peers.

``memory_pipe()`` returns two connected endpoints. Bytes written to one are
read from the other, with blocking reads, optional fragmentation of reads
(to exercise framing against a transport that splits data arbitrarily) and
an optional read timeout.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from .streams import BytesLike


@dataclass(frozen=True)
class MemoryPipeConfig:
    """Configuration for in-memory pipes.

    Attributes:
        max_read_chunk: Largest number of bytes a single ``read`` returns
            (default None = no limit). Set to 1 to deliver one byte per read.

        timeout: Seconds a ``read`` waits for data before raising
            ``TimeoutError`` (default None = wait forever).

    Examples:
        ```python
        from packetio.memory import MemoryPipeConfig, memory_pipe

        # Worst-case fragmentation
        left, right = memory_pipe(MemoryPipeConfig(max_read_chunk=1))

        # Fail fast in tests instead of hanging
        left, right = memory_pipe(MemoryPipeConfig(timeout=2.0))
        ```
    """

    max_read_chunk: Optional[int] = None
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_read_chunk is not None and self.max_read_chunk <= 0:
            raise ValueError(f"max_read_chunk must be > 0, got {self.max_read_chunk}")

        if self.timeout is not None and self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")


class _Channel:
    """One direction of a pipe: a byte buffer guarded by a condition."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._closed = False
        self._cond = threading.Condition()

    def write(self, data: bytes) -> None:
        with self._cond:
            if self._closed:
                raise BrokenPipeError("Write to closed in-memory pipe")
            self._buffer.extend(data)
            self._cond.notify_all()

    def read(self, n: int, max_chunk: Optional[int], timeout: Optional[float]) -> bytes:
        if n <= 0:
            return b""

        with self._cond:
            ready = self._cond.wait_for(lambda: self._buffer or self._closed, timeout)
            if not ready:
                raise TimeoutError(f"No data within {timeout} seconds")

            count = min(n, len(self._buffer))
            if max_chunk is not None:
                count = min(count, max_chunk)

            chunk = bytes(self._buffer[:count])
            del self._buffer[:count]
            return chunk

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        with self._cond:
            return len(self._buffer)


class MemoryStream:
    """One endpoint of an in-memory pipe.

    ``read`` blocks until data arrives or the peer closes; after the peer
    closes, buffered bytes are still delivered and then ``read`` returns
    ``b""``. ``write`` after either side closed raises ``BrokenPipeError``.
    """

    def __init__(
        self, incoming: _Channel, outgoing: _Channel, config: MemoryPipeConfig
    ) -> None:
        self._incoming = incoming
        self._outgoing = outgoing
        self.config = config

    def read(self, n: int = -1) -> bytes:
        """Read up to ``n`` bytes (``n < 0`` reads whatever is available)."""
        if n < 0:
            n = max(self._incoming.pending(), 1)
        return self._incoming.read(n, self.config.max_read_chunk, self.config.timeout)

    def write(self, data: BytesLike) -> int:
        payload = bytes(data)
        self._outgoing.write(payload)
        return len(payload)

    def shutdown_write(self) -> None:
        """Signal end of stream to the peer while still allowing reads."""
        self._outgoing.close()

    def close(self) -> None:
        """Close both directions."""
        self._outgoing.close()
        self._incoming.close()

    @property
    def closed(self) -> bool:
        return self._outgoing.closed and self._incoming.closed

    def __enter__(self) -> MemoryStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MemoryStream(closed={self.closed}, pending={self._incoming.pending()})"


def memory_pipe(config: Optional[MemoryPipeConfig] = None) -> tuple[MemoryStream, MemoryStream]:
    """Create a pair of connected in-memory endpoints.

    Args:
        config: Pipe behavior shared by both endpoints

    Returns:
        Tuple of (left, right) endpoints; left writes arrive at right and
        vice versa

    Example:
        ```python
        from packetio import memory_pipe, send_packet, recv_packet

        left, right = memory_pipe()
        send_packet(left, 42)
        assert recv_packet(right, int) == 42
        ```
    """
    config = config if config is not None else MemoryPipeConfig()
    left_to_right = _Channel()
    right_to_left = _Channel()
    left = MemoryStream(right_to_left, left_to_right, config)
    right = MemoryStream(left_to_right, right_to_left, config)
    return left, right
