"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import io

import pytest
from pydantic import Field

from packetio import Packet


class Record(Packet):
    """Sample structured message."""

    id: int = Field(ge=0)
    name: str


class OneByteReader:
    """Stream double that returns at most one byte per read call."""

    def __init__(self, data: bytes) -> None:
        self._buffer = io.BytesIO(data)
        self.reads = 0

    def read(self, n: int) -> bytes:
        self.reads += 1
        return self._buffer.read(min(n, 1))

    def remaining(self) -> bytes:
        return self._buffer.read()


class PartialWriter:
    """Stream double that accepts at most ``limit`` bytes per write call."""

    def __init__(self, limit: int = 3) -> None:
        self.limit = limit
        self.data = bytearray()
        self.calls = 0

    def write(self, data: bytes) -> int:
        self.calls += 1
        chunk = bytes(data[: self.limit])
        self.data.extend(chunk)
        return len(chunk)


class FailingStream:
    """Stream double whose reads and writes raise ConnectionResetError."""

    def read(self, n: int) -> bytes:
        raise ConnectionResetError("peer reset")

    def write(self, data: bytes) -> int:
        raise ConnectionResetError("peer reset")


@pytest.fixture
def sample_payload() -> bytes:
    """Sample binary payload for testing."""
    return b"Hello, framed world!"


@pytest.fixture
def sample_record() -> Record:
    """Sample structured message for testing."""
    return Record(id=42, name="abc")


@pytest.fixture
def buffer() -> io.BytesIO:
    """Empty in-memory stream."""
    return io.BytesIO()


@pytest.fixture
def record_type() -> type[Record]:
    """Packet class matching ``sample_record``."""
    return Record


@pytest.fixture
def one_byte_reader() -> type[OneByteReader]:
    """Factory for streams that deliver one byte per read."""
    return OneByteReader


@pytest.fixture
def partial_writer() -> type[PartialWriter]:
    """Factory for streams that accept a few bytes per write."""
    return PartialWriter


@pytest.fixture
def failing_stream() -> FailingStream:
    """Stream whose every operation raises."""
    return FailingStream()
