"""Byte-level packing primitives for the binary encoding.

Integers use bincode's variable-length layout: values below 251 take a
single byte, larger values take a marker byte followed by a fixed-width
little-endian integer.

    +-----------------+------------------------------+
    |  marker         |  followed by                 |
    +-----------------+------------------------------+
    |  0 - 250        |  nothing (marker is value)   |
    |  251            |  u16                         |
    |  252            |  u32                         |
    |  253            |  u64                         |
    |  254            |  u128                        |
    +-----------------+------------------------------+

Signed integers are zigzag-mapped to unsigned before the varint step.
"""

from __future__ import annotations

import struct

_U16_MARKER = 251
_U32_MARKER = 252
_U64_MARKER = 253
_U128_MARKER = 254

_VARINT_WIDTHS = {
    _U16_MARKER: 2,
    _U32_MARKER: 4,
    _U64_MARKER: 8,
    _U128_MARKER: 16,
}

U128_MAX = (1 << 128) - 1
I128_MIN = -(1 << 127)
I128_MAX = (1 << 127) - 1


def zigzag(value: int) -> int:
    """Map a signed integer onto the unsigned integers (0, -1, 1, -2, ...)."""
    return value * 2 if value >= 0 else -value * 2 - 1


def unzigzag(value: int) -> int:
    """Inverse of ``zigzag``."""
    return (value >> 1) ^ -(value & 1)


class BytePacker:
    """Appends encoded primitives to a byte buffer.

    Example:
        >>> packer = BytePacker()
        >>> packer.write_u8(1)
        >>> packer.write_varint(300)
        >>> packer.to_bytes()
        b'\\x01\\xfb,\\x01'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_u8(self, value: int) -> None:
        """Write a single byte.

        Raises:
            ValueError: If value is not 0-255
        """
        if not 0 <= value <= 0xFF:
            raise ValueError(f"u8 value must be 0-255, got {value}")
        self._buffer.append(value)

    def write_varint(self, value: int) -> None:
        """Write an unsigned integer using the variable-length layout.

        Raises:
            ValueError: If value is negative or wider than 128 bits
        """
        if value < 0:
            raise ValueError(f"write_varint requires non-negative value, got {value}")

        if value < _U16_MARKER:
            self._buffer.append(value)
        elif value <= 0xFFFF:
            self._buffer.append(_U16_MARKER)
            self._buffer.extend(value.to_bytes(2, "little"))
        elif value <= 0xFFFFFFFF:
            self._buffer.append(_U32_MARKER)
            self._buffer.extend(value.to_bytes(4, "little"))
        elif value <= 0xFFFFFFFFFFFFFFFF:
            self._buffer.append(_U64_MARKER)
            self._buffer.extend(value.to_bytes(8, "little"))
        elif value <= U128_MAX:
            self._buffer.append(_U128_MARKER)
            self._buffer.extend(value.to_bytes(16, "little"))
        else:
            raise ValueError(f"Value {value} does not fit in 128 bits")

    def write_signed(self, value: int) -> None:
        """Write a signed integer as a zigzag varint.

        Raises:
            ValueError: If value is outside the signed 128-bit range
        """
        if not I128_MIN <= value <= I128_MAX:
            raise ValueError(f"Value {value} does not fit in a signed 128-bit integer")
        self.write_varint(zigzag(value))

    def write_f64(self, value: float) -> None:
        """Write an IEEE-754 double, little-endian."""
        self._buffer.extend(struct.pack("<d", value))

    def write_raw(self, data: bytes) -> None:
        """Write bytes as-is."""
        self._buffer.extend(data)

    def write_sized(self, data: bytes) -> None:
        """Write a varint length followed by the bytes."""
        self.write_varint(len(data))
        self._buffer.extend(data)

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


class ByteUnpacker:
    """Reads encoded primitives from a byte buffer.

    All read methods raise ``IndexError`` when the buffer runs out, so a
    caller can report truncation in one place.
    """

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(bytes(data))
        self._position = 0

    def _take(self, count: int) -> memoryview:
        if self._position + count > len(self._data):
            raise IndexError(
                f"Not enough bytes: need {count}, have {len(self._data) - self._position}"
            )
        chunk = self._data[self._position : self._position + count]
        self._position += count
        return chunk

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_varint(self) -> int:
        """Read an unsigned variable-length integer.

        Raises:
            ValueError: If the marker byte is not a valid varint marker
            IndexError: If the buffer ends mid-integer
        """
        marker = self.read_u8()
        if marker < _U16_MARKER:
            return marker

        width = _VARINT_WIDTHS.get(marker)
        if width is None:
            raise ValueError(f"Invalid varint marker byte: {marker}")
        return int.from_bytes(self._take(width), "little")

    def read_signed(self) -> int:
        return unzigzag(self.read_varint())

    def read_f64(self) -> float:
        return struct.unpack("<d", self._take(8))[0]

    def read_raw(self, count: int) -> bytes:
        return bytes(self._take(count))

    def read_sized(self) -> bytes:
        """Read a varint length followed by that many bytes."""
        return self.read_raw(self.read_varint())

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._position

    def position(self) -> int:
        """Return the current read offset."""
        return self._position
