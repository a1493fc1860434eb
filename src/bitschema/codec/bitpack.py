"""Bit-level read and write primitives.

This module is the only place where bit order is defined: every value is
written and read most-significant bit first, and the final byte of a buffer
is padded with zero bits.
"""

from __future__ import annotations

from typing import Iterable

from ..exceptions import DeserializationError, SerializationError


class BitWriter:
    """Appends values bit-by-bit and packs them into bytes.

    Example:
        >>> writer = BitWriter()
        >>> writer.write_bits(0b101, 3)
        >>> writer.write_bool(True)
        >>> writer.size
        4
        >>> writer.to_bytes()
        b'\\xb0'
    """

    def __init__(self) -> None:
        self._bits: list[int] = []  # List of 0s and 1s

    @property
    def size(self) -> int:
        """Number of bits written so far."""
        return len(self._bits)

    def write_bits(self, value: int, length: int) -> None:
        """Write an unsigned integer using exactly ``length`` bits.

        Args:
            value: Unsigned integer value to write
            length: Number of bits to use (0 writes nothing)

        Raises:
            SerializationError: If length is negative or value doesn't fit in length bits
        """
        if length < 0:
            raise SerializationError(f"Bit length must be >= 0, got {length}")
        if value < 0:
            raise SerializationError(f"write_bits requires a non-negative value, got {value}")

        max_value = (1 << length) - 1
        if value > max_value:
            raise SerializationError(
                f"Value {value} requires more than {length} bits (max: {max_value})"
            )

        for i in range(length - 1, -1, -1):
            self._bits.append((value >> i) & 1)

    def write_bool(self, value: bool) -> None:
        """Write a boolean as a single bit."""
        self._bits.append(1 if value else 0)

    def write_bytes(self, data: Iterable[int]) -> None:
        """Write each byte of ``data`` as 8 bits."""
        for byte in data:
            self.write_bits(byte, 8)

    def to_bytes(self) -> bytes:
        """Pack the written bits into bytes.

        If the number of bits is not a multiple of 8, the last byte
        is padded with zeros on the right (LSB side).

        Returns:
            Packed bytes (empty when nothing was written)
        """
        if not self._bits:
            return b""

        padded_bits = self._bits + [0] * ((-len(self._bits)) % 8)

        result = bytearray()
        for i in range(0, len(padded_bits), 8):
            byte = 0
            for j in range(8):
                byte = (byte << 1) | padded_bits[i + j]
            result.append(byte)

        return bytes(result)


class BitReader:
    """Consumes values bit-by-bit from a byte buffer.

    Example:
        >>> reader = BitReader(b"\\xb0")
        >>> reader.read_bits(3)
        5
        >>> reader.read_bool()
        True
        >>> reader.remaining_bits
        4
    """

    def __init__(self, data: bytes) -> None:
        """Initialize a bit reader over ``data``.

        Args:
            data: Byte buffer to read from
        """
        self._data = bytes(data)
        self._total = len(self._data) * 8
        self._position = 0

    @property
    def position(self) -> int:
        """Number of bits consumed so far."""
        return self._position

    @property
    def remaining_bits(self) -> int:
        """Number of bits left to read."""
        return self._total - self._position

    def read_bits(self, length: int) -> int:
        """Read ``length`` bits as an unsigned integer, MSB first.

        Raises:
            DeserializationError: If length is negative or fewer than length bits remain
        """
        if length < 0:
            raise DeserializationError(f"Bit length must be >= 0, got {length}")
        if length > self.remaining_bits:
            raise DeserializationError(
                f"Not enough bits: need {length}, have {self.remaining_bits}"
            )

        value = 0
        for _ in range(length):
            byte = self._data[self._position >> 3]
            bit = (byte >> (7 - (self._position & 7))) & 1
            value = (value << 1) | bit
            self._position += 1

        return value

    def read_bool(self) -> bool:
        """Read a single bit as a boolean."""
        return self.read_bits(1) == 1

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read ``num_bytes`` bytes, 8 bits each."""
        return bytes(self.read_bits(8) for _ in range(num_bytes))

    def align_to_byte(self) -> None:
        """Advance to the next byte boundary (no-op if already aligned)."""
        self._position = min(self._total, (self._position + 7) & ~7)
