"""Unit tests for bit reader and writer."""

from __future__ import annotations

import pytest

from bitschema.codec.bitpack import BitReader, BitWriter
from bitschema.exceptions import DeserializationError, SerializationError


class TestBitWriter:
    """Test BitWriter functionality."""

    def test_write_bits_across_byte_boundaries(self) -> None:
        """Test MSB-first packing across bytes."""
        writer = BitWriter()
        writer.write_bits(0b101, 3)
        writer.write_bits(0b001101, 6)
        writer.write_bits(0b1110000, 7)

        assert writer.size == 16
        assert writer.to_bytes() == bytes([0b10100110, 0b11110000])

    def test_write_bool(self) -> None:
        """Test writing boolean values."""
        writer = BitWriter()
        writer.write_bool(True)
        writer.write_bool(False)
        writer.write_bool(True)

        assert writer.size == 3
        assert writer.to_bytes() == b"\xa0"  # 101 00000

    def test_write_bits_bounds(self) -> None:
        """Test value and length checking."""
        writer = BitWriter()

        writer.write_bits(0, 8)
        writer.write_bits(255, 8)

        with pytest.raises(SerializationError, match="non-negative"):
            writer.write_bits(-1, 8)

        with pytest.raises(SerializationError, match="more than"):
            writer.write_bits(256, 8)

        with pytest.raises(SerializationError, match="Bit length"):
            writer.write_bits(0, -1)

    def test_write_zero_bits(self) -> None:
        """Test that a zero-width write is a no-op."""
        writer = BitWriter()
        writer.write_bits(0, 0)
        assert writer.size == 0

        with pytest.raises(SerializationError):
            writer.write_bits(1, 0)

    def test_write_bytes(self) -> None:
        """Test writing raw bytes."""
        writer = BitWriter()
        writer.write_bits(1, 1)
        writer.write_bytes(b"\x12\x34")

        assert writer.size == 17
        assert writer.to_bytes() == b"\x09\x1a\x00"

    def test_to_bytes_padding(self) -> None:
        """Test padding to byte boundary."""
        writer = BitWriter()
        writer.write_bool(True)

        assert writer.to_bytes() == b"\x80"  # 10000000

    def test_empty_writer(self) -> None:
        """Test empty bit writer."""
        writer = BitWriter()
        assert writer.size == 0
        assert writer.to_bytes() == b""


class TestBitReader:
    """Test BitReader functionality."""

    def test_read_bits_msb_first(self) -> None:
        """Test reading unsigned integers MSB first."""
        reader = BitReader(bytes([0b11001010, 0b01101100]))

        assert reader.read_bits(4) == 0b1100
        assert reader.read_bits(3) == 0b101
        assert reader.read_bits(3) == 0b001
        assert reader.read_bits(6) == 0b101100

    def test_read_bool(self) -> None:
        """Test reading boolean values."""
        reader = BitReader(b"\xa0")

        assert reader.read_bool() is True
        assert reader.read_bool() is False
        assert reader.read_bool() is True

    def test_read_bytes(self) -> None:
        """Test reading unaligned bytes."""
        reader = BitReader(b"\x09\x1a\x00")

        assert reader.read_bits(1) == 1
        assert reader.read_bytes(2) == b"\x12\x34"

    def test_position_and_remaining(self) -> None:
        """Test tracking consumed and remaining bits."""
        reader = BitReader(b"\xff\x00")

        assert reader.position == 0
        assert reader.remaining_bits == 16
        reader.read_bits(3)
        assert reader.position == 3
        assert reader.remaining_bits == 13

    def test_align_to_byte(self) -> None:
        """Test advancing to the next byte boundary."""
        reader = BitReader(b"\xff\x5a")

        reader.align_to_byte()
        assert reader.position == 0

        reader.read_bits(3)
        reader.align_to_byte()
        assert reader.position == 8
        assert reader.read_bits(8) == 0x5A

        reader.align_to_byte()
        assert reader.remaining_bits == 0

    def test_truncation_error(self) -> None:
        """Test error on reading past end."""
        reader = BitReader(b"\xf0")
        reader.read_bits(8)

        with pytest.raises(DeserializationError, match="Not enough bits"):
            reader.read_bits(1)

    def test_read_zero_bits(self) -> None:
        """Test zero-width read on an empty buffer."""
        reader = BitReader(b"")
        assert reader.read_bits(0) == 0


class TestRoundTrip:
    """Test writer/reader round-trip."""

    def test_roundtrip_mixed(self) -> None:
        """Test mixed widths round-trip."""
        writer = BitWriter()
        writer.write_bits(0b101, 3)
        writer.write_bits(0b001101, 6)
        writer.write_bits(0b1110000, 7)
        writer.write_bool(True)

        reader = BitReader(writer.to_bytes())
        assert reader.read_bits(3) == 0b101
        assert reader.read_bits(6) == 0b001101
        assert reader.read_bits(7) == 0b1110000
        assert reader.read_bool() is True
