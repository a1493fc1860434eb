"""Bit-level codecs for bitschema.

This module provides the bit reader/writer, the codec kinds, and the
encode/decode dispatch that turns application values into bits and back.
"""

from __future__ import annotations

from .bitpack import BitReader, BitWriter
from .decoder import read_message, read_value
from .encoder import write_message, write_value
from .types import (
    MESSAGE_PLACEHOLDER,
    Alias,
    Array,
    Boolean,
    Bytes,
    Codec,
    Float,
    Hexa,
    Integer,
    Sequence,
    Static,
    Symbol,
    Void,
    Xor,
)

__all__ = [
    "BitReader",
    "BitWriter",
    "read_value",
    "read_message",
    "write_value",
    "write_message",
    "MESSAGE_PLACEHOLDER",
    "Codec",
    "Static",
    "Boolean",
    "Integer",
    "Float",
    "Bytes",
    "Hexa",
    "Symbol",
    "Void",
    "Sequence",
    "Alias",
    "Array",
    "Xor",
]
