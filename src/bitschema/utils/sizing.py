"""Encoded size calculation utilities.

This module computes the bit width of codecs and definitions without
encoding anything. Widths are only known when they do not depend on the
value: arrays, embedded messages and xors whose options differ in size are
reported as variable (None).
"""

from __future__ import annotations

from typing import Optional

from ..codec.types import (
    MESSAGE_PLACEHOLDER,
    Alias,
    Array,
    Boolean,
    Bytes,
    Codec,
    Float,
    Integer,
    Sequence,
    Static,
    Symbol,
    Void,
    Xor,
)
from ..schema.configuration import Configuration


def fixed_bit_length(codec: Codec, configuration: Configuration) -> Optional[int]:
    """Return the exact number of bits ``codec`` always writes, or None.

    Example:
        >>> fixed_bit_length(Integer(9), configuration)
        9
    """
    return _fixed_bit_length(codec, configuration, frozenset())


def _fixed_bit_length(
    codec: Codec, configuration: Configuration, visiting: frozenset[str]
) -> Optional[int]:
    if isinstance(codec, (Static, Void)):
        return 0
    if isinstance(codec, Boolean):
        return 1
    if isinstance(codec, (Integer, Float)):
        return codec.bit_length
    if isinstance(codec, Bytes):
        return codec.byte_length * 8
    if isinstance(codec, Symbol):
        return codec.width
    if isinstance(codec, Array):
        return None

    if isinstance(codec, Alias):
        return _named_bit_length(codec.target, configuration, visiting)

    if isinstance(codec, Sequence):
        total = 0
        for name in codec.names:
            bits = _named_bit_length(name, configuration, visiting)
            if bits is None:
                return None
            total += bits
        return total

    if isinstance(codec, Xor):
        sizes = {_named_bit_length(name, configuration, visiting) for name in codec.options}
        if len(sizes) != 1 or None in sizes:
            return None
        return codec.width + sizes.pop()

    return None


def _named_bit_length(
    name: str, configuration: Configuration, visiting: frozenset[str]
) -> Optional[int]:
    # Recursive definitions can't have a fixed size
    if name == MESSAGE_PLACEHOLDER or name in visiting:
        return None
    codec = configuration.definition(name).codec
    return _fixed_bit_length(codec, configuration, visiting | {name})


def definition_sizes(configuration: Configuration) -> dict[str, Optional[int]]:
    """Get the fixed fragment size in bits of each definition.

    Returns:
        Dictionary mapping definition names to bits, None when variable
    """
    return {
        definition.name: fixed_bit_length(definition.codec, configuration)
        for definition in configuration.definitions
    }


def framed_bit_length(configuration: Configuration, name: str) -> Optional[int]:
    """Bits taken by definition ``name`` inside a message (binary key included)."""
    bits = fixed_bit_length(configuration.definition(name).codec, configuration)
    if bits is None:
        return None
    return configuration.key_bit_size + bits
