"""Bit-level decoder for schema codecs.

This module provides read_value(), the inverse of encoder.write_value(), and
read_message(), which reads an embedded list of self-describing fragments
until the bits run out or a zero-key terminator is found.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import DeserializationError
from .bitpack import BitReader
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

if TYPE_CHECKING:
    from ..schema.configuration import Configuration


def read_value(reader: BitReader, codec: Codec, configuration: Configuration) -> Any:
    """Decode one value described by ``codec``.

    Args:
        reader: BitReader positioned at the value
        codec: Codec describing the value
        configuration: Configuration used to resolve definition names

    Returns:
        Application-level value

    Raises:
        DeserializationError: If data is truncated or holds an unknown index
    """
    if isinstance(codec, Static):
        return codec.value

    if isinstance(codec, Void):
        return True

    if isinstance(codec, Boolean):
        return reader.read_bool()

    if isinstance(codec, Integer):
        return reader.read_bits(codec.bit_length)

    if isinstance(codec, Float):
        encoded = reader.read_bits(codec.bit_length)
        return (encoded / codec.max_int) * (codec.max_value - codec.min_value) + codec.min_value

    if isinstance(codec, Hexa):
        return "0x" + reader.read_bytes(codec.byte_length).hex().upper()

    if isinstance(codec, Bytes):
        return list(reader.read_bytes(codec.byte_length))

    if isinstance(codec, Symbol):
        index = reader.read_bits(codec.width)
        if index >= len(codec.values):
            raise DeserializationError(
                f"Symbol index {index} out of range for {list(codec.values)}"
            )
        return codec.values[index]

    if isinstance(codec, Sequence):
        return _read_record(reader, codec.names, configuration)

    if isinstance(codec, Alias):
        return read_value(reader, configuration.definition(codec.target).codec, configuration)

    if isinstance(codec, Array):
        return _read_array(reader, codec, configuration)

    if isinstance(codec, Xor):
        return _read_xor(reader, codec, configuration)

    raise DeserializationError(f"Unsupported codec {codec!r}")


def read_message(reader: BitReader, configuration: Configuration) -> list[dict[str, Any]]:
    """Read [binary key][fragment] pairs until the message ends.

    The message ends when fewer than key_bit_size bits remain, or when a zero
    key is read and no definition owns binary key 0.

    Raises:
        DeserializationError: On an unknown non-zero binary key or truncated fragment
    """
    key_bit_size = configuration.key_bit_size
    fragments: list[dict[str, Any]] = []

    while reader.remaining_bits >= key_bit_size:
        binary_key = reader.read_bits(key_bit_size)
        definition = configuration.definition_for_binary_key(binary_key)
        if definition is None:
            if binary_key == 0:
                break
            raise DeserializationError(f"Unknown binary key 0x{binary_key:X}")

        fragments.append(definition.decode_fragment(reader, configuration))

    return fragments


def _read_record(
    reader: BitReader, names: tuple[str, ...], configuration: Configuration
) -> dict[str, Any]:
    record: dict[str, Any] = {}
    for name in names:
        if name == MESSAGE_PLACEHOLDER:
            record[name] = read_message(reader, configuration)
        else:
            record[name] = read_value(reader, configuration.definition(name).codec, configuration)
    return record


def _read_array(reader: BitReader, codec: Array, configuration: Configuration) -> list[Any]:
    count = reader.read_bits(codec.length_bits)

    if not codec.is_homogeneous:
        return [_read_record(reader, codec.names, configuration) for _ in range(count)]

    name = codec.names[0]
    if name == MESSAGE_PLACEHOLDER:
        return [read_message(reader, configuration) for _ in range(count)]

    element_codec = configuration.definition(name).codec
    return [read_value(reader, element_codec, configuration) for _ in range(count)]


def _read_xor(reader: BitReader, codec: Xor, configuration: Configuration) -> dict[str, Any]:
    selector = reader.read_bits(codec.width)
    option = codec.option_for(selector)
    if option is None:
        raise DeserializationError(f"Unknown xor selector 0x{selector:X} for {list(codec.options)}")

    if option == MESSAGE_PLACEHOLDER:
        return {option: read_message(reader, configuration)}
    return {option: read_value(reader, configuration.definition(option).codec, configuration)}
