"""Bit-level encoder for schema codecs.

This module provides write_value(), which dispatches on the codec kind and
appends the encoding of an application value to a BitWriter, and
write_message(), which writes an embedded list of self-describing fragments.

The ``is_last`` flag tells a codec whether anything can follow it in the
buffer. An embedded message only needs a zero-key terminator when something
may follow it.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from ..exceptions import SerializationError
from ..records import fetch_field, has_field, is_record
from .bitpack import BitWriter
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


def write_value(
    writer: BitWriter,
    codec: Codec,
    value: Any,
    configuration: Configuration,
    is_last: bool = True,
) -> None:
    """Encode ``value`` with ``codec``.

    Args:
        writer: BitWriter to append to
        codec: Codec describing the value
        value: Application-level value
        configuration: Configuration used to resolve definition names
        is_last: True when nothing will be written after this value

    Raises:
        SerializationError: If the value does not satisfy the codec
    """
    if isinstance(codec, Static):
        if value is not None and value != codec.value:
            raise SerializationError(f"Static value {codec.value!r} expected, got {value!r}")
        return

    if isinstance(codec, Void):
        if value is not None and value is not True:
            raise SerializationError(f"Void accepts only None or True, got {value!r}")
        return

    if isinstance(codec, Boolean):
        if value not in (True, False) or not isinstance(value, (bool, int)):
            raise SerializationError(f"Boolean expects true/false or 1/0, got {value!r}")
        writer.write_bool(bool(value))
        return

    if isinstance(codec, Integer):
        if isinstance(value, bool) or not isinstance(value, int):
            raise SerializationError(f"Integer expects int, got {type(value).__name__}")
        if value < 0 or value > codec.max_value:
            raise SerializationError(
                f"Integer value {value} out of bounds [0, {codec.max_value}]"
            )
        writer.write_bits(value, codec.bit_length)
        return

    if isinstance(codec, Float):
        _write_float(writer, codec, value)
        return

    if isinstance(codec, Bytes):
        data = _coerce_bytes(value, codec.byte_length, hexa=isinstance(codec, Hexa))
        writer.write_bytes(data)
        return

    if isinstance(codec, Symbol):
        try:
            index = codec.values.index(value)
        except ValueError as err:
            raise SerializationError(
                f"Unknown symbol {value!r}, expected one of {list(codec.values)}"
            ) from err
        writer.write_bits(index, codec.width)
        return

    if isinstance(codec, Sequence):
        _write_record(writer, codec.names, value, configuration, is_last)
        return

    if isinstance(codec, Alias):
        target = configuration.definition(codec.target).codec
        write_value(writer, target, value, configuration, is_last)
        return

    if isinstance(codec, Array):
        _write_array(writer, codec, value, configuration)
        return

    if isinstance(codec, Xor):
        _write_xor(writer, codec, value, configuration, is_last)
        return

    raise SerializationError(f"Unsupported codec {codec!r}")


def write_message(
    writer: BitWriter,
    fragments: Any,
    configuration: Configuration,
    terminate: bool,
) -> None:
    """Write a list of fragments as [binary key][fragment] pairs.

    Args:
        writer: BitWriter to append to
        fragments: Ordered list of records, each naming a top-level definition
        configuration: Configuration providing key_bit_size and definitions
        terminate: Append a zero key after the last fragment (skipped when a
            definition owns binary key 0)

    Raises:
        SerializationError: If a record matches no definition or fails to encode
    """
    if not isinstance(fragments, (list, tuple)):
        raise SerializationError(
            f"Message must be a list of fragments, got {type(fragments).__name__}"
        )

    last = len(fragments) - 1
    for index, fragment in enumerate(fragments):
        definition = configuration.detect_definition(fragment)
        if definition is None:
            raise SerializationError(f"Unable to infer definition for {fragment!r}")

        writer.write_bits(definition.binary_key, configuration.key_bit_size)
        definition.encode_fragment(
            writer, fragment, configuration, is_last=not terminate and index == last
        )

    if terminate and configuration.definition_for_binary_key(0) is None:
        writer.write_bits(0, configuration.key_bit_size)


def _write_float(writer: BitWriter, codec: Float, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SerializationError(f"Float expects a number, got {type(value).__name__}")

    if not codec.min_value <= value <= codec.max_value:
        raise SerializationError(
            f"Float value {value} out of bounds [{codec.min_value}, {codec.max_value}]"
        )

    scaled = (value - codec.min_value) / (codec.max_value - codec.min_value) * codec.max_int
    encoded = min(max(math.floor(scaled + 0.5), 0), codec.max_int)
    writer.write_bits(encoded, codec.bit_length)


def _coerce_bytes(value: Any, byte_length: int, hexa: bool) -> bytes:
    """Normalize the accepted byte representations to ``bytes``."""
    if isinstance(value, (bytes, bytearray)):
        data = bytes(value)
    elif isinstance(value, str):
        if value[:2].lower() == "0x":
            data = _from_hex(value[2:])
        elif hexa:
            data = _from_hex(value)
        else:
            try:
                data = value.encode("latin-1")
            except UnicodeEncodeError as err:
                raise SerializationError(f"Not a binary string: {value!r}") from err
    elif isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= 255:
                raise SerializationError(f"Invalid byte value {item!r} in {value!r}")
        data = bytes(value)
    else:
        raise SerializationError(f"Expected bytes, hex string or byte list, got {value!r}")

    if len(data) != byte_length:
        raise SerializationError(f"Expected {byte_length} bytes, got {len(data)} bytes")
    return data


def _from_hex(text: str) -> bytes:
    try:
        return bytes.fromhex(text)
    except ValueError as err:
        raise SerializationError(f"Invalid hex string {text!r}") from err


def _write_record(
    writer: BitWriter,
    names: tuple[str, ...],
    record: Any,
    configuration: Configuration,
    is_last: bool,
) -> None:
    """Write one value per name, from a record or a positional list."""
    positional = isinstance(record, (list, tuple))
    if positional:
        if len(record) != len(names):
            raise SerializationError(
                f"Expected {len(names)} positional values for {list(names)}, got {len(record)}"
            )
    elif not is_record(record):
        raise SerializationError(f"Expected a record for {list(names)}, got {record!r}")

    last = len(names) - 1
    for index, name in enumerate(names):
        item_is_last = is_last and index == last
        if positional:
            present, item = True, record[index]
        else:
            present, item = has_field(record, name), fetch_field(record, name)

        if name == MESSAGE_PLACEHOLDER:
            if not present:
                raise SerializationError(f"Missing key {name} in {record!r}")
            write_message(writer, item, configuration, terminate=not item_is_last)
            continue

        codec = configuration.definition(name).codec
        if not present and not isinstance(codec, (Static, Void)):
            raise SerializationError(f"Missing key {name} in {record!r}")
        write_value(writer, codec, item, configuration, item_is_last)


def _write_array(
    writer: BitWriter, codec: Array, value: Any, configuration: Configuration
) -> None:
    if not isinstance(value, (list, tuple)):
        raise SerializationError(f"Array expects a list, got {type(value).__name__}")
    if len(value) > codec.max_items:
        raise SerializationError(
            f"Array holds at most {codec.max_items} items, got {len(value)}"
        )

    writer.write_bits(len(value), codec.length_bits)

    # Elements are never the end of the buffer: the count says more may follow.
    if not codec.is_homogeneous:
        for item in value:
            _write_record(writer, codec.names, item, configuration, is_last=False)
        return

    name = codec.names[0]
    if name == MESSAGE_PLACEHOLDER:
        for item in value:
            write_message(writer, item, configuration, terminate=True)
        return

    element_codec = configuration.definition(name).codec
    for item in value:
        write_value(writer, element_codec, item, configuration, is_last=False)


def _write_xor(
    writer: BitWriter, codec: Xor, value: Any, configuration: Configuration, is_last: bool
) -> None:
    if not is_record(value):
        raise SerializationError(
            f"Xor expects a record with one of {list(codec.options)}, got {value!r}"
        )

    active = [option for option in codec.options if fetch_field(value, option) is not None]
    if len(active) != 1:
        raise SerializationError(
            f"Xor expects exactly one of {list(codec.options)}, got {active or 'none'}"
        )

    option = active[0]
    writer.write_bits(codec.selector_for(option), codec.width)
    item = fetch_field(value, option)
    if option == MESSAGE_PLACEHOLDER:
        write_message(writer, item, configuration, terminate=not is_last)
    else:
        write_value(writer, configuration.definition(option).codec, item, configuration, is_last)
