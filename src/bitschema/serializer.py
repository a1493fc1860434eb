"""Top-level encode/decode API.

The Serializer handles two request shapes per direction:

- a single fragment, encoded with its definition's codec only
- a message, an ordered list of fragments each prefixed with its
  definition's binary key so the payload describes itself
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel

from .codec.bitpack import BitReader, BitWriter
from .codec.decoder import read_message
from .codec.encoder import write_message
from .exceptions import SerializationError
from .records import has_field
from .schema.configuration import Configuration

_NO_VALUE: Any = object()


class Serializer:
    """Encodes and decodes fragments and messages for one Configuration.

    Example:
        >>> configuration = Configuration.parse(
        ...     "nb_bit_key_binary=6\\n"
        ...     "0x03 resync_kpi INTEGER(4)\\n"
        ...     "0x13 flag BOOLEAN\\n"
        ... )
        >>> serializer = Serializer(configuration)
        >>> serializer.serialize("resync_kpi", 12)
        (b'\\xc0', 4)
        >>> serializer.deserialize("resync_kpi", b"\\xc0")
        {'resync_kpi': 12}
        >>> data, bits = serializer.serialize([{"flag": True}, {"resync_kpi": 5}])
        >>> serializer.deserialize(data)
        [{'flag': True}, {'resync_kpi': 5}]
    """

    def __init__(self, configuration: Configuration) -> None:
        self.configuration = configuration

    def serialize(self, definition_or_message: Any, value: Any = _NO_VALUE) -> tuple[bytes, int]:
        """Encode a single fragment or a whole message.

        ``serialize(name, value)`` encodes ``value`` as the fragment of
        definition ``name``. ``serialize(records)`` encodes a message: a list
        of records (or a single record) each framed by its binary key.

        Returns:
            Tuple of (packed bytes, number of meaningful bits)

        Raises:
            TypeError: If a definition name is given without a value
            ValueError: If the value wraps itself under the definition name
            ConfigurationError: If the definition name is unknown
            SerializationError: If a value does not fit the schema
        """
        if value is _NO_VALUE:
            if isinstance(definition_or_message, str) and definition_or_message in self.configuration:
                raise TypeError(
                    f"value is required when serializing definition {definition_or_message}"
                )
            return self._serialize_message(definition_or_message)

        return self._serialize_single(definition_or_message, value)

    def deserialize(self, definition_or_data: Any, data: Any = None) -> Any:
        """Decode a single fragment or a whole message.

        ``deserialize(name, data)`` returns the fragment record of definition
        ``name`` with its static fields. ``deserialize(data)`` returns the
        list of fragment records of a message.

        Raises:
            ConfigurationError: If the definition name is unknown
            DeserializationError: If the data is truncated or holds an unknown key
        """
        if data is None:
            return self._deserialize_message(definition_or_data)
        return self._deserialize_single(definition_or_data, data)

    def _serialize_single(self, name: str, value: Any) -> tuple[bytes, int]:
        definition = self.configuration.definition(name)

        if isinstance(value, (Mapping, BaseModel)) and has_field(value, definition.name):
            raise ValueError(
                f"value for {definition.name} should not include the definition key"
            )

        writer = BitWriter()
        definition.encode_fragment(writer, {definition.name: value}, self.configuration)
        return writer.to_bytes(), writer.size

    def _serialize_message(self, data: Any) -> tuple[bytes, int]:
        if isinstance(data, (Mapping, BaseModel)):
            fragments = [data]
        elif isinstance(data, (list, tuple)):
            fragments = list(data)
        else:
            raise SerializationError(f"Message must be a list or a record, got {data!r}")

        writer = BitWriter()
        write_message(writer, fragments, self.configuration, terminate=False)
        return writer.to_bytes(), writer.size

    def _deserialize_single(self, name: str, data: Any) -> dict[str, Any]:
        definition = self.configuration.definition(name)
        reader = BitReader(_normalize_bytes(data))
        return definition.decode_fragment(reader, self.configuration)

    def _deserialize_message(self, data: Any) -> list[dict[str, Any]]:
        reader = BitReader(_normalize_bytes(data))
        return read_message(reader, self.configuration)


def _normalize_bytes(data: Any) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, (list, tuple)):
        return bytes(data)
    raise TypeError(f"data must be bytes or a list of byte values, got {type(data).__name__}")


def serialize(
    configuration: Configuration, definition_or_message: Any, value: Any = _NO_VALUE
) -> tuple[bytes, int]:
    """Shortcut for ``Serializer(configuration).serialize(...)``."""
    return Serializer(configuration).serialize(definition_or_message, value)


def deserialize(
    configuration: Configuration, definition_or_data: Any, data: Optional[Any] = None
) -> Any:
    """Shortcut for ``Serializer(configuration).deserialize(...)``."""
    return Serializer(configuration).deserialize(definition_or_data, data)
