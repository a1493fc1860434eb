"""Schema definitions.

A Definition names one fragment of the schema: its binary key, its codec and
the static fields asserted on encode and injected on decode. Definitions are
created unbound by the parser and finalized once every name is registered,
because codecs refer to sibling definitions by name.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

from ..codec.bitpack import BitReader, BitWriter
from ..codec.decoder import read_value
from ..codec.encoder import write_value
from ..codec.types import Codec
from ..exceptions import ConfigurationError, SerializationError
from ..records import fetch_field, field_names, has_field
from .ast import CodecNode
from .builder import build_codec

if TYPE_CHECKING:
    from .configuration import Configuration


class Definition:
    """One named fragment of a schema.

    Attributes:
        name: Unique definition name
        binary_key: Tag written ahead of the fragment in messages
        codec_node: Unresolved codec from the schema text
        static_fields: Constant fields of the fragment
        comment: Trailing ``//`` comment, if any
        codec: Bound codec, available after :meth:`finalize`
    """

    def __init__(
        self,
        name: str,
        binary_key: int,
        codec_node: CodecNode,
        static_fields: Optional[Mapping[str, Any]] = None,
        comment: Optional[str] = None,
    ) -> None:
        self.name = name
        self.binary_key = binary_key
        self.codec_node = codec_node
        self.static_fields: Mapping[str, Any] = MappingProxyType(dict(static_fields or {}))
        self.comment = comment
        self._codec: Optional[Codec] = None

    def __repr__(self) -> str:
        return f"Definition({self.name!r}, binary_key=0x{self.binary_key:X}, {self.codec_node.kind.name})"

    @property
    def is_finalized(self) -> bool:
        return self._codec is not None

    @property
    def codec(self) -> Codec:
        if self._codec is None:
            raise ConfigurationError(f"Definition {self.name} is not finalized")
        return self._codec

    def finalize(self, configuration: Configuration) -> None:
        """Build the codec, resolving names against ``configuration``.

        Must run after every definition is registered.

        Raises:
            ConfigurationError: If the codec arguments or references are invalid
        """
        self._codec = build_codec(self.codec_node, configuration, self)

    def encode_fragment(
        self,
        writer: BitWriter,
        fragment: Any,
        configuration: Configuration,
        is_last: bool = True,
    ) -> None:
        """Encode the value stored under this definition's name in ``fragment``.

        Raises:
            SerializationError: On a static field mismatch, a missing value,
                or a value the codec rejects
        """
        self._check_static_fields(fragment)
        write_value(writer, self.codec, self._extract_value(fragment), configuration, is_last)

    def decode_fragment(self, reader: BitReader, configuration: Configuration) -> dict[str, Any]:
        """Decode a fragment record, static fields included."""
        return self.build_fragment(read_value(reader, self.codec, configuration))

    def build_fragment(self, value: Any) -> dict[str, Any]:
        fragment = {self.name: value}
        fragment.update(self.static_fields)
        return fragment

    def _check_static_fields(self, fragment: Any) -> None:
        for key, expected in self.static_fields.items():
            actual = fetch_field(fragment, key)
            if actual is None or actual == expected:
                continue
            raise SerializationError(
                f"Static field {key} of {self.name} expected {expected!r}, got {actual!r}"
            )

    def _extract_value(self, fragment: Any) -> Any:
        if has_field(fragment, self.name):
            return fetch_field(fragment, self.name)
        raise SerializationError(
            f"Missing key {self.name} in fragment (available: {', '.join(field_names(fragment))})"
        )
