"""Schema configuration.

A Configuration owns every Definition of a schema, indexed by name and by
binary key, plus the key bit size used for message framing. Construction is
two-phase: all definitions are registered first, then each is finalized so
that codecs can resolve any sibling name, including forward references.

Once built, a Configuration is never mutated and may be shared by concurrent
readers.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Optional

from ..codec.types import MESSAGE_PLACEHOLDER, Alias, Codec, Sequence, Xor
from ..exceptions import ConfigurationError
from ..records import fetch_field, field_names, is_record
from .definition import Definition
from .parser import SchemaParser
from .settings import DEFAULT_KEY_BIT_SIZE, MAX_KEY_BIT_SIZE

logger = logging.getLogger(__name__)


class Configuration:
    """Finalized set of schema definitions.

    Example:
        >>> configuration = Configuration.parse(
        ...     "nb_bit_key_binary=6\\n"
        ...     "0x03 resync_kpi INTEGER(4)\\n"
        ...     "0x13 flag BOOLEAN\\n"
        ... )
        >>> configuration.definition("flag").binary_key
        19
    """

    def __init__(
        self,
        definitions: Iterable[Definition],
        key_bit_size: int = DEFAULT_KEY_BIT_SIZE,
    ) -> None:
        """Register and finalize ``definitions``.

        Args:
            definitions: Unfinalized definitions, in schema order
            key_bit_size: Width of every binary key

        Raises:
            ConfigurationError: On duplicate names or keys, oversized keys,
                any codec that fails to build, or a definition that
                recurses into itself without reading a bit
        """
        if (
            isinstance(key_bit_size, bool)
            or not isinstance(key_bit_size, int)
            or not 1 <= key_bit_size <= MAX_KEY_BIT_SIZE
        ):
            raise ConfigurationError(
                f"key_bit_size must be an integer from 1 to {MAX_KEY_BIT_SIZE}, got {key_bit_size!r}"
            )

        self.key_bit_size = key_bit_size
        self._definitions: dict[str, Definition] = {}
        self._definitions_by_key: dict[int, Definition] = {}

        for definition in definitions:
            self._register(definition)

        for definition in self._definitions.values():
            definition.finalize(self)

        self._check_cycles()

        logger.debug(
            "Built configuration with %d definitions, %d-bit keys",
            len(self._definitions),
            key_bit_size,
        )

    @classmethod
    def parse(cls, text: str) -> Configuration:
        """Parse schema text into a finalized Configuration.

        Raises:
            ConfigurationError: If the text is malformed or inconsistent
        """
        settings, definitions = SchemaParser(text).parse()
        return cls(definitions, key_bit_size=settings.key_bit_size)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[Definition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def definitions(self) -> list[Definition]:
        """Definitions in registration order."""
        return list(self._definitions.values())

    def definition(self, name: str) -> Definition:
        """Return the definition called ``name``.

        Raises:
            ConfigurationError: If no such definition exists
        """
        try:
            return self._definitions[name]
        except KeyError:
            raise ConfigurationError(f"Unknown definition {name}") from None

    def definition_for_binary_key(self, binary_key: int) -> Optional[Definition]:
        """Return the definition owning ``binary_key``, or None."""
        return self._definitions_by_key.get(binary_key)

    def detect_definition(self, fragment: Any) -> Optional[Definition]:
        """Return the definition a fragment record belongs to.

        The first field of the record that names a definition and holds a
        non-None value wins.
        """
        if not is_record(fragment):
            return None
        for key in field_names(fragment):
            definition = self._definitions.get(key)
            if definition is not None and fetch_field(fragment, key) is not None:
                return definition
        return None

    def _register(self, definition: Definition) -> None:
        name = definition.name
        binary_key = definition.binary_key
        max_key = (1 << self.key_bit_size) - 1

        if name == MESSAGE_PLACEHOLDER:
            raise ConfigurationError(f"'{MESSAGE_PLACEHOLDER}' is a reserved name")
        if name in self._definitions:
            raise ConfigurationError(f"Duplicate definition {name}")
        if binary_key < 0 or binary_key > max_key:
            raise ConfigurationError(
                f"Binary key 0x{binary_key:02X} of {name} exceeds {self.key_bit_size} bits"
            )
        if binary_key in self._definitions_by_key:
            raise ConfigurationError(
                f"Binary key 0x{binary_key:02X} already used by "
                f"{self._definitions_by_key[binary_key].name}"
            )

        self._definitions[name] = definition
        self._definitions_by_key[binary_key] = definition

    def _check_cycles(self) -> None:
        """Reject definitions that would recurse into themselves without reading a bit.

        Raises:
            ConfigurationError: If such a cycle exists
        """
        done: set[str] = set()
        for name in self._definitions:
            self._walk(name, [], done)

    def _walk(self, name: str, path: list[str], done: set[str]) -> None:
        if name in done:
            return
        if name in path:
            cycle = path[path.index(name):] + [name]
            raise ConfigurationError(f"Definition {name}: cycle through {' -> '.join(cycle)}")

        path.append(name)
        for target in _unconditional_references(self._definitions[name].codec):
            self._walk(target, path, done)
        path.pop()
        done.add(name)


def _unconditional_references(codec: Codec) -> tuple[str, ...]:
    # Array counts and non-empty xor selectors are read before their targets
    if isinstance(codec, Sequence):
        names: tuple[str, ...] = codec.names
    elif isinstance(codec, Alias):
        names = (codec.target,)
    elif isinstance(codec, Xor) and codec.width == 0:
        names = codec.options
    else:
        names = ()
    return tuple(name for name in names if name != MESSAGE_PLACEHOLDER)
