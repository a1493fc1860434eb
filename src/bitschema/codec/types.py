"""Codec kinds.

Each codec is a small frozen dataclass holding only the parameters parsed
from the schema. Codecs never own a buffer and never hold a reference to
their Configuration: composite codecs keep definition *names*, which the
encoder and decoder resolve against the Configuration passed to every call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Union

from ..exceptions import ConfigurationError

#: Reserved field name for an embedded, self-delimiting list of fragments.
MESSAGE_PLACEHOLDER = "message"

MAX_BIT_LENGTH = 64


def selector_bits(count: int) -> int:
    """Bits needed to index ``count`` entries (0 when count <= 1)."""
    if count <= 1:
        return 0
    return math.ceil(math.log2(count))


def _check_bit_length(kind: str, bit_length: int, minimum: int = 1) -> None:
    if not isinstance(bit_length, int) or isinstance(bit_length, bool):
        raise ConfigurationError(f"{kind}: bit length must be an integer, got {bit_length!r}")
    if bit_length < minimum or bit_length > MAX_BIT_LENGTH:
        raise ConfigurationError(
            f"{kind}: bit length must be {minimum}-{MAX_BIT_LENGTH}, got {bit_length}"
        )


def _check_placeholder(kind: str, names: tuple[str, ...]) -> None:
    count = names.count(MESSAGE_PLACEHOLDER)
    if count > 1:
        raise ConfigurationError(f"{kind}: at most one '{MESSAGE_PLACEHOLDER}' entry allowed")
    if count == 1 and names[-1] != MESSAGE_PLACEHOLDER:
        raise ConfigurationError(f"{kind}: '{MESSAGE_PLACEHOLDER}' must be the last entry")


@dataclass(frozen=True)
class Static:
    """Writes nothing; always reads as ``value``."""

    kind: ClassVar[str] = "STATIC"

    value: Any = True


@dataclass(frozen=True)
class Boolean:
    """One bit."""

    kind: ClassVar[str] = "BOOLEAN"


@dataclass(frozen=True)
class Integer:
    """Unsigned integer in [0, 2^bit_length - 1]."""

    kind: ClassVar[str] = "INTEGER"

    bit_length: int

    def __post_init__(self) -> None:
        _check_bit_length(self.kind, self.bit_length)

    @property
    def max_value(self) -> int:
        return (1 << self.bit_length) - 1


@dataclass(frozen=True)
class Float:
    """Real value linearly quantized onto [0, 2^bit_length - 1].

    Attributes:
        bit_length: Width of the quantized integer
        min_value: Lowest encodable value (maps to 0)
        max_value: Highest encodable value (maps to the max integer)
    """

    kind: ClassVar[str] = "FLOAT"

    bit_length: int
    min_value: float
    max_value: float

    def __post_init__(self) -> None:
        _check_bit_length(self.kind, self.bit_length)
        if not self.max_value > self.min_value:
            raise ConfigurationError(
                f"{self.kind}: max ({self.max_value}) must exceed min ({self.min_value})"
            )

    @property
    def max_int(self) -> int:
        return (1 << self.bit_length) - 1


@dataclass(frozen=True)
class Bytes:
    """Raw fixed-length payload."""

    kind: ClassVar[str] = "BYTES"

    byte_length: int

    def __post_init__(self) -> None:
        if not isinstance(self.byte_length, int) or self.byte_length < 1:
            raise ConfigurationError(
                f"{self.kind}: byte length must be a positive integer, got {self.byte_length!r}"
            )


@dataclass(frozen=True)
class Hexa(Bytes):
    """Same wire format as Bytes, represented as a "0x..." uppercase hex string."""

    kind: ClassVar[str] = "HEXA"


@dataclass(frozen=True)
class Symbol:
    """Index of a value within a fixed ordered list of symbols.

    Symbols keep the type converted from the schema text, so
    ``SYMBOL(low;1;high)`` holds the integer 1, not the string "1".

    Attributes:
        values: Ordered symbol values
        bit_length: Explicit selector width, or None for ceil(log2(len(values)))
    """

    kind: ClassVar[str] = "SYMBOL"

    values: tuple[Any, ...]
    bit_length: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.values:
            raise ConfigurationError(f"{self.kind}: at least one symbol is required")
        if len(set(self.values)) != len(self.values):
            raise ConfigurationError(f"{self.kind}: duplicate symbols in {list(self.values)}")
        if self.bit_length is not None:
            _check_bit_length(self.kind, self.bit_length, minimum=0)
            if self.bit_length < selector_bits(len(self.values)):
                raise ConfigurationError(
                    f"{self.kind}: {self.bit_length} bits cannot index {len(self.values)} symbols"
                )

    @property
    def width(self) -> int:
        if self.bit_length is not None:
            return self.bit_length
        return selector_bits(len(self.values))


@dataclass(frozen=True)
class Void:
    """Zero bits; reads as True."""

    kind: ClassVar[str] = "VOID"


@dataclass(frozen=True)
class Sequence:
    """Ordered record of other definitions, optionally ending with the placeholder."""

    kind: ClassVar[str] = "SEQUENCE"

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.names:
            raise ConfigurationError(f"{self.kind}: at least one entry is required")
        if len(set(self.names)) != len(self.names):
            raise ConfigurationError(f"{self.kind}: duplicate entries in {list(self.names)}")
        _check_placeholder(self.kind, self.names)


@dataclass(frozen=True)
class Alias:
    """Delegates to another definition's codec."""

    kind: ClassVar[str] = "ALIAS"

    target: str


@dataclass(frozen=True)
class Array:
    """Counted list of elements.

    With a single element name the list is homogeneous; with several, each
    element is a record holding one value per name.
    """

    kind: ClassVar[str] = "ARRAY"

    length_bits: int
    names: tuple[str, ...]

    def __post_init__(self) -> None:
        _check_bit_length(self.kind, self.length_bits)
        if not self.names:
            raise ConfigurationError(f"{self.kind}: at least one element name is required")
        if len(set(self.names)) != len(self.names):
            raise ConfigurationError(f"{self.kind}: duplicate entries in {list(self.names)}")
        _check_placeholder(self.kind, self.names)

    @property
    def max_items(self) -> int:
        return (1 << self.length_bits) - 1

    @property
    def is_homogeneous(self) -> bool:
        return len(self.names) == 1


@dataclass(frozen=True)
class Xor:
    """Tagged union over named options.

    By default the selector is the option index on ceil(log2(n)) bits.
    ``bit_length`` and ``selectors`` pin an explicit width and per-option
    selector values instead.
    """

    kind: ClassVar[str] = "XOR"

    options: tuple[str, ...]
    bit_length: Optional[int] = None
    selectors: Optional[tuple[int, ...]] = None

    def __post_init__(self) -> None:
        if not self.options:
            raise ConfigurationError(f"{self.kind}: at least one option is required")
        if len(set(self.options)) != len(self.options):
            raise ConfigurationError(f"{self.kind}: duplicate options in {list(self.options)}")
        if self.bit_length is not None:
            _check_bit_length(self.kind, self.bit_length, minimum=0)
        if self.selectors is None:
            if self.bit_length is not None and self.bit_length < selector_bits(len(self.options)):
                raise ConfigurationError(
                    f"{self.kind}: {self.bit_length} bits cannot index {len(self.options)} options"
                )
            return

        if self.bit_length is None:
            raise ConfigurationError(f"{self.kind}: explicit selectors need a bit length")
        if len(self.selectors) != len(self.options):
            raise ConfigurationError(f"{self.kind}: one selector per option is required")
        if len(set(self.selectors)) != len(self.selectors):
            raise ConfigurationError(f"{self.kind}: duplicate selectors {list(self.selectors)}")
        limit = 1 << self.bit_length
        for selector in self.selectors:
            if selector < 0 or selector >= limit:
                raise ConfigurationError(
                    f"{self.kind}: selector 0x{selector:X} exceeds {self.bit_length} bits"
                )

    @property
    def width(self) -> int:
        if self.bit_length is not None:
            return self.bit_length
        return selector_bits(len(self.options))

    def selector_for(self, option: str) -> int:
        index = self.options.index(option)
        if self.selectors is None:
            return index
        return self.selectors[index]

    def option_for(self, selector: int) -> Optional[str]:
        if self.selectors is None:
            return self.options[selector] if selector < len(self.options) else None
        if selector in self.selectors:
            return self.options[self.selectors.index(selector)]
        return None


Codec = Union[
    Static, Boolean, Integer, Float, Bytes, Hexa, Symbol, Void, Sequence, Alias, Array, Xor
]
