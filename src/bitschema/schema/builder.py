"""Codec construction from the parsed syntax tree.

build_codec() validates a CodecNode's arguments and checks every name it
references against the Configuration. It runs during Definition.finalize(),
after all definitions are registered, so forward references are legal.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable

from ..codec.types import (
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
from ..exceptions import ConfigurationError
from .ast import ArgValue, CodecKind, CodecNode

if TYPE_CHECKING:
    from .configuration import Configuration
    from .definition import Definition

WILDCARD = "*"

# "0x01:name", optionally opening or closing a bracketed list
_SELECTOR_PAIR = re.compile(r"^\[?\s*(0[xX][0-9a-fA-F]+|\d+)\s*:\s*([A-Za-z_]\w*)\s*\]?$")


def build_codec(node: CodecNode, configuration: Configuration, definition: Definition) -> Codec:
    """Build the bound codec for ``definition``.

    Raises:
        ConfigurationError: If arguments are invalid or a referenced name is unknown
    """
    builder = _BUILDERS[node.kind]
    try:
        return builder(list(node.args), configuration, definition)
    except ConfigurationError as err:
        raise ConfigurationError(f"Definition {definition.name}: {err}") from err


def _is_int(arg: ArgValue) -> bool:
    return isinstance(arg, int) and not isinstance(arg, bool)


def _as_name(arg: ArgValue) -> str:
    if isinstance(arg, bool):
        return "true" if arg else "false"
    return str(arg)


def _parse_selector(token: str) -> int:
    if token.lower().startswith("0x"):
        return int(token, 16)
    return int(token)


def _expect_count(kind: str, args: list[ArgValue], count: int) -> None:
    if len(args) != count:
        raise ConfigurationError(f"{kind} expects {count} argument(s), got {len(args)}")


def _expect_int(kind: str, arg: ArgValue, what: str) -> int:
    if not _is_int(arg):
        raise ConfigurationError(f"{kind} {what} must be an integer, got {arg!r}")
    return int(arg)


def _resolve_names(
    kind: str,
    args: list[ArgValue],
    configuration: Configuration,
    definition: Definition,
    allow_self: bool = True,
) -> tuple[str, ...]:
    names = tuple(_as_name(arg) for arg in args)
    for name in names:
        if name == MESSAGE_PLACEHOLDER:
            continue
        if name not in configuration:
            raise ConfigurationError(f"{kind} references unknown definition {name}")
        if not allow_self and name == definition.name:
            raise ConfigurationError(f"{kind} cannot reference itself")
    return names


def _build_static(args, configuration, definition) -> Codec:
    if len(args) > 1:
        raise ConfigurationError(f"STATIC expects at most 1 argument, got {len(args)}")
    return Static(args[0] if args else True)


def _build_boolean(args, configuration, definition) -> Codec:
    _expect_count("BOOLEAN", args, 0)
    return Boolean()


def _build_void(args, configuration, definition) -> Codec:
    _expect_count("VOID", args, 0)
    return Void()


def _build_integer(args, configuration, definition) -> Codec:
    _expect_count("INTEGER", args, 1)
    return Integer(_expect_int("INTEGER", args[0], "bit length"))


def _build_float(args, configuration, definition) -> Codec:
    _expect_count("FLOAT", args, 3)
    bit_length = _expect_int("FLOAT", args[0], "bit length")
    bounds = []
    for arg in args[1:]:
        if isinstance(arg, bool) or not isinstance(arg, (int, float)):
            raise ConfigurationError(f"FLOAT bounds must be numbers, got {arg!r}")
        bounds.append(float(arg))
    return Float(bit_length, bounds[0], bounds[1])


def _build_bytes(args, configuration, definition) -> Codec:
    _expect_count("BYTES", args, 1)
    return Bytes(_expect_int("BYTES", args[0], "byte length"))


def _build_hexa(args, configuration, definition) -> Codec:
    _expect_count("HEXA", args, 1)
    return Hexa(_expect_int("HEXA", args[0], "byte length"))


def _build_symbol(args, configuration, definition) -> Codec:
    bit_length = None
    if args and _is_int(args[0]):
        bit_length = int(args[0])
        args = args[1:]
    return Symbol(tuple(args), bit_length)


def _build_sequence(args, configuration, definition) -> Codec:
    return Sequence(
        _resolve_names("SEQUENCE", args, configuration, definition, allow_self=False)
    )


def _build_alias(args, configuration, definition) -> Codec:
    _expect_count("ALIAS", args, 1)
    target = _as_name(args[0])
    if target == MESSAGE_PLACEHOLDER:
        raise ConfigurationError(f"ALIAS cannot target '{MESSAGE_PLACEHOLDER}'")
    _resolve_names("ALIAS", [target], configuration, definition, allow_self=False)

    seen = {definition.name}
    current = target
    while True:
        node = configuration.definition(current).codec_node
        if node.kind is not CodecKind.ALIAS or len(node.args) != 1:
            break
        seen.add(current)
        current = _as_name(node.args[0])
        if current in seen:
            raise ConfigurationError(f"ALIAS cycle through {sorted(seen)}")
        if current not in configuration:
            break

    return Alias(target)


def _build_array(args, configuration, definition) -> Codec:
    if len(args) < 2:
        raise ConfigurationError("ARRAY expects a length bit count and at least one element")
    length_bits = _expect_int("ARRAY", args[0], "length bit count")
    return Array(length_bits, _resolve_names("ARRAY", args[1:], configuration, definition))


def _build_xor(args, configuration, definition) -> Codec:
    if [_as_name(arg) for arg in args] == [WILDCARD]:
        options = tuple(
            other.name for other in configuration.definitions if other.name != definition.name
        )
        return Xor(options)

    if len(args) >= 2 and _is_int(args[0]):
        pairs = [_SELECTOR_PAIR.match(_as_name(arg)) for arg in args[1:]]
        if all(pairs):
            names = [match.group(2) for match in pairs if match]
            selectors = tuple(_parse_selector(match.group(1)) for match in pairs if match)
            options = _resolve_names("XOR", names, configuration, definition)
            return Xor(options, bit_length=int(args[0]), selectors=selectors)

    return Xor(_resolve_names("XOR", args, configuration, definition))


_BUILDERS: dict[CodecKind, Callable[..., Codec]] = {
    CodecKind.STATIC: _build_static,
    CodecKind.BOOLEAN: _build_boolean,
    CodecKind.INTEGER: _build_integer,
    CodecKind.FLOAT: _build_float,
    CodecKind.BYTES: _build_bytes,
    CodecKind.HEXA: _build_hexa,
    CodecKind.SYMBOL: _build_symbol,
    CodecKind.VOID: _build_void,
    CodecKind.SEQUENCE: _build_sequence,
    CodecKind.ALIAS: _build_alias,
    CodecKind.ARRAY: _build_array,
    CodecKind.XOR: _build_xor,
}
