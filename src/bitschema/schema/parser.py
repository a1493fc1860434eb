"""Schema text parser.

Schema text is line oriented. Each non-blank line is either a global
assignment or a definition::

    nb_bit_key_binary=6
    0x02 battery_level FLOAT(8;1.5;4.0) // 8 bits from 1.5 to 4.0
    adding_child 0x09 ALIAS(device_mac) STATIC(signal)
    0x04 reboot_kpi INTEGER(4) alarm=12

The binary key (hex or decimal) may come before or after the name. Codec
arguments and static field values are split on ``;`` or ``,`` and converted
to bool, int or float where they look like one.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from ..exceptions import ConfigurationError
from .ast import ArgValue, CodecKind, CodecNode
from .definition import Definition
from .settings import SchemaSettings

_GLOBAL_ASSIGNMENT = re.compile(r"^([A-Za-z0-9_]+)\s*=\s*(.*)$")
_TOKEN = re.compile(r"\S+\([^)]*\)|\S+")
_BINARY_KEY = re.compile(r"^(0[xX][0-9a-fA-F]+|\d+)$")
_NAME = re.compile(r"^[A-Za-z_]\w*$")
_CODEC = re.compile(r"^([A-Za-z_]+)(?:\((.*)\))?$")
_STATIC_BLOCK = re.compile(r"^STATIC\((.*)\)$", re.IGNORECASE)
_INTEGER = re.compile(r"^-?\d+$")
_FLOAT = re.compile(r"^-?\d*\.\d+$")
_SEPARATOR = re.compile(r"[;,]")


def convert_value(raw: str) -> ArgValue:
    """Convert a schema token to bool, int or float, else keep the text."""
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if _INTEGER.match(raw):
        return int(raw)
    if _FLOAT.match(raw):
        return float(raw)
    return raw


def parse_binary_key(token: str) -> int:
    if token.lower().startswith("0x"):
        return int(token, 16)
    return int(token)


class SchemaParser:
    """Turns schema text into settings and unfinalized definitions.

    Example:
        >>> settings, definitions = SchemaParser("0x01 flag BOOLEAN").parse()
        >>> settings.key_bit_size, definitions[0].name
        (8, 'flag')
    """

    def __init__(self, text: str) -> None:
        self._lines = (text or "").splitlines()

    def parse(self) -> tuple[SchemaSettings, list[Definition]]:
        """Parse every line.

        Returns:
            Tuple of (settings, definitions in schema order)

        Raises:
            ConfigurationError: On the first malformed line
        """
        assignments: dict[str, Any] = {}
        definitions: list[Definition] = []

        for line_number, line in enumerate(self._lines, 1):
            body, comment = self._split_comment(line)
            if not body:
                continue

            assignment = _GLOBAL_ASSIGNMENT.match(body)
            if assignment:
                assignments[assignment.group(1)] = convert_value(assignment.group(2).strip())
                continue

            definitions.append(self._parse_definition(body, comment, line_number))

        return SchemaSettings.from_assignments(assignments), definitions

    @staticmethod
    def _split_comment(line: str) -> tuple[str, Optional[str]]:
        body, separator, comment = line.partition("//")
        return body.strip(), (comment.strip() if separator else None)

    def _parse_definition(self, text: str, comment: Optional[str], line_number: int) -> Definition:
        tokens = _TOKEN.findall(text)
        binary_key, name, tokens = self._split_key_and_name(tokens, line_number)

        if not tokens:
            raise ConfigurationError(f"Missing codec for {name} on line {line_number}")

        codec_node = self._parse_codec(tokens[0], line_number)
        static_fields = self._parse_static(tokens[1:])

        return Definition(
            name=name,
            binary_key=binary_key,
            codec_node=codec_node,
            static_fields=static_fields,
            comment=comment,
        )

    @staticmethod
    def _split_key_and_name(tokens: list[str], line_number: int) -> tuple[int, str, list[str]]:
        if len(tokens) < 2:
            raise ConfigurationError(f"Malformed definition on line {line_number}")

        first, second = tokens[0], tokens[1]
        if _BINARY_KEY.match(first):
            binary_key, name = parse_binary_key(first), second
        elif _BINARY_KEY.match(second):
            binary_key, name = parse_binary_key(second), first
        else:
            raise ConfigurationError(f"Missing binary key for {first} on line {line_number}")

        if not _NAME.match(name):
            raise ConfigurationError(f"Invalid definition name {name!r} on line {line_number}")

        return binary_key, name, tokens[2:]

    @staticmethod
    def _parse_codec(token: str, line_number: int) -> CodecNode:
        match = _CODEC.match(token)
        if not match:
            raise ConfigurationError(f"Malformed codec {token!r} on line {line_number}")

        try:
            kind = CodecKind.from_token(match.group(1))
        except ConfigurationError as err:
            raise ConfigurationError(f"{err} on line {line_number}") from err

        arguments = match.group(2) or ""
        args = tuple(
            convert_value(entry.strip())
            for entry in _SEPARATOR.split(arguments)
            if entry.strip()
        )
        return CodecNode(kind=kind, args=args)

    @staticmethod
    def _parse_static(tokens: list[str]) -> dict[str, ArgValue]:
        static: dict[str, ArgValue] = {}
        for token in tokens:
            block = _STATIC_BLOCK.match(token)
            entries = block.group(1) if block else token
            for entry in _SEPARATOR.split(entries):
                cleaned = entry.strip()
                if not cleaned:
                    continue
                key, separator, value = cleaned.partition("=")
                static[key.strip()] = convert_value(value.strip()) if separator else True
        return static
