"""Codec syntax tree produced by the schema parser.

A CodecNode is the unresolved form of a codec: its kind and the raw,
type-converted arguments from the schema line. Nodes are turned into bound
codecs by :func:`bitschema.schema.builder.build_codec` once every definition
name is known.
"""

from __future__ import annotations

import enum
from typing import Union

from pydantic import BaseModel, ConfigDict

from ..exceptions import ConfigurationError

ArgValue = Union[bool, int, float, str]


class CodecKind(str, enum.Enum):
    """Codec kinds recognised in schema text."""

    STATIC = "static"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    BYTES = "bytes"
    HEXA = "hexa"
    SYMBOL = "symbol"
    VOID = "void"
    SEQUENCE = "sequence"
    ALIAS = "alias"
    ARRAY = "array"
    XOR = "xor"

    @classmethod
    def from_token(cls, token: str) -> CodecKind:
        """Resolve a case-insensitive codec token (NUMERIC is INTEGER)."""
        name = token.lower()
        if name == "numeric":
            return cls.INTEGER
        try:
            return cls(name)
        except ValueError as err:
            raise ConfigurationError(f"Unknown codec {token}") from err


class CodecNode(BaseModel):
    """Unresolved codec: kind plus converted arguments.

    Example:
        >>> CodecNode(kind=CodecKind.FLOAT, args=(8, 1.5, 4.0))
        CodecNode(kind=<CodecKind.FLOAT: 'float'>, args=(8, 1.5, 4.0))
    """

    model_config = ConfigDict(frozen=True)

    kind: CodecKind
    args: tuple[ArgValue, ...] = ()
