"""Schema parsing and configuration for bitschema.

This module turns schema text into a finalized Configuration of named
definitions whose codecs reference each other by name.
"""

from __future__ import annotations

from .ast import CodecKind, CodecNode
from .configuration import Configuration
from .definition import Definition
from .parser import SchemaParser
from .settings import SchemaSettings

__all__ = [
    "CodecKind",
    "CodecNode",
    "Configuration",
    "Definition",
    "SchemaParser",
    "SchemaSettings",
]
