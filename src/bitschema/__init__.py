"""bitschema: Schema-Driven Bit-Level Codec

A Python library for dense binary encoding of named data fragments. A small
text schema maps each fragment to a bit-level codec; the schema compiles to a
graph of composable codecs that serialize values to a bit stream and back,
with no padding other than final byte alignment.

Key Features:
- Leaf codecs: static, boolean, integer, quantized float, bytes, hex, symbol, void
- Composite codecs: sequence, alias, counted array, tagged union (xor)
- Self-describing messages framed by per-definition binary keys
- Recursive embedded messages through the reserved "message" field

Quick Start:
    >>> from bitschema import Configuration, Serializer
    >>>
    >>> configuration = Configuration.parse('''
    ... nb_bit_key_binary=6
    ... 0x02 battery_level FLOAT(8;1.5;4.0)
    ... 0x03 resync_kpi INTEGER(4)
    ... 0x0A alert VOID signal
    ... ''')
    >>> serializer = Serializer(configuration)
    >>> data, bit_count = serializer.serialize("resync_kpi", 12)
    >>> serializer.deserialize("resync_kpi", data)
    {'resync_kpi': 12}
    >>> data, bit_count = serializer.serialize([{"resync_kpi": 5}, {"alert": True, "signal": True}])
    >>> serializer.deserialize(data)
    [{'resync_kpi': 5}, {'alert': True, 'signal': True}]
"""

from __future__ import annotations

__version__ = "0.1.0"

from .codec import MESSAGE_PLACEHOLDER, BitReader, BitWriter
from .exceptions import (
    BitschemaError,
    ConfigurationError,
    DeserializationError,
    SerializationError,
)
from .schema import Configuration, Definition, SchemaParser, SchemaSettings
from .serializer import Serializer, deserialize, serialize
from .utils import definition_sizes, fixed_bit_length, framed_bit_length

__all__ = [
    # Core API
    "Configuration",
    "Serializer",
    "serialize",
    "deserialize",
    # Schema
    "Definition",
    "SchemaParser",
    "SchemaSettings",
    "MESSAGE_PLACEHOLDER",
    # Bit I/O
    "BitReader",
    "BitWriter",
    # Exceptions
    "BitschemaError",
    "ConfigurationError",
    "SerializationError",
    "DeserializationError",
    # Sizing
    "definition_sizes",
    "fixed_bit_length",
    "framed_bit_length",
    # Version
    "__version__",
]
