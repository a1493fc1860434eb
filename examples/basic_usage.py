#!/usr/bin/env python3
"""Basic usage example for bitschema.

This example demonstrates:
1. Loading a schema file
2. Encoding a single fragment and a whole message
3. Decoding back to plain records
4. Calculating fragment sizes
"""

from __future__ import annotations

from pathlib import Path

from bitschema import Configuration, Serializer, definition_sizes

SCHEMA_FILE = Path(__file__).with_name("sensor_schema.txt")


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("bitschema Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Loading the schema...")
    configuration = Configuration.parse(SCHEMA_FILE.read_text(encoding="utf-8"))
    serializer = Serializer(configuration)
    print(f"   {len(configuration)} definitions, {configuration.key_bit_size}-bit keys")
    print()

    print("2. Analyzing fragment sizes...")
    for name, bits in definition_sizes(configuration).items():
        print(f"   {name}: {bits if bits is not None else 'variable'} bits")
    print()

    print("3. Encoding a single fragment...")
    data, bits = serializer.serialize("battery_level", 3.3)
    print(f"   battery_level=3.3 -> {data.hex()} ({bits} bits)")
    print(f"   Decoded: {serializer.deserialize('battery_level', data)}")
    print()

    print("4. Encoding a message...")
    message = [
        {"accelerometer_kpi": "free_fall"},
        {"battery_level": 2.25},
        {"adding_child": "0xA1B2C3D4E5F6", "signal": True},
        {"alert": True, "signal": True},
    ]
    data, bits = serializer.serialize(message)
    print(f"   Encoded size: {bits} bits in {len(data)} bytes")
    print(f"   Hex: {data.hex()}")
    print(f"   Binary: {' '.join(format(b, '08b') for b in data)}")
    print()

    print("5. Decoding the message...")
    for fragment in serializer.deserialize(data):
        print(f"   {fragment}")
    print()

    print("6. Embedding a message in a fragment...")
    value = {
        "resync_kpi": 5,
        "message": [{"device_index": {"index_long": 300}}, {"alert": True}],
    }
    data, bits = serializer.serialize("sequence_with_message", value)
    print(f"   Encoded size: {bits} bits")
    print(f"   Decoded: {serializer.deserialize('sequence_with_message', data)}")


if __name__ == "__main__":
    main()
