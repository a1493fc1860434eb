"""Schema analysis CLI command."""

from __future__ import annotations

from pathlib import Path

from ..schema.configuration import Configuration
from ..schema.definition import Definition
from ..utils.sizing import definition_sizes


def analyze_file(file_path: Path) -> None:
    """Parse a schema file and print a size breakdown of its definitions.

    Args:
        file_path: Path to a schema text file

    Raises:
        ConfigurationError: If the schema is invalid
    """
    configuration = Configuration.parse(file_path.read_text(encoding="utf-8"))
    print_configuration(configuration)


def print_configuration(configuration: Configuration) -> None:
    """Print one line per definition: key, name, codec and fixed size."""
    count = len(configuration)
    print("|" * 7, "bitschema: schema-driven bit-level codec", "|" * 7)
    print(f"{count} definition{'s' if count != 1 else ''} loaded.")
    print(f"Binary keys use {configuration.key_bit_size} bits. Sizes are in bits.")
    print()

    sizes = definition_sizes(configuration)
    key_width = (configuration.key_bit_size + 3) // 4

    for definition in configuration.definitions:
        bits = sizes[definition.name]
        size = f"{bits} bits" if bits is not None else "variable"
        label = f"0x{definition.binary_key:0{key_width}X} {definition.name}"
        kind = definition.codec.kind
        dots = "." * max(1, 44 - len(label) - len(kind))
        line = f"{label} {kind}{dots}{size}"
        extra = _describe(definition)
        if extra:
            line = f"{line}  {extra}"
        print(line)

    print()


def _describe(definition: Definition) -> str:
    parts = []
    if definition.static_fields:
        statics = ", ".join(f"{key}={value}" for key, value in definition.static_fields.items())
        parts.append(f"[static: {statics}]")
    if definition.comment:
        parts.append(f"// {definition.comment}")
    return " ".join(parts)
