"""Field access over application records.

Fragments arrive either as plain mappings (typically decoded JSON) or as
Pydantic models. These helpers give codecs one way to look up a field by
name regardless of which representation the caller used.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel


def is_record(value: Any) -> bool:
    """Return True if ``value`` can be read with :func:`fetch_field`."""
    return isinstance(value, (Mapping, BaseModel))


def has_field(record: Any, name: str) -> bool:
    """Return True if ``record`` carries a field called ``name``."""
    if isinstance(record, Mapping):
        return name in record
    if isinstance(record, BaseModel):
        return name in type(record).model_fields
    return False


def fetch_field(record: Any, name: str) -> Any | None:
    """Return the value of field ``name`` in ``record``, or None if absent."""
    if isinstance(record, Mapping):
        return record.get(name)
    if isinstance(record, BaseModel):
        return getattr(record, name, None)
    return None


def field_names(record: Any) -> list[str]:
    """Return the field names of ``record`` in declaration order."""
    if isinstance(record, Mapping):
        return [str(key) for key in record.keys()]
    if isinstance(record, BaseModel):
        return list(type(record).model_fields)
    return []
