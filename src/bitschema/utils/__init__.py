"""Utility functions for bitschema.

This module provides size calculation for schema definitions.
"""

from __future__ import annotations

from .sizing import definition_sizes, fixed_bit_length, framed_bit_length

__all__ = [
    "definition_sizes",
    "fixed_bit_length",
    "framed_bit_length",
]
