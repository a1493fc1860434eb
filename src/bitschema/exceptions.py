"""Exception hierarchy for bitschema.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BitschemaError for easy catching of any bitschema-specific error.
"""

from __future__ import annotations


class BitschemaError(Exception):
    """Base exception for all bitschema errors."""

    pass


class ConfigurationError(BitschemaError):
    """Raised when a schema is malformed or inconsistent.

    Also raised when a caller asks a Configuration for a definition name it
    does not hold.

    Examples:
        - Malformed definition line or unknown codec token
        - Duplicate definition name or binary key
        - Binary key wider than the configured key bit size
        - Reference to an undefined definition name
        - Misplaced "message" placeholder
    """

    pass


class SerializationError(BitschemaError):
    """Raised when an application value does not fit its codec.

    Examples:
        - Value out of range for an integer or float codec
        - Unknown symbol
        - Missing component key in a sequence
        - Zero or several active options for a xor
        - Static field mismatch
    """

    pass


class DeserializationError(BitschemaError):
    """Raised when decoding a bit stream fails.

    Examples:
        - Truncated data (not enough bits left)
        - Unknown binary key in a message
        - Xor selector or symbol index without a matching entry
    """

    pass
