"""Global schema settings.

Schema text may carry ``key = value`` lines ahead of (or between) definition
lines. Only the binary key width is currently meaningful; it is known under
two historical names.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_KEY_BIT_SIZE = 8
MAX_KEY_BIT_SIZE = 64


class SchemaSettings(BaseModel):
    """Settings shared by every definition of a schema.

    Attributes:
        key_bit_size: Width of every binary key used in message framing
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    key_bit_size: int = Field(default=DEFAULT_KEY_BIT_SIZE, ge=1, le=MAX_KEY_BIT_SIZE)

    SYNONYMS: ClassVar[dict[str, str]] = {
        "nb_bit_key_binary": "key_bit_size",
        "key_binary_size_in_bit": "key_bit_size",
        "key_bit_size": "key_bit_size",
    }

    @classmethod
    def from_assignments(cls, assignments: dict[str, Any]) -> SchemaSettings:
        """Build settings from raw ``key = value`` pairs.

        Unknown keys are ignored with a warning.

        Raises:
            ConfigurationError: If a known setting has an invalid value
        """
        values: dict[str, Any] = {}
        for key, value in assignments.items():
            field = cls.SYNONYMS.get(key)
            if field is None:
                logger.warning("Ignoring unknown schema setting %r", key)
                continue
            values[field] = value

        try:
            return cls(**values)
        except ValidationError as err:
            raise ConfigurationError(f"Invalid schema settings {assignments}: {err}") from err
