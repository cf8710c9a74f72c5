"""
Kinds - Interned identifiers for entity types and action kinds.

Rule sets declare their identifiers as str-valued Enums, e.g.:

    class OnoEntity(str, Enum):
        PLAYER = "Player"

Members compare and hash equal to their value, so the core only ever
stores the plain string. kind_name() is the one normalization point.
"""

from __future__ import annotations
from enum import Enum
from typing import Union

Kind = Union[str, Enum]


def kind_name(kind: Kind | None) -> str | None:
    """Plain string identifier for an Enum member or string."""
    if kind is None:
        return None
    if isinstance(kind, Enum):
        return str(kind.value)
    return str(kind)
