"""
Attributes - Fixed-key records of numeric/boolean values.

An AttributeSchema declares the ordered key list once; every AttributeSet
built from it carries exactly those keys for its whole life.

Contract:
- Numeric keys default to 0, boolean-declared keys default to False
- set() on an undeclared key is a silent no-op
- get() on an undeclared key returns None (absence), never raises
- Positional (array) and {"values": ...} projections round-trip exactly
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..errors import RuleConfigError


@dataclass(frozen=True)
class AttributeSchema:
    """
    Declared key list for a family of attribute sets.

    Schemas are plain data: a rule set declares one per attribute family
    (core stats, status flags, ...) and reuses it for every entity and
    action that speaks about those keys.
    """
    name: str
    keys: tuple[str, ...]
    boolean_keys: frozenset[str] = frozenset()

    def __post_init__(self):
        if not self.keys:
            raise RuleConfigError(f"Attribute schema '{self.name}' declares no keys")
        if len(set(self.keys)) != len(self.keys):
            raise RuleConfigError(f"Attribute schema '{self.name}' has duplicate keys")
        unknown = set(self.boolean_keys) - set(self.keys)
        if unknown:
            raise RuleConfigError(
                f"Attribute schema '{self.name}' marks undeclared keys as boolean: {sorted(unknown)}"
            )

    @classmethod
    def define(
        cls,
        name: str,
        keys: Iterable[str],
        boolean_keys: Iterable[str] = (),
    ) -> AttributeSchema:
        """Factory accepting any iterables."""
        return cls(name=name, keys=tuple(keys), boolean_keys=frozenset(boolean_keys))

    def default_for(self, key: str) -> Any:
        return False if key in self.boolean_keys else 0

    def declares(self, key: str) -> bool:
        return key in self.keys

    def create(self, values: Mapping[str, Any] | None = None) -> AttributeSet:
        """Build an AttributeSet of this schema, defaulting missing keys."""
        return AttributeSet(self, values)

    def from_data(self, data: Mapping[str, Any] | None) -> AttributeSet:
        """Restore an AttributeSet from its {"values": ...} form."""
        return AttributeSet.from_data(self, data)


class AttributeSet:
    """
    A mapping key -> value restricted to a schema's declared keys.

    The key list never changes after construction. Values for keys the
    schema does not declare are ignored everywhere (constructor, set,
    from_array, from_data).
    """

    def __init__(self, schema: AttributeSchema, values: Mapping[str, Any] | None = None):
        if schema is None:
            raise RuleConfigError("AttributeSet requires a schema")
        self.schema = schema
        initial = values or {}
        self.values = {}
        for key in schema.keys:
            value = initial.get(key)
            self.values[key] = schema.default_for(key) if value is None else value

    def __eq__(self, other):
        if not isinstance(other, AttributeSet):
            return False
        return self.schema == other.schema and self.values == other.values

    def __repr__(self):
        return f"AttributeSet({self.schema.name}, {self.values!r})"

    def keys(self) -> list[str]:
        return list(self.schema.keys)

    def items(self) -> list[tuple[str, Any]]:
        return [(key, self.values[key]) for key in self.schema.keys]

    def get(self, key: str) -> Any:
        """Current value, or None when the key is not declared."""
        return self.values.get(key)

    def set(self, key: str, value: Any) -> None:
        """Assign a declared key; undeclared keys are ignored."""
        if key in self.values:
            self.values[key] = value

    def copy(self) -> AttributeSet:
        return AttributeSet(self.schema, dict(self.values))

    # -------------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------------

    def to_array(self) -> list[Any]:
        """Values in declaration order."""
        return [self.values[key] for key in self.schema.keys]

    def from_array(self, array: Iterable[Any]) -> None:
        """
        Apply positional values in declaration order.

        Short arrays only touch the positions present; None entries are
        treated as absent and leave the current value in place.
        """
        for key, value in zip(self.schema.keys, array):
            if value is not None:
                self.values[key] = value

    def to_data(self) -> dict[str, dict[str, Any]]:
        return {"values": dict(self.values)}

    @classmethod
    def from_data(
        cls,
        schema: AttributeSchema,
        data: Mapping[str, Any] | None,
    ) -> AttributeSet:
        """
        Restore from {"values": ...}.

        Only keys the receiving schema declares are restored; the rest
        keep their defaults. Missing or malformed data yields defaults.
        """
        instance = cls(schema)
        stored = (data or {}).get("values") or {}
        for key in schema.keys:
            if key in stored:
                instance.set(key, stored[key])
        return instance
