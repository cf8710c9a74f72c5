"""
Entities - Named actors with stable identity.

An Entity owns two AttributeSets: numeric stats and textual/status flags.
Entities are built by an EntityFactory bound to a fixed
(type, numeric schema, textual schema) triple; they are destroyed only by
removal from the owning world's entity table.

Identity:
- uid values come from a UidAllocator owned by the world (one per session)
- uids are monotonic and never reused within a session
- the allocator counter is persisted so post-load allocation cannot collide
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping

from .attributes import AttributeSchema, AttributeSet
from .kinds import kind_name
from ..errors import RuleConfigError


@dataclass
class UidAllocator:
    """Monotonic uid counter owned by a single world/session."""
    next_uid: int = 0

    def allocate(self) -> int:
        uid = self.next_uid
        self.next_uid += 1
        return uid

    def restore(self, next_uid: int, issued: list[int] | None = None) -> None:
        """
        Reset the counter after a load.

        Never moves below an already issued uid.
        """
        floor = max(issued) + 1 if issued else 0
        self.next_uid = max(int(next_uid or 0), floor)


@dataclass(eq=False)
class Entity:
    """
    An actor (player or enemy) in the world.

    Equality is identity: two entities are the same only if they are the
    same object. Cross references (roster, turn order, player) point at
    shared instances, never copies.
    """
    uid: int
    name: str
    type: str
    num_attrs: AttributeSet
    txt_attrs: AttributeSet
    description: str | None = None

    def num(self, key: str) -> Any:
        """Shortcut for a numeric attribute."""
        return self.num_attrs.get(key)

    def to_data(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "numAttrs": self.num_attrs.to_data(),
            "txtAttrs": self.txt_attrs.to_data(),
        }

    def __repr__(self):
        return f"Entity(uid={self.uid}, name={self.name!r}, type={self.type!r})"


@dataclass(frozen=True)
class EntityFactory:
    """
    Typed constructor for one kind of entity.

    Replaces per-type subclasses: the type tag and both schemas are data.
    """
    entity_type: str
    num_schema: AttributeSchema
    txt_schema: AttributeSchema
    description: str | None = None

    def __post_init__(self):
        if not self.entity_type or self.num_schema is None or self.txt_schema is None:
            raise RuleConfigError(
                "EntityFactory requires 'entity_type', 'num_schema' and 'txt_schema'"
            )
        object.__setattr__(self, "entity_type", kind_name(self.entity_type))

    def create(
        self,
        allocator: UidAllocator,
        name: str,
        num_attrs: Mapping[str, Any] | None = None,
        txt_attrs: Mapping[str, Any] | None = None,
        description: str | None = None,
    ) -> Entity:
        """Create a fresh entity with a newly allocated uid."""
        return Entity(
            uid=allocator.allocate(),
            name=name,
            type=self.entity_type,
            description=description if description is not None else self.description,
            num_attrs=self.num_schema.create(num_attrs),
            txt_attrs=self.txt_schema.create(txt_attrs),
        )

    def from_data(self, data: Mapping[str, Any]) -> Entity:
        """
        Rebuild an entity from its persisted form.

        The stored uid is kept as-is; the allocator is not consulted.
        """
        return Entity(
            uid=int(data["uid"]),
            name=data.get("name", ""),
            type=self.entity_type,
            description=data.get("description"),
            num_attrs=self.num_schema.from_data(data.get("numAttrs")),
            txt_attrs=self.txt_schema.from_data(data.get("txtAttrs")),
        )
