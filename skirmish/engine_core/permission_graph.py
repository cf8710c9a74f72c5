"""
Permission Graph - Authorization matrix for actions.

Nodes are (entity_type, phase) pairs. An edge from
(actioner_type, phase) to (actionee_type, phase) carries the set of action
kinds the actioner may use on the actionee in that phase.

Building is additive and idempotent: declaring the same
(from, to, phase) pair again unions the new kind into the existing edge.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from .kinds import Kind, kind_name

if TYPE_CHECKING:
    from .entity import Entity
    from .encounter import Encounter

NodeKey = tuple[str, str]


def node_key(entity_type: Kind, phase: str) -> NodeKey:
    return (kind_name(entity_type), phase)


@dataclass
class PermissionEdge:
    """Authorized action kinds from one node to another."""
    target: NodeKey
    allowed: set[str] = field(default_factory=set)


@dataclass
class PermissionGraph:
    """Built permission graph."""
    adjacency: dict[NodeKey, list[PermissionEdge]] = field(default_factory=dict)

    def edge(self, from_key: NodeKey, to_key: NodeKey) -> PermissionEdge | None:
        for edge in self.adjacency.get(from_key, []):
            if edge.target == to_key:
                return edge
        return None

    def allowed_kinds(self, actioner_type: Kind, actionee_type: Kind, phase: str) -> set[str]:
        edge = self.edge(node_key(actioner_type, phase), node_key(actionee_type, phase))
        return set(edge.allowed) if edge else set()

    def is_allowed(
        self,
        action_kind: Kind,
        actioner: Entity | None,
        actionee: Entity | None,
        phase: str,
        encounter: Encounter | None,
    ) -> bool:
        """
        Whether `actioner` may use `action_kind` on `actionee` now.

        False when there is no current encounter, either party is absent,
        or no edge grants that exact kind.
        """
        if encounter is None or actioner is None or actionee is None:
            return False
        edge = self.edge(node_key(actioner.type, phase), node_key(actionee.type, phase))
        return edge is not None and kind_name(action_kind) in edge.allowed

    def iter_permissions(self) -> Iterator[tuple[NodeKey, NodeKey, str]]:
        """Yield (from_key, to_key, kind) for every granted permission."""
        for from_key, edges in self.adjacency.items():
            for edge in edges:
                for kind in sorted(edge.allowed):
                    yield from_key, edge.target, kind


class PermissionGraphBuilder:
    """
    Fluent builder for PermissionGraph.

    Usage:
        graph = (
            PermissionGraphBuilder()
            .add_permission(OnoEntity.PLAYER, OnoEntity.ORC, "combat", OnoAction.HEAVY_STRIKE)
            .add_permission(OnoEntity.ORC, OnoEntity.PLAYER, "combat", OnoAction.BASIC_ATTACK)
            .build()
        )
    """

    def __init__(self):
        self._adjacency: dict[NodeKey, list[PermissionEdge]] = {}

    def add_permission(
        self,
        from_type: Kind,
        to_type: Kind,
        phase: str,
        action_kind: Kind,
    ) -> PermissionGraphBuilder:
        from_key = node_key(from_type, phase)
        to_key = node_key(to_type, phase)
        edges = self._adjacency.setdefault(from_key, [])
        edge = next((e for e in edges if e.target == to_key), None)
        if edge is None:
            edge = PermissionEdge(target=to_key)
            edges.append(edge)
        edge.allowed.add(kind_name(action_kind))
        return self

    def build(self) -> PermissionGraph:
        return PermissionGraph(
            adjacency={
                key: [PermissionEdge(edge.target, set(edge.allowed)) for edge in edges]
                for key, edges in self._adjacency.items()
            }
        )
