"""
Rule Set - The rule-set provider contract.

A RuleSet is injected once when a World is constructed and held for the
session's lifetime. It supplies:
- entity factories keyed by entity type
- action definitions keyed by action kind
- the phase graph and the permission graph
- the player type and the numeric key that measures "still standing"
- how to populate a new encounter and how enemies choose moves
- narrative constants for presentation layers
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable

from ..engine_core.action import ActionDefinition
from ..engine_core.entity import Entity, EntityFactory
from ..engine_core.kinds import Kind, kind_name
from ..engine_core.permission_graph import PermissionGraph
from ..engine_core.phase_graph import PhaseGraph
from ..errors import RuleConfigError

if TYPE_CHECKING:
    from ..bots.policy import BotPolicy
    from ..engine_core.world import World

EncounterFactory = Callable[["World"], list[Entity]]


@dataclass
class RuleSet:
    """
    Complete, immutable-by-convention rule configuration.

    Dictionary keys are normalized to plain strings so str-valued Enum
    members and their values are interchangeable for lookups.
    """
    name: str
    entity_factories: dict[str, EntityFactory]
    actions: dict[str, ActionDefinition]
    phase_graph: PhaseGraph
    permission_graph: PermissionGraph
    player_type: str
    vitality_key: str = "hp"
    encounter_factory: EncounterFactory | None = None
    enemy_policy: BotPolicy | None = None
    narrative: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        required = {
            "name": self.name,
            "entity_factories": self.entity_factories,
            "phase_graph": self.phase_graph,
            "permission_graph": self.permission_graph,
            "player_type": self.player_type,
        }
        for prop, value in required.items():
            if value is None or (isinstance(value, (str, dict)) and not value):
                raise RuleConfigError(f"Rule set requires '{prop}'")
        self.entity_factories = {
            kind_name(key): factory for key, factory in self.entity_factories.items()
        }
        self.actions = {kind_name(key): action for key, action in (self.actions or {}).items()}
        self.player_type = kind_name(self.player_type)

    @classmethod
    def create(
        cls,
        name: str,
        factories: Iterable[EntityFactory],
        actions: Iterable[ActionDefinition],
        phase_graph: PhaseGraph,
        permission_graph: PermissionGraph,
        player_type: Kind,
        **options,
    ) -> RuleSet:
        """Build a rule set keying factories and actions by their own type/kind."""
        return cls(
            name=name,
            entity_factories={factory.entity_type: factory for factory in factories},
            actions={action.kind: action for action in actions},
            phase_graph=phase_graph,
            permission_graph=permission_graph,
            player_type=player_type,
            **options,
        )

    def factory_for(self, entity_type: Kind) -> EntityFactory | None:
        return self.entity_factories.get(kind_name(entity_type))

    def action(self, kind: Kind) -> ActionDefinition | None:
        return self.actions.get(kind_name(kind))

    def entity_types(self) -> list[str]:
        return list(self.entity_factories)

    def action_kinds(self) -> list[str]:
        return list(self.actions)
