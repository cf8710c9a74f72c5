"""
Ono Rule Set

A one-on-one dungeon skirmish: a hero against orcs.

The rule set defines:
- Attribute schemas (core stats, status effects)
- Entity types (Player, Orc, Elf)
- Actions (Heavy Strike, Basic Attack)
- Phase graph: START -> combat -> END
- Permissions: Player may Heavy Strike an Orc, an Orc may Basic Attack the Player
"""

from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING

from ...bots.policy import BotPolicy, FirstAllowedPolicy
from ...engine_core.action import ActionDefinition, EffectType
from ...engine_core.attributes import AttributeSchema
from ...engine_core.entity import Entity, EntityFactory
from ...engine_core.permission_graph import PermissionGraphBuilder
from ...engine_core.phase_graph import END, START, PhaseGraphBuilder
from ...rules.ruleset import RuleSet

if TYPE_CHECKING:
    from ...engine_core.world import World

COMBAT = "combat"

CORE_STATS = AttributeSchema.define("CoreStats", ["hp", "mp", "strength", "defense"])
STATUS_EFFECTS = AttributeSchema.define(
    "StatusEffects",
    ["poisoned", "stunned", "burning"],
    boolean_keys=["poisoned", "stunned", "burning"],
)

HERO_STATS = {"hp": 100, "mp": 50, "strength": 20, "defense": 10}
GRIMGOR_STATS = {"hp": 60, "strength": 15, "defense": 5}

NARRATIVE = {
    "title": "Ono",
    "encounter_complete": "Encounter complete! A new challenge appears!",
    "game_over": "You have been defeated. Game Over.",
}


class OnoEntity(str, Enum):
    """Entity types."""
    PLAYER = "Player"
    ORC = "Orc"
    ELF = "Elf"


class OnoAction(str, Enum):
    """Action kinds."""
    HEAVY_STRIKE = "HeavyStrike"
    BASIC_ATTACK = "BasicAttack"


def _define_factories() -> list[EntityFactory]:
    return [
        EntityFactory(entity_type, CORE_STATS, STATUS_EFFECTS)
        for entity_type in OnoEntity
    ]


def _define_actions() -> list[ActionDefinition]:
    heavy_strike = ActionDefinition.define(
        CORE_STATS,
        name="Heavy Strike",
        kind=OnoAction.HEAVY_STRIKE,
        cost={"mp": 1},
        actioner_mod={"strength": 0.5},
        actionee_mod={"defense": 0.2},
        effect={"hp": -2},
        effect_type=EffectType.ADD,
        description="A slow, powerful blow that drains a little focus.",
    )
    basic_attack = ActionDefinition.define(
        CORE_STATS,
        name="Basic Attack",
        kind=OnoAction.BASIC_ATTACK,
        actioner_mod={"strength": 0.3},
        actionee_mod={"defense": 0.3},
        effect={"hp": -1},
        effect_type=EffectType.ADD,
    )
    return [heavy_strike, basic_attack]


def _encounter_over(world: World) -> bool:
    return world.is_player_defeated() or world.all_enemies_defeated()


def _define_phase_graph():
    return (
        PhaseGraphBuilder()
        .add_phase(COMBAT)
        .add_transition(START, COMBAT)
        .add_transition(COMBAT, END, _encounter_over)
        .build()
    )


def _define_permission_graph():
    return (
        PermissionGraphBuilder()
        .add_permission(OnoEntity.PLAYER, OnoEntity.ORC, COMBAT, OnoAction.HEAVY_STRIKE)
        .add_permission(OnoEntity.ORC, OnoEntity.PLAYER, COMBAT, OnoAction.BASIC_ATTACK)
        .build()
    )


def spawn_grimgor(world: World) -> list[Entity]:
    """Encounter factory: every encounter is one orc warlord."""
    return [world.create_entity(OnoEntity.ORC, "Grimgor", GRIMGOR_STATS)]


def create_hero(world: World, name: str = "Hero") -> Entity:
    """Create the player with the standard starting stats."""
    return world.create_player(name, num_attrs=HERO_STATS)


def create_ono_ruleset(enemy_policy: BotPolicy | None = None) -> RuleSet:
    """
    Create the Ono rule set.

    Enemies use FirstAllowedPolicy unless another policy is given.
    """
    return RuleSet.create(
        name="ono",
        factories=_define_factories(),
        actions=_define_actions(),
        phase_graph=_define_phase_graph(),
        permission_graph=_define_permission_graph(),
        player_type=OnoEntity.PLAYER,
        vitality_key="hp",
        encounter_factory=spawn_grimgor,
        enemy_policy=enemy_policy or FirstAllowedPolicy(),
        narrative=dict(NARRATIVE),
    )
