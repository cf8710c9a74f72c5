"""
Pytest fixtures for Skirmish tests.
"""

from enum import Enum

import pytest

from ..bots.policy import FirstAllowedPolicy
from ..engine_core.action import ActionDefinition, EffectType
from ..engine_core.attributes import AttributeSchema
from ..engine_core.dice import ScriptedDice
from ..engine_core.entity import EntityFactory, UidAllocator
from ..engine_core.events import RecordingSink
from ..engine_core.permission_graph import PermissionGraphBuilder
from ..engine_core.phase_graph import END, START, PhaseGraphBuilder
from ..engine_core.world import World
from ..rules.ruleset import RuleSet

COMBAT = "combat"


class Kind(str, Enum):
    PLAYER = "Player"
    GOBLIN = "Goblin"
    FIREBALL = "Fireball"
    CLAW = "Claw"


@pytest.fixture
def stats_schema() -> AttributeSchema:
    """Numeric core stats."""
    return AttributeSchema.define("Stats", ["hp", "mp", "strength", "defense"])


@pytest.fixture
def flags_schema() -> AttributeSchema:
    """Boolean status flags."""
    return AttributeSchema.define("Flags", ["poisoned", "stunned"], boolean_keys=["poisoned", "stunned"])


@pytest.fixture
def allocator() -> UidAllocator:
    return UidAllocator()


@pytest.fixture
def player_factory(stats_schema, flags_schema) -> EntityFactory:
    return EntityFactory(Kind.PLAYER, stats_schema, flags_schema)


@pytest.fixture
def goblin_factory(stats_schema, flags_schema) -> EntityFactory:
    return EntityFactory(Kind.GOBLIN, stats_schema, flags_schema)


@pytest.fixture
def fireball(stats_schema) -> ActionDefinition:
    """cost mp 10, add hp -20, no modifiers."""
    return ActionDefinition.define(
        stats_schema,
        name="Fireball",
        kind=Kind.FIREBALL,
        cost={"mp": 10},
        effect={"hp": -20},
        effect_type=EffectType.ADD,
    )


@pytest.fixture
def claw(stats_schema) -> ActionDefinition:
    return ActionDefinition.define(
        stats_schema,
        name="Claw",
        kind=Kind.CLAW,
        effect={"hp": -5},
    )


@pytest.fixture
def ruleset(player_factory, goblin_factory, fireball, claw) -> RuleSet:
    """Player vs goblins: START -> combat -> END when either side is down."""
    phase_graph = (
        PhaseGraphBuilder()
        .add_phase(COMBAT)
        .add_transition(START, COMBAT)
        .add_transition(COMBAT, END, lambda w: w.is_player_defeated() or w.all_enemies_defeated())
        .build()
    )
    permission_graph = (
        PermissionGraphBuilder()
        .add_permission(Kind.PLAYER, Kind.GOBLIN, COMBAT, Kind.FIREBALL)
        .add_permission(Kind.GOBLIN, Kind.PLAYER, COMBAT, Kind.CLAW)
        .build()
    )
    return RuleSet.create(
        name="test",
        factories=[player_factory, goblin_factory],
        actions=[fireball, claw],
        phase_graph=phase_graph,
        permission_graph=permission_graph,
        player_type=Kind.PLAYER,
        encounter_factory=lambda world: [
            world.create_entity(Kind.GOBLIN, "Goblin", {"hp": 30}),
        ],
        enemy_policy=FirstAllowedPolicy(),
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def dice() -> ScriptedDice:
    """Scripted dice; shuffles keep player-first order."""
    return ScriptedDice()


@pytest.fixture
def world(ruleset, sink, dice) -> World:
    """A world with a player (hp 100, mp 50) and no encounter yet."""
    world = World(ruleset, sink=sink, dice=dice)
    world.create_player("Hero", num_attrs={"hp": 100, "mp": 50})
    return world


@pytest.fixture
def combat_world(world) -> World:
    """World in combat against two goblins; the player acts first."""
    world.start_encounter([
        world.create_entity(Kind.GOBLIN, "Snag", {"hp": 30}),
        world.create_entity(Kind.GOBLIN, "Grub", {"hp": 30}),
    ])
    return world
