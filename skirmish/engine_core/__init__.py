"""
Engine Core - Deterministic turn-based combat over rule-set data.

The engine is the runtime that:
1. Builds entities from typed factories
2. Schedules turns inside an Encounter
3. Authorizes actions through the permission graph
4. Resolves actions with contested d20 rolls
5. Moves the encounter through its phase graph
6. Saves and restores the whole world
"""

from .attributes import AttributeSchema, AttributeSet
from .entity import Entity, EntityFactory, UidAllocator
from .action import ActionBuilder, ActionDefinition, ActionOutcome, ActionResult, EffectType
from .dice import Dice, ScriptedDice
from .events import Event, EventBus, EventName, LoggingSink, RecordingSink
from .phase_graph import END, START, PhaseGraph, PhaseGraphBuilder
from .permission_graph import PermissionGraph, PermissionGraphBuilder
from .encounter import Encounter
from .resolver import ActionResolver, band_outcome
from .world import Move, TurnReport, World

__all__ = [
    "AttributeSchema",
    "AttributeSet",
    "Entity",
    "EntityFactory",
    "UidAllocator",
    "ActionBuilder",
    "ActionDefinition",
    "ActionOutcome",
    "ActionResult",
    "EffectType",
    "Dice",
    "ScriptedDice",
    "Event",
    "EventBus",
    "EventName",
    "LoggingSink",
    "RecordingSink",
    "START",
    "END",
    "PhaseGraph",
    "PhaseGraphBuilder",
    "PermissionGraph",
    "PermissionGraphBuilder",
    "Encounter",
    "ActionResolver",
    "band_outcome",
    "Move",
    "TurnReport",
    "World",
]
