"""
World - The engine facade for one game session.

The World owns:
- the injected RuleSet (read-only for the session)
- the entity table (uid -> Entity) and the uid allocator
- the player reference
- the current phase and at most one active Encounter
- the dice and the event sink

Lifecycle of an encounter:
1. start_encounter()  - roster + shuffled turn order, phase reset to START
2. play_turn() / apply() + update_phase() + advance_turn(), repeatedly
3. update_phase() reaches END -> encounter_end emitted, encounter discarded

Persistence goes through the pydantic models in snapshot.py; entity
references are uids on disk and shared instances in memory.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

from pydantic import ValidationError

from .action import ActionDefinition, ActionResult
from .dice import Dice
from .encounter import Encounter
from .entity import Entity, UidAllocator
from .events import EventName, EventSink, emit
from .kinds import Kind, kind_name
from .phase_graph import END, START
from .resolver import ActionResolver, can_afford
from .snapshot import WorldSnapshot
from ..errors import EncounterError, RuleConfigError, RuleSetValidationError, SnapshotError
from ..rules.validation import validate_ruleset

if TYPE_CHECKING:
    from ..rules.ruleset import RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    """An action kind paired with the entity it targets."""
    kind: str
    target: Entity

    def describe(self) -> str:
        return f"{self.kind} -> {self.target.name}"


@dataclass
class TurnReport:
    """What happened during one play_turn() call."""
    actor: Entity | None
    move: Move | None
    result: ActionResult | None
    phase: str
    encounter_ended: bool = False
    player_won: bool | None = None


class World:
    """
    One session of the engine.

    Constructed explicitly with its rule set; there is no global instance.
    Any number of worlds can coexist.
    """

    def __init__(
        self,
        ruleset: RuleSet,
        sink: EventSink | None = None,
        dice: Dice | None = None,
        validate: bool = True,
    ):
        if ruleset is None:
            raise RuleConfigError("World requires a rule set")
        if validate:
            result = validate_ruleset(ruleset)
            if not result.valid:
                raise RuleSetValidationError(result.errors)
            for warning in result.warnings:
                logger.warning("Rule set '%s': %s", ruleset.name, warning)

        self.ruleset = ruleset
        self.sink = sink
        self.dice = dice or Dice()
        self.allocator = UidAllocator()
        self.entities: dict[int, Entity] = {}
        self.player: Entity | None = None
        self.phase: str = START
        self.encounter: Encounter | None = None
        self.last_player_won: bool | None = None
        self.load_warnings: list[str] = []
        self.resolver = ActionResolver(ruleset.permission_graph, self.dice, sink)

    # =========================================================================
    # Entities
    # =========================================================================

    def create_entity(
        self,
        entity_type: Kind,
        name: str,
        num_attrs: Mapping[str, Any] | None = None,
        txt_attrs: Mapping[str, Any] | None = None,
        description: str | None = None,
    ) -> Entity:
        """Create an entity of a registered type and add it to the table."""
        factory = self.ruleset.factory_for(entity_type)
        if factory is None:
            raise RuleConfigError(f"Unknown entity type '{kind_name(entity_type)}'")
        entity = factory.create(self.allocator, name, num_attrs, txt_attrs, description)
        self.entities[entity.uid] = entity
        logger.debug("Created %r", entity)
        return entity

    def create_player(self, name: str, **kwargs) -> Entity:
        """Create the player entity and make it the session's player."""
        self.player = self.create_entity(self.ruleset.player_type, name, **kwargs)
        return self.player

    def get_entity(self, uid: int) -> Entity | None:
        return self.entities.get(uid)

    def remove_entity(self, uid: int) -> Entity | None:
        """Destroy an entity: drop it from the table and any active roster."""
        entity = self.entities.pop(uid, None)
        if entity is None:
            return None
        if self.encounter is not None:
            self.encounter.remove(entity)
        if entity is self.player:
            self.player = None
        logger.debug("Removed %r", entity)
        return entity

    def is_defeated(self, entity: Entity | None) -> bool:
        if entity is None:
            return True
        value = entity.num(self.ruleset.vitality_key)
        return value is not None and value <= 0

    def is_player_defeated(self) -> bool:
        return self.player is not None and self.is_defeated(self.player)

    def all_enemies_defeated(self) -> bool:
        if self.encounter is None:
            return False
        return all(self.is_defeated(enemy) for enemy in self.encounter.enemies)

    # =========================================================================
    # Encounter lifecycle
    # =========================================================================

    def start_encounter(self, enemies: list[Entity] | None = None) -> Encounter | None:
        """
        Begin a new encounter against `enemies`.

        Without explicit enemies, the rule set's encounter factory builds
        the roster. The turn order is a uniform shuffle of player + enemies.
        The phase is reset to START and checked once; if that check already
        reaches END the encounter is closed and None is returned.
        """
        if self.player is None:
            raise EncounterError("Cannot start an encounter without a player")
        if self.encounter is not None:
            raise EncounterError("An encounter is already in progress")

        if enemies is None:
            if self.ruleset.encounter_factory is None:
                raise EncounterError(
                    f"Rule set '{self.ruleset.name}' has no encounter factory; pass enemies"
                )
            enemies = list(self.ruleset.encounter_factory(self))
        for enemy in enemies:
            self.entities.setdefault(enemy.uid, enemy)

        turn_order = self.dice.shuffle([self.player, *enemies])
        self.phase = START
        self.last_player_won = None
        self.encounter = Encounter(enemies=list(enemies), turn_order=turn_order, phase=START)

        logger.info(
            "Encounter started: %s vs %s",
            self.player.name, ", ".join(e.name for e in enemies) or "nobody",
        )
        emit(self.sink, EventName.ENCOUNTER_START, enemies=list(enemies), turn_order=list(turn_order))
        # Leave START right away so the first turn is played in a real phase
        self.update_phase()
        if self.encounter is None:
            return None
        emit(
            self.sink,
            EventName.TURN_START,
            entity=self.encounter.current_entity(),
            round=self.encounter.round,
        )
        return self.encounter

    def update_phase(self) -> str:
        """
        Run one phase-graph check with this world as the guard context.

        Reaching END closes the encounter. Returns the (possibly new) phase.
        """
        new_phase = self.ruleset.phase_graph.next_phase(self.phase, self)
        if new_phase == self.phase:
            return self.phase

        old_phase = self.phase
        player_won = self.all_enemies_defeated() if new_phase == END else None
        self.phase = new_phase
        if self.encounter is not None:
            self.encounter.phase = new_phase

        logger.info("Phase %s -> %s", old_phase, new_phase)
        emit(self.sink, EventName.PHASE_CHANGE, from_phase=old_phase, to_phase=new_phase)

        if new_phase == END:
            self.last_player_won = player_won
            logger.info("Encounter ended: %s", "victory" if player_won else "defeat")
            emit(self.sink, EventName.ENCOUNTER_END, player_won=player_won)
            self.encounter = None
        return new_phase

    def current_actor(self) -> Entity | None:
        if self.encounter is None:
            return None
        return self.encounter.current_entity()

    def is_player_turn(self) -> bool:
        return self.player is not None and self.current_actor() is self.player

    def advance_turn(self) -> Entity | None:
        """Hand the turn to the next entity in the order."""
        if self.encounter is None:
            return None
        entity = self.encounter.advance_turn()
        emit(self.sink, EventName.TURN_START, entity=entity, round=self.encounter.round)
        return entity

    # =========================================================================
    # Actions
    # =========================================================================

    def is_allowed(self, kind: Kind, actioner: Entity | None, actionee: Entity | None) -> bool:
        return self.ruleset.permission_graph.is_allowed(
            kind, actioner, actionee, self.phase, self.encounter
        )

    def apply(
        self,
        action: Kind | ActionDefinition,
        actioner: Entity,
        actionee: Entity,
    ) -> ActionResult:
        """Resolve one action by kind or definition."""
        if not isinstance(action, ActionDefinition):
            definition = self.ruleset.action(action)
            if definition is None:
                raise RuleConfigError(f"Unknown action kind '{kind_name(action)}'")
            action = definition
        return self.resolver.resolve(action, actioner, actionee, self.phase, self.encounter)

    def potential_targets(self, actor: Entity) -> list[Entity]:
        """Living opponents of `actor`: enemies for the player, the player otherwise."""
        if self.encounter is None:
            return []
        if actor is self.player:
            candidates = self.encounter.enemies
        else:
            candidates = [self.player] if self.player is not None else []
        return [e for e in candidates if not self.is_defeated(e)]

    def allowed_moves(self, actor: Entity | None, include_unaffordable: bool = True) -> list[Move]:
        """Every (kind, target) pair the permission graph allows `actor` right now."""
        if actor is None or self.encounter is None:
            return []
        moves = []
        for kind, action in self.ruleset.actions.items():
            if not include_unaffordable and not can_afford(action, actor):
                continue
            for target in self.potential_targets(actor):
                if self.is_allowed(kind, actor, target):
                    moves.append(Move(kind, target))
        return moves

    def play_turn(self, kind: Kind | None = None, target: Entity | None = None) -> TurnReport:
        """
        Drive one complete turn.

        The current actor acts (player: the supplied move; others: the rule
        set's enemy policy), then the phase is checked, then the turn
        advances if the encounter is still running. Defeated actors act on
        nothing and simply pass.
        """
        if self.encounter is None:
            raise EncounterError("No encounter in progress")

        actor = self.current_actor()
        move: Move | None = None
        result: ActionResult | None = None

        if self.is_defeated(actor):
            logger.debug("%r is defeated; turn passes", actor)
        elif actor is self.player:
            if kind is None or target is None:
                raise EncounterError("A player turn requires an action kind and a target")
            move = Move(kind_name(kind), target)
            result = self.apply(kind, actor, target)
        else:
            moves = self.allowed_moves(actor, include_unaffordable=False)
            policy = self.ruleset.enemy_policy
            if moves and policy is not None:
                decision = policy.select_move(self, actor, moves)
                move = decision.move
                result = self.apply(move.kind, actor, move.target)
            else:
                logger.debug("%r has no move; turn passes", actor)

        return self._finish_turn(actor, move, result)

    def pass_turn(self) -> TurnReport:
        """End the current actor's turn without acting."""
        if self.encounter is None:
            raise EncounterError("No encounter in progress")
        return self._finish_turn(self.current_actor(), None, None)

    def _finish_turn(self, actor: Entity | None, move: Move | None, result: ActionResult | None) -> TurnReport:
        self.update_phase()
        ended = self.encounter is None
        if not ended:
            self.advance_turn()

        return TurnReport(
            actor=actor,
            move=move,
            result=result,
            phase=self.phase,
            encounter_ended=ended,
            player_won=self.last_player_won if ended else None,
        )

    # =========================================================================
    # Persistence
    # =========================================================================

    def _snapshot(self) -> WorldSnapshot:
        return WorldSnapshot.model_validate({
            "gamePhase": self.phase,
            "playerUid": self.player.uid if self.player is not None else None,
            "entities": [
                {"type": entity.type, "data": entity.to_data()}
                for entity in self.entities.values()
            ],
            "encounter": self.encounter.to_data() if self.encounter is not None else None,
            "nextUid": self.allocator.next_uid,
        })

    def to_data(self) -> dict[str, Any]:
        """Plain-dict form of the whole world (JSON-compatible)."""
        return self._snapshot().model_dump(by_alias=True)

    def to_json(self, indent: int | None = 2) -> str:
        return self._snapshot().model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_data(
        cls,
        data: Mapping[str, Any],
        ruleset: RuleSet,
        sink: EventSink | None = None,
        dice: Dice | None = None,
    ) -> World:
        """Rebuild a world from its persisted dict form."""
        try:
            snapshot = WorldSnapshot.model_validate(data)
        except ValidationError as e:
            raise SnapshotError(f"Invalid world document: {e}") from e
        return cls._from_snapshot(snapshot, ruleset, sink, dice)

    @classmethod
    def from_json(
        cls,
        text: str | bytes,
        ruleset: RuleSet,
        sink: EventSink | None = None,
        dice: Dice | None = None,
    ) -> World:
        try:
            snapshot = WorldSnapshot.model_validate_json(text)
        except ValidationError as e:
            raise SnapshotError(f"Invalid world document: {e}") from e
        return cls._from_snapshot(snapshot, ruleset, sink, dice)

    @classmethod
    def _from_snapshot(
        cls,
        snapshot: WorldSnapshot,
        ruleset: RuleSet,
        sink: EventSink | None,
        dice: Dice | None,
    ) -> World:
        world = cls(ruleset, sink=sink, dice=dice)
        warnings = world.load_warnings

        def warn(message: str) -> None:
            logger.warning(message)
            warnings.append(message)

        for record in snapshot.entities:
            factory = ruleset.factory_for(record.type)
            if factory is None:
                warn(f"Unknown entity type '{record.type}' for uid {record.data.uid}; skipped")
                continue
            if record.data.uid in world.entities:
                warn(f"Duplicate entity uid {record.data.uid}; later record skipped")
                continue
            entity = factory.from_data(record.data.model_dump(by_alias=True))
            world.entities[entity.uid] = entity

        world.allocator.restore(snapshot.next_uid, list(world.entities))

        if snapshot.player_uid is not None:
            world.player = world.entities.get(snapshot.player_uid)
            if world.player is None:
                warn(f"Player uid {snapshot.player_uid} does not resolve; no player restored")

        if ruleset.phase_graph.has_phase(snapshot.game_phase):
            world.phase = snapshot.game_phase
        else:
            warn(f"Unknown phase '{snapshot.game_phase}'; reset to '{START}'")

        if snapshot.encounter is not None:
            world.encounter = Encounter.from_data(
                snapshot.encounter.model_dump(by_alias=True), world.entities, warnings
            )
            world.encounter.phase = world.phase

        logger.info(
            "Loaded world: %d entities, encounter=%s, %d warning(s)",
            len(world.entities), world.encounter is not None, len(warnings),
        )
        return world
