"""
Encounter - One bounded combat session.

Holds the enemy roster, the turn order (computed once at creation), the
current-turn pointer and the current phase. Entities are referenced, never
copied; the persisted form stores uids only.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .entity import Entity
from .phase_graph import START

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Encounter:
    """
    Roster + turn order + phase.

    The pointer advances circularly; wrapping around starts a new round.
    Defeated entities are not skipped here: scheduling policy belongs to
    the caller.
    """
    enemies: list[Entity]
    turn_order: list[Entity] = field(default_factory=list)
    current_turn_index: int = 0
    phase: str = START
    round: int = 1

    def current_entity(self) -> Entity | None:
        if not self.turn_order:
            return None
        return self.turn_order[self.current_turn_index % len(self.turn_order)]

    def advance_turn(self) -> Entity | None:
        """Move the pointer to the next entity and return it."""
        if not self.turn_order:
            return None
        self.current_turn_index = (self.current_turn_index + 1) % len(self.turn_order)
        if self.current_turn_index == 0:
            self.round += 1
        return self.current_entity()

    def remove(self, entity: Entity) -> None:
        """
        Drop an entity from roster and turn order.

        Keeps the pointer on the same upcoming entity where possible.
        """
        self.enemies = [e for e in self.enemies if e is not entity]
        if entity not in self.turn_order:
            return
        index = next(i for i, e in enumerate(self.turn_order) if e is entity)
        self.turn_order = [e for e in self.turn_order if e is not entity]
        if index < self.current_turn_index:
            self.current_turn_index -= 1
        if self.turn_order:
            self.current_turn_index %= len(self.turn_order)
        else:
            self.current_turn_index = 0

    def to_data(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "currentTurnIndex": self.current_turn_index,
            "enemies": [e.uid for e in self.enemies],
            "turnOrder": [e.uid for e in self.turn_order],
            "round": self.round,
        }

    @classmethod
    def from_data(
        cls,
        data: Mapping[str, Any],
        entity_table: Mapping[int, Entity],
        warnings: list[str] | None = None,
    ) -> Encounter:
        """
        Re-link a persisted encounter against a uid -> Entity table.

        Dangling uids are dropped with a warning instead of failing.
        """
        def resolve(uids, label):
            linked = []
            for uid in uids or []:
                entity = entity_table.get(uid)
                if entity is None:
                    message = f"Encounter {label} references unknown uid {uid}; skipped"
                    logger.warning(message)
                    if warnings is not None:
                        warnings.append(message)
                    continue
                linked.append(entity)
            return linked

        raw_order = list(data.get("turnOrder") or [])
        turn_order = resolve(raw_order, "turn order")
        index = 0
        if turn_order:
            # The saved index points into the unfiltered uid list; keep the
            # same entity current, or the next one that still resolves.
            start = int(data.get("currentTurnIndex") or 0) % len(raw_order)
            for offset in range(len(raw_order)):
                position = (start + offset) % len(raw_order)
                if raw_order[position] in entity_table:
                    index = sum(1 for uid in raw_order[:position] if uid in entity_table)
                    break

        return cls(
            enemies=resolve(data.get("enemies"), "roster"),
            turn_order=turn_order,
            current_turn_index=index,
            phase=data.get("phase") or START,
            round=int(data.get("round") or 1),
        )
