"""
Phase Graph - Encounter lifecycle state machine.

Nodes are phase names, always including the two reserved sentinels
START ("__start__") and END ("__end__"). Each node has an ordered list of
outgoing transitions guarded by predicates over the current context
(normally the World).

Transition rule (one check per call):
- scan the current phase's outgoing edges in declaration order
- take the first edge whose guard returns True
- if no guard holds, stay in the current phase

Guards must be pure reads of the context. Reaching END is the
authoritative signal that the encounter is over.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable

from ..errors import GraphConfigError

START = "__start__"
END = "__end__"

Guard = Callable[[Any], bool]


def always(_context: Any) -> bool:
    return True


@dataclass(frozen=True)
class PhaseTransition:
    """A guarded directed edge."""
    destination: str
    guard: Guard = always


@dataclass
class PhaseGraph:
    """Built, read-only phase graph."""
    phases: frozenset[str]
    transitions: dict[str, tuple[PhaseTransition, ...]] = field(default_factory=dict)

    def has_phase(self, phase: str) -> bool:
        return phase in self.phases

    def outgoing(self, phase: str) -> tuple[PhaseTransition, ...]:
        return self.transitions.get(phase, ())

    def next_phase(self, current: str, context: Any) -> str:
        """
        Evaluate one transition step from `current`.

        Returns the destination of the first true guard, or `current`
        when none holds (no implicit default transition).
        """
        for transition in self.outgoing(current):
            if transition.guard(context):
                return transition.destination
        return current

    def reachable_from(self, phase: str) -> set[str]:
        """Phases reachable by following edges, ignoring guards."""
        seen: set[str] = set()
        frontier = [phase]
        while frontier:
            node = frontier.pop()
            for transition in self.outgoing(node):
                if transition.destination not in seen:
                    seen.add(transition.destination)
                    frontier.append(transition.destination)
        return seen


class PhaseGraphBuilder:
    """
    Fluent builder for PhaseGraph.

    Usage:
        graph = (
            PhaseGraphBuilder()
            .add_phase("combat")
            .add_transition(START, "combat")
            .add_transition("combat", END, lambda world: world.all_enemies_defeated())
            .build()
        )

    Referencing an undeclared phase raises GraphConfigError immediately.
    """

    def __init__(self):
        self._phases: list[str] = [START, END]
        self._transitions: dict[str, list[PhaseTransition]] = {}

    def add_phase(self, phase: str) -> PhaseGraphBuilder:
        if not phase:
            raise GraphConfigError("Phase name must be non-empty")
        if phase not in self._phases:
            self._phases.append(phase)
        return self

    def add_transition(
        self,
        from_phase: str,
        to_phase: str,
        guard: Guard = always,
    ) -> PhaseGraphBuilder:
        missing = [p for p in (from_phase, to_phase) if p not in self._phases]
        if missing:
            raise GraphConfigError(
                f"Both phases '{from_phase}' and '{to_phase}' must be added before "
                f"creating a transition (undeclared: {missing})"
            )
        if from_phase == END:
            raise GraphConfigError("The terminal phase cannot have outgoing transitions")
        if not callable(guard):
            raise GraphConfigError(f"Guard for '{from_phase}' -> '{to_phase}' is not callable")
        self._transitions.setdefault(from_phase, []).append(PhaseTransition(to_phase, guard))
        return self

    def build(self) -> PhaseGraph:
        return PhaseGraph(
            phases=frozenset(self._phases),
            transitions={
                phase: tuple(edges) for phase, edges in self._transitions.items()
            },
        )
