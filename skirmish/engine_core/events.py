"""
Events - Structured notifications emitted by the engine.

The engine reports every resolution step as (event_name, payload) to an
injected sink. What the sink does with them (narrate, log, buffer for a
UI) is not the engine's concern; the engine only guarantees the names and
payload shapes below, and never lets a sink failure propagate back.

Payload shapes:
    action_attempt   {action, actioner, actionee}
    cost_paid        {entity, resource, cost, new_value}
    roll_result      {actioner, actionee, actioner_roll, actionee_roll,
                      actioner_mod, actionee_mod, result_value, outcome}
    effect_applied   {entity, key, original_value, new_value, critical}
    penalty          {entity, reason}
    no_effect        {outcome}
    halt             {reason, outcome}
    phase_change     {from_phase, to_phase}
    turn_start       {entity, round}
    encounter_start  {enemies, turn_order}
    encounter_end    {player_won}
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)


class EventName(str, Enum):
    """Names of engine events."""
    ACTION_ATTEMPT = "action_attempt"
    COST_PAID = "cost_paid"
    ROLL_RESULT = "roll_result"
    EFFECT_APPLIED = "effect_applied"
    PENALTY = "penalty"
    NO_EFFECT = "no_effect"
    HALT = "halt"
    PHASE_CHANGE = "phase_change"
    TURN_START = "turn_start"
    ENCOUNTER_START = "encounter_start"
    ENCOUNTER_END = "encounter_end"


EventSink = Callable[[str, Mapping[str, Any]], None]


@dataclass(frozen=True)
class Event:
    """Immutable record of one emitted event."""
    name: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]


def emit(sink: EventSink | None, name: EventName | str, **payload: Any) -> None:
    """
    Deliver an event to a sink, swallowing sink failures.

    A failing sink is logged and otherwise ignored.
    """
    if sink is None:
        return
    event_name = name.value if isinstance(name, EventName) else str(name)
    try:
        sink(event_name, payload)
    except Exception:
        logger.exception("Event sink failed while handling '%s'", event_name)


class EventBus:
    """
    Publish/subscribe sink.

    Usage:
        bus = EventBus()
        bus.subscribe("roll_result", on_roll)
        bus.subscribe_all(recorder)
        world = World(ruleset, sink=bus)
    """

    def __init__(self):
        self._listeners: dict[str, list[Callable[[Mapping[str, Any]], None]]] = {}
        self._wildcard: list[EventSink] = []

    def subscribe(self, name: EventName | str, callback: Callable[[Mapping[str, Any]], None]) -> None:
        key = name.value if isinstance(name, EventName) else str(name)
        self._listeners.setdefault(key, []).append(callback)

    def subscribe_all(self, callback: EventSink) -> None:
        self._wildcard.append(callback)

    def publish(self, name: str, payload: Mapping[str, Any]) -> None:
        """Deliver to every listener; one failing listener does not stop the rest."""
        for callback in self._listeners.get(name, []):
            try:
                callback(payload)
            except Exception:
                logger.exception("Listener for '%s' failed", name)
        for callback in self._wildcard:
            try:
                callback(name, payload)
            except Exception:
                logger.exception("Wildcard listener failed on '%s'", name)

    __call__ = publish


class RecordingSink:
    """Sink that keeps every event in order (tests, replays)."""

    def __init__(self):
        self.events: list[Event] = []

    def __call__(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append(Event(name=name, payload=dict(payload)))

    def names(self) -> list[str]:
        return [event.name for event in self.events]

    def of(self, name: EventName | str) -> list[Event]:
        key = name.value if isinstance(name, EventName) else str(name)
        return [event for event in self.events if event.name == key]

    def clear(self) -> None:
        self.events.clear()


class LoggingSink:
    """Sink that writes every event to a logger at DEBUG level."""

    def __init__(self, name: str = "skirmish.events", level: int = logging.DEBUG):
        self.logger = logging.getLogger(name)
        self.level = level

    def __call__(self, name: str, payload: Mapping[str, Any]) -> None:
        if self.logger.isEnabledFor(self.level):
            details = ", ".join(f"{key}={value!r}" for key, value in payload.items())
            self.logger.log(self.level, "%s: %s", name, details)
