"""
Ono Event Formatter - Narrative text for engine events.

Translates (event_name, payload) pairs into human-readable lines. The
NarrativeSink adapter plugs a formatter straight into a World as its
event sink.
"""

from __future__ import annotations
from typing import Any, Callable, Mapping

from ...engine_core.events import EventName


def _fmt_number(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


class EventFormatter:
    """Formats engine events as narrative text."""

    def __init__(self, narrative: Mapping[str, str] | None = None):
        self.narrative = dict(narrative or {})

    def format(self, name: EventName | str, payload: Mapping[str, Any]) -> str:
        """Return the narrative line for an event ('' for unknown events)."""
        event = name.value if isinstance(name, EventName) else str(name)
        handler = getattr(self, f"_format_{event}", None)
        if handler is None:
            return ""
        return handler(payload)

    def _format_action_attempt(self, data: Mapping[str, Any]) -> str:
        return f"{data['actioner'].name} attempts '{data['action'].name}' on {data['actionee'].name}."

    def _format_cost_paid(self, data: Mapping[str, Any]) -> str:
        return (
            f"  {data['entity'].name} pays {data['cost']} {data['resource']}. "
            f"New value: {data['new_value']}"
        )

    def _format_roll_result(self, data: Mapping[str, Any]) -> str:
        return (
            f"  Roll: {data['actioner'].name} ({data['actioner_roll']}) vs "
            f"{data['actionee'].name} ({data['actionee_roll']}). "
            f"Mods: {_fmt_number(data['actioner_mod'])} vs {_fmt_number(data['actionee_mod'])}. "
            f"Final Value: {_fmt_number(data['result_value'])} -> {str(data['outcome']).upper()}"
        )

    def _format_effect_applied(self, data: Mapping[str, Any]) -> str:
        bonus = " Critical hit!" if data.get("critical") else ""
        return (
            f"  Effect on {data['entity'].name}: {data['key']} changed from "
            f"{data['original_value']} to {data['new_value']}.{bonus}"
        )

    def _format_no_effect(self, data: Mapping[str, Any]) -> str:
        return f"  Action resulted in {data['outcome']}. No effect applied."

    def _format_penalty(self, data: Mapping[str, Any]) -> str:
        return f"  Penalty for {data['entity'].name}: {data['reason']}"

    def _format_halt(self, data: Mapping[str, Any]) -> str:
        return f"  HALT: {data['reason']}"

    def _format_phase_change(self, data: Mapping[str, Any]) -> str:
        return f"Phase changed from {data['from_phase']} to {data['to_phase']}."

    def _format_turn_start(self, data: Mapping[str, Any]) -> str:
        entity = data.get("entity")
        name = entity.name if entity is not None else "nobody"
        return f"Round {data.get('round', 1)}: now is {name}'s turn."

    def _format_encounter_start(self, data: Mapping[str, Any]) -> str:
        names = ", ".join(e.name for e in data.get("enemies", [])) or "nobody"
        return f"--- Encounter begins! Facing: {names} ---"

    def _format_encounter_end(self, data: Mapping[str, Any]) -> str:
        outcome = "Victory!" if data.get("player_won") else "Defeat."
        return f"--- Encounter ended. {outcome} ---"


class NarrativeSink:
    """
    Event sink writing formatted lines to `write`.

    Events with no narrative text are dropped.
    """

    def __init__(self, formatter: EventFormatter | None = None, write: Callable[[str], Any] = print):
        self.formatter = formatter or EventFormatter()
        self.write = write

    def __call__(self, name: str, payload: Mapping[str, Any]) -> None:
        line = self.formatter.format(name, payload)
        if line:
            self.write(line)
