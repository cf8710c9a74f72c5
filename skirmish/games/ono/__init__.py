"""
Ono - The demo rule set

A hero fights an endless line of orc warlords.
Key mechanics:
- Heavy Strike costs mana and scales with strength against defense
- Orcs answer with Basic Attack
- An encounter ends when the hero or every orc is down

This module contains:
- The rule set factory and its identifiers
- The narrative event formatter
"""

from .rules import (
    CORE_STATS,
    STATUS_EFFECTS,
    COMBAT,
    OnoEntity,
    OnoAction,
    create_ono_ruleset,
    create_hero,
    spawn_grimgor,
)
from .formatter import EventFormatter, NarrativeSink

__all__ = [
    "CORE_STATS",
    "STATUS_EFFECTS",
    "COMBAT",
    "OnoEntity",
    "OnoAction",
    "create_ono_ruleset",
    "create_hero",
    "spawn_grimgor",
    "EventFormatter",
    "NarrativeSink",
]
