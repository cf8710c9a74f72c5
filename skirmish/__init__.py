"""
Skirmish - Turn-Based Combat Resolution Engine

A deterministic, rules-driven engine for narrative role-playing encounters.
The engine loads a rule set and provides:
- Attribute/entity data model
- Contested-roll action resolution
- Encounter lifecycle via a guarded phase graph
- Authorization via a permission graph
- Turn order and state round-trip
"""

__version__ = "0.1.0"
