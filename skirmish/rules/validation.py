"""
Rule Set Validation - Consistency checks for a rule-set provider.

Validates that:
1. The player type has a factory
2. Actions are keyed by their own kind
3. Permissions name registered entity types, action kinds and declared phases
4. The phase graph can leave the initial phase (and, ideally, reach the end)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.phase_graph import END, START
from ..errors import RuleSetValidationError

if TYPE_CHECKING:
    from .ruleset import RuleSet


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_ruleset(ruleset: RuleSet, raise_on_error: bool = False) -> ValidationResult:
    """
    Validate a complete rule set.

    Returns ValidationResult with errors and warnings.
    Raises RuleSetValidationError if raise_on_error=True and errors exist.
    """
    errors: list[str] = []
    warnings: list[str] = []

    entity_types = set(ruleset.entity_factories)
    action_kinds = set(ruleset.actions)

    if ruleset.player_type not in entity_types:
        errors.append(f"No entity factory registered for player type '{ruleset.player_type}'")

    for key, action in ruleset.actions.items():
        if action.kind != key:
            errors.append(f"Action '{action.name}' has kind '{action.kind}' but is registered as '{key}'")

    errors.extend(_validate_permissions(ruleset, entity_types, action_kinds))

    graph = ruleset.phase_graph
    if not graph.outgoing(START):
        errors.append(f"Phase graph has no transition out of '{START}'")
    elif END not in graph.reachable_from(START):
        warnings.append(f"Phase graph has no path from '{START}' to '{END}'")

    permitted = {kind for _, _, kind in ruleset.permission_graph.iter_permissions()}
    for kind in ruleset.actions:
        if kind not in permitted:
            warnings.append(f"Action '{kind}' is never permitted")

    result = ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
    if raise_on_error and not result.valid:
        raise RuleSetValidationError(errors)
    return result


def _validate_permissions(
    ruleset: RuleSet, entity_types: set[str], action_kinds: set[str]
) -> list[str]:
    """Validate every permission edge against the registered names."""
    errors = []
    for (from_type, phase), (to_type, _), kind in ruleset.permission_graph.iter_permissions():
        label = f"Permission {from_type} -> {to_type} in '{phase}'"
        for entity_type in (from_type, to_type):
            if entity_type not in entity_types:
                errors.append(f"{label} names unregistered entity type '{entity_type}'")
        if kind not in action_kinds:
            errors.append(f"{label} names unregistered action kind '{kind}'")
        if not ruleset.phase_graph.has_phase(phase):
            errors.append(f"{label} uses undeclared phase '{phase}'")
    # Duplicate messages appear once per granted kind on the same edge
    return list(dict.fromkeys(errors))
