"""
Rule-set provider: the injected bundle of factories, actions and graphs.
"""

from .ruleset import RuleSet, EncounterFactory
from .validation import ValidationResult, validate_ruleset

__all__ = [
    "RuleSet",
    "EncounterFactory",
    "ValidationResult",
    "validate_ruleset",
]
