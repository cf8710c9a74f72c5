"""
Exception hierarchy.

Configuration mistakes are raised at construction time so they surface
before any gameplay happens. Resolution halts are NOT exceptions; they are
ordinary outcome values (see engine_core.action.ActionOutcome).
"""


class SkirmishError(Exception):
    """Base class for all engine errors."""


class RuleConfigError(SkirmishError):
    """A rule set, schema, factory or action definition is misconfigured."""


class GraphConfigError(RuleConfigError):
    """A phase or permission graph references something undeclared."""


class RuleSetValidationError(RuleConfigError):
    """Raised when rule set validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Rule set validation failed with {len(errors)} error(s)")


class SnapshotError(SkirmishError):
    """A persisted world document is structurally invalid."""


class EncounterError(SkirmishError):
    """The engine lifecycle was driven out of order."""
