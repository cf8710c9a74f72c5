"""
Action System - Rule definitions, outcomes and results.

An ActionDefinition is configuration, not per-use state: the same
definition is reused for every application between two entities. It is
never persisted as a live instance; after a load it is re-obtained from
the rule set by kind.

Definition fields:
- cost: required resource amounts (deducted before the roll)
- actioner_mod / actionee_mod: linear weights over numeric attributes
- effect_val: deltas (add) or absolutes (set)
- effect_mask: booleans selecting which keys the effect touches
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .attributes import AttributeSchema, AttributeSet
from .kinds import Kind, kind_name
from ..errors import RuleConfigError


class EffectType(str, Enum):
    """How an effect value is applied to the actionee."""
    SET = "set"
    ADD = "add"


class ActionOutcome(str, Enum):
    """Outcome of one resolution."""
    # Precondition halts (no mutation)
    NOT_ALLOWED = "not_allowed"
    CANNOT_AFFORD = "cannot_afford"

    # Rolled outcomes
    CRITICAL_FAILURE = "critical failure"
    FAILURE = "failure"
    SUCCESS = "success"
    CRITICAL_SUCCESS = "critical success"

    @property
    def is_halt(self) -> bool:
        return self in (ActionOutcome.NOT_ALLOWED, ActionOutcome.CANNOT_AFFORD)

    @property
    def is_success(self) -> bool:
        return self in (ActionOutcome.SUCCESS, ActionOutcome.CRITICAL_SUCCESS)


@dataclass(frozen=True)
class ActionDefinition:
    """
    A stateless rule applied by an actioner to an actionee.

    All attribute sets are expected to share the numeric schema of the
    entities the action is used between.
    """
    name: str
    kind: str
    cost: AttributeSet
    actioner_mod: AttributeSet
    actionee_mod: AttributeSet
    effect_val: AttributeSet
    effect_type: EffectType
    effect_mask: AttributeSet
    description: str | None = None

    def __post_init__(self):
        required = {
            "name": self.name,
            "kind": self.kind,
            "cost": self.cost,
            "actioner_mod": self.actioner_mod,
            "actionee_mod": self.actionee_mod,
            "effect_val": self.effect_val,
            "effect_type": self.effect_type,
            "effect_mask": self.effect_mask,
        }
        for prop, value in required.items():
            if value is None or value == "":
                raise RuleConfigError(f"Action definition is missing required property '{prop}'")
        try:
            effect_type = EffectType(self.effect_type)
        except ValueError:
            raise RuleConfigError(
                f"Action '{self.name}' has unknown effect type '{self.effect_type}'"
            )
        object.__setattr__(self, "effect_type", effect_type)
        object.__setattr__(self, "kind", kind_name(self.kind))

    @classmethod
    def define(
        cls,
        schema: AttributeSchema,
        name: str,
        kind: Kind,
        cost: Mapping[str, Any] | None = None,
        actioner_mod: Mapping[str, Any] | None = None,
        actionee_mod: Mapping[str, Any] | None = None,
        effect: Mapping[str, Any] | None = None,
        effect_type: EffectType | str = EffectType.ADD,
        mask: Mapping[str, bool] | None = None,
        description: str | None = None,
    ) -> ActionDefinition:
        """
        Factory building every attribute set from plain mappings.

        When no mask is given, every key named in `effect` is selected.
        Keys the schema does not declare are rejected here, so typos fail
        at rule-authoring time instead of silently doing nothing.
        """
        effect = dict(effect or {})
        if mask is None:
            mask = {key: True for key in effect}

        sections = {
            "cost": cost,
            "actioner_mod": actioner_mod,
            "actionee_mod": actionee_mod,
            "effect": effect,
            "mask": mask,
        }
        for section, values in sections.items():
            unknown = sorted(set(values or {}) - set(schema.keys))
            if unknown:
                raise RuleConfigError(
                    f"Action '{name}' {section} uses keys not in schema '{schema.name}': {unknown}"
                )

        return cls(
            name=name,
            kind=kind,
            cost=schema.create(cost),
            actioner_mod=schema.create(actioner_mod),
            actionee_mod=schema.create(actionee_mod),
            effect_val=schema.create(effect),
            effect_type=effect_type,
            effect_mask=schema.create({key: bool(flag) for key, flag in mask.items()}),
            description=description,
        )

    def positive_costs(self) -> list[tuple[str, Any]]:
        """Cost entries that actually require payment."""
        return [(key, amount) for key, amount in self.cost.items() if amount and amount > 0]

    def masked_keys(self) -> list[str]:
        return [key for key, flag in self.effect_mask.items() if flag]

    def to_data(self) -> dict[str, Any]:
        """Describe the configuration (for inspection; never used to persist state)."""
        return {
            "name": self.name,
            "type": self.kind,
            "description": self.description,
            "cost": self.cost.to_data(),
            "actionerMod": self.actioner_mod.to_data(),
            "actioneeMod": self.actionee_mod.to_data(),
            "effectVal": self.effect_val.to_data(),
            "effectType": self.effect_type.value,
            "effectMask": self.effect_mask.to_data(),
        }


@dataclass
class ActionResult:
    """
    Result of one resolution.

    result_value and the roll details are None for precondition halts.
    """
    outcome: ActionOutcome
    result_value: float | None = None
    actioner_roll: int | None = None
    actionee_roll: int | None = None
    actioner_mod: float | None = None
    actionee_mod: float | None = None

    @property
    def halted(self) -> bool:
        return self.outcome.is_halt

    @property
    def succeeded(self) -> bool:
        return self.outcome.is_success

    @classmethod
    def halt(cls, outcome: ActionOutcome) -> ActionResult:
        return cls(outcome=outcome)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"outcome": self.outcome.value}
        if self.result_value is not None:
            data["resultValue"] = self.result_value
        return data


class ActionBuilder:
    """
    Fluent builder for ActionDefinition.

    Usage:
        strike = (
            ActionBuilder()
            .with_name("Heavy Strike")
            .with_kind(OnoAction.HEAVY_STRIKE)
            .with_cost(stats.create({"mp": 10}))
            ...
            .build()
        )
    """

    REQUIRED = (
        "name",
        "kind",
        "cost",
        "actioner_mod",
        "actionee_mod",
        "effect_val",
        "effect_type",
        "effect_mask",
    )

    def __init__(self):
        self.config: dict[str, Any] = {}

    def with_name(self, name: str) -> ActionBuilder:
        self.config["name"] = name
        return self

    def with_kind(self, kind: Kind) -> ActionBuilder:
        self.config["kind"] = kind
        return self

    def with_description(self, description: str) -> ActionBuilder:
        self.config["description"] = description
        return self

    def with_cost(self, cost: AttributeSet) -> ActionBuilder:
        self.config["cost"] = cost
        return self

    def with_actioner_mod(self, actioner_mod: AttributeSet) -> ActionBuilder:
        self.config["actioner_mod"] = actioner_mod
        return self

    def with_actionee_mod(self, actionee_mod: AttributeSet) -> ActionBuilder:
        self.config["actionee_mod"] = actionee_mod
        return self

    def with_effect_val(self, effect_val: AttributeSet) -> ActionBuilder:
        self.config["effect_val"] = effect_val
        return self

    def with_effect_type(self, effect_type: EffectType | str) -> ActionBuilder:
        self.config["effect_type"] = effect_type
        return self

    def with_effect_mask(self, effect_mask: AttributeSet) -> ActionBuilder:
        self.config["effect_mask"] = effect_mask
        return self

    def build(self) -> ActionDefinition:
        for prop in self.REQUIRED:
            if self.config.get(prop) is None:
                raise RuleConfigError(f"Cannot build action: missing required property '{prop}'")
        return ActionDefinition(**self.config)
