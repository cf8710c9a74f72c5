"""
Action Resolver - Contested-roll resolution of one action.

Algorithm:
1. Authorization via the permission graph       -> else NOT_ALLOWED
2. Affordability of every positive cost key     -> else CANNOT_AFFORD
   (a halt performs no mutation on either party and draws no rolls)
3. Deduct the full cost from the actioner (never refunded)
4. Weighted modifiers: sum(weight(k) * numeric(k)) for each side
5. Two independent d20 rolls
6. result = (actioner_roll + actioner_mod) - (actionee_roll + actionee_mod)
7. Band the result and apply:
   - success / critical success: masked effect on the actionee
     (add effects are doubled on a critical success)
   - critical failure: the actioner pays the cost again, floored at zero
   - failure: nothing further

Every step is reported to the event sink.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .action import ActionDefinition, ActionOutcome, ActionResult, EffectType
from .attributes import AttributeSet
from .dice import Dice
from .events import EventName, EventSink, emit

if TYPE_CHECKING:
    from .entity import Entity
    from .encounter import Encounter
    from .permission_graph import PermissionGraph

logger = logging.getLogger(__name__)

# Outcome band thresholds on the result value
CRITICAL_FAILURE_BELOW = -12
SUCCESS_FROM = 0
CRITICAL_SUCCESS_FROM = 11

CRITICAL_ADD_MULTIPLIER = 2


def band_outcome(result_value: float) -> ActionOutcome:
    """
    Map a result value to its outcome band.

        result < -12         critical failure
        -12 <= result < 0    failure
        0 <= result < 11     success
        result >= 11         critical success
    """
    if result_value < CRITICAL_FAILURE_BELOW:
        return ActionOutcome.CRITICAL_FAILURE
    if result_value < SUCCESS_FROM:
        return ActionOutcome.FAILURE
    if result_value < CRITICAL_SUCCESS_FROM:
        return ActionOutcome.SUCCESS
    return ActionOutcome.CRITICAL_SUCCESS


def weighted_modifier(weights: AttributeSet, entity: Entity) -> float:
    """Linear combination of the entity's numeric attributes."""
    total = 0
    for key, weight in weights.items():
        if not weight:
            continue
        total += weight * (entity.num(key) or 0)
    return total


def can_afford(action: ActionDefinition, actioner: Entity) -> bool:
    for key, amount in action.positive_costs():
        current = actioner.num(key)
        if current is None or current < amount:
            return False
    return True


@dataclass
class ActionResolver:
    """
    Resolves one action between two entities.

    Stateless between calls; mutates only the two entities it is given.
    """
    permission_graph: PermissionGraph
    dice: Dice
    sink: EventSink | None = None

    def resolve(
        self,
        action: ActionDefinition,
        actioner: Entity,
        actionee: Entity,
        phase: str,
        encounter: Encounter | None,
    ) -> ActionResult:
        emit(self.sink, EventName.ACTION_ATTEMPT, action=action, actioner=actioner, actionee=actionee)

        if not self.permission_graph.is_allowed(action.kind, actioner, actionee, phase, encounter):
            return self._halt(
                ActionOutcome.NOT_ALLOWED,
                f"Action '{action.name}' is not allowed right now.",
            )
        if not can_afford(action, actioner):
            return self._halt(ActionOutcome.CANNOT_AFFORD, "Cannot afford cost.")

        self._pay_cost(action, actioner)

        actioner_mod = weighted_modifier(action.actioner_mod, actioner)
        actionee_mod = weighted_modifier(action.actionee_mod, actionee)
        actioner_roll = self.dice.d20()
        actionee_roll = self.dice.d20()
        result_value = (actioner_roll + actioner_mod) - (actionee_roll + actionee_mod)
        outcome = band_outcome(result_value)

        logger.debug(
            "%s -> %s with %s: %s+%s vs %s+%s = %s (%s)",
            actioner.name, actionee.name, action.name,
            actioner_roll, actioner_mod, actionee_roll, actionee_mod,
            result_value, outcome.value,
        )
        emit(
            self.sink,
            EventName.ROLL_RESULT,
            actioner=actioner,
            actionee=actionee,
            actioner_roll=actioner_roll,
            actionee_roll=actionee_roll,
            actioner_mod=actioner_mod,
            actionee_mod=actionee_mod,
            result_value=result_value,
            outcome=outcome.value,
        )

        if outcome.is_success:
            self._apply_effect(action, actionee, critical=outcome == ActionOutcome.CRITICAL_SUCCESS)
        elif outcome == ActionOutcome.CRITICAL_FAILURE:
            emit(
                self.sink,
                EventName.PENALTY,
                entity=actioner,
                reason="pays cost again due to critical failure.",
            )
            self._pay_cost(action, actioner, floor_at_zero=True)
        else:
            emit(self.sink, EventName.NO_EFFECT, outcome=outcome.value)

        return ActionResult(
            outcome=outcome,
            result_value=result_value,
            actioner_roll=actioner_roll,
            actionee_roll=actionee_roll,
            actioner_mod=actioner_mod,
            actionee_mod=actionee_mod,
        )

    def _halt(self, outcome: ActionOutcome, reason: str) -> ActionResult:
        logger.debug("Resolution halted: %s", reason)
        emit(self.sink, EventName.HALT, reason=reason, outcome=outcome.value)
        return ActionResult.halt(outcome)

    def _pay_cost(self, action: ActionDefinition, actioner: Entity, floor_at_zero: bool = False) -> None:
        for key, amount in action.positive_costs():
            new_value = actioner.num(key) - amount
            if floor_at_zero:
                new_value = max(0, new_value)
            actioner.num_attrs.set(key, new_value)
            emit(
                self.sink,
                EventName.COST_PAID,
                entity=actioner,
                resource=key,
                cost=amount,
                new_value=new_value,
            )

    def _apply_effect(self, action: ActionDefinition, actionee: Entity, critical: bool) -> None:
        for key in action.masked_keys():
            if not actionee.num_attrs.schema.declares(key):
                logger.debug("%s has no numeric key '%s'; effect skipped", actionee.name, key)
                continue
            original_value = actionee.num(key)
            if action.effect_type == EffectType.SET:
                new_value = action.effect_val.get(key)
            else:
                amount = action.effect_val.get(key)
                if critical:
                    amount *= CRITICAL_ADD_MULTIPLIER
                new_value = original_value + amount
            actionee.num_attrs.set(key, new_value)
            emit(
                self.sink,
                EventName.EFFECT_APPLIED,
                entity=actionee,
                key=key,
                original_value=original_value,
                new_value=new_value,
                critical=critical,
            )
