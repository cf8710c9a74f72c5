"""
Heuristic Evaluator - Scores candidate moves for enemy decision-making.

A move is scored from the exact outcome distribution of the contested
roll (all 400 d20 pairs) given the modifier edge between the two
entities:
- Expected effect magnitude (success, doubled add on critical success)
- Chance the effect drops the target's vitality to zero
- Resource cost, inflated by the chance of paying it twice

Weights can be adjusted to create different temperaments.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING

from ..engine_core.action import ActionOutcome, EffectType
from ..engine_core.resolver import CRITICAL_ADD_MULTIPLIER, band_outcome, weighted_modifier
from .policy import BotDecision, BotPolicy

if TYPE_CHECKING:
    from ..engine_core.entity import Entity
    from ..engine_core.world import Move, World

DIE_FACES = range(1, 21)


@lru_cache(maxsize=256)
def outcome_probabilities(edge: float) -> dict[ActionOutcome, float]:
    """
    Probability of each outcome band for a given modifier edge.

    edge = actioner_mod - actionee_mod
    """
    counts = {outcome: 0 for outcome in (
        ActionOutcome.CRITICAL_FAILURE,
        ActionOutcome.FAILURE,
        ActionOutcome.SUCCESS,
        ActionOutcome.CRITICAL_SUCCESS,
    )}
    for actioner_roll in DIE_FACES:
        for actionee_roll in DIE_FACES:
            counts[band_outcome(actioner_roll - actionee_roll + edge)] += 1
    total = len(DIE_FACES) ** 2
    return {outcome: count / total for outcome, count in counts.items()}


@dataclass
class EvaluationWeights:
    """
    Weights for the move evaluator.

    Higher values = more importance.
    """
    effect_magnitude: float = 1.0
    lethal_chance: float = 25.0
    cost: float = 0.25


@dataclass
class MoveEvaluation:
    """
    Result of evaluating one move.
    """
    move: Move
    score: float
    edge: float = 0.0
    feature_breakdown: dict[str, float] = field(default_factory=dict)


class MoveEvaluator:
    """
    Evaluates moves without touching the world.

    Used by HeuristicPolicy:
    1. Score every allowed move
    2. Select the highest score (earliest move wins ties)
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, world: World, actor: Entity, move: Move) -> MoveEvaluation:
        action = world.ruleset.action(move.kind)
        if action is None:
            return MoveEvaluation(move=move, score=float("-inf"))

        target = move.target
        edge = (
            weighted_modifier(action.actioner_mod, actor)
            - weighted_modifier(action.actionee_mod, target)
        )
        probs = outcome_probabilities(edge)
        p_success = probs[ActionOutcome.SUCCESS]
        p_critical = probs[ActionOutcome.CRITICAL_SUCCESS]

        magnitude = 0.0
        lethal = 0.0
        vitality_key = world.ruleset.vitality_key
        for key in action.masked_keys():
            if not target.num_attrs.schema.declares(key):
                continue
            value = action.effect_val.get(key) or 0
            current = target.num(key) or 0
            if action.effect_type == EffectType.SET:
                magnitude += (p_success + p_critical) * abs(current - value)
                if key == vitality_key and current > 0 and value <= 0:
                    lethal = max(lethal, p_success + p_critical)
            else:
                magnitude += p_success * abs(value) + p_critical * abs(value) * CRITICAL_ADD_MULTIPLIER
                if key == vitality_key and current > 0:
                    if current + value <= 0:
                        lethal = max(lethal, p_success + p_critical)
                    elif current + value * CRITICAL_ADD_MULTIPLIER <= 0:
                        lethal = max(lethal, p_critical)

        cost = sum(amount for _, amount in action.positive_costs())
        cost *= 1 + probs[ActionOutcome.CRITICAL_FAILURE]

        features = {
            "effect_magnitude": magnitude,
            "lethal_chance": lethal,
            "cost": cost,
        }
        score = (
            self.weights.effect_magnitude * magnitude
            + self.weights.lethal_chance * lethal
            - self.weights.cost * cost
        )
        return MoveEvaluation(move=move, score=score, edge=edge, feature_breakdown=features)


class HeuristicPolicy(BotPolicy):
    """
    Heuristic policy - picks the move with the best evaluated score.
    """

    def __init__(self, evaluator: MoveEvaluator | None = None):
        self.evaluator = evaluator or MoveEvaluator()

    def select_move(self, world: World, actor: Entity, moves: list[Move]) -> BotDecision:
        if not moves:
            raise ValueError("No allowed moves available")

        evaluations = [self.evaluator.evaluate(world, actor, move) for move in moves]
        best = evaluations[0]
        for evaluation in evaluations[1:]:
            if evaluation.score > best.score:
                best = evaluation

        return BotDecision(
            move=best.move,
            explanation=f"Best expected value for {best.move.describe()}",
            evaluated_moves=len(evaluations),
            best_score=best.score,
            evaluation_details={e.move.describe(): e.score for e in evaluations},
        )
