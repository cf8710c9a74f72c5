"""
Bots module - Enemy policies.

Provides:
- BotPolicy: Interface for enemy decision-making
- FirstAllowedPolicy / RandomPolicy: baseline policies
- MoveEvaluator / HeuristicPolicy: expected-value move scoring
"""

from .policy import BotPolicy, BotDecision, FirstAllowedPolicy, RandomPolicy
from .evaluator import (
    EvaluationWeights,
    HeuristicPolicy,
    MoveEvaluation,
    MoveEvaluator,
    outcome_probabilities,
)

__all__ = [
    "BotPolicy",
    "BotDecision",
    "FirstAllowedPolicy",
    "RandomPolicy",
    "EvaluationWeights",
    "HeuristicPolicy",
    "MoveEvaluation",
    "MoveEvaluator",
    "outcome_probabilities",
]
