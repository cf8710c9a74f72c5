"""
Bot Policy - Interface for enemy decision-making.

A BotPolicy takes the world, the acting entity and the moves the
permission graph currently allows, and returns a decision.
Decisions include:
- Which move to make (action kind + target)
- Explanation (for narration/debugging)
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..engine_core.entity import Entity
    from ..engine_core.world import Move, World


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The move to make
    - Explanation (for UI/debugging)
    - Confidence in the decision
    """
    move: Move
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_moves: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for enemy policies.

    The world only calls a policy with a non-empty move list; policies
    raise ValueError when given none.
    """

    @abstractmethod
    def select_move(
        self,
        world: World,
        actor: Entity,
        moves: list[Move],
    ) -> BotDecision:
        """
        Select a move from the allowed moves.

        Args:
            world: Current world (read-only for the policy)
            actor: The entity whose turn it is
            moves: Allowed moves to choose from

        Returns:
            BotDecision with the selected move
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class FirstAllowedPolicy(BotPolicy):
    """
    First-allowed policy - always picks the first allowed move.

    Moves are ordered by action registration, then by target roster
    order, so this is fully deterministic.
    """

    def select_move(self, world: World, actor: Entity, moves: list[Move]) -> BotDecision:
        if not moves:
            raise ValueError("No allowed moves available")

        return BotDecision(
            move=moves[0],
            explanation="Selected first allowed move",
            evaluated_moves=1,
        )


class RandomPolicy(BotPolicy):
    """
    Random policy - picks uniformly among the allowed moves.

    Seeded independently of the world's dice so enemy choices do not
    shift the combat rolls.
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(self, world: World, actor: Entity, moves: list[Move]) -> BotDecision:
        if not moves:
            raise ValueError("No allowed moves available")

        move = self.rng.choice(moves)
        return BotDecision(
            move=move,
            explanation="Selected randomly",
            confidence=1.0 / len(moves),
            evaluated_moves=len(moves),
        )
