"""
Dice - The single randomness source of a world.

All rolls and shuffles flow through one Dice instance so a session can be
reproduced from a seed, and tests can force exact rolls with ScriptedDice.
"""

from __future__ import annotations
import random
from typing import Iterable, Sequence, TypeVar

T = TypeVar("T")


class Dice:
    """Seedable uniform dice backed by random.Random."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self.rng = random.Random(seed)

    def roll(self, sides: int = 20) -> int:
        """Uniform integer in [1, sides]."""
        return self.rng.randint(1, sides)

    def d20(self) -> int:
        return self.roll(20)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Uniformly random permutation (new list)."""
        shuffled = list(items)
        self.rng.shuffle(shuffled)
        return shuffled


class ScriptedDice(Dice):
    """
    Dice that return pre-scripted rolls in order.

    Shuffles keep the input order unless an explicit order is scripted.
    Raises if more rolls are requested than were scripted.
    """

    def __init__(self, rolls: Iterable[int] = (), order: Sequence[int] | None = None):
        super().__init__(seed=0)
        self.rolls = list(rolls)
        self.order = list(order) if order is not None else None
        self.calls = 0

    def push(self, *rolls: int) -> None:
        self.rolls.extend(rolls)

    def roll(self, sides: int = 20) -> int:
        if not self.rolls:
            raise RuntimeError("ScriptedDice ran out of scripted rolls")
        self.calls += 1
        return self.rolls.pop(0)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        if self.order is None:
            return list(items)
        return [items[i] for i in self.order]
