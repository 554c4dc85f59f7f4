"""
Injectable random source.

Every draw made by the combat core goes through an RNG instance so a
battle can be replayed from a seed. All helpers are derived from
random(), which means a test double only has to override that one method
to script crits, targets, confusion rolls and move picks.
"""

from __future__ import annotations

from random import Random
from typing import Sequence, TypeVar

T = TypeVar("T")


class RNG:
    """
    Uniform random source.

    Usage:
        rng = RNG()          # production: unseeded
        rng = RNG(seed=42)   # replayable
    """

    def __init__(self, seed: int | None = None):
        self._random = Random(seed)
        self.seed = seed

    def random(self) -> float:
        """Next float in [0.0, 1.0)."""
        return self._random.random()

    def chance(self, probability: float) -> bool:
        """Return True with the given probability (clamped to [0, 1])."""
        if probability <= 0:
            return False
        if probability >= 1:
            return True
        return self.random() < probability

    def randint(self, a: int, b: int) -> int:
        """Integer N with a <= N <= b."""
        if b < a:
            a, b = b, a
        span = b - a + 1
        return a + min(span - 1, int(self.random() * span))

    def uniform(self, a: float, b: float) -> float:
        """Float between a and b."""
        return a + (b - a) * self.random()

    def choice(self, seq: Sequence[T]) -> T:
        """Uniformly pick one element from a non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return seq[self.randint(0, len(seq) - 1)]

    def weighted_index(self, weights: Sequence[float]) -> int:
        """
        Pick an index with probability proportional to its weight.

        Non-positive weights never win unless every weight is non-positive,
        in which case the last index is returned.
        """
        if not weights:
            raise ValueError("Cannot pick from an empty weight list.")
        total = sum(w for w in weights if w > 0)
        if total <= 0:
            return len(weights) - 1

        roll = self.random() * total
        last_positive = len(weights) - 1
        for index, weight in enumerate(weights):
            if weight <= 0:
                continue
            if roll < weight:
                return index
            roll -= weight
            last_positive = index
        # Float rounding can leave a sliver past the final bucket
        return last_positive
