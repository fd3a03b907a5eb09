"""
Deterministic pseudo-random source.

A small linear-congruential generator. Every stochastic decision in a run
draws from one instance in call order, so the same seed replays the same
trace. Each helper consumes exactly one draw.
"""

import math
import random
from typing import Optional, Sequence, Tuple, TypeVar, Union

T = TypeVar("T")

MULTIPLIER = 9301
INCREMENT = 49297
MODULUS = 233280

# Seed 0 is replaced so that it never behaves like "no seed".
ZERO_SEED_SUBSTITUTE = 49297

Seed = Union[int, float]


class RandomSource:
    """Seedable LCG producing floats in [0, 1)."""

    def __init__(self, seed: Optional[Seed] = None):
        if seed is None:
            seed = random.randrange(1, MODULUS)
        elif seed == 0:
            seed = ZERO_SEED_SUBSTITUTE
        self.seed = seed
        self._state = seed
        self.draws = 0

    def next(self) -> float:
        self._state = (self._state * MULTIPLIER + INCREMENT) % MODULUS
        self.draws += 1
        return self._state / MODULUS

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.next()

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self.next() < probability

    def pick(self, options: Sequence[T]) -> T:
        return options[math.floor(self.next() * len(options))]

    def pick_threshold(self, table: Sequence[Tuple[T, float]]) -> T:
        """
        Pick from ``(value, upper_bound)`` pairs.

        Bounds are cumulative and ascending; the first value whose bound
        exceeds the roll wins and the last value catches the rest.
        """
        roll = self.next()
        for value, upper_bound in table[:-1]:
            if roll < upper_bound:
                return value
        return table[-1][0]
