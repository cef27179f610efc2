"""Seeded source of uniform and normal deviates."""

from __future__ import annotations

import math
import random


class RandomStream:
    """Reproducible deviate stream.

    Two streams built with the same seed and called in the same order
    return identical values. Instances are not shared between generation
    calls, so no locking is done.
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._rng = random.Random(seed)
        self._spare: float | None = None

    def random(self) -> float:
        """Next uniform deviate in [0, 1)."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        """Uniform deviate in [low, high)."""
        return low + (high - low) * self.random()

    def normal(self) -> float:
        """Standard normal deviate (Box-Muller, one spare kept per pair)."""
        if self._spare is not None:
            value, self._spare = self._spare, None
            return value
        # 1 - u keeps the log argument in (0, 1]
        u = 1.0 - self.random()
        v = self.random()
        mag = math.sqrt(-2.0 * math.log(u))
        self._spare = mag * math.cos(2.0 * math.pi * v)
        return mag * math.sin(2.0 * math.pi * v)
