"""Random number generation utilities for the can-collecting robot."""

import numpy as np
from typing import Optional, Sequence, List, TypeVar

T = TypeVar("T")


class SeededRNG:
    """Seeded random number generator for reproducible results.

    Every random draw in a run (can placement, start position, exploration)
    goes through one instance of this class, so a seed pins down the whole run.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._generator = np.random.default_rng(seed)

    def random(self) -> float:
        """Generate random float in [0, 1)."""
        return float(self._generator.random())

    def randint(self, a: int, b: int) -> int:
        """Generate random integer in [a, b]."""
        return int(self._generator.integers(a, b + 1))

    def sample(self, population: Sequence[T], k: int) -> List[T]:
        """Sample k elements from population without replacement."""
        if not (0 <= k <= len(population)):
            raise ValueError(f"Sample size {k} is outside [0, {len(population)}]")
        indices = self._generator.choice(len(population), size=k, replace=False)
        return [population[int(i)] for i in indices]

