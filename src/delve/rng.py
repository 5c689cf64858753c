from __future__ import annotations

import logging
import random
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)


class RandomSource:
    """
    The single source of randomness for generation and combat.

    A thin wrapper around random.Random so the generator can be injected and
    seeded explicitly. Nothing else in the package touches the ``random``
    module.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)
        if seed is not None:
            logger.debug("Initialized RandomSource with deterministic seed=%s", seed)
        else:
            logger.debug("Initialized RandomSource with non-deterministic seed")

    def reseed(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng.seed(seed)
        logger.debug("RandomSource reseeded with seed=%s", seed)

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in [a, b], both ends inclusive."""
        return self._rng.randint(a, b)

    def randrange(self, start: int, stop: int) -> int:
        """Uniform integer in [start, stop); ``stop`` must exceed ``start``."""
        return self._rng.randrange(start, stop)

    def chance(self, percent: int) -> bool:
        return self._rng.randrange(0, 100) < percent

    def coin(self) -> bool:
        return self._rng.randrange(0, 2) == 0

    def choice(self, seq: Sequence[Any]) -> Any:
        if not seq:
            raise ValueError("RandomSource.choice() received an empty sequence")
        return seq[self._rng.randrange(0, len(seq))]


__all__ = ["RandomSource"]
