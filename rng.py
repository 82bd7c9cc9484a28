# rng.py
"""
Seeded random source for the scheduler.

A schedule for a given date must be reproducible, so every random decision in
one scheduling run is drawn from a single SeededRandom instance. The seed
string is hashed with 32-bit FNV-1a (Python's built-in hash() is salted per
process) and the result seeds a random.Random. It is not cryptographically
secure.
"""

import logging
import random
import time
from typing import Sequence, TypeVar

logger = logging.getLogger("app.rng")

T = TypeVar("T")

_MASK_32 = 0xFFFFFFFF
_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619


def hash_string_to_seed(text: str) -> int:
    """Hashes a string to a 32-bit seed (FNV-1a over UTF-16 code units)."""
    h = _FNV_OFFSET_BASIS
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * _FNV_PRIME) & _MASK_32
    return h


def make_seed(date_seed: str, randomize: bool = False, entropy: int | None = None) -> str:
    """
    Builds the seed string for a scheduling run.

    Args:
        date_seed: Deterministic basis, normally an ISO date
        randomize: If True, ephemeral entropy is mixed in so repeated calls differ
        entropy: Explicit entropy to mix in (defaults to the current time in ns)

    Returns:
        The date seed unchanged, or "<date_seed>#<entropy>" when randomizing.
    """
    if not randomize:
        return date_seed
    if entropy is None:
        entropy = time.time_ns()
    return f"{date_seed}#{entropy}"


class SeededRandom:
    """A random.Random seeded from a string, plus the helpers the scheduler needs."""

    def __init__(self, seed: str | int):
        if isinstance(seed, str):
            self.seed = seed
            state = hash_string_to_seed(seed)
        else:
            self.seed = str(seed)
            state = seed & _MASK_32
        self._random = random.Random(state)
        logger.debug("RNG seeded from %r (state=%d)", self.seed, state)

    def random(self) -> float:
        """Uniform draw in [0, 1)."""
        return self._random.random()

    def randrange(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        return self._random.randrange(n)

    def choice(self, items: Sequence[T]) -> T:
        return self._random.choice(items)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Returns a shuffled copy of items."""
        result = list(items)
        self._random.shuffle(result)
        return result

    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> T:
        """
        Picks one item with probability proportional to its weight.

        Meant for small candidate sets. A zero total weight falls back to a
        uniform choice.
        """
        if len(items) != len(weights):
            raise ValueError("items and weights must have the same length")
        if not items:
            raise IndexError("Cannot choose from an empty sequence")
        if any(w < 0 for w in weights):
            raise ValueError("weights must be non-negative")

        if sum(weights) <= 0:
            return self.choice(items)
        return self._random.choices(items, weights=weights)[0]

    def jitter(self, scale: float) -> float:
        """Small random offset in [0, scale) used to break near-ties."""
        return self._random.random() * scale
