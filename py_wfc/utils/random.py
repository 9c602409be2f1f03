"""
Random number generation utilities.

The collapse engine consumes randomness through the ``RandomSource``
protocol. ``AleaPRNG`` is the default implementation; ``NumpyRandomSource``
adapts a NumPy generator for callers that already manage NumPy seeds.
"""

from typing import MutableSequence, Optional, Protocol, Sequence, TypeVar

import numpy as np

from ..core.alea_prng import AleaPRNG

T = TypeVar("T")

# Global PRNG instance
_prng = None


class RandomSource(Protocol):
    """Capabilities the engine needs from a random number source."""

    def random(self) -> float:
        ...

    def choice(self, seq: Sequence[T]) -> T:
        ...

    def weighted_choice(self, seq: Sequence[T], weights: Sequence[float]) -> T:
        ...

    def shuffle(self, items: MutableSequence) -> None:
        ...


class NumpyRandomSource:
    """RandomSource backed by ``numpy.random.Generator``."""

    def __init__(self, seed: Optional[int] = None, generator: Optional[np.random.Generator] = None):
        self.generator = generator if generator is not None else np.random.default_rng(seed)

    def random(self) -> float:
        return float(self.generator.random())

    def choice(self, seq):
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.generator.integers(len(seq)))]

    def weighted_choice(self, seq, weights):
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        if len(seq) != len(weights):
            raise ValueError("seq and weights must have the same length")
        p = np.clip(np.asarray(weights, dtype=np.float64), 0.0, None)
        total = p.sum()
        if total <= 0:
            return self.choice(seq)
        return seq[int(self.generator.choice(len(seq), p=p / total))]

    def shuffle(self, items) -> None:
        order = self.generator.permutation(len(items))
        items[:] = [items[i] for i in order]


def set_random_seed(seed: str) -> None:
    """
    Set the seed of the process-wide Alea PRNG.

    Collapse runs that are not handed an explicit random source draw from
    this generator.

    Args:
        seed: Seed string to use
    """
    global _prng
    _prng = AleaPRNG(seed)


def get_prng() -> AleaPRNG:
    """
    Get the process-wide Alea PRNG, creating it from the configured
    default seed on first use.

    Returns:
        AleaPRNG instance
    """
    global _prng
    if _prng is None:
        from ..config import settings

        _prng = AleaPRNG(settings.default_seed)
    return _prng
