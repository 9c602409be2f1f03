"""
Alea PRNG used as the default random source for wave function collapse.

Based on Johannes Baagøe's Alea algorithm. The generator is seeded from
strings or numbers and produces the same sequence on every platform,
which keeps a whole collapse run reproducible from a single seed.
"""

from typing import List, MutableSequence, Sequence, TypeVar

T = TypeVar("T")

_TWO_POW_32 = 0x100000000
_TWO_POW_NEG_32 = 2.3283064365386963e-10


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Seed hashing function from the reference Alea implementation."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        for char in str(data):
            self.n += ord(char)
            h = 0.02519603282416938 * self.n
            self.n = _uint32(h)
            h -= self.n
            h *= self.n
            self.n = _uint32(h)
            h -= self.n
            self.n += h * _TWO_POW_32
        return _uint32(self.n) * _TWO_POW_NEG_32


class AleaPRNG:
    """
    Seeded random source implementing the capabilities the collapse
    engine needs: uniform floats, uniform picks, weighted picks and
    in-place shuffles.

    Every draw goes through ``random()`` so ``call_count`` reflects the
    total amount of randomness consumed.
    """

    def __init__(self, seed="default"):
        """Initialize with a seed string, number or iterable of either."""
        self.seed = seed
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            parts = list(seed)
        else:
            parts = [seed]

        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for part in parts:
            self.s0 = self._wrap(self.s0 - mash(part))
            self.s1 = self._wrap(self.s1 - mash(part))
            self.s2 = self._wrap(self.s2 - mash(part))

    @staticmethod
    def _wrap(value: float) -> float:
        return value + 1 if value < 0 else value

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_NEG_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def randint(self, upper: int) -> int:
        """Return an integer in [0, upper)."""
        return int(self.random() * upper)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(len(seq))]

    def weighted_choice(self, seq: Sequence[T], weights: Sequence[float]) -> T:
        """
        Choose an element with probability proportional to its weight.

        Negative weights count as zero. When no weight is positive the
        draw degrades to a uniform ``choice``.
        """
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        if len(seq) != len(weights):
            raise ValueError("seq and weights must have the same length")

        clipped: List[float] = [max(float(w), 0.0) for w in weights]
        total = sum(clipped)
        if total <= 0:
            return self.choice(seq)

        target = self.random() * total
        cumulative = 0.0
        for item, weight in zip(seq, clipped):
            cumulative += weight
            if target < cumulative:
                return item
        # Float rounding can leave target == total
        return seq[-1]

    def shuffle(self, items: MutableSequence) -> None:
        """Shuffle a list in place (Fisher-Yates)."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(i + 1)
            items[i], items[j] = items[j], items[i]
