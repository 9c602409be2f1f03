"""
Per-cell possibility sets.

A pixel holds the candidate values that are still allowed at one grid
location and, once pinned down, the value it was determined to. The
``recalc`` state machine is the only place candidates are removed.
"""

from enum import Enum
from typing import Any, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

Location = Tuple[int, ...]


class PixelChangeResult(Enum):
    """Outcome of re-evaluating a pixel against the constraint predicate."""

    UNCHANGED = "unchanged"
    UPDATED = "updated"
    INVALID = "invalid"


def unique(values: Sequence[T]) -> List[T]:
    """Return values with duplicates removed, keeping first occurrences in order."""
    result: List[T] = []
    for value in values:
        if value not in result:
            result.append(value)
    return result


class Pixel(Generic[T]):
    """
    One cell of the grid.

    ``possible_values`` may hold the same value several times; duplicates
    raise that value's chance in a uniform draw.
    ``None`` marks an undetermined pixel and is never a valid candidate.
    """

    __slots__ = ("possible_values", "determined_value")

    def __init__(self, possible_values: List[T], determined_value: Optional[T] = None):
        if any(value is None for value in possible_values):
            raise ValueError("None cannot be a candidate value")
        self.possible_values = possible_values
        self.determined_value = determined_value

    @classmethod
    def universe(cls, domain: Callable[[], Sequence[T]]) -> "Pixel[T]":
        """Build an undetermined pixel holding every value the domain offers."""
        values = list(domain())
        if not values:
            raise ValueError("Value domain must offer at least one candidate")
        return cls(values)

    @classmethod
    def fixed(cls, value: T) -> "Pixel[T]":
        """Build a pixel already determined to ``value``."""
        return cls([value], value)

    @property
    def is_determined(self) -> bool:
        return self.determined_value is not None

    def entropy(self) -> int:
        """Number of distinct candidates left."""
        try:
            return len(set(self.possible_values))
        except TypeError:
            return len(unique(self.possible_values))

    def copy(self) -> "Pixel[T]":
        return Pixel(list(self.possible_values), self.determined_value)

    def _determine(self, index: int) -> None:
        value = self.possible_values[index]
        self.determined_value = value
        self.possible_values = [value]

    def _filter(self, view, location: Location, test) -> bool:
        """Drop candidates the predicate rejects. Returns True if any were dropped."""
        removed = False
        for i in range(len(self.possible_values) - 1, -1, -1):
            if not test(view, location, self.possible_values[i]):
                del self.possible_values[i]
                removed = True
        return removed

    def _draw(self, rng) -> int:
        return rng.choice(range(len(self.possible_values)))

    def recalc(self, view, location: Location, test, rng=None) -> PixelChangeResult:
        """
        Re-evaluate this pixel in place.

        Args:
            view: Read-only grid view handed to the predicate
            location: Location of this pixel
            test: Constraint predicate ``test(view, location, value) -> bool``
            rng: Random source; when given an undetermined pixel is forced
                to a single value

        Returns:
            INVALID if no candidate survives (the pixel must then be
            discarded), UPDATED if candidates were removed or a value was
            determined, UNCHANGED otherwise.
        """
        removed = self._filter(view, location, test)

        if not self.possible_values:
            return PixelChangeResult.INVALID
        if self.determined_value is not None:
            return PixelChangeResult.UNCHANGED
        if len(self.possible_values) == 1:
            self._determine(0)
            return PixelChangeResult.UPDATED
        if rng is not None:
            self._determine(self._draw(rng))
            return PixelChangeResult.UPDATED
        return PixelChangeResult.UPDATED if removed else PixelChangeResult.UNCHANGED

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._state() == other._state()

    def _state(self):
        return (self.possible_values, self.determined_value)

    def __repr__(self) -> str:
        if self.determined_value is not None:
            return f"{type(self).__name__}(determined={self.determined_value!r})"
        return f"{type(self).__name__}({self.possible_values!r})"


class WeightedPixel(Pixel[T]):
    """
    Pixel whose candidates carry a desirability weight.

    The predicate receives the current weight and may return a new one;
    the forced draw is proportional to the weights. A determined pixel
    always carries a single weight of 1.0.
    """

    __slots__ = ("weights",)

    def __init__(
        self,
        possible_values: List[T],
        weights: Optional[List[float]] = None,
        determined_value: Optional[T] = None,
    ):
        super().__init__(possible_values, determined_value)
        if weights is None:
            weights = [1.0] * len(possible_values)
        if len(weights) != len(possible_values):
            raise ValueError("weights must be parallel to possible_values")
        self.weights = [float(w) for w in weights]

    @classmethod
    def universe(cls, domain: Callable[[], Sequence[Tuple[T, float]]]) -> "WeightedPixel[T]":
        pairs = list(domain())
        if not pairs:
            raise ValueError("Value domain must offer at least one candidate")
        return cls([value for value, _ in pairs], [weight for _, weight in pairs])

    @classmethod
    def fixed(cls, value: T) -> "WeightedPixel[T]":
        return cls([value], [1.0], value)

    def entropy(self) -> int:
        """Length of the weighted candidate list; weights are ignored."""
        return len(self.possible_values)

    def copy(self) -> "WeightedPixel[T]":
        return WeightedPixel(list(self.possible_values), list(self.weights), self.determined_value)

    def _determine(self, index: int) -> None:
        super()._determine(index)
        self.weights = [1.0]

    def _filter(self, view, location: Location, test) -> bool:
        removed = False
        determined = self.determined_value is not None
        for i in range(len(self.possible_values) - 1, -1, -1):
            allowed, weight = _split_verdict(
                test(view, location, self.possible_values[i], self.weights[i]),
                self.weights[i],
            )
            if not allowed:
                del self.possible_values[i]
                del self.weights[i]
                removed = True
            elif not determined:
                self.weights[i] = weight
        return removed

    def _draw(self, rng) -> int:
        return rng.weighted_choice(range(len(self.possible_values)), self.weights)

    def _state(self):
        return (self.possible_values, self.weights, self.determined_value)

    def __repr__(self) -> str:
        if self.determined_value is not None:
            return f"WeightedPixel(determined={self.determined_value!r})"
        return f"WeightedPixel({list(zip(self.possible_values, self.weights))!r})"


def _split_verdict(verdict, current_weight: float) -> Tuple[bool, float]:
    """Normalize a weighted predicate result to ``(allowed, weight)``."""
    if isinstance(verdict, tuple):
        allowed, weight = verdict
        return bool(allowed), float(weight)
    return bool(verdict), current_weight
