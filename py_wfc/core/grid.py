"""
N-dimensional grid storage and addressing.

The grid keeps one pixel per location in a NumPy object array. Addressing
(bounds checks and neighbour enumeration) is written once for every rank;
a 2D tile map, a 3D voxel volume and a 4D grid all use the same code.
"""

from itertools import product
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .journal import UndoJournal
from .pixel import Location, Pixel, WeightedPixel

logger = structlog.get_logger()

# Distinguishes "use the configured default" from an explicit None (unbounded)
_UNSET = object()


class SizeError(ValueError):
    """Raised when a grid is requested with an empty or zero-sized dimension."""


def _as_location(location: Sequence[int]) -> Location:
    return tuple(int(c) for c in location)


class Grid:
    """
    Grid of pixels used by the wave function collapse engine.

    Cells start in their universe state, built from the value-domain
    function. ``get_item`` returns copies; writes go through ``set_item``
    so they can be rolled back while a checkpoint is active.
    """

    pixel_type = Pixel

    def __init__(self, size: Sequence[int], domain: Callable[[], Sequence[Any]]):
        """
        Args:
            size: Extent of every dimension, e.g. ``(30, 30)``
            domain: Zero-argument callable returning the candidate universe
                of a cell (``[(value, weight), ...]`` for weighted grids)

        Raises:
            SizeError: If ``size`` is empty or any dimension is below 1
        """
        size = tuple(int(n) for n in size)
        if not size or any(n < 1 for n in size):
            raise SizeError(f"Grid size must be non-empty and positive, got {size}")

        self._size = size
        self._domain = domain
        self._journal: Optional[UndoJournal] = None
        self._data = np.empty(size, dtype=object)
        for loc in np.ndindex(size):
            self._data[loc] = self.pixel_type.universe(domain)

        logger.debug("Grid created", size=size, cells=self.n_cells)

    @property
    def size(self) -> Tuple[int, ...]:
        return self._size

    @property
    def ndim(self) -> int:
        return len(self._size)

    @property
    def n_cells(self) -> int:
        return int(np.prod(self._size))

    @property
    def domain(self) -> Callable[[], Sequence[Any]]:
        return self._domain

    # -- cell access ---------------------------------------------------------

    def get_item(self, location: Sequence[int]) -> Pixel:
        """Return a copy of the pixel at ``location``."""
        return self._data[tuple(location)].copy()

    def set_item(self, location: Sequence[int], pixel: Pixel) -> None:
        """Store ``pixel`` at ``location``, journaling the previous content."""
        location = _as_location(location)
        if self._journal is not None:
            self._journal.record(location, self._data[location])
        self._data[location] = pixel

    def reset_item(self, location: Sequence[int]) -> None:
        """Put the pixel at ``location`` back into its universe state."""
        self.set_item(location, self.pixel_type.universe(self._domain))

    def determined_value(self, location: Sequence[int]) -> Any:
        return self._data[tuple(location)].determined_value

    def entropy(self, location: Sequence[int]) -> int:
        return self._data[tuple(location)].entropy()

    # -- addressing ----------------------------------------------------------

    def check_loc(self, location: Sequence[int]) -> Optional[Location]:
        """
        Validate a signed coordinate.

        Returns the coordinate as a location tuple, or None if it has the
        wrong rank or lies outside the grid.
        """
        if len(location) != len(self._size):
            return None
        for c, n in zip(location, self._size):
            if c < 0 or c >= n:
                return None
        return _as_location(location)

    def neighbor_locations(self, location: Sequence[int], distance: int = 1) -> List[Location]:
        """Locations within Chebyshev ``distance`` of ``location``, itself included."""
        ranges = [
            range(max(c - distance, 0), min(c + distance, n - 1) + 1)
            for c, n in zip(location, self._size)
        ]
        return list(product(*ranges))

    def neighbors(self, location: Sequence[int], distance: int = 1) -> List[Tuple[Location, Pixel]]:
        """
        All cells within Chebyshev ``distance`` of ``location`` (a
        hyper-cube including diagonals and ``location`` itself), clipped
        to the grid.
        """
        return [(loc, self.get_item(loc)) for loc in self.neighbor_locations(location, distance)]

    def unidirectional_locations(self, location: Sequence[int]) -> List[Location]:
        """Locations sharing a face with ``location`` (one axis, one step)."""
        location = _as_location(location)
        result = []
        for axis, n in enumerate(self._size):
            for step in (-1, 1):
                c = location[axis] + step
                if 0 <= c < n:
                    result.append(location[:axis] + (c,) + location[axis + 1:])
        return result

    def unidirectional_neighbors(self, location: Sequence[int]) -> List[Tuple[Location, Pixel]]:
        """Face-sharing neighbours; corners and edges are not included."""
        return [(loc, self.get_item(loc)) for loc in self.unidirectional_locations(location)]

    def locations(self) -> Iterator[Location]:
        """Every location in C order."""
        return np.ndindex(self._size)

    def undetermined(self) -> List[Location]:
        return [loc for loc in np.ndindex(self._size) if self._data[loc].determined_value is None]

    def is_solved(self) -> bool:
        return not self.undetermined()

    def values(self) -> np.ndarray:
        """Determined values as an object array, None where still undetermined."""
        out = np.empty(self._size, dtype=object)
        for loc in np.ndindex(self._size):
            out[loc] = self._data[loc].determined_value
        return out

    def view(self) -> "GridView":
        return GridView(self)

    # -- snapshots and rollback ----------------------------------------------

    def copy(self) -> "Grid":
        """Independent deep copy of the grid (a full snapshot)."""
        clone = object.__new__(type(self))
        clone._size = self._size
        clone._domain = self._domain
        clone._journal = None
        clone._data = np.empty(self._size, dtype=object)
        for loc in np.ndindex(self._size):
            clone._data[loc] = self._data[loc].copy()
        return clone

    def restore(self, snapshot: "Grid") -> None:
        """Replace every cell with the content of ``snapshot``."""
        if snapshot.size != self._size:
            raise ValueError(f"Snapshot size {snapshot.size} does not match {self._size}")
        for loc in np.ndindex(self._size):
            self.set_item(loc, snapshot._data[loc].copy())

    def checkpoint(self) -> UndoJournal:
        """Start journaling writes; ``rollback`` returns to this point."""
        self._journal = UndoJournal()
        return self._journal

    def rollback(self) -> int:
        """Undo every write since the checkpoint. Returns the number of restored cells."""
        journal, self._journal = self._journal, None
        if journal is None:
            return 0
        for loc, pixel in journal:
            self._data[loc] = pixel
        return len(journal)

    def commit(self) -> None:
        """Keep every write since the checkpoint and stop journaling."""
        self._journal = None

    # -- engine entry points -------------------------------------------------

    def check_validity(self, test) -> Optional[Location]:
        """Validate every undetermined cell once. Returns the first contradiction, if any."""
        from .propagation import Propagator

        return Propagator(self, test).check_validity()

    def collapse(self, test, effect_distance: int, rng, location: Sequence[int]) -> Optional[Location]:
        """Force a value at ``location`` and propagate it. Returns the contradiction, if any."""
        from .propagation import Propagator

        return Propagator(self, test, effect_distance, rng).collapse(location)

    def wfc(
        self,
        test,
        effect_distance: Optional[int] = None,
        rng=None,
        chance: Optional[float] = None,
        on_update: Optional[Callable[["GridView"], None]] = None,
        max_contradictions: Any = _UNSET,
    ):
        """
        Run wave function collapse until every cell is determined.

        Args:
            test: Constraint predicate
            effect_distance: Radius re-evaluated after a change
            rng: Random source, the process-wide PRNG when omitted
            chance: Probability of picking any undetermined cell instead
                of a minimal-entropy one
            on_update: Observer called with a read-only view after every round
            max_contradictions: Rolled-back attempts allowed before giving up

        Returns:
            WFCResult, truthy on success
        """
        from .driver import WaveFunctionCollapse, WFCOptions

        overrides = {}
        if effect_distance is not None:
            overrides["effect_distance"] = effect_distance
        if chance is not None:
            overrides["chance"] = chance
        if max_contradictions is not _UNSET:
            overrides["max_contradictions"] = max_contradictions
        options = WFCOptions.from_settings(**overrides)

        return WaveFunctionCollapse(self, test, rng=rng, options=options, on_update=on_update).run()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Grid) or other.size != self._size:
            return NotImplemented
        return all(self._data[loc] == other._data[loc] for loc in np.ndindex(self._size))

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._size})"


class WeightedGrid(Grid):
    """Grid whose cells are WeightedPixel; the domain yields ``(value, weight)`` pairs."""

    pixel_type = WeightedPixel


class GridView:
    """
    Read-only facade over a grid.

    Constraint predicates and progress observers receive a view, so they
    can inspect any cell but have no way to write one.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: Grid):
        self._grid = grid

    @property
    def size(self) -> Tuple[int, ...]:
        return self._grid.size

    @property
    def ndim(self) -> int:
        return self._grid.ndim

    def get_item(self, location: Sequence[int]) -> Pixel:
        return self._grid.get_item(location)

    def determined_value(self, location: Sequence[int]) -> Any:
        return self._grid.determined_value(location)

    def check_loc(self, location: Sequence[int]) -> Optional[Location]:
        return self._grid.check_loc(location)

    def neighbors(self, location: Sequence[int], distance: int = 1) -> List[Tuple[Location, Pixel]]:
        return self._grid.neighbors(location, distance)

    def unidirectional_neighbors(self, location: Sequence[int]) -> List[Tuple[Location, Pixel]]:
        return self._grid.unidirectional_neighbors(location)

    def unidirectional_locations(self, location: Sequence[int]) -> List[Location]:
        return self._grid.unidirectional_locations(location)

    def values(self) -> np.ndarray:
        return self._grid.values()

    def __repr__(self) -> str:
        return f"GridView({self._grid!r})"
