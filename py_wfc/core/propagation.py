"""
Constraint propagation.

A collapse starts with one forced decision and spreads its consequences
through a FIFO worklist: every cell that changes queues its neighbourhood
for re-evaluation, until nothing changes any more or a cell runs out of
candidates.
"""

from collections import deque
from typing import Optional, Sequence

import structlog

from .pixel import Location, PixelChangeResult

logger = structlog.get_logger()


class Propagator:
    """Applies a constraint predicate to a grid and propagates changes."""

    def __init__(self, grid, test, effect_distance: int = 1, rng=None):
        """
        Args:
            grid: Grid to update in place
            test: Constraint predicate receiving a read-only view
            effect_distance: Chebyshev radius queued after a cell changes
            rng: Random source for forced decisions and queue shuffling
        """
        if effect_distance < 0:
            raise ValueError(f"effect_distance must be >= 0, got {effect_distance}")
        self.grid = grid
        self.test = test
        self.effect_distance = effect_distance
        self.rng = rng
        self._view = grid.view()
        self.recalculations = 0

    def check_validity(self) -> Optional[Location]:
        """
        Evaluate every undetermined cell once, without forcing or propagating.

        All cells are judged against the grid as it was before the sweep.
        On a contradiction the grid is left untouched.

        Returns:
            Location of the first cell left without candidates, or None
        """
        updates = []
        for loc in self.grid.undetermined():
            pixel = self.grid.get_item(loc)
            result = pixel.recalc(self._view, loc, self.test)
            self.recalculations += 1
            if result is PixelChangeResult.INVALID:
                logger.warning("Initial grid state is unsatisfiable", location=loc)
                return loc
            if result is PixelChangeResult.UPDATED:
                updates.append((loc, pixel))

        for loc, pixel in updates:
            self.grid.set_item(loc, pixel)
        return None

    def collapse(self, location: Sequence[int]) -> Optional[Location]:
        """
        Force a decision at ``location`` and propagate it.

        The seed cell is recalculated with the random source, every cell
        queued afterwards without it. A cell is read from the grid when it
        is dequeued, so it is always judged on its latest content.

        Returns:
            Location of the first contradiction, or None once the queue drains
        """
        if self.rng is None:
            raise ValueError("collapse needs a random source")

        queue = deque([tuple(location)])
        rng = self.rng

        while queue:
            loc = queue.popleft()
            pixel = self.grid.get_item(loc)
            result = pixel.recalc(self._view, loc, self.test, rng)
            rng = None
            self.recalculations += 1

            if result is PixelChangeResult.INVALID:
                return loc
            if result is PixelChangeResult.UPDATED:
                self.grid.set_item(loc, pixel)
                neighbors = self.grid.neighbor_locations(loc, self.effect_distance)
                self.rng.shuffle(neighbors)
                queue.extend(neighbors)

        return None
