"""
Whole-grid generation with retries.

A single collapse run can fail when its random choices paint the grid
into a corner. ``generate`` builds a fresh grid and runs again, up to a
bounded number of attempts.
"""

from typing import Any, Callable, Optional, Sequence

import structlog

from ..utils.random import get_prng
from .alea_prng import AleaPRNG
from .grid import Grid, WeightedGrid
from .pixel import Location

logger = structlog.get_logger()


class ContradictionError(RuntimeError):
    """Raised when no attempt produced a fully determined grid."""

    def __init__(self, message: str, location: Optional[Location] = None, attempts: int = 0):
        super().__init__(message)
        self.location = location
        self.attempts = attempts


def generate(
    size: Sequence[int],
    domain: Callable[[], Sequence[Any]],
    test,
    *,
    weighted: bool = False,
    effect_distance: Optional[int] = None,
    chance: Optional[float] = None,
    rng=None,
    seed: Optional[str] = None,
    max_attempts: Optional[int] = None,
    on_update: Optional[Callable] = None,
    prepare: Optional[Callable[[Grid], None]] = None,
) -> Grid:
    """
    Generate a fully determined grid.

    Args:
        size: Extent of every dimension
        domain: Value-domain function of a cell
        test: Constraint predicate
        weighted: Build a WeightedGrid, ``domain`` then yields (value, weight) pairs
        effect_distance: Radius re-evaluated after a change
        chance: Probability of ignoring the entropy heuristic
        rng: Random source shared by all attempts
        seed: Seed for a fresh AleaPRNG when ``rng`` is not given
        max_attempts: Number of fresh grids to try, defaults to settings
        on_update: Observer passed to every run
        prepare: Called with each fresh grid before it is collapsed, e.g.
            to pin cells with ``Pixel.fixed``

    Returns:
        The first grid whose run succeeded

    Raises:
        ContradictionError: If every attempt failed
    """
    from ..config import settings

    if rng is None:
        rng = AleaPRNG(seed) if seed is not None else get_prng()
    if max_attempts is None:
        max_attempts = settings.max_attempts
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    grid_cls = WeightedGrid if weighted else Grid
    last_location = None

    for attempt in range(1, max_attempts + 1):
        grid = grid_cls(size, domain)
        if prepare is not None:
            prepare(grid)

        result = grid.wfc(
            test,
            effect_distance=effect_distance,
            rng=rng,
            chance=chance,
            on_update=on_update,
        )
        if result:
            logger.info("Grid generated", size=grid.size, attempts=attempt)
            return grid

        last_location = result.location
        logger.info("Generation attempt failed", attempt=attempt, location=result.location)

    raise ContradictionError(
        f"No solution found for grid of size {tuple(size)} after {max_attempts} attempts",
        location=last_location,
        attempts=max_attempts,
    )
