"""
Wave function collapse driver.

Each round picks an undetermined cell (minimal entropy, or any cell with
probability ``chance``), forces a value there and propagates it. A round
that ends in a contradiction is rolled back through the grid's undo
journal, restoring every cell it touched, and the next round picks
again.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

import structlog

from ..config import Settings
from ..utils.random import get_prng
from .pixel import Location
from .propagation import Propagator

logger = structlog.get_logger()


@dataclass
class WFCOptions:
    """Tuning knobs of a collapse run."""

    effect_distance: int = 1  # Neighbourhood radius re-evaluated after a change
    chance: float = 0.0  # Probability of ignoring the entropy heuristic
    max_contradictions: Optional[int] = 1000  # None allows unbounded rollbacks

    def __post_init__(self):
        if self.effect_distance < 0:
            raise ValueError(f"effect_distance must be >= 0, got {self.effect_distance}")
        if not 0.0 <= self.chance <= 1.0:
            raise ValueError(f"chance must be within [0, 1], got {self.chance}")
        if self.max_contradictions is not None and self.max_contradictions < 0:
            raise ValueError(f"max_contradictions must be >= 0, got {self.max_contradictions}")

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None, **overrides) -> "WFCOptions":
        """Build options from settings, with keyword overrides applied on top."""
        if config is None:
            from ..config import settings as config

        values = dict(
            effect_distance=config.default_effect_distance,
            chance=config.default_chance,
            max_contradictions=config.max_contradictions,
        )
        values.update(overrides)
        return cls(**values)


@dataclass
class WFCResult:
    """Outcome of a collapse run; truthy when every cell was determined."""

    success: bool
    location: Optional[Location] = None  # Last contradiction when unsuccessful
    iterations: int = 0
    contradictions: int = 0

    def __bool__(self) -> bool:
        return self.success


class WaveFunctionCollapse:
    """Runs collapse rounds on a grid until it is fully determined."""

    def __init__(
        self,
        grid,
        test,
        rng=None,
        options: Optional[WFCOptions] = None,
        on_update: Optional[Callable] = None,
    ):
        """
        Args:
            grid: Grid to solve in place
            test: Constraint predicate
            rng: Random source, defaults to the process-wide Alea PRNG
            options: Run options, defaults to the configured settings
            on_update: Observer called with a read-only view after each round
        """
        self.grid = grid
        self.test = test
        self.rng = rng if rng is not None else get_prng()
        self.options = options if options is not None else WFCOptions.from_settings()
        self.on_update = on_update
        self.propagator = Propagator(grid, test, self.options.effect_distance, self.rng)

    def select(self) -> Optional[Location]:
        """
        Pick the next cell to collapse, or None when the grid is solved.

        Entropy is a tie-breaker here, not a probability: among the cells
        with the fewest distinct candidates one is drawn uniformly.
        """
        candidates = self.grid.undetermined()
        if not candidates:
            return None

        if self.rng.random() < self.options.chance:
            return self.rng.choice(candidates)

        entropies = [self.grid.entropy(loc) for loc in candidates]
        lowest = min(entropies)
        tied: List[Location] = [loc for loc, e in zip(candidates, entropies) if e == lowest]
        return self.rng.choice(tied)

    def run(self) -> WFCResult:
        """
        Collapse the grid.

        Returns:
            WFCResult with ``success`` set once every cell is determined.
            Fails without drawing any randomness when the initial state is
            already contradictory, and after more than
            ``options.max_contradictions`` rolled-back rounds.
        """
        logger.info(
            "Starting wave function collapse",
            size=self.grid.size,
            effect_distance=self.options.effect_distance,
            chance=self.options.chance,
        )

        failure = self.propagator.check_validity()
        if failure is not None:
            return WFCResult(success=False, location=failure)

        iterations = 0
        contradictions = 0
        limit = self.options.max_contradictions

        while True:
            self.grid.checkpoint()
            location = self.select()
            if location is None:
                self.grid.commit()
                break

            iterations += 1
            try:
                failure = self.propagator.collapse(location)
            except Exception:
                self.grid.rollback()
                raise

            if failure is None:
                self.grid.commit()
            else:
                restored = self.grid.rollback()
                contradictions += 1
                logger.debug(
                    "Contradiction, round rolled back",
                    selected=location,
                    contradiction=failure,
                    restored_cells=restored,
                )
                if limit is not None and contradictions > limit:
                    logger.warning(
                        "Giving up after repeated contradictions",
                        contradictions=contradictions,
                        location=failure,
                    )
                    return WFCResult(
                        success=False,
                        location=failure,
                        iterations=iterations,
                        contradictions=contradictions,
                    )

            if self.on_update is not None:
                self.on_update(self.grid.view())

        logger.info(
            "Wave function collapse complete",
            iterations=iterations,
            contradictions=contradictions,
            recalculations=self.propagator.recalculations,
        )
        return WFCResult(success=True, iterations=iterations, contradictions=contradictions)
