"""Board generation with an optional guarantee of guess-free solvability."""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .config import LOGICAL_SEARCH_CAP, BoardConfig
from .engine import RevealEngine
from .errors import SearchExhaustedError
from .grid import PRESS_NONE, Grid, GridSnapshot
from .solver import LogicalSolver
from .utils import Cell

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """
    Outcome of BoardGenerator.generate().

    ``logical`` is True only when the grid comes with an initial opening from
    which the deduction passes alone solve it. ``seed_cell`` is the cell whose
    click produced that opening (already exposed on ``grid``).
    """

    grid: Grid
    boards_tried: int
    logical: bool
    seed_cell: Optional[Cell] = None
    regions_tried: int = 0

    @property
    def opening_size(self) -> int:
        return self.grid.count_exposed()


class BoardGenerator:
    """Scatter mines uniformly and, in logical mode, search for a guess-free layout."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        search_cap: int = LOGICAL_SEARCH_CAP,
    ) -> None:
        """
        Args:
            rng: Random source; pass a seeded ``random.Random`` for reproducible boards.
            search_cap: Maximum number of layouts tried in logical mode, must be > 0.

        Raises:
            ValueError: If search_cap is not positive.
        """
        if search_cap <= 0:
            raise ValueError("search_cap must be positive.")
        self.rng: random.Random = rng if rng is not None else random.Random()
        self.search_cap: int = search_cap

    def scatter(self, config: BoardConfig) -> Grid:
        """
        Place ``config.mine_count`` mines uniformly without replacement.

        Args:
            config: A valid board configuration.

        Returns:
            A fully hidden grid with numbers computed.
        """
        grid = Grid(config.rows, config.cols)
        cells: List[Cell] = [
            (r, c) for r in range(config.rows) for c in range(config.cols)
        ]
        grid.place_mines(self.rng.sample(cells, config.mine_count))
        return grid

    def generate(
        self,
        config: BoardConfig,
        logical_mode: bool = False,
        strict: bool = False,
    ) -> GenerationResult:
        """
        Generate a board.

        Args:
            config: Board configuration.
            logical_mode: If True, search for a layout plus opening that the
                deduction passes solve without guessing.
            strict: In logical mode, raise instead of falling back when the
                search budget runs out.

        Returns:
            The generated board. In logical mode the grid shows the initial
            opening (no flags, press counts cleared).

        Raises:
            InvalidConfigurationError: If the config is out of range.
            SearchExhaustedError: If strict and no solvable layout was found.
        """
        config.validate()

        grid = self.scatter(config)
        if not logical_mode:
            return GenerationResult(grid, boards_tried=1, logical=False)

        regions_tried = 0
        for boards_tried in range(1, self.search_cap + 1):
            if boards_tried > 1:
                grid = self.scatter(config)

            seed, attempts = self._find_logical_opening(grid)
            regions_tried += attempts
            if seed is not None:
                logger.debug(
                    "Logical layout found after %d boards (%d regions), opening at %s.",
                    boards_tried,
                    regions_tried,
                    seed,
                )
                return GenerationResult(
                    grid,
                    boards_tried=boards_tried,
                    logical=True,
                    seed_cell=seed,
                    regions_tried=regions_tried,
                )

        if strict:
            raise SearchExhaustedError(self.search_cap)

        logger.warning(
            "No logically solvable %dx%d/%d layout in %d boards; "
            "keeping the last one, which may need a guess.",
            config.rows,
            config.cols,
            config.mine_count,
            self.search_cap,
        )
        return GenerationResult(
            grid,
            boards_tried=self.search_cap,
            logical=False,
            regions_tried=regions_tried,
        )

    def _find_logical_opening(self, grid: Grid) -> Tuple[Optional[Cell], int]:
        """
        Try every zero-region of the layout, largest first.

        Returns:
            (seed_cell, regions_tried). On success the grid is left showing
            only the seed's flood; otherwise its visible state is cleared.
        """
        attempts = 0
        for region in grid.zero_regions():
            attempts += 1
            grid.clear_visible_state()

            engine = RevealEngine(grid)
            seed = region[0]
            engine.reveal(seed[0], seed[1])
            if grid.any_mine_exposed():
                continue

            first_view = grid.exposed.copy()
            if LogicalSolver(engine, record_steps=False).logical_solve():
                grid.restore(
                    GridSnapshot(
                        first_view,
                        np.zeros(grid.shape, dtype=bool),
                        np.full(grid.shape, PRESS_NONE, dtype=np.int8),
                    )
                )
                return seed, attempts

        grid.clear_visible_state()
        return None, attempts
