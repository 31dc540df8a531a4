"""Reveal engine: flood fill, second-click cascades and extra-life mine absorption."""

import logging
from collections import deque
from typing import Deque, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .config import LIVES_DISABLED, MAX_EXTRA_LIVES
from .grid import EMPTY, MINE, PRESS_ARMED, PRESS_NONE, PRESS_SATURATED, Grid
from .utils import Cell

logger = logging.getLogger(__name__)


class LivesLedger:
    """Extra lives and the mines they absorbed (last three, oldest dropped first)."""

    def __init__(self, extra_lives: int = LIVES_DISABLED) -> None:
        """
        Args:
            extra_lives: -1 disables the feature, 0..3 enables it.

        Raises:
            ValueError: If extra_lives is outside -1..3.
        """
        if not LIVES_DISABLED <= extra_lives <= MAX_EXTRA_LIVES:
            raise ValueError(
                f"extra_lives must be between {LIVES_DISABLED} and "
                f"{MAX_EXTRA_LIVES}, got {extra_lives}."
            )
        self.remaining: int = extra_lives
        self._absorbed: Deque[Cell] = deque(maxlen=MAX_EXTRA_LIVES)

    @property
    def enabled(self) -> bool:
        return self.remaining != LIVES_DISABLED

    @property
    def absorbed(self) -> Tuple[Cell, ...]:
        return tuple(self._absorbed)

    def can_absorb(self) -> bool:
        return self.remaining > 0

    def absorb(self, cell: Cell) -> None:
        if not self.can_absorb():
            raise RuntimeError("No extra lives left to absorb a mine.")
        self.remaining -= 1
        self._absorbed.append(cell)

    def has_absorbed(self, cell: Cell) -> bool:
        return cell in self._absorbed

    def copy(self) -> "LivesLedger":
        other = LivesLedger(self.remaining)
        other._absorbed.extend(self._absorbed)
        return other


class RevealEngine:
    """
    Applies presses to a grid.

    A press either comes from the player (``player_initiated=True``) or is a
    side effect of a cascade. Only player presses can cost a life or lose the
    game; a cascade that runs into a mine leaves it hidden.
    """

    def __init__(self, grid: Grid, lives: Optional[LivesLedger] = None) -> None:
        self.grid: Grid = grid
        self.lives: LivesLedger = lives if lives is not None else LivesLedger()

        self.won: bool = False
        self.lost: bool = False
        self.last_pressed: Cell = (-1, -1)

    @property
    def game_over(self) -> bool:
        return self.won or self.lost

    def reveal(self, row: int, col: int, player_initiated: bool = True) -> List[Cell]:
        """
        Press a cell and cascade as the rules dictate.

        Args:
            row: Row of the pressed cell.
            col: Column of the pressed cell.
            player_initiated: False when the press is itself part of a cascade.

        Returns:
            Cells newly exposed by this press, in exposure order. Out-of-bounds,
            flagged and already-exposed blank cells give an empty list.
        """
        if self.game_over or not self.grid.in_bounds(row, col):
            return []
        if player_initiated:
            self.last_pressed = (row, col)
        return self._run(row, col, player_initiated, track_press=True)

    def chord(self, row: int, col: int) -> List[Cell]:
        """
        Second-click an exposed number without moving ``last_pressed``.

        Used by the solver to simulate the player's saturation click.
        """
        if self.game_over or not self.grid.in_bounds(row, col):
            return []
        if self.grid.exposed[row, col] and self.grid.press_count[row, col] == PRESS_NONE:
            self.grid.press_count[row, col] = PRESS_ARMED
        return self._run(row, col, True, track_press=False)

    def iter_saturation_chords(self) -> Iterator[Tuple[Cell, List[Cell]]]:
        """
        Second-click every exposed number whose flags and absorbed mines meet
        its clue, sweeping row-major until a full sweep exposes nothing new.

        Only frontier numbers (touching an unknown cell) are considered; the
        neighbour counts are computed once per sweep.

        Yields:
            (number_cell, newly_exposed_cells) for every chord that exposed
            at least one cell.
        """
        grid = self.grid
        changed = True
        while changed and not self.game_over:
            changed = False
            accounted = grid.count_neighbors(grid.accounted_mask())
            saturated = grid.frontier_mask() & (accounted >= grid.truth)
            for r, c in np.argwhere(saturated):
                cell = (int(r), int(c))
                exposed_now = self.chord(*cell)
                if exposed_now:
                    changed = True
                    yield cell, exposed_now

    def expand_saturated(self) -> List[Cell]:
        """Run iter_saturation_chords() to its fixpoint and return every exposed cell."""
        exposed_now: List[Cell] = []
        for _, cells in self.iter_saturation_chords():
            exposed_now.extend(cells)
        return exposed_now

    def refresh_outcome(self) -> bool:
        """Recompute ``won`` (e.g. after a flag change) and return it."""
        if not self.lost:
            self.won = self.grid.is_solved()
        return self.won

    # -------------------------------------------------------------------------
    # Cascade implementation
    # -------------------------------------------------------------------------

    def _run(self, row: int, col: int, direct: bool, track_press: bool) -> List[Cell]:
        exposed_now: List[Cell] = []
        pending: Deque[Tuple[int, int, bool]] = deque([(row, col, direct)])

        while pending:
            r, c, is_direct = pending.popleft()
            for nr, nc in self._visit(r, c, is_direct, track_press, exposed_now):
                pending.append((nr, nc, False))

        self.refresh_outcome()
        if exposed_now:
            logger.debug("Press %s exposed %d cells.", (row, col), len(exposed_now))
        return exposed_now

    def _expose(self, r: int, c: int, exposed_now: List[Cell]) -> None:
        if not self.grid.exposed[r, c]:
            self.grid.exposed[r, c] = True
            exposed_now.append((r, c))

    def _visit(
        self,
        r: int,
        c: int,
        direct: bool,
        track_press: bool,
        exposed_now: List[Cell],
    ) -> Iterable[Cell]:
        """Process one press and return the cells it cascades into."""
        grid = self.grid
        if not grid.in_bounds(r, c) or grid.flagged[r, c]:
            return ()

        value = int(grid.truth[r, c])
        if grid.exposed[r, c] and value <= EMPTY:
            return ()

        if value == MINE:
            if not direct:
                # A mis-flag let a cascade reach a mine: keep it hidden, but
                # point the highlight at it.
                if track_press:
                    self.last_pressed = (r, c)
                logger.debug("Cascade reached mine at %s; ignored.", (r, c))
                return ()

            self._expose(r, c, exposed_now)
            if self.lives.can_absorb():
                self.lives.absorb((r, c))
                logger.info(
                    "Mine at %s absorbed, %d extra lives left.",
                    (r, c),
                    self.lives.remaining,
                )
            else:
                self.lost = True
                logger.info("Mine at %s exposed; game lost.", (r, c))
            return ()

        if value == EMPTY:
            self._expose(r, c, exposed_now)
            return grid.neighbors(r, c)

        # Numbered cell
        self._expose(r, c, exposed_now)
        if grid.press_count[r, c] == PRESS_NONE:
            grid.press_count[r, c] = PRESS_ARMED
            return ()
        if not direct:
            return ()

        # Flags and absorbed (exposed) mines both count toward the clue
        accounted = grid.accounted_neighbors(r, c)
        if accounted < value:
            return ()

        grid.press_count[r, c] = PRESS_SATURATED
        return grid.neighbors(r, c)
