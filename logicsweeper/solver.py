"""Guess-free auto-solver built on the deduction passes and the reveal engine."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .deduction import suggest_mine
from .engine import RevealEngine
from .grid import Grid
from .utils import Cell

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverMove:
    """
    One step of the auto-solver.

    ``action`` is "reveal" (a saturated number was second-clicked and
    ``cells`` opened), "flag" (``cell`` was deduced to be a mine), or one of
    the terminal markers "solved" and "stalled".
    """

    action: str
    cell: Optional[Cell]
    method: str
    cells: Tuple[Cell, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return self.action in ("solved", "stalled")


class LogicalSolver:
    """
    Solve a board by pure deduction: propagate saturated numbers, deduce one
    certain mine, flag it, repeat.

    A stall is a normal outcome meaning a guess would be required.
    """

    def __init__(self, engine: RevealEngine, record_steps: bool = True) -> None:
        """
        Args:
            engine: Reveal engine bound to the grid to solve.
            record_steps: If True, keep every yielded move in ``steps_history``.
                Set to False when solving many boards (e.g. during generation).
        """
        self.engine: RevealEngine = engine
        self.record_steps: bool = record_steps

        # Metrics / counters (for analysis)
        self.flags_placed: int = 0
        self.inferred_single_count: int = 0
        self.inferred_paired_count: int = 0
        self.propagated_cells_count: int = 0

        self.steps_history: List[SolverMove] = []

    @property
    def grid(self) -> Grid:
        return self.engine.grid

    def _record(self, move: SolverMove) -> SolverMove:
        if self.record_steps:
            self.steps_history.append(move)
        return move

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def _propagation_moves(self) -> Iterator[SolverMove]:
        for cell, exposed_now in self.engine.iter_saturation_chords():
            self.propagated_cells_count += len(exposed_now)
            yield self._record(
                SolverMove("reveal", cell, "propagate", tuple(exposed_now))
            )
        self.engine.refresh_outcome()

    def propagate(self) -> int:
        """
        Second-click every saturated number until nothing more opens.

        Returns:
            Number of newly exposed cells.
        """
        return sum(len(move.cells) for move in self._propagation_moves())

    def next_mine(self) -> Tuple[Optional[Cell], str]:
        """Return the next certain mine and the pass that found it."""
        return suggest_mine(self.grid)

    def flag(self, cell: Cell, method: str) -> SolverMove:
        self.grid.set_flag(cell[0], cell[1], True)
        self.flags_placed += 1
        if method == "single_infer":
            self.inferred_single_count += 1
        elif method == "paired_infer":
            self.inferred_paired_count += 1
        self.engine.refresh_outcome()
        logger.debug("Deduced mine at %s (%s).", cell, method)
        return self._record(SolverMove("flag", cell, method))

    def step(self) -> Optional[SolverMove]:
        """
        Deduce one mine, flag it and propagate the consequences.

        Returns:
            The flag move, or None when nothing can be deduced.
        """
        cell, method = self.next_mine()
        if cell is None:
            return None
        move = self.flag(cell, method)
        self.propagate()
        return move

    def flag_isolated_mines(self) -> List[Cell]:
        """
        Flag every hidden mine none of whose neighbours is a hidden safe cell.

        Reads the hidden layout. Absorbed (exposed) mines are left alone.

        Returns:
            Newly flagged coordinates in roster order.
        """
        grid = self.grid
        added: List[Cell] = []
        for r, c in grid.mine_roster:
            if grid.flagged[r, c] or grid.exposed[r, c]:
                continue
            if any(
                not grid.exposed[nr, nc] and not grid.is_mine(nr, nc)
                for nr, nc in grid.neighbors(r, c)
            ):
                continue
            grid.set_flag(r, c, True)
            added.append((r, c))

        self.engine.refresh_outcome()
        return added

    # -------------------------------------------------------------------------
    # Main solving loop
    # -------------------------------------------------------------------------

    def iter_moves(self) -> Iterator[SolverMove]:
        """
        Lazily solve the board one move at a time.

        The sequence is finite and ends with a "solved" or "stalled" move.
        Calling this again resumes from the board's current state; to stop
        early, stop consuming.
        """
        yield from self._propagation_moves()

        while True:
            if self.engine.lost:
                yield self._record(SolverMove("stalled", None, "lost"))
                return
            if self.grid.is_solved():
                yield self._record(SolverMove("solved", None, "none"))
                return

            cell, method = self.next_mine()
            if cell is None:
                yield self._record(SolverMove("stalled", None, "none"))
                return

            yield self.flag(cell, method)
            yield from self._propagation_moves()

    def logical_solve(self) -> bool:
        """
        Solve as far as deduction allows.

        Returns:
            True if the board was solved without guessing, False on a stall.
        """
        last: Optional[SolverMove] = None
        for last in self.iter_moves():
            pass
        solved = last is not None and last.action == "solved"
        logger.debug(
            "Logical solve %s after %d flags.",
            "succeeded" if solved else "stalled",
            self.flags_placed,
        )
        return solved

    def summary(self) -> Dict[str, Any]:
        return {
            "solved": self.grid.is_solved(),
            "flags_placed": self.flags_placed,
            "inferred_single_count": self.inferred_single_count,
            "inferred_paired_count": self.inferred_paired_count,
            "propagated_cells_count": self.propagated_cells_count,
            "exposed_count": self.grid.count_exposed(),
        }
