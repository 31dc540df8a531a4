"""Game session: configuration, the play state machine, hints and statistics."""

import logging
import random
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .config import (
    DEFAULT_CUSTOM,
    DIFFICULTIES,
    HINT_MIN_EXPOSED_NEIGHBORS,
    LIVES_DISABLED,
    MAX_EXTRA_LIVES,
    BoardConfig,
    preset,
)
from .deduction import find_best_hint_mine
from .engine import LivesLedger, RevealEngine
from .errors import GameNotStartedError
from .generator import BoardGenerator, GenerationResult
from .grid import Grid
from .solver import LogicalSolver, SolverMove
from .stats import StatisticsStore
from .utils import Cell

logger = logging.getLogger(__name__)

RULES_TEXT = """\
Minesweeper rules

The board hides a number of mines. Press a cell to expose it:
- a mine ends the game, unless an extra life absorbs it;
- a blank cell opens all of its neighbours;
- a number tells how many of its eight neighbours hold a mine.

Flag the cells you believe hold mines. Pressing an exposed number again
opens its remaining neighbours once as many flags surround it as its value.

You win when every safe cell is exposed and every mine is flagged.
In logical mode the board can always be solved without guessing.
"""


class GameState(Enum):
    CONFIGURING = "configuring"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class GameSession:
    """
    The surface a presentation layer talks to.

    A session moves from CONFIGURING to PLAYING on a successful start_game()
    and from PLAYING to WON or LOST. Only reset_game() or another
    start_game() leaves a finished game.
    """

    def __init__(
        self,
        stats: Optional[StatisticsStore] = None,
        rng: Optional[random.Random] = None,
        generator: Optional[BoardGenerator] = None,
    ) -> None:
        """
        Args:
            stats: Shared statistics store; a fresh one if omitted.
            rng: Random source for mine placement (ignored if generator is given).
            generator: Board generator to use.
        """
        self.statistics: StatisticsStore = (
            stats if stats is not None else StatisticsStore()
        )
        self._generator: BoardGenerator = (
            generator if generator is not None else BoardGenerator(rng=rng)
        )

        self.logical_mode: bool = False
        self.hint_threshold: int = HINT_MIN_EXPOSED_NEIGHBORS
        self._restore_defaults()

        self.state: GameState = GameState.CONFIGURING
        self.last_error: Optional[str] = None
        self.last_generation: Optional[GenerationResult] = None

        self._grid: Optional[Grid] = None
        self._engine: Optional[RevealEngine] = None
        self._solver: Optional[LogicalSolver] = None
        self._last_elapsed: int = 0

    def _restore_defaults(self) -> None:
        self.difficulty: str = "beginner"
        self.custom_config: BoardConfig = DEFAULT_CUSTOM
        self._extra_lives: int = LIVES_DISABLED

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    def config(self) -> BoardConfig:
        return preset(self.difficulty, self.custom_config)

    def configure(self, difficulty: str) -> None:
        """
        Select a difficulty.

        Raises:
            ValueError: If the name is not one of DIFFICULTIES.
        """
        preset(difficulty, self.custom_config)
        self.difficulty = difficulty

    def configure_custom(self, rows: int, cols: int, mines: int) -> None:
        """Select the custom difficulty; ranges are checked by start_game()."""
        self.custom_config = BoardConfig(rows, cols, mines)
        self.difficulty = "custom"

    def set_logical_mode(self, enabled: bool) -> None:
        self.logical_mode = enabled

    def set_extra_lives(self, lives: int) -> None:
        """
        Set the extra lives for the next game (-1 disables them).

        Raises:
            ValueError: If lives is outside -1..3.
        """
        if not LIVES_DISABLED <= lives <= MAX_EXTRA_LIVES:
            raise ValueError(
                f"extra lives must be between {LIVES_DISABLED} and "
                f"{MAX_EXTRA_LIVES}, got {lives}."
            )
        self._extra_lives = lives

    def difficulties(self) -> List[str]:
        return list(DIFFICULTIES)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start_game(self) -> bool:
        """
        Generate a new board from the current configuration.

        Returns:
            False (with ``last_error`` set) if the configuration is out of
            range, True once the board is ready.
        """
        config = self.config
        problems = config.problems()
        if problems:
            self.last_error = "; ".join(problems)
            logger.info("Cannot start game: %s", self.last_error)
            return False

        result = self._generator.generate(config, logical_mode=self.logical_mode)
        self.last_generation = result
        self._grid = result.grid
        self._engine = RevealEngine(self._grid, LivesLedger(self._extra_lives))
        self._solver = LogicalSolver(self._engine)
        self._last_elapsed = 0
        self.last_error = None
        self.state = GameState.PLAYING

        logger.info(
            "Started %s game %dx%d with %d mines (logical=%s, boards tried=%d).",
            self.difficulty,
            config.rows,
            config.cols,
            config.mine_count,
            result.logical,
            result.boards_tried,
        )
        return True

    def reset_game(self) -> None:
        """
        Count a new game and return to beginner defaults.

        Lives, flags and the board are dropped; best times and wins are kept.
        """
        self.statistics.record_game_started()
        self._restore_defaults()
        self._grid = None
        self._engine = None
        self._solver = None
        self.last_generation = None
        self.last_error = None
        self._last_elapsed = 0
        self.state = GameState.CONFIGURING

    def _require_game(self) -> Tuple[Grid, RevealEngine, LogicalSolver]:
        if self._grid is None or self._engine is None or self._solver is None:
            raise GameNotStartedError("start_game() must succeed before this call.")
        return self._grid, self._engine, self._solver

    def _sync_state(self, record: bool) -> None:
        """Move PLAYING to WON or LOST after the engine's outcome changed."""
        _, engine, _ = self._require_game()
        if self.state is not GameState.PLAYING:
            return

        if engine.lost:
            self.state = GameState.LOST
            logger.info("Game lost at %s.", engine.last_pressed)
        elif engine.won:
            self.state = GameState.WON
            if record:
                new_record = self.statistics.record_win(self.difficulty, self._last_elapsed)
                logger.info(
                    "Game won in %d seconds%s.",
                    self._last_elapsed,
                    " (new best time)" if new_record else "",
                )
            else:
                logger.info("Board solved by the auto-solver.")

    # -------------------------------------------------------------------------
    # Player actions
    # -------------------------------------------------------------------------

    def tile_pressed(self, row: int, col: int, elapsed_seconds: int) -> np.ndarray:
        """
        Press a cell.

        Args:
            row: Row of the cell.
            col: Column of the cell.
            elapsed_seconds: Game clock, used for the best time on a win.

        Returns:
            Copy of the exposed bitmap after the press.

        Raises:
            GameNotStartedError: If no game has been started.
        """
        grid, engine, _ = self._require_game()
        if self.state is GameState.PLAYING:
            self._last_elapsed = elapsed_seconds
            engine.reveal(row, col, player_initiated=True)
            self._sync_state(record=True)
        return grid.exposed.copy()

    def tile_flagged(self, flagged: bool, row: int, col: int) -> None:
        """
        Set or clear a flag. Flags on exposed or out-of-range cells are ignored.

        Placing the last correct flag wins the game; the win is timed with the
        last elapsed value passed to tile_pressed().

        Raises:
            GameNotStartedError: If no game has been started.
        """
        grid, engine, _ = self._require_game()
        if self.state is not GameState.PLAYING:
            return
        if not grid.in_bounds(row, col) or grid.exposed[row, col]:
            return
        grid.set_flag(row, col, flagged)
        engine.refresh_outcome()
        self._sync_state(record=True)

    def player_won(self) -> bool:
        return self.state is GameState.WON

    def player_lost(self) -> bool:
        return self.state is GameState.LOST

    # -------------------------------------------------------------------------
    # Hints and auto-solver primitives
    # -------------------------------------------------------------------------

    def apply_hint(self) -> Optional[Cell]:
        """
        Flag the mine whose flag opens the most cells.

        Returns:
            The flagged coordinate, or None (with ``last_error`` set) when no
            mine qualifies.
        """
        grid, engine, _ = self._require_game()
        if self.state is not GameState.PLAYING:
            return None

        cell = find_best_hint_mine(grid, engine.lives, self.hint_threshold)
        if cell is None:
            self.last_error = "No hint available."
            return None

        grid.set_flag(cell[0], cell[1], True)
        engine.refresh_outcome()
        self._sync_state(record=False)
        logger.debug("Hint flagged %s.", cell)
        return cell

    def next_logical_mine(self) -> Optional[Cell]:
        """Return the next mine deducible from visible information, without flagging it."""
        _, _, solver = self._require_game()
        cell, _ = solver.next_mine()
        return cell

    def propagate_logical_consequences(self) -> int:
        """Second-click every saturated number; returns how many cells opened."""
        _, _, solver = self._require_game()
        opened = solver.propagate()
        self._sync_state(record=False)
        return opened

    def flag_isolated_mines(self) -> List[Cell]:
        _, _, solver = self._require_game()
        added = solver.flag_isolated_mines()
        self._sync_state(record=False)
        return added

    def iter_solver_moves(self) -> Iterator[SolverMove]:
        """
        Yield auto-solver moves one at a time, keeping the session state current.

        Pacing and cancellation belong to the consumer: stop iterating to stop.
        """
        _, _, solver = self._require_game()
        for move in solver.iter_moves():
            self._sync_state(record=False)
            yield move

    def logical_solve(self) -> bool:
        last: Optional[SolverMove] = None
        for last in self.iter_solver_moves():
            pass
        return last is not None and last.action == "solved"

    # -------------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------------

    def grid_truth(self) -> np.ndarray:
        grid, _, _ = self._require_game()
        return grid.truth.copy()

    def exposed(self) -> np.ndarray:
        grid, _, _ = self._require_game()
        return grid.exposed.copy()

    def flagged(self) -> np.ndarray:
        grid, _, _ = self._require_game()
        return grid.flagged.copy()

    def mine_roster(self) -> List[Cell]:
        grid, _, _ = self._require_game()
        return list(grid.mine_roster)

    @property
    def mine_count(self) -> int:
        return self.config.mine_count if self._grid is None else self._grid.mine_count

    @property
    def flag_count(self) -> int:
        grid, _, _ = self._require_game()
        return grid.count_flags()

    @property
    def last_pressed(self) -> Cell:
        _, engine, _ = self._require_game()
        return engine.last_pressed

    @property
    def extra_lives_left(self) -> int:
        if self._engine is None:
            return self._extra_lives
        return self._engine.lives.remaining

    @property
    def games_played(self) -> int:
        return self.statistics.games_played

    @property
    def games_won(self) -> int:
        return self.statistics.games_won

    def best_times(self) -> str:
        return self.statistics.best_times_text(self.difficulty)

    @staticmethod
    def rules_text() -> str:
        return RULES_TEXT

    def format_board(self, reveal_all: bool = False) -> str:
        grid, engine, _ = self._require_game()
        return grid.format_board(reveal_all=reveal_all, highlight=engine.last_pressed)
