"""Grid model: static mine layout and numbers plus the player-visible cell state."""

from collections import deque
from typing import Deque, Dict, Iterable, List, NamedTuple, Optional, Sequence, Set, Tuple

import numpy as np

from .utils import NEIGHBOR_OFFSETS, Cell, get_neighborhoods

MINE = -1
EMPTY = 0

# press_count values
PRESS_NONE = 0
PRESS_ARMED = 1
PRESS_SATURATED = 2


class GridSnapshot(NamedTuple):
    """Copy of the dynamic (player-visible) part of a grid."""

    exposed: np.ndarray
    flagged: np.ndarray
    press_count: np.ndarray


class Grid:
    """
    Rectangular Minesweeper board.

    ``truth`` holds the immutable layout (MINE, EMPTY or a number 1..8). The
    dynamic state lives in ``exposed``, ``flagged`` and ``press_count``; only
    the reveal engine sets ``exposed`` and it never clears a cell back.
    """

    def __init__(self, rows: int, cols: int) -> None:
        """
        Create an empty (mine-free, fully hidden) grid.

        Args:
            rows: Number of rows, must be > 0.
            cols: Number of columns, must be > 0.

        Raises:
            ValueError: If dimensions are invalid.
        """
        if rows <= 0 or cols <= 0:
            raise ValueError("rows and cols must be positive.")

        self.rows: int = rows
        self.cols: int = cols

        self.truth: np.ndarray = np.zeros((rows, cols), dtype=np.int8)
        self.exposed: np.ndarray = np.zeros((rows, cols), dtype=bool)
        self.flagged: np.ndarray = np.zeros((rows, cols), dtype=bool)
        self.press_count: np.ndarray = np.zeros((rows, cols), dtype=np.int8)

        self.mine_roster: List[Cell] = []

        self._neighborhoods: Dict[Cell, Tuple[Cell, ...]] = get_neighborhoods(
            rows, cols
        )

    @classmethod
    def from_layout(cls, layout: Sequence[str]) -> "Grid":
        """
        Build a grid from text rows where ``M`` marks a mine and any other
        character a safe cell.

        Args:
            layout: One string per row, all of equal length.

        Returns:
            A grid with mines placed (row-major roster order) and numbers baked.

        Raises:
            ValueError: If the rows are empty or ragged.
        """
        if not layout or not layout[0]:
            raise ValueError("layout must contain at least one non-empty row.")
        width = len(layout[0])
        if any(len(row) != width for row in layout):
            raise ValueError("layout rows must all have the same length.")

        grid = cls(len(layout), width)
        grid.place_mines(
            (r, c)
            for r, row in enumerate(layout)
            for c, ch in enumerate(row)
            if ch == "M"
        )
        return grid

    # -------------------------------------------------------------------------
    # Static truth
    # -------------------------------------------------------------------------

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    @property
    def mine_count(self) -> int:
        return len(self.mine_roster)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def neighbors(self, row: int, col: int) -> Tuple[Cell, ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods[(row, col)]

    def is_mine(self, row: int, col: int) -> bool:
        return bool(self.truth[row, col] == MINE)

    def is_empty(self, row: int, col: int) -> bool:
        return bool(self.truth[row, col] == EMPTY)

    def is_number(self, row: int, col: int) -> bool:
        return bool(self.truth[row, col] > 0)

    def number_at(self, row: int, col: int) -> int:
        """Return the clue of a numbered cell, 0 for empty cells and -1 for mines."""
        return int(self.truth[row, col])

    def count_adjacent_mines(self, row: int, col: int) -> int:
        return sum(1 for nr, nc in self.neighbors(row, col) if self.truth[nr, nc] == MINE)

    def place_mines(self, coords: Iterable[Cell]) -> None:
        """
        Replace the layout with the given mines and recompute every number.

        Args:
            coords: Mine coordinates; order is kept as the mine roster.

        Raises:
            ValueError: If a coordinate repeats or lies outside the grid.
        """
        roster: List[Cell] = []
        seen: Set[Cell] = set()
        for r, c in coords:
            if not self.in_bounds(r, c):
                raise ValueError(f"Mine coordinate {(r, c)} is outside the grid.")
            if (r, c) in seen:
                raise ValueError(f"Duplicate mine coordinate {(r, c)}.")
            seen.add((r, c))
            roster.append((r, c))

        self.truth[:, :] = EMPTY
        for r, c in roster:
            self.truth[r, c] = MINE
        self.mine_roster = roster
        self.compute_numbers()

    def compute_numbers(self) -> None:
        """Populate every non-mine cell with its adjacent mine count (0 stays EMPTY)."""
        mines = self.truth == MINE
        self.truth = np.where(mines, MINE, self.count_neighbors(mines)).astype(np.int8)

    def count_neighbors(self, mask: np.ndarray) -> np.ndarray:
        """
        Count, for every cell at once, how many of its neighbours are set in a mask.

        Args:
            mask: Boolean array with the grid's shape.

        Returns:
            int8 array of counts in 0..8.
        """
        padded = np.pad(mask.astype(np.int8), 1)
        total = np.zeros(self.shape, dtype=np.int8)
        for dr, dc in NEIGHBOR_OFFSETS:
            total += padded[1 + dr:1 + dr + self.rows, 1 + dc:1 + dc + self.cols]
        return total

    def zero_regions(self) -> List[List[Cell]]:
        """
        Find every maximal 8-connected region of EMPTY cells.

        Returns:
            Regions sorted by size, largest first. Equal sizes keep row-major
            discovery order; cells inside a region are in BFS order from the
            region's first (top-left-most) cell.
        """
        seen = np.zeros((self.rows, self.cols), dtype=bool)
        regions: List[List[Cell]] = []

        for r in range(self.rows):
            for c in range(self.cols):
                if seen[r, c] or self.truth[r, c] != EMPTY:
                    continue

                block: List[Cell] = []
                queue: Deque[Cell] = deque([(r, c)])
                seen[r, c] = True
                while queue:
                    cr, cc = queue.popleft()
                    block.append((cr, cc))
                    for nr, nc in self.neighbors(cr, cc):
                        if not seen[nr, nc] and self.truth[nr, nc] == EMPTY:
                            seen[nr, nc] = True
                            queue.append((nr, nc))
                regions.append(block)

        regions.sort(key=len, reverse=True)
        return regions

    # -------------------------------------------------------------------------
    # Player-visible state
    # -------------------------------------------------------------------------

    def hidden_neighbors(self, row: int, col: int) -> List[Cell]:
        return [(nr, nc) for nr, nc in self.neighbors(row, col) if not self.exposed[nr, nc]]

    def flagged_neighbors(self, row: int, col: int) -> int:
        return sum(1 for nr, nc in self.neighbors(row, col) if self.flagged[nr, nc])

    def accounted_mask(self) -> np.ndarray:
        """Cells a player already counts as mines: flags and exposed (absorbed) mines."""
        return self.flagged | (self.exposed & (self.truth == MINE))

    def unknown_mask(self) -> np.ndarray:
        return ~self.exposed & ~self.flagged

    def accounted_neighbors(self, row: int, col: int) -> int:
        return sum(
            1
            for nr, nc in self.neighbors(row, col)
            if self.flagged[nr, nc] or (self.exposed[nr, nc] and self.truth[nr, nc] == MINE)
        )

    def frontier_mask(self) -> np.ndarray:
        """Exposed numbers that still touch at least one unknown cell."""
        return (
            self.exposed
            & (self.truth > 0)
            & (self.count_neighbors(self.unknown_mask()) > 0)
        )

    def is_exposed_number(self, row: int, col: int) -> bool:
        return bool(self.exposed[row, col] and self.truth[row, col] > 0)

    def count_flags(self) -> int:
        return int(np.count_nonzero(self.flagged))

    def count_exposed(self) -> int:
        return int(np.count_nonzero(self.exposed))

    def any_mine_exposed(self) -> bool:
        return bool(np.any(self.exposed & (self.truth == MINE)))

    def is_solved(self) -> bool:
        """Return True iff every cell is exposed or is a flagged mine."""
        return bool(np.all(self.exposed | (self.flagged & (self.truth == MINE))))

    def all_safe_exposed(self) -> bool:
        return bool(np.all(self.exposed | (self.truth == MINE)))

    def set_flag(self, row: int, col: int, flagged: bool) -> None:
        self.flagged[row, col] = flagged

    def clear_visible_state(self) -> None:
        self.exposed[:, :] = False
        self.flagged[:, :] = False
        self.press_count[:, :] = PRESS_NONE

    def snapshot(self) -> GridSnapshot:
        return GridSnapshot(
            self.exposed.copy(), self.flagged.copy(), self.press_count.copy()
        )

    def restore(self, snapshot: GridSnapshot) -> None:
        self.exposed = snapshot.exposed.copy()
        self.flagged = snapshot.flagged.copy()
        self.press_count = snapshot.press_count.copy()

    def copy(self) -> "Grid":
        """Return a deep copy (layout, roster and visible state)."""
        other = Grid(self.rows, self.cols)
        other.truth = self.truth.copy()
        other.mine_roster = list(self.mine_roster)
        other.restore(self.snapshot())
        return other

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    def cell_symbol(self, row: int, col: int, reveal_all: bool = False) -> str:
        if self.flagged[row, col] and not reveal_all:
            return "F"
        if reveal_all or self.exposed[row, col]:
            v = int(self.truth[row, col])
            if v == MINE:
                return "M"
            return str(v)
        return "."

    def format_board(self, reveal_all: bool = False, highlight: Optional[Cell] = None) -> str:
        """
        Render the board as a multi-line string for logs and debugging.

        Args:
            reveal_all: If True, show mines and all underlying values.
            highlight: Optional cell wrapped in brackets (e.g. the last press).

        Returns:
            A formatted multi-line string with coordinate labels and the board grid.
        """
        header_cells = " ".join(f"{c:2d}" for c in range(self.cols))
        out = ["   " + header_cells, "   " + "-" * (3 * self.cols - 1)]

        for r in range(self.rows):
            cells = []
            for c in range(self.cols):
                sym = self.cell_symbol(r, c, reveal_all)
                cells.append(f"[{sym}" if (r, c) == highlight else f" {sym}")
            out.append(f"{r:2d} |" + " ".join(cells))

        return "\n".join(out)

    def __repr__(self) -> str:
        return (
            f"Grid(rows={self.rows}, cols={self.cols}, mines={self.mine_count}, "
            f"exposed={self.count_exposed()}, flags={self.count_flags()})"
        )
