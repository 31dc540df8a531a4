"""
Mine inference over a partially revealed grid.

The first two passes only read what the player can see: exposed numbers,
the current flags and mines absorbed by an extra life. The expansion passes
rank mines by how much of the board flagging them would open up; they read
the hidden layout and therefore only back the hint feature, never the
solvability check.

Every scan is row-major and visits neighbours in NEIGHBOR_OFFSETS order, so
the "first" mine returned is reproducible.
"""

from typing import List, Optional, Set, Tuple

import numpy as np

from .config import HINT_MIN_EXPOSED_NEIGHBORS
from .engine import LivesLedger, RevealEngine
from .grid import EMPTY, MINE, Grid
from .utils import Cell


def _unknown_neighbors(grid: Grid, row: int, col: int) -> List[Cell]:
    """Hidden, unflagged neighbours of a cell in neighbour order."""
    return [
        (nr, nc)
        for nr, nc in grid.neighbors(row, col)
        if not grid.exposed[nr, nc] and not grid.flagged[nr, nc]
    ]


def _constraint_arrays(grid: Grid) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Per-cell counts every pass works from, computed once per call.

    Returns:
        (frontier, remaining, unknown_count) where ``remaining`` is each
        clue minus its flagged and absorbed (exposed) mine neighbours.
    """
    unknown_count = grid.count_neighbors(grid.unknown_mask())
    remaining = grid.truth - grid.count_neighbors(grid.accounted_mask())
    frontier = grid.exposed & (grid.truth > 0) & (unknown_count > 0)
    return frontier, remaining, unknown_count


# -----------------------------------------------------------------------------
# Player-visible inference
# -----------------------------------------------------------------------------


def suggest_mine_by_single_constraint(grid: Grid) -> Optional[Cell]:
    """
    Find a mine forced by a single exposed number.

    A number whose mines still missing (clue minus flags and absorbed mines)
    equal its count of unknown (hidden, unflagged) neighbours has a mine
    under every one of them.

    Args:
        grid: Board to inspect.

    Returns:
        The first forced mine in scan order, or None.
    """
    frontier, remaining, unknown_count = _constraint_arrays(grid)
    forced = np.argwhere(frontier & (remaining == unknown_count))
    if len(forced) == 0:
        return None
    r, c = forced[0]
    return _unknown_neighbors(grid, int(r), int(c))[0]


def suggest_mine_by_constraint_overlap(grid: Grid) -> Optional[Cell]:
    """
    Find a mine forced by two adjacent exposed numbers sharing unknown cells.

    For the pair (cell1, cell2) the unknown neighbours split into
    ``unique1``, ``unique2`` and ``common``:

    - cell1 can place at most ``min(|common|, remaining2)`` of its mines in
      ``common``. When the rest exactly fills ``unique1``, every cell of
      ``unique1`` is a mine. With nothing left for cell2 this is the plain
      ``|unique1| == remaining1`` case.
    - When ``remaining2 - |unique2| == |common|`` (and is positive) cell2 can
      only be satisfied by a mine on every common cell.

    Only frontier numbers take part; a number without unknown neighbours
    shares nothing.

    Args:
        grid: Board to inspect.

    Returns:
        The first forced mine in scan order, or None.
    """
    frontier, remaining, _ = _constraint_arrays(grid)

    for r, c in np.argwhere(frontier):
        r, c = int(r), int(c)
        unknown1 = _unknown_neighbors(grid, r, c)
        set1: Set[Cell] = set(unknown1)
        remaining1 = int(remaining[r, c])

        for r2, c2 in grid.neighbors(r, c):
            if not frontier[r2, c2]:
                continue

            unknown2 = _unknown_neighbors(grid, r2, c2)
            set2: Set[Cell] = set(unknown2)
            common = [cell for cell in unknown1 if cell in set2]
            if not common:
                continue

            remaining2 = int(remaining[r2, c2])
            unique1 = [cell for cell in unknown1 if cell not in set2]
            unique2 = [cell for cell in unknown2 if cell not in set1]

            max_in_common = min(len(common), max(remaining2, 0))
            if unique1 and remaining1 - max_in_common == len(unique1):
                return unique1[0]

            if remaining2 > len(unique2) and remaining2 - len(unique2) == len(common):
                return common[0]

    return None


def suggest_mine(grid: Grid) -> Tuple[Optional[Cell], str]:
    """
    Run the single-constraint pass, then the overlap pass.

    Returns:
        (cell, method) where method is "single_infer", "paired_infer", or
        "none" when cell is None.
    """
    cell = suggest_mine_by_single_constraint(grid)
    if cell is not None:
        return cell, "single_infer"

    cell = suggest_mine_by_constraint_overlap(grid)
    if cell is not None:
        return cell, "paired_infer"

    return None, "none"


# -----------------------------------------------------------------------------
# Ground-truth expansion ranking
# -----------------------------------------------------------------------------


def _is_mine_accounted(grid: Grid, mine: Cell) -> bool:
    """A mine counts as located once it is exposed or touches an exposed number."""
    r, c = mine
    if grid.exposed[r, c]:
        return True
    return any(grid.is_exposed_number(nr, nc) for nr, nc in grid.neighbors(r, c))


def _simulate_flood(grid: Grid, row: int, col: int) -> int:
    """Count hidden safe cells a second click on (row, col) would open, blanks cascading."""
    visited = np.zeros(grid.shape, dtype=bool)
    stack: List[Cell] = [(row, col)]
    count = 0

    while stack:
        cr, cc = stack.pop()
        for nr, nc in grid.neighbors(cr, cc):
            if visited[nr, nc] or grid.exposed[nr, nc] or grid.truth[nr, nc] == MINE:
                continue
            visited[nr, nc] = True
            count += 1
            if grid.truth[nr, nc] == EMPTY:
                stack.append((nr, nc))

    return count


def _count_expansion_from_cell(grid: Grid, row: int, col: int) -> int:
    located = sum(
        1
        for nr, nc in grid.neighbors(row, col)
        if grid.truth[nr, nc] == MINE and _is_mine_accounted(grid, (nr, nc))
    )
    if located != grid.number_at(row, col):
        return 0
    return _simulate_flood(grid, row, col)


def calculate_expansion_score(grid: Grid, mine: Cell) -> int:
    """
    Score a mine by the cells its exposed numbered neighbours would open.

    Args:
        grid: Board to inspect (hidden layout is read).
        mine: Coordinate of a mine.

    Returns:
        Sum, over the mine's exposed numbered neighbours whose mines are all
        located, of the hidden safe cells a second click would expose.
    """
    r, c = mine
    return sum(
        _count_expansion_from_cell(grid, nr, nc)
        for nr, nc in grid.neighbors(r, c)
        if grid.is_exposed_number(nr, nc)
    )


def suggest_next_mine_to_reveal(grid: Grid) -> Optional[Cell]:
    """
    Return the hidden mine with the highest expansion score.

    Ties go to the first mine in row-major order. None when every mine is
    already exposed.
    """
    best: Optional[Cell] = None
    best_score = -1
    for r in range(grid.rows):
        for c in range(grid.cols):
            if grid.truth[r, c] != MINE or grid.exposed[r, c]:
                continue
            score = calculate_expansion_score(grid, (r, c))
            if score > best_score:
                best, best_score = (r, c), score
    return best


def _exposed_safe_neighbors(grid: Grid, mine: Cell) -> int:
    r, c = mine
    return sum(
        1
        for nr, nc in grid.neighbors(r, c)
        if grid.truth[nr, nc] != MINE and grid.exposed[nr, nc]
    )


def flag_gain(grid: Grid, mine: Cell, lives: Optional[LivesLedger] = None) -> int:
    """
    Simulate flagging ``mine`` on a copy and second-clicking every number it
    saturates until nothing more opens.

    Returns:
        How many cells the simulation exposed beyond the current board.
    """
    sim = grid.copy()
    sim.set_flag(mine[0], mine[1], True)
    engine = RevealEngine(sim, lives.copy() if lives is not None else None)
    engine.expand_saturated()
    return sim.count_exposed() - grid.count_exposed()


def find_best_hint_mine(
    grid: Grid,
    lives: Optional[LivesLedger] = None,
    min_exposed_neighbors: int = HINT_MIN_EXPOSED_NEIGHBORS,
) -> Optional[Cell]:
    """
    Pick the mine whose flag would unlock the largest expansion wave.

    Only hidden, unflagged mines with at least ``min_exposed_neighbors``
    exposed non-mine neighbours are candidates.

    Args:
        grid: Board to inspect (hidden layout is read).
        lives: Lives ledger of the game, so absorbed mines count as located.
        min_exposed_neighbors: Candidate threshold.

    Returns:
        The first mine, in roster order, with the largest strictly positive
        gain; None when no candidate opens anything.
    """
    best: Optional[Cell] = None
    best_gain = 0

    for r, c in grid.mine_roster:
        if grid.exposed[r, c] or grid.flagged[r, c]:
            continue
        if _exposed_safe_neighbors(grid, (r, c)) < min_exposed_neighbors:
            continue

        gain = flag_gain(grid, (r, c), lives)
        if gain > best_gain:
            best, best_gain = (r, c), gain

    return best
