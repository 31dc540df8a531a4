"""Utility functions shared by the grid, deduction and generation modules."""

from typing import Dict, List, Tuple

Cell = Tuple[int, int]

# Compass order starting up-left; every scan that must be reproducible uses it.
NEIGHBOR_OFFSETS: Tuple[Cell, ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)

# Module-level cache: (rows, cols) -> {(r, c): ((nr, nc), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[Tuple[int, int], Dict[Cell, Tuple[Cell, ...]]] = {}


def get_neighborhoods(rows: int, cols: int) -> Dict[Cell, Tuple[Cell, ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for every cell in a grid.

    Args:
        rows: Number of grid rows. Must be positive.
        cols: Number of grid columns. Must be positive.

    Returns:
        Mapping from each cell (r, c) to a tuple of valid neighboring
        coordinates in NEIGHBOR_OFFSETS order. Corner cells get 3 entries,
        edge cells 5 and interior cells 8.

    Raises:
        ValueError: If rows or cols is non-positive.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError("rows and cols must be positive.")

    key = (rows, cols)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Cell, Tuple[Cell, ...]] = {}
    for r in range(rows):
        for c in range(cols):
            nbrs: List[Cell] = []
            for dr, dc in NEIGHBOR_OFFSETS:
                nr, nc = r + dr, c + dc
                if 0 <= nr < rows and 0 <= nc < cols:
                    nbrs.append((nr, nc))
            neighborhoods[(r, c)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods
