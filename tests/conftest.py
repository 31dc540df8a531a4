import os

os.environ.setdefault("MPLBACKEND", "Agg")

import random

import pytest

from logicsweeper.grid import Grid


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def corner_grid():
    """3x3 board with a single mine in the bottom-right corner."""
    return Grid.from_layout(["...", "...", "..M"])


@pytest.fixture
def one_two_one_grid():
    """Top row reads 1-2-1 once exposed; mines under its outer cells."""
    grid = Grid.from_layout(["...", "M.M"])
    grid.exposed[0, :] = True
    return grid
