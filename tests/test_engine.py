import pytest

from logicsweeper.engine import LivesLedger, RevealEngine
from logicsweeper.grid import PRESS_ARMED, PRESS_NONE, PRESS_SATURATED, Grid


def test_flood_fill_opens_every_reachable_safe_cell():
    grid = Grid.from_layout(["....", "....", "...M"])
    engine = RevealEngine(grid)

    exposed = engine.reveal(0, 0)

    assert len(exposed) == 11
    assert grid.count_exposed() == 11
    assert not grid.exposed[2, 3]
    assert not engine.lost
    assert not engine.won
    assert engine.last_pressed == (0, 0)
    # Numbers on the flood border are exposed and armed
    assert grid.press_count[1, 2] == PRESS_ARMED

    grid.set_flag(2, 3, True)
    assert engine.refresh_outcome()


def test_pressing_exposed_blank_is_a_no_op():
    grid = Grid.from_layout(["....", "....", "...M"])
    engine = RevealEngine(grid)
    engine.reveal(0, 0)

    assert engine.reveal(0, 0) == []
    assert grid.count_exposed() == 11


def test_second_press_without_flags_does_nothing():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid)

    assert engine.reveal(0, 1) == [(0, 1)]
    assert grid.press_count[0, 1] == PRESS_ARMED
    assert engine.reveal(0, 1) == []
    assert grid.count_exposed() == 1


def test_second_press_with_enough_flags_opens_neighbors():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid)
    grid.set_flag(0, 0, True)

    engine.reveal(0, 1)
    engine.reveal(0, 1)

    assert grid.press_count[0, 1] == PRESS_SATURATED
    assert grid.count_exposed() == 8
    assert engine.won


def test_cascade_into_mine_through_misflag_is_ignored():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid)
    grid.set_flag(1, 0, True)

    engine.reveal(0, 1)
    engine.reveal(0, 1)

    assert not engine.lost
    assert not grid.exposed[0, 0]
    assert not grid.exposed[1, 0]
    assert engine.last_pressed == (0, 0)


def test_pressing_flagged_cell_is_a_no_op():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid)
    grid.set_flag(0, 0, True)

    assert engine.reveal(0, 0) == []
    assert not engine.lost


def test_pressing_mine_without_lives_loses():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid)

    engine.reveal(0, 0)

    assert engine.lost
    assert not engine.won
    assert grid.exposed[0, 0]
    assert engine.reveal(2, 2) == []


def test_out_of_bounds_press_is_ignored():
    grid = Grid.from_layout(["M.", ".."])
    engine = RevealEngine(grid)

    assert engine.reveal(5, 5) == []
    assert engine.last_pressed == (-1, -1)


def test_extra_life_absorbs_first_mine():
    grid = Grid.from_layout(["M.", ".M"])
    engine = RevealEngine(grid, LivesLedger(1))

    engine.reveal(0, 0)
    assert not engine.lost
    assert engine.lives.remaining == 0
    assert engine.lives.has_absorbed((0, 0))

    engine.reveal(1, 1)
    assert engine.lost


def test_absorbed_mine_counts_toward_saturation():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid, LivesLedger(1))

    engine.reveal(0, 0)
    engine.reveal(0, 1)
    engine.reveal(0, 1)

    assert grid.all_safe_exposed()
    assert not engine.lost


def test_chord_arms_unpressed_number_first():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid)
    grid.exposed[0, 1] = True
    grid.set_flag(0, 0, True)
    assert grid.press_count[0, 1] == PRESS_NONE

    opened = engine.chord(0, 1)

    assert len(opened) == 7
    assert engine.last_pressed == (-1, -1)
    assert engine.won


def test_expand_saturated_reaches_fixpoint():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid)
    engine.reveal(0, 1)
    grid.set_flag(0, 0, True)

    opened = engine.expand_saturated()

    assert len(opened) == 7
    assert grid.is_solved()


def test_lives_ledger_range_and_copy():
    with pytest.raises(ValueError):
        LivesLedger(4)
    with pytest.raises(ValueError):
        LivesLedger(-2)

    assert not LivesLedger().enabled
    assert not LivesLedger(0).can_absorb()

    ledger = LivesLedger(2)
    ledger.absorb((1, 1))
    other = ledger.copy()
    other.absorb((2, 2))

    assert ledger.remaining == 1
    assert ledger.absorbed == ((1, 1),)
    assert other.absorbed == ((1, 1), (2, 2))


def test_saturation_sweep_counts_absorbed_mines():
    grid = Grid.from_layout(["M.", ".."])
    engine = RevealEngine(grid, LivesLedger(1))
    engine.reveal(0, 0)
    engine.reveal(0, 1)
    engine.reveal(1, 0)

    assert engine.expand_saturated() == [(1, 1)]
    assert grid.count_flags() == 0
    assert engine.won
