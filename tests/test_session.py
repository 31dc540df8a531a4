import random

import numpy as np
import pytest

from logicsweeper.errors import GameNotStartedError
from logicsweeper.grid import MINE
from logicsweeper.session import GameSession, GameState
from logicsweeper.stats import StatisticsStore


def _mines(session):
    return [tuple(int(v) for v in cell) for cell in np.argwhere(session.grid_truth() == MINE)]


def _safe_cells(session):
    return [tuple(int(v) for v in cell) for cell in np.argwhere(session.grid_truth() != MINE)]


@pytest.fixture
def session(rng):
    return GameSession(rng=rng)


def test_grid_calls_before_start_raise(session):
    assert session.state is GameState.CONFIGURING
    with pytest.raises(GameNotStartedError):
        session.exposed()
    with pytest.raises(GameNotStartedError):
        session.tile_pressed(0, 0, 1)
    with pytest.raises(GameNotStartedError):
        session.apply_hint()
    with pytest.raises(GameNotStartedError):
        _ = session.flag_count
    assert session.mine_count == 10


def test_win_by_flagging_last_mine_records_best_time(session):
    session.configure_custom(2, 2, 1)
    assert session.start_game()

    for i, (r, c) in enumerate(_safe_cells(session)):
        exposed = session.tile_pressed(r, c, 3 + i)
    assert exposed.sum() == 3
    assert session.state is GameState.PLAYING

    (mr, mc), = _mines(session)
    session.tile_flagged(True, mr, mc)

    assert session.player_won()
    assert session.games_won == 1
    assert session.statistics.best_time("custom") == 5
    assert session.best_times() == "Custom best time: 5 seconds\n"


def test_pressing_mine_loses_when_lives_disabled(session):
    assert session.start_game()
    r, c = _mines(session)[0]

    session.tile_pressed(r, c, 1)

    assert session.player_lost()
    assert session.last_pressed == (r, c)
    assert session.games_won == 0

    before = session.exposed()
    after = session.tile_pressed(*_safe_cells(session)[0], 2)
    assert np.array_equal(before, after)


def test_extra_lives_absorb_mines_until_exhausted(session):
    session.set_extra_lives(2)
    assert session.start_game()
    assert session.extra_lives_left == 2
    mines = _mines(session)

    session.tile_pressed(*mines[0], 1)
    session.tile_pressed(*mines[1], 2)
    assert session.state is GameState.PLAYING
    assert session.extra_lives_left == 0

    session.tile_pressed(*mines[2], 3)
    assert session.player_lost()


def test_extra_lives_range_checked(session):
    with pytest.raises(ValueError):
        session.set_extra_lives(4)


def test_flags_on_exposed_or_outside_cells_are_ignored(session):
    session.configure_custom(2, 2, 1)
    assert session.start_game()
    r, c = _safe_cells(session)[0]
    session.tile_pressed(r, c, 1)

    session.tile_flagged(True, r, c)
    session.tile_flagged(True, 9, 9)

    assert session.flag_count == 0


def test_invalid_custom_config_does_not_start(session):
    session.configure_custom(1, 40, 0)

    assert not session.start_game()
    assert session.last_error
    assert session.state is GameState.CONFIGURING
    with pytest.raises(GameNotStartedError):
        session.exposed()


def test_unknown_difficulty_keeps_previous(session):
    with pytest.raises(ValueError):
        session.configure("nightmare")
    assert session.difficulty == "beginner"


def test_reset_counts_game_and_restores_defaults(session):
    session.configure("expert")
    session.set_extra_lives(3)
    assert session.start_game()
    played = session.games_played

    session.reset_game()

    assert session.games_played == played + 1
    assert session.difficulty == "beginner"
    assert session.extra_lives_left == -1
    assert session.state is GameState.CONFIGURING
    with pytest.raises(GameNotStartedError):
        session.exposed()


def test_shared_statistics_store():
    store = StatisticsStore()
    first = GameSession(stats=store, rng=random.Random(1))
    second = GameSession(stats=store, rng=random.Random(2))

    first.reset_game()
    second.reset_game()

    assert store.games_played == 3


def test_logical_mode_board_is_auto_solved_without_recording_win():
    session = GameSession(rng=random.Random(3))
    session.set_logical_mode(True)
    session.configure_custom(8, 8, 6)
    assert session.start_game()
    assert session.last_generation.logical

    assert session.logical_solve()
    assert session.player_won()
    assert session.games_won == 0


def test_iter_solver_moves_ends_with_terminal_move():
    session = GameSession(rng=random.Random(3))
    session.set_logical_mode(True)
    session.configure_custom(8, 8, 6)
    assert session.start_game()

    moves = list(session.iter_solver_moves())
    assert moves[-1].is_terminal
    assert session.state is GameState.WON


def test_apply_hint_flags_a_mine_or_reports_none(session):
    session.set_logical_mode(True)
    assert session.start_game()
    truth = session.grid_truth()

    cell = session.apply_hint()

    if cell is None:
        assert session.last_error == "No hint available."
    else:
        assert truth[cell] == MINE
        assert session.flagged()[cell]


def test_next_logical_mine_is_a_mine():
    session = GameSession(rng=random.Random(3))
    session.set_logical_mode(True)
    session.configure_custom(8, 8, 6)
    assert session.start_game()

    session.propagate_logical_consequences()
    cell = session.next_logical_mine()

    if cell is not None:
        assert session.grid_truth()[cell] == MINE
        assert not session.flagged()[cell]


def test_static_accessors(session):
    assert session.difficulties() == ["beginner", "intermediate", "expert", "custom"]
    assert "mine" in GameSession.rules_text()


def test_reset_keeps_wins_and_best_times(session):
    for _ in range(4):
        session.reset_game()
    assert session.games_played == 5

    session.configure_custom(2, 2, 1)
    assert session.start_game()
    for r, c in _safe_cells(session):
        session.tile_pressed(r, c, 7)
    session.tile_flagged(True, *_mines(session)[0])
    assert session.player_won()

    session.reset_game()

    assert session.games_played == 6
    assert session.games_won == 1
    assert session.statistics.best_time("custom") == 7


@pytest.mark.parametrize("rows,cols,mines", [(2, 2, 3), (30, 30, 150), (16, 30, 99)])
def test_boundary_configs_place_exact_mine_count(session, rows, cols, mines):
    session.configure_custom(rows, cols, mines)

    assert session.start_game()
    assert session.mine_count == mines
    assert len(set(session.mine_roster())) == mines
    assert len(_mines(session)) == mines
    assert session.grid_truth().shape == (rows, cols)
