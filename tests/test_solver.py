from logicsweeper.engine import LivesLedger, RevealEngine
from logicsweeper.grid import Grid
from logicsweeper.solver import LogicalSolver


def test_solves_corner_mine(corner_grid):
    engine = RevealEngine(corner_grid)
    engine.reveal(0, 0)
    solver = LogicalSolver(engine)

    assert solver.logical_solve()
    assert engine.won
    assert [m.action for m in solver.steps_history] == ["flag", "solved"]
    assert solver.flags_placed == 1
    assert solver.inferred_single_count == 1


def test_stalls_on_fifty_fifty():
    grid = Grid.from_layout(["..", "..", "..", "M."])
    engine = RevealEngine(grid)
    engine.reveal(0, 0)
    solver = LogicalSolver(engine)

    assert not solver.logical_solve()
    assert not engine.won
    assert solver.steps_history[-1].action == "stalled"
    assert grid.count_flags() == 0


def test_iter_moves_interleaves_flags_and_propagation():
    grid = Grid.from_layout(["...", "M.M", "..."])
    engine = RevealEngine(grid)
    for c in range(3):
        engine.reveal(0, c)
    solver = LogicalSolver(engine)

    moves = list(solver.iter_moves())

    assert [m.action for m in moves] == ["flag", "reveal", "flag", "reveal", "solved"]
    assert moves[0].cell == (1, 2)
    assert moves[0].method == "paired_infer"
    assert moves[1].cells == ((1, 1),)
    assert moves[2].cell == (1, 0)
    assert moves[2].method == "single_infer"
    assert moves[-1].is_terminal
    assert solver.summary()["propagated_cells_count"] == 4
    assert solver.inferred_paired_count == 1


def test_record_steps_disabled_keeps_history_empty(corner_grid):
    engine = RevealEngine(corner_grid)
    engine.reveal(0, 0)
    solver = LogicalSolver(engine, record_steps=False)

    assert solver.logical_solve()
    assert solver.steps_history == []


def test_flag_isolated_mines():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid)
    solver = LogicalSolver(engine)

    assert solver.flag_isolated_mines() == []

    engine.reveal(2, 2)
    assert solver.flag_isolated_mines() == [(0, 0)]
    assert engine.won


def test_stalled_when_game_lost():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid)
    engine.reveal(0, 0)

    moves = list(LogicalSolver(engine).iter_moves())
    assert moves[-1].action == "stalled"
    assert moves[-1].method == "lost"


def test_step_flags_one_mine_then_reports_nothing(corner_grid):
    engine = RevealEngine(corner_grid)
    engine.reveal(0, 0)
    solver = LogicalSolver(engine)

    move = solver.step()
    assert move.action == "flag"
    assert move.cell == (2, 2)
    assert solver.step() is None


def test_solves_around_absorbed_mine():
    grid = Grid.from_layout(["M.", ".."])
    engine = RevealEngine(grid, LivesLedger(1))
    for cell in [(0, 0), (0, 1), (1, 0)]:
        engine.reveal(*cell)
    solver = LogicalSolver(engine)

    assert solver.logical_solve()
    assert grid.count_flags() == 0
    assert grid.all_safe_exposed()


def test_flag_isolated_mines_skips_absorbed_mine():
    grid = Grid.from_layout(["M..", "...", "..."])
    engine = RevealEngine(grid, LivesLedger(1))
    engine.reveal(0, 0)
    engine.reveal(2, 2)

    assert LogicalSolver(engine).flag_isolated_mines() == []
    assert grid.count_flags() == 0
