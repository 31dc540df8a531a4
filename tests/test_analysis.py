import pytest

from logicsweeper.analysis import (
    format_solver_view,
    run_difficulty_analysis,
    run_generation_benchmark,
    run_solver_benchmark,
)
from logicsweeper.config import BoardConfig
from logicsweeper.grid import Grid


def test_format_solver_view_without_coords():
    grid = Grid.from_layout(["M.", ".."])
    grid.exposed[1, 1] = True

    assert format_solver_view(grid, show_coords=False) == " .  .\n .  1"
    assert "--" in format_solver_view(grid)


def test_generation_benchmark_is_reproducible():
    config = BoardConfig(6, 6, 3)
    a = run_generation_benchmark(config, 3, seed=1)
    b = run_generation_benchmark(config, 3, seed=1)

    assert a == b
    assert 0.0 <= a["logical_rate"] <= 1.0
    assert a["avg_boards_tried"] >= 1.0


def test_generation_benchmark_rejects_zero_runs():
    with pytest.raises(ValueError):
        run_generation_benchmark(BoardConfig(6, 6, 3), 0)


def test_solver_benchmark_rates_in_range():
    out = run_solver_benchmark(BoardConfig(6, 6, 3), 4, seed=2)

    assert 0.0 <= out["solve_rate"] <= 1.0
    assert 0.0 <= out["avg_exposed_fraction"] <= 1.0
    assert "avg_inferred_paired_count" in out


def test_difficulty_analysis_on_small_levels():
    levels = {"tiny": BoardConfig(5, 5, 2), "small": BoardConfig(6, 6, 4)}

    results = run_difficulty_analysis(2, levels=levels, seed=0, show=False)

    assert set(results) == {"tiny", "small"}
    assert "gen_logical_rate" in results["tiny"]
    assert "solve_rate" in results["small"]
