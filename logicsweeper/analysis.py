"""Analysis and benchmarking tools for board generation and the logical solver."""

import random
from typing import Dict, List, Mapping, Optional

import matplotlib.pyplot as plt
import numpy as np

from .config import PRESETS, BoardConfig
from .engine import RevealEngine
from .generator import BoardGenerator
from .grid import Grid
from .solver import LogicalSolver


def format_solver_view(grid: Grid, *, show_coords: bool = True) -> str:
    """
    Format what the player (and the solver) can see as a human-readable string.

    Args:
        grid: Board to display.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid where hidden cells are shown as '.', flags as 'F' and
        exposed cells as their value.
    """
    if show_coords:
        return grid.format_board()

    return "\n".join(
        " ".join(f" {grid.cell_symbol(r, c)}" for c in range(grid.cols))
        for r in range(grid.rows)
    )


def run_generation_benchmark(
    config: BoardConfig,
    runs: int,
    *,
    logical_mode: bool = True,
    seed: Optional[int] = None,
    search_cap: Optional[int] = None,
) -> Dict[str, float]:
    """
    Generate many boards and aggregate how hard the generator had to work.

    Args:
        config: Board configuration.
        runs: Number of boards to generate, must be > 0.
        logical_mode: Whether to request guess-free boards.
        seed: Seed for the random source, for reproducible runs.
        search_cap: Override of the generator's layout budget.

    Returns:
        Dict with:
        - avg_boards_tried, max_boards_tried
        - avg_regions_tried
        - logical_rate: share of boards delivered with the guarantee
        - avg_opening_size: cells exposed by the initial opening
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = random.Random(seed)
    generator = (
        BoardGenerator(rng=rng)
        if search_cap is None
        else BoardGenerator(rng=rng, search_cap=search_cap)
    )

    boards_tried = np.zeros(runs)
    regions_tried = np.zeros(runs)
    logical = np.zeros(runs, dtype=bool)
    opening = np.zeros(runs)

    for i in range(runs):
        result = generator.generate(config, logical_mode=logical_mode)
        boards_tried[i] = result.boards_tried
        regions_tried[i] = result.regions_tried
        logical[i] = result.logical
        opening[i] = result.opening_size

    return {
        "avg_boards_tried": float(boards_tried.mean()),
        "max_boards_tried": float(boards_tried.max()),
        "avg_regions_tried": float(regions_tried.mean()),
        "logical_rate": float(logical.mean()),
        "avg_opening_size": float(opening.mean()),
    }


def run_solver_benchmark(
    config: BoardConfig,
    runs: int,
    *,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Measure how often pure deduction solves a plain random board.

    Each board is opened on the first cell of its largest zero region (boards
    without one count as stalls) and then solved without guessing.

    Args:
        config: Board configuration.
        runs: Number of boards, must be > 0.
        seed: Seed for the random source.

    Returns:
        Dict with solve_rate and per-game averages of the solver counters
        (avg_flags_placed, avg_inferred_single_count,
        avg_inferred_paired_count, avg_propagated_cells_count) plus
        avg_exposed_fraction.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    generator = BoardGenerator(rng=random.Random(seed))
    keys = (
        "flags_placed",
        "inferred_single_count",
        "inferred_paired_count",
        "propagated_cells_count",
    )
    counters = np.zeros((runs, len(keys)))
    solved = np.zeros(runs, dtype=bool)
    exposed_fraction = np.zeros(runs)

    for i in range(runs):
        grid = generator.scatter(config)
        regions = grid.zero_regions()
        if not regions:
            continue

        engine = RevealEngine(grid)
        seed_cell = regions[0][0]
        engine.reveal(seed_cell[0], seed_cell[1])

        solver = LogicalSolver(engine, record_steps=False)
        solved[i] = solver.logical_solve()
        summary = solver.summary()
        counters[i] = [summary[k] for k in keys]
        exposed_fraction[i] = summary["exposed_count"] / config.cells

    out: Dict[str, float] = {
        f"avg_{k}": float(v) for k, v in zip(keys, counters.mean(axis=0))
    }
    out["solve_rate"] = float(solved.mean())
    out["avg_exposed_fraction"] = float(exposed_fraction.mean())
    return out


def run_difficulty_analysis(
    runs: int,
    *,
    levels: Optional[Mapping[str, BoardConfig]] = None,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Run both benchmarks on each difficulty level and plot summaries.

    Args:
        runs: Number of boards per level and benchmark.
        levels: Level name to configuration; defaults to the standard presets.
        seed: Seed shared by every benchmark.
        show: If True, display the figures; otherwise they are closed.

    Returns:
        Mapping from level name to the merged metrics of
        run_generation_benchmark() (prefixed "gen_") and run_solver_benchmark().

    Standard difficulty levels:
        - Beginner: 9x9, 10 mines
        - Intermediate: 16x16, 40 mines
        - Expert: 16x30, 99 mines
    """
    if levels is None:
        levels = PRESETS

    results: Dict[str, Dict[str, float]] = {}
    for level, config in levels.items():
        generation = run_generation_benchmark(config, runs, seed=seed)
        metrics = {f"gen_{k}": v for k, v in generation.items()}
        metrics.update(run_solver_benchmark(config, runs, seed=seed))
        results[level] = metrics

    level_names: List[str] = list(levels.keys())
    x = np.arange(len(level_names))
    bar_w = 0.35

    # 1) Deductions made (by method)
    inferred_single = [results[n]["avg_inferred_single_count"] for n in level_names]
    inferred_paired = [results[n]["avg_inferred_paired_count"] for n in level_names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, inferred_single, width=bar_w, label="single")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, inferred_paired, width=bar_w, label="paired")  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average inferred count")  # type: ignore[misc]
    plt.title("Average deductions by method (per board)")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()

    # 2) Generator effort
    boards_tried = [results[n]["gen_avg_boards_tried"] for n in level_names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, boards_tried)  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average layouts tried")  # type: ignore[misc]
    plt.title("Logical-mode generation effort")  # type: ignore[misc]
    plt.tight_layout()

    # 3) Solve rate vs. guarantee rate
    solve_rates = [results[n]["solve_rate"] for n in level_names]
    logical_rates = [results[n]["gen_logical_rate"] for n in level_names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, solve_rates, width=bar_w, label="random board solved")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, logical_rates, width=bar_w, label="logical board found")  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Guess-free solvability by difficulty level")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()

    if show:
        plt.show()  # type: ignore[misc]
    else:
        plt.close("all")

    return results
