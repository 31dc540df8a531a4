"""
Quickstart example for Logicsweeper.

This script demonstrates guess-free board generation, the auto-solver and a
short scripted game session.
"""

import logging
import random

from logicsweeper import (
    BoardConfig,
    BoardGenerator,
    GameSession,
    LogicalSolver,
    RevealEngine,
    format_solver_view,
    run_solver_benchmark,
)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("Logicsweeper - Quickstart Example")
    print("=" * 60)

    # Example 1: Generate a board that needs no guessing
    print("\n1. Generating a logical Intermediate board (16x16, 40 mines)...")
    print("-" * 60)

    generator = BoardGenerator(rng=random.Random(2024))
    result = generator.generate(BoardConfig(16, 16, 40), logical_mode=True)

    print(f"Guess-free: {result.logical}")
    print(f"Layouts tried: {result.boards_tried}")
    print(f"Opening at {result.seed_cell}, {result.opening_size} cells exposed")
    print(format_solver_view(result.grid))

    # Example 2: Let the solver finish it
    print("\n2. Auto-solving the board...")
    print("-" * 60)

    solver = LogicalSolver(RevealEngine(result.grid))
    for move in solver.iter_moves():
        if move.action == "flag":
            print(f"flag {move.cell} ({move.method})")
        elif move.is_terminal:
            print(f"-> {move.action}")

    summary = solver.summary()
    print(f"Flags placed: {summary['flags_placed']}")
    print(f"Single inferences: {summary['inferred_single_count']}")
    print(f"Paired inferences: {summary['inferred_paired_count']}")
    print(result.grid.format_board())

    # Example 3: A scripted session with hints
    print("\n3. Beginner session with two extra lives...")
    print("-" * 60)

    session = GameSession(rng=random.Random(7))
    session.set_logical_mode(True)
    session.set_extra_lives(2)
    session.start_game()

    hint = session.apply_hint()
    print(f"Hint: {hint if hint is not None else session.last_error}")
    print(f"Solved by deduction: {session.logical_solve()}")
    print(session.format_board())

    # Example 4: How often plain random boards are guess-free
    print("\n4. Guess-free rate of random boards (20 boards each)...")
    print("-" * 60)

    difficulties = [
        ("Beginner", BoardConfig(9, 9, 10)),
        ("Intermediate", BoardConfig(16, 16, 40)),
        ("Expert", BoardConfig(16, 30, 99)),
    ]

    for name, config in difficulties:
        stats = run_solver_benchmark(config, 20, seed=1)
        print(
            f"{name:15s} ({config.rows}x{config.cols}, {config.mine_count:2d} mines): "
            f"{stats['solve_rate']*100:5.1f}% solved without guessing"
        )

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
