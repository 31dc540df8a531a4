"""
Logicsweeper

A Minesweeper engine that can guarantee boards solvable without guessing:
- Reveal engine: Flood fill, second-click cascades and extra lives
- Deduction: Single-constraint and constraint-overlap mine inference
- Logical solver: Guess-free auto-solve used to vet generated boards
- Game session: Configuration, play state, hints and statistics
"""

from .config import DIFFICULTIES, PRESETS, BoardConfig, preset
from .errors import GameNotStartedError, InvalidConfigurationError, SearchExhaustedError
from .grid import Grid
from .engine import LivesLedger, RevealEngine
from .deduction import (
    suggest_mine,
    suggest_mine_by_single_constraint,
    suggest_mine_by_constraint_overlap,
    suggest_next_mine_to_reveal,
    calculate_expansion_score,
    find_best_hint_mine,
)
from .solver import LogicalSolver, SolverMove
from .generator import BoardGenerator, GenerationResult
from .stats import StatisticsStore
from .session import GameSession, GameState
from .analysis import (
    format_solver_view,
    run_generation_benchmark,
    run_solver_benchmark,
    run_difficulty_analysis,
)

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "BoardConfig",
    "DIFFICULTIES",
    "PRESETS",
    "preset",
    # Errors
    "InvalidConfigurationError",
    "GameNotStartedError",
    "SearchExhaustedError",
    # Core classes
    "Grid",
    "LivesLedger",
    "RevealEngine",
    "LogicalSolver",
    "SolverMove",
    "BoardGenerator",
    "GenerationResult",
    "StatisticsStore",
    "GameSession",
    "GameState",
    # Deduction
    "suggest_mine",
    "suggest_mine_by_single_constraint",
    "suggest_mine_by_constraint_overlap",
    "suggest_next_mine_to_reveal",
    "calculate_expansion_score",
    "find_best_hint_mine",
    # Analysis functions
    "format_solver_view",
    "run_generation_benchmark",
    "run_solver_benchmark",
    "run_difficulty_analysis",
]
