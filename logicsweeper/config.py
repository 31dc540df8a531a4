"""Board configuration, difficulty presets and engine-wide limits."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import InvalidConfigurationError

MIN_SIZE = 2
MAX_SIZE = 30
MIN_MINES = 1
MAX_MINES = 150

LIVES_DISABLED = -1
MAX_EXTRA_LIVES = 3

LOGICAL_SEARCH_CAP = 500

# A mine only qualifies as a hint once this many of its non-mine neighbours
# are exposed. Tunable; 3 matches the behaviour players already know.
HINT_MIN_EXPOSED_NEIGHBORS = 3

DIFFICULTIES: Tuple[str, ...] = ("beginner", "intermediate", "expert", "custom")


@dataclass(frozen=True)
class BoardConfig:
    """Dimensions and mine count of a board."""

    rows: int
    cols: int
    mine_count: int

    def problems(self) -> Tuple[str, ...]:
        """Return human-readable reasons this config cannot be played (empty if valid)."""
        out = []
        if not MIN_SIZE <= self.rows <= MAX_SIZE:
            out.append(f"rows must be between {MIN_SIZE} and {MAX_SIZE}, got {self.rows}")
        if not MIN_SIZE <= self.cols <= MAX_SIZE:
            out.append(f"cols must be between {MIN_SIZE} and {MAX_SIZE}, got {self.cols}")
        if not MIN_MINES <= self.mine_count <= MAX_MINES:
            out.append(
                f"mine_count must be between {MIN_MINES} and {MAX_MINES}, "
                f"got {self.mine_count}"
            )
        if self.rows * self.cols <= self.mine_count:
            out.append(
                f"a {self.rows}x{self.cols} board is too small for "
                f"{self.mine_count} mines"
            )
        return tuple(out)

    def is_valid(self) -> bool:
        return not self.problems()

    def validate(self) -> None:
        """
        Raise if the config cannot be played.

        Raises:
            InvalidConfigurationError: With every violated rule in the message.
        """
        problems = self.problems()
        if problems:
            raise InvalidConfigurationError("; ".join(problems))

    @property
    def cells(self) -> int:
        return self.rows * self.cols


PRESETS: Dict[str, BoardConfig] = {
    "beginner": BoardConfig(9, 9, 10),
    "intermediate": BoardConfig(16, 16, 40),
    "expert": BoardConfig(16, 30, 99),
}

DEFAULT_CUSTOM = BoardConfig(9, 9, 10)


def preset(difficulty: str, custom: Optional[BoardConfig] = None) -> BoardConfig:
    """
    Resolve a difficulty name to its board configuration.

    Args:
        difficulty: One of DIFFICULTIES.
        custom: Configuration used for "custom"; defaults to DEFAULT_CUSTOM.

    Returns:
        The matching BoardConfig.

    Raises:
        ValueError: If the difficulty name is not recognised.
    """
    if difficulty == "custom":
        return custom if custom is not None else DEFAULT_CUSTOM
    try:
        return PRESETS[difficulty]
    except KeyError:
        raise ValueError(
            f"Unknown difficulty {difficulty!r}; expected one of {DIFFICULTIES}."
        ) from None
