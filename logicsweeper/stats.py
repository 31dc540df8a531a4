"""Process-lifetime game statistics."""

from typing import Dict, Optional

from .config import DIFFICULTIES


class StatisticsStore:
    """
    Games played and won plus the best time per difficulty slot.

    One store is created per process and handed to every session that should
    share it; nothing is written to disk. A best time of 0 means "no record".
    """

    def __init__(self) -> None:
        self.games_played: int = 1
        self.games_won: int = 0
        self._best_times: Dict[str, int] = {d: 0 for d in DIFFICULTIES}

    def record_game_started(self) -> None:
        self.games_played += 1

    def record_win(self, difficulty: str, elapsed_seconds: int) -> bool:
        """
        Count a win and update the difficulty's best time.

        Args:
            difficulty: One of DIFFICULTIES.
            elapsed_seconds: Time the game took.

        Returns:
            True if this time is a new record for the difficulty.

        Raises:
            ValueError: If the difficulty is unknown.
        """
        self._check_difficulty(difficulty)
        self.games_won += 1

        best = self._best_times[difficulty]
        if best == 0 or elapsed_seconds < best:
            self._best_times[difficulty] = elapsed_seconds
            return True
        return False

    def best_time(self, difficulty: str) -> int:
        self._check_difficulty(difficulty)
        return self._best_times[difficulty]

    def best_times_text(self, current_difficulty: Optional[str] = None) -> str:
        """
        Render one line per difficulty that has a record or is being played.

        Example line: ``"Beginner best time: 42 seconds"``.
        """
        lines = []
        for difficulty in DIFFICULTIES:
            best = self._best_times[difficulty]
            if difficulty == current_difficulty or best > 0:
                lines.append(f"{difficulty.capitalize()} best time: {best} seconds")
        return "".join(line + "\n" for line in lines)

    def as_dict(self) -> Dict[str, object]:
        return {
            "games_played": self.games_played,
            "games_won": self.games_won,
            "best_times": dict(self._best_times),
        }

    @staticmethod
    def _check_difficulty(difficulty: str) -> None:
        if difficulty not in DIFFICULTIES:
            raise ValueError(
                f"Unknown difficulty {difficulty!r}; expected one of {DIFFICULTIES}."
            )
