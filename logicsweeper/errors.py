"""Exception types raised by the logicsweeper engine."""


class InvalidConfigurationError(ValueError):
    """Board dimensions or mine count fall outside the supported ranges."""


class GameNotStartedError(RuntimeError):
    """An operation needed a generated grid but no game has been started.

    This is a caller bug, not a runtime condition: there is no partial
    recovery and no sentinel value is returned instead.
    """


class SearchExhaustedError(RuntimeError):
    """Logical-mode generation used its whole budget without a solvable layout."""

    def __init__(self, boards_tried: int) -> None:
        super().__init__(
            f"No logically solvable layout found after {boards_tried} boards."
        )
        self.boards_tried = boards_tried
