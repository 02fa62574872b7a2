"""
Gala Showdown - Engine Errors

Exceptions raised by the engines and match resolvers.
"""


class IllegalActionError(ValueError):
    """An action was attempted outside the phase or turn that allows it."""


class DiceExhaustedError(RuntimeError):
    """No valid, distinct-rank pair of dice hands within the attempt bound."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(
            f"No decisive dice roll after {attempts} attempts; "
            "the random source looks degenerate."
        )


class MatchStalledError(RuntimeError):
    """A match kept ending in ties past the replay bound."""

    def __init__(self, mode: str, replays: int) -> None:
        self.mode = mode
        self.replays = replays
        super().__init__(f"{mode} match still tied after {replays} replays.")
