"""
Gala Showdown - Match Resolver Base

Every game mode plays a match as a sequence of async steps that update the
shared match view, pause for the viewers, and finally hand back the winner.
"""

from __future__ import annotations

import logging
import random
from enum import Enum, auto
from typing import Awaitable, Callable, ClassVar

from src.database.models import Match, MatchStatus, Participant
from src.engine.base import GameMode
from src.engine.errors import MatchStalledError
from src.match.pacing import Pacer
from src.match.screen import MatchScreen

logger = logging.getLogger(__name__)

Announcer = Callable[[str], Awaitable[None]]


class MatchPhase(Enum):
    DEALING = auto()
    P1_TURN = auto()
    P2_TURN = auto()
    SETTLING = auto()
    DONE = auto()


class MatchResolver:
    """
    Plays one two-player match to a decided winner.

    Attributes:
        match: The match being played; its game log is appended to
        screen: Handle on the authoritative match view
        pacer: Scheduler for presentation delays
        phase: Current step of the match
        replays: Number of full restarts caused by ties
    """

    mode: ClassVar[GameMode]
    SETTLE_DELAY: ClassVar[float] = 3.0
    REPLAY_DELAY: ClassVar[float] = 3.0

    def __init__(
        self,
        match: Match,
        screen: MatchScreen,
        pacer: Pacer,
        *,
        rng: random.Random | None = None,
        announce: Announcer | None = None,
        max_replays: int = 100,
    ) -> None:
        if match.p2 is None:
            raise ValueError("A bye has no opponent to play against.")
        self.match = match
        self.screen = screen
        self.pacer = pacer
        self.rng = rng or random.Random()
        self.max_replays = max_replays
        self.phase = MatchPhase.DEALING
        self.replays = 0
        self._announce = announce

    @property
    def p1(self) -> Participant:
        return self.match.p1

    @property
    def p2(self) -> Participant:
        return self.match.p2  # type: ignore[return-value]

    def player(self, side: int) -> Participant:
        return self.p1 if side == 1 else self.p2

    async def play(self) -> Participant:
        raise NotImplementedError

    async def announce(self, text: str) -> None:
        if self._announce is not None:
            await self._announce(text)

    def log(self, text: str) -> None:
        self.match.game_log.append(text)
        logger.debug("[%s] %s", self.mode.value, text)

    def count_replay(self) -> None:
        """Record a tie restart, failing once the bound is passed."""
        self.replays += 1
        if self.replays > self.max_replays:
            logger.error(
                "%s vs %s still tied after %d replays", self.p1.name, self.p2.name, self.max_replays
            )
            raise MatchStalledError(self.mode.value, self.max_replays)
        self.log(f"Tie, replay #{self.replays}")

    async def finish(self, side: int, **changes) -> Participant:
        """Show the result, let it settle, and return the winner."""
        winner = self.player(side)
        self.phase = MatchPhase.SETTLING
        message = f"🎉 {winner.name} wins! 🎉"
        await self.screen.commit(status=MatchStatus.RESULT, round_message=message, **changes)
        self.log(f"{winner.name} wins")
        await self.announce(f"Congratulations {winner.name}, on to the next round!")
        await self.pacer.pause(self.SETTLE_DELAY)
        self.phase = MatchPhase.DONE
        return winner
