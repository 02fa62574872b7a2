"""
Gala Showdown - Eighteen Dice Match

Both rolls are decided up front (re-rolling until both hands are valid
and unequal), then revealed one player at a time for the viewers.
"""

import logging
from typing import ClassVar

from src.database.models import MatchStatus, Participant
from src.engine.base import DiceHand, GameMode
from src.engine.eighteen import EighteenEngine
from src.engine.errors import DiceExhaustedError
from src.match.base import MatchPhase, MatchResolver

logger = logging.getLogger(__name__)


class DiceMatch(MatchResolver):
    """Round 1: eighteen."""

    mode = GameMode.EIGHTEEN
    FLURRY_FRAMES: ClassVar[int] = 10
    FLURRY_DELAY: ClassVar[float] = 0.1
    ROLL_DELAY: ClassVar[float] = 0.5
    REVEAL_DELAY: ClassVar[float] = 1.5
    COMPARE_DELAY: ClassVar[float] = 5.0

    def __init__(self, *args, max_attempts: int = EighteenEngine.MAX_ATTEMPTS, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.max_attempts = max_attempts

    async def play(self) -> Participant:
        p1, p2 = self.p1, self.p2
        await self.announce(f"Round 1, eighteen! {p1.name} and {p2.name} get ready to roll...")

        try:
            showdown = EighteenEngine.roll_until_decided(self.rng, self.max_attempts)
        except DiceExhaustedError:
            logger.error("Dice match %s vs %s could not be decided", p1.name, p2.name)
            raise
        self.log(f"Dice decided after {showdown.attempts} roll(s)")

        await self.screen.commit(
            p1_score=0,
            p2_score=0,
            p1_dice=[],
            p2_dice=[],
            p1_dice_result="",
            p2_dice_result="",
            status=MatchStatus.ACTION,
            round_message=f"{p1.name} rolls the dice...",
        )
        await self.pacer.pause(self.ROLL_DELAY)

        self.phase = MatchPhase.P1_TURN
        await self._reveal(1, showdown.p1_dice, showdown.p1_hand)

        self.phase = MatchPhase.P2_TURN
        await self.screen.commit(round_message=f"{p2.name} rolls the dice...")
        await self.pacer.pause(self.ROLL_DELAY)
        await self._reveal(2, showdown.p2_dice, showdown.p2_hand)

        summary = f"{p1.name} [{showdown.p1_hand.label}] vs {p2.name} [{showdown.p2_hand.label}]"
        await self.screen.commit(
            round_message=summary,
            p1_score=showdown.p1_hand.points,
            p2_score=showdown.p2_hand.points,
        )
        await self.announce(f"{summary}, check the points...")
        await self.pacer.pause(self.COMPARE_DELAY)

        return await self.finish(showdown.winner)

    async def _reveal(self, side: int, dice: tuple[int, ...], hand: DiceHand) -> None:
        """Flicker random faces, then settle on the real roll."""
        key = f"p{side}_dice"
        for _ in range(self.FLURRY_FRAMES):
            await self.screen.frame(**{key: list(EighteenEngine.roll(self.rng))})
            await self.pacer.pause(self.FLURRY_DELAY)

        name = self.player(side).name
        await self.screen.commit(**{
            key: list(dice),
            f"p{side}_dice_result": hand.label,
            "round_message": f"{name} [{hand.label}]",
        })
        self.log(f"{name} rolled {list(dice)}: {hand.label}")
        await self.pacer.pause(self.REVEAL_DELAY)
