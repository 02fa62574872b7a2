"""
Gala Showdown - Poker Showdown Match

Deals five cards to each player alternately, then compares the hands.
Ties, including every high card against high card, are redealt.
"""

from typing import ClassVar

from src.database.models import MatchStatus, Participant
from src.engine.base import Card, GameMode
from src.engine.deck import shuffled_deck
from src.engine.poker import PokerEngine
from src.match.base import MatchPhase, MatchResolver


class PokerMatch(MatchResolver):
    """Round 3 onwards: five-card showdown."""

    mode = GameMode.POKER
    HAND_SIZE: ClassVar[int] = 5
    DEAL_DELAY: ClassVar[float] = 0.4
    REVEAL_DELAY: ClassVar[float] = 1.0
    COMPARE_DELAY: ClassVar[float] = 5.0
    SETTLE_DELAY: ClassVar[float] = 4.0

    async def play(self) -> Participant:
        while True:
            self.phase = MatchPhase.DEALING
            deck = shuffled_deck(self.rng)
            await self.announce("Final stage, five-card poker showdown! Who holds the strongest hand?")
            await self.screen.reset(status=MatchStatus.ACTION, round_message="Dealing...")

            h1: list[Card] = []
            h2: list[Card] = []
            for _ in range(self.HAND_SIZE):
                h1.append(deck.pop())
                await self.screen.frame(p1_hand=list(h1))
                await self.pacer.pause(self.DEAL_DELAY)
                h2.append(deck.pop())
                await self.screen.frame(p2_hand=list(h2))
                await self.pacer.pause(self.DEAL_DELAY)
            await self.pacer.pause(self.REVEAL_DELAY)

            self.phase = MatchPhase.SETTLING
            e1 = PokerEngine.evaluate(h1)
            e2 = PokerEngine.evaluate(h2)
            result = PokerEngine.compare(e1, e2)

            summary = f"{self.p1.name} [{e1.label}] vs {self.p2.name} [{e2.label}]"
            await self.screen.commit(p1_hand=h1, p2_hand=h2, deck=deck, round_message=summary)
            self.log(
                f"{self.p1.name} {' '.join(map(str, h1))} ({e1.label}) vs "
                f"{self.p2.name} {' '.join(map(str, h2))} ({e2.label})"
            )
            await self.announce(f"{summary}, check the hands...")
            await self.pacer.pause(self.COMPARE_DELAY)

            if result != 0:
                return await self.finish(1 if result > 0 else 2, p1_score=e1.rank, p2_score=e2.rank)

            await self.screen.commit(
                status=MatchStatus.RESULT,
                round_message=f"Tie! {e1.label} vs {e2.label}, replaying!",
                p1_score=e1.rank,
                p2_score=e2.rank,
            )
            await self.announce(f"{summary}, a tie! Dealing again!")
            self.count_replay()
            await self.pacer.pause(self.REPLAY_DELAY)
