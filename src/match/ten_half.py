"""
Gala Showdown - Ten and a Half Match

Turn-based card drawing. Player 1 acts until they stand, bust or clear
five cards; then player 2 does the same and the deal is decided. Actions
come from the host (``hit``/``stand``) or, for unattended play, from a
strategy. A tied deal is replayed from a fresh deck.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import ClassVar, Protocol, Sequence

from src.database.models import MatchStatus, Participant
from src.engine.base import Card, GameMode
from src.engine.deck import shuffled_deck
from src.engine.errors import IllegalActionError
from src.engine.ten_half import TenHalfEngine
from src.match.base import MatchPhase, MatchResolver

logger = logging.getLogger(__name__)


class TenHalfStrategy(Protocol):
    def wants_card(self, hand: Sequence[Card], opponent_hand: Sequence[Card]) -> bool:
        """True to hit, False to stand."""


@dataclass(frozen=True)
class ThresholdStrategy:
    """Hit below a fixed total."""

    stand_at: float = 7.5

    def wants_card(self, hand: Sequence[Card], opponent_hand: Sequence[Card]) -> bool:
        return TenHalfEngine.hand_points(hand) < self.stand_at


def _fmt(points: float) -> str:
    return f"{points:g}"


class TenHalfMatch(MatchResolver):
    """Round 2: ten and a half."""

    mode = GameMode.TEN_HALF
    BUST_DELAY: ClassVar[float] = 1.5
    FIVE_CARD_DELAY: ClassVar[float] = 2.0
    STAND_DELAY: ClassVar[float] = 1.0

    def __init__(self, *args, strategy: TenHalfStrategy | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.strategy = strategy
        self._outcome: asyncio.Future | None = None
        self._busy = False

    async def play(self) -> Participant:
        loop = asyncio.get_running_loop()
        while True:
            self._outcome = loop.create_future()
            await self._deal()
            if self.strategy is not None:
                await self._autoplay()
            side = await self._outcome
            if side is not None:
                return await self.finish(side)
            self.count_replay()
            await self.pacer.pause(self.REPLAY_DELAY)

    # -- Host actions ------------------------------------------------------

    @property
    def acting_side(self) -> int | None:
        if self.phase == MatchPhase.P1_TURN:
            return 1
        if self.phase == MatchPhase.P2_TURN:
            return 2
        return None

    async def hit(self) -> Card:
        """
        Draw a card for the player whose turn it is.

        Raises:
            IllegalActionError: If no player is on turn or an action is running
        """
        side = self._begin_action()
        try:
            view = self.screen.view
            deck = list(view.deck)
            card = deck.pop()
            hand = [*self._hand(side), card]
            points = TenHalfEngine.hand_points(hand)
            name = self.player(side).name
            five = TenHalfEngine.is_five_card_clear(hand)
            bust = TenHalfEngine.is_bust(hand)

            if five:
                message = f"{name} clears five cards with {_fmt(points)} points and wins outright!"
            elif bust:
                message = f"{name} busts with {_fmt(points)} points!"
            else:
                message = f"{name} draws {card}"
            if five or bust:
                self.phase = MatchPhase.SETTLING

            await self.screen.commit(**{
                f"p{side}_hand": hand,
                f"p{side}_score": points,
                "deck": deck,
                "round_message": message,
            })
            self.log(message)

            if five:
                await self.announce(message)
                await self.pacer.pause(self.FIVE_CARD_DELAY)
                await self._decide()
            elif bust and side == 1:
                await self.announce(f"{message} Over to {self.p2.name}!")
                await self.pacer.pause(self.BUST_DELAY)
                await self._start_p2_turn()
            elif bust:
                await self.announce(message)
                await self.pacer.pause(self.BUST_DELAY)
                await self._decide()
            return card
        finally:
            self._busy = False

    async def stand(self) -> None:
        """
        End the current player's turn.

        Raises:
            IllegalActionError: If no player is on turn, or the total is
                below the minimum for standing
        """
        side = self._begin_action()
        try:
            name = self.player(side).name
            if not TenHalfEngine.can_stand(self._hand(side)):
                raise IllegalActionError(
                    f"{name} must draw while below {_fmt(TenHalfEngine.MIN_STAND)} points."
                )
            self.phase = MatchPhase.SETTLING
            self.log(f"{name} stands on {_fmt(TenHalfEngine.hand_points(self._hand(side)))}")

            if side == 1:
                await self.announce(f"{name} stands! Over to {self.p2.name}!")
                await self._start_p2_turn()
            else:
                await self.announce(f"{name} stands!")
                await self.screen.commit(p2_passed=True)
                await self.pacer.pause(self.STAND_DELAY)
                await self._decide()
        finally:
            self._busy = False

    # -- Steps -------------------------------------------------------------

    def _begin_action(self) -> int:
        side = self.acting_side
        if side is None:
            raise IllegalActionError(f"No player can act during {self.phase.name}.")
        if self._busy:
            raise IllegalActionError("Another action is still being resolved.")
        self._busy = True
        return side

    def _hand(self, side: int) -> list[Card]:
        view = self.screen.view
        return list(view.p1_hand if side == 1 else view.p2_hand)

    async def _deal(self) -> None:
        self.phase = MatchPhase.DEALING
        deck = shuffled_deck(self.rng)
        c1 = deck.pop()
        c2 = deck.pop()
        await self.announce(
            f"Round 2, ten and a half! {self.p1.name} goes first, hit or stand?"
        )
        await self.screen.reset(
            p1_hand=[c1],
            p2_hand=[c2],
            p1_score=c1.points,
            p2_score=c2.points,
            status=MatchStatus.P1_TURN,
            round_message=f"{self.p1.name}'s turn",
            deck=deck,
            current_player=1,
        )
        self.log(f"Dealt {c1} to {self.p1.name} and {c2} to {self.p2.name}")
        self.phase = MatchPhase.P1_TURN

    async def _start_p2_turn(self) -> None:
        await self.screen.commit(
            current_player=2,
            status=MatchStatus.P2_TURN,
            p1_passed=True,
            round_message=f"{self.p2.name}'s turn",
        )
        self.phase = MatchPhase.P2_TURN

    async def _decide(self) -> None:
        view = self.screen.view
        side = TenHalfEngine.decide(view.p1_hand, view.p2_hand)
        s1 = _fmt(TenHalfEngine.hand_points(view.p1_hand))
        s2 = _fmt(TenHalfEngine.hand_points(view.p2_hand))

        if side is None:
            self.phase = MatchPhase.SETTLING
            await self.screen.commit(
                status=MatchStatus.RESULT,
                round_message=f"Tie! {s1} vs {s2} points, replaying!",
            )
            await self.announce(
                f"{self.p1.name} {s1} vs {self.p2.name} {s2}, a tie! Dealing again!"
            )
        else:
            await self.announce(f"{self.p1.name} {s1} vs {self.p2.name} {s2}.")
        self._outcome.set_result(side)

    async def _autoplay(self) -> None:
        """Drive both turns from the strategy until the deal is decided."""
        while not self._outcome.done():
            side = self.acting_side
            if side is None:
                raise IllegalActionError(f"Deal stuck in {self.phase.name}.")
            hand = self._hand(side)
            opponent = self._hand(2 if side == 1 else 1)
            if TenHalfEngine.can_stand(hand) and not self.strategy.wants_card(hand, opponent):
                await self.stand()
            else:
                await self.hit()
