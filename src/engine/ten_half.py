"""
Gala Showdown - Ten and a Half Engine

Card-drawing game played in the second round.

Game Rules:
- Ace counts 1, J/Q/K count 0.5, numerals count their number
- Each player starts with one card and may draw (hit) or stop (stand)
- A player may only stand with at least 6 points
- Over 10.5 points is a bust
- Five cards without busting ("five-card clear") wins outright
- Otherwise the higher total wins; equal totals or two busts are a tie
  and the match is replayed with a fresh deck
"""

from typing import ClassVar, Sequence

from src.engine.base import Card


class TenHalfEngine:
    """Stateless rules for ten and a half."""

    LIMIT: ClassVar[float] = 10.5
    MAX_CARDS: ClassVar[int] = 5
    MIN_STAND: ClassVar[float] = 6.0

    @classmethod
    def hand_points(cls, hand: Sequence[Card]) -> float:
        return sum(card.points for card in hand)

    @classmethod
    def is_bust(cls, hand: Sequence[Card]) -> bool:
        return cls.hand_points(hand) > cls.LIMIT

    @classmethod
    def is_five_card_clear(cls, hand: Sequence[Card]) -> bool:
        return len(hand) == cls.MAX_CARDS and not cls.is_bust(hand)

    @classmethod
    def can_stand(cls, hand: Sequence[Card]) -> bool:
        return cls.hand_points(hand) >= cls.MIN_STAND

    @classmethod
    def decide(cls, p1_hand: Sequence[Card], p2_hand: Sequence[Card]) -> int | None:
        """
        Decide a finished deal.

        Returns:
            1 or 2 for the winning side, None for a tie (replay)
        """
        p1_five = cls.is_five_card_clear(p1_hand)
        p2_five = cls.is_five_card_clear(p2_hand)
        if p1_five != p2_five:
            return 1 if p1_five else 2

        p1_bust = cls.is_bust(p1_hand)
        p2_bust = cls.is_bust(p2_hand)
        if p1_bust != p2_bust:
            return 2 if p1_bust else 1
        if p1_bust and p2_bust:
            return None

        s1 = cls.hand_points(p1_hand)
        s2 = cls.hand_points(p2_hand)
        if s1 == s2:
            return None
        return 1 if s1 > s2 else 2
