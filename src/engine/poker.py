"""
Gala Showdown - Poker Showdown Engine

Five-card hand evaluation and comparison for the final rounds.

Comparison Rules:
- Higher category wins (straight flush down to high card)
- Two high-card hands always tie; kickers are not compared
- Any other equal category compares tie-break ranks element-wise,
  highest first, until one differs
"""

from collections import Counter
from typing import Sequence

from src.engine.base import Card, HandCategory, PokerHand
from src.engine.validators import validate_poker_hand

WHEEL = (14, 5, 4, 3, 2)


class PokerEngine:
    """Stateless engine for five-card showdowns."""

    HAND_SIZE = 5

    @classmethod
    def straight_high(cls, ranks: Sequence[int]) -> int | None:
        """
        High card of a straight, or None.

        Args:
            ranks: Five ranks sorted descending

        The wheel (A-2-3-4-5) plays the Ace low, so its high card is 5.
        """
        if tuple(ranks) == WHEEL:
            return 5
        if len(set(ranks)) == len(ranks) and ranks[0] - ranks[-1] == len(ranks) - 1:
            return ranks[0]
        return None

    @classmethod
    def evaluate(cls, hand: Sequence[Card]) -> PokerHand:
        """
        Evaluate a five-card hand.

        Returns:
            PokerHand with category, tie-break ranks and label

        Raises:
            ValueError: If the hand is not five distinct cards
        """
        cards = validate_poker_hand(hand, cls.HAND_SIZE)
        ranks = sorted((c.rank for c in cards), reverse=True)
        counts = Counter(ranks)
        shape = sorted(counts.values(), reverse=True)
        # Group ranks by multiplicity first, then by rank
        grouped = tuple(sorted(counts, key=lambda r: (counts[r], r), reverse=True))

        is_flush = len({c.suit for c in cards}) == 1
        high = cls.straight_high(ranks)

        if is_flush and high is not None:
            return cls._hand(HandCategory.STRAIGHT_FLUSH, (high,))
        if shape[0] == 4:
            return cls._hand(HandCategory.FOUR_OF_A_KIND, grouped)
        if shape == [3, 2]:
            return cls._hand(HandCategory.FULL_HOUSE, grouped)
        if is_flush:
            return cls._hand(HandCategory.FLUSH, tuple(ranks))
        if high is not None:
            return cls._hand(HandCategory.STRAIGHT, (high,))
        if shape[0] == 3:
            return cls._hand(HandCategory.THREE_OF_A_KIND, grouped)
        if shape == [2, 2, 1]:
            return cls._hand(HandCategory.TWO_PAIR, grouped)
        if shape[0] == 2:
            return cls._hand(HandCategory.ONE_PAIR, grouped)
        return cls._hand(HandCategory.HIGH_CARD, tuple(ranks))

    @classmethod
    def compare(cls, first: Sequence[Card] | PokerHand, second: Sequence[Card] | PokerHand) -> int:
        """
        Compare two hands.

        Returns:
            1 if ``first`` wins, -1 if ``second`` wins, 0 on a tie
        """
        a = first if isinstance(first, PokerHand) else cls.evaluate(first)
        b = second if isinstance(second, PokerHand) else cls.evaluate(second)

        if a.category != b.category:
            return 1 if a.category > b.category else -1

        if a.category == HandCategory.HIGH_CARD:
            return 0

        for i in range(max(len(a.tiebreak), len(b.tiebreak))):
            x = a.tiebreak[i] if i < len(a.tiebreak) else 0
            y = b.tiebreak[i] if i < len(b.tiebreak) else 0
            if x != y:
                return 1 if x > y else -1
        return 0

    @staticmethod
    def _hand(category: HandCategory, tiebreak: tuple[int, ...]) -> PokerHand:
        return PokerHand(category=category, tiebreak=tiebreak, label=category.label)
