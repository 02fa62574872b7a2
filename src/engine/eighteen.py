"""
Gala Showdown - Eighteen Dice Engine

Four-dice game played in the first round.

Game Rules:
- Each player rolls 4 D6
- Four of a kind ("quad") beats everything
- Two pairs including a pair of sixes is "eighteen", second best
- Exactly one pair: set the pair aside and score the other two dice;
  a leftover 1 and 2 is the lowest valid hand
- Three of a kind, two pairs without sixes, and no pair are invalid;
  the round is re-rolled until both hands are valid and unequal

All methods are stateless class methods operating on immutable data.
"""

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import ClassVar, Sequence

from src.engine.base import DiceHand
from src.engine.deck import roll_four_dice
from src.engine.errors import DiceExhaustedError
from src.engine.validators import validate_dice_values

logger = logging.getLogger(__name__)

INVALID_HAND = DiceHand(rank=-1, points=0, label="invalid", valid=False)


@dataclass(frozen=True)
class DiceShowdown:
    """A decided pair of rolls: both hands valid with distinct ranks."""
    p1_dice: tuple[int, ...]
    p1_hand: DiceHand
    p2_dice: tuple[int, ...]
    p2_hand: DiceHand
    attempts: int

    @property
    def winner(self) -> int:
        """1 or 2, the side with the higher rank."""
        return 1 if self.p1_hand.rank > self.p2_hand.rank else 2


class EighteenEngine:
    """
    Stateless engine for the eighteen dice game.

    All methods are class methods operating on immutable data.
    """

    QUAD_RANK: ClassVar[int] = 100
    EIGHTEEN_RANK: ClassVar[int] = 99
    LOW_COMBO_RANK: ClassVar[int] = 0
    MAX_ATTEMPTS: ClassVar[int] = 100

    @classmethod
    def roll(cls, rng: random.Random | None = None) -> tuple[int, ...]:
        return tuple(roll_four_dice(rng))

    @classmethod
    def evaluate(cls, dice: Sequence[int]) -> DiceHand:
        """
        Evaluate four dice.

        Args:
            dice: Four D6 values, in any order

        Returns:
            DiceHand; ``valid`` is False for hands that must be re-rolled

        Raises:
            ValueError: If the dice are not four values in 1-6
        """
        values = validate_dice_values(dice)
        counts = Counter(values)
        shape = sorted(counts.values(), reverse=True)

        if shape[0] == 4:
            return DiceHand(rank=cls.QUAD_RANK, points=values[0] * 4, label="quad")

        if shape == [2, 2]:
            pairs = [face for face, n in counts.items() if n == 2]
            if 6 in pairs:
                return DiceHand(rank=cls.EIGHTEEN_RANK, points=18, label="eighteen")
            return INVALID_HAND

        if shape == [2, 1, 1]:
            remaining = sorted(face for face, n in counts.items() if n == 1)
            if remaining == [1, 2]:
                return DiceHand(rank=cls.LOW_COMBO_RANK, points=3, label="low combo")
            total = sum(remaining)
            return DiceHand(rank=total, points=total, label=f"{total} points")

        # Three of a kind or no pair at all
        return INVALID_HAND

    @classmethod
    def is_decisive(cls, first: DiceHand, second: DiceHand) -> bool:
        """Both hands valid and not tied."""
        return first.valid and second.valid and first.rank != second.rank

    @classmethod
    def roll_until_decided(
        cls,
        rng: random.Random | None = None,
        max_attempts: int | None = None,
    ) -> DiceShowdown:
        """
        Roll both sides until the result is decisive.

        Args:
            rng: Random source (module generator when omitted)
            max_attempts: Re-roll bound, defaults to MAX_ATTEMPTS

        Raises:
            DiceExhaustedError: If no decisive roll occurs within the bound
        """
        limit = max_attempts or cls.MAX_ATTEMPTS
        for attempt in range(1, limit + 1):
            p1_dice = cls.roll(rng)
            p2_dice = cls.roll(rng)
            p1_hand = cls.evaluate(p1_dice)
            p2_hand = cls.evaluate(p2_dice)
            if cls.is_decisive(p1_hand, p2_hand):
                if attempt > 1:
                    logger.debug("Dice decided after %d attempts", attempt)
                return DiceShowdown(p1_dice, p1_hand, p2_dice, p2_hand, attempt)

        logger.error("Dice re-roll exhausted after %d attempts", limit)
        raise DiceExhaustedError(limit)
