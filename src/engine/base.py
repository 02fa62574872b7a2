"""
Gala Showdown - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. All classes are immutable (frozen dataclasses) so a dealt card
or an evaluated hand can be shared freely between the resolver and the
replicated view.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum


class Suit(Enum):
    """Card suits with their tie-break weight."""
    SPADES = ("♠", 4)
    HEARTS = ("♥", 3)
    DIAMONDS = ("♦", 2)
    CLUBS = ("♣", 1)

    @property
    def symbol(self) -> str:
        return self.value[0]

    @property
    def weight(self) -> int:
        return self.value[1]

    @classmethod
    def from_symbol(cls, symbol: str) -> "Suit":
        for suit in cls:
            if suit.symbol == symbol:
                return suit
        raise ValueError(f"Unknown suit symbol {symbol!r}")


FACES = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")


class GameMode(Enum):
    """Game played in a tournament round."""
    EIGHTEEN = "eighteen"
    TEN_HALF = "ten_and_a_half"
    POKER = "poker_showdown"

    @classmethod
    def for_round(cls, round_number: int) -> "GameMode":
        """Round 1 rolls dice, round 2 draws cards, every later round is poker."""
        if round_number < 1:
            raise ValueError(f"Round number must be at least 1, got {round_number}.")
        if round_number == 1:
            return cls.EIGHTEEN
        if round_number == 2:
            return cls.TEN_HALF
        return cls.POKER

    @property
    def title(self) -> str:
        return _MODE_TITLES[self]


_MODE_TITLES = {
    GameMode.EIGHTEEN: "Round 1: Eighteen",
    GameMode.TEN_HALF: "Round 2: Ten and a Half",
    GameMode.POKER: "Final Stage: Poker Showdown",
}


@dataclass(frozen=True)
class Card:
    """
    A single playing card.

    Attributes:
        suit: Suit symbol (♠ ♥ ♦ ♣)
        suit_value: Tie-break weight of the suit (1-4)
        face: Printed face ("A", "2".."10", "J", "Q", "K")
        rank: Comparison rank, 2-13 with the Ace high at 14
        points: Ten-and-a-half value (Ace 1, court cards 0.5, numerals face)
    """
    suit: str
    suit_value: int
    face: str
    rank: int
    points: float

    def __post_init__(self) -> None:
        if self.face not in FACES:
            raise ValueError(f"Invalid card face {self.face!r}.")
        if not (2 <= self.rank <= 14):
            raise ValueError(f"Invalid card rank {self.rank}. Must be between 2 and 14.")
        if not (1 <= self.suit_value <= 4):
            raise ValueError(f"Invalid suit value {self.suit_value}.")

    @classmethod
    def of(cls, face: str, suit: Suit) -> "Card":
        """Build a card from its face and suit, deriving rank and points."""
        if face not in FACES:
            raise ValueError(f"Invalid card face {face!r}.")
        index = FACES.index(face) + 1
        if face == "A":
            rank, points = 14, 1.0
        elif face in ("J", "Q", "K"):
            rank, points = index, 0.5
        else:
            rank, points = index, float(index)
        return cls(suit=suit.symbol, suit_value=suit.weight, face=face, rank=rank, points=points)

    @classmethod
    def parse(cls, text: str) -> "Card":
        """Parse a short label such as ``"10♠"`` or ``"A♥"``."""
        return cls.of(text[:-1], Suit.from_symbol(text[-1]))

    def __str__(self) -> str:
        return f"{self.face}{self.suit}"


@dataclass(frozen=True)
class DiceHand:
    """
    Evaluation of four dice in the eighteen game.

    Attributes:
        rank: Comparison rank; higher wins, -1 when invalid
        points: Points shown to players
        label: Human-readable hand name
        valid: False for hands that cannot be compared (re-roll)
    """
    rank: int
    points: int
    label: str
    valid: bool = True


class HandCategory(IntEnum):
    """Poker hand categories ordered from weakest to strongest."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass(frozen=True)
class PokerHand:
    """
    Evaluation of a five-card poker hand.

    Attributes:
        category: Hand category
        tiebreak: Rank values compared element-wise, highest first
        label: Human-readable category name
    """
    category: HandCategory
    tiebreak: tuple[int, ...]
    label: str

    @property
    def rank(self) -> int:
        return int(self.category)
