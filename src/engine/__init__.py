"""
Gala Showdown Game Engine.

Pure Python game logic with zero database or network dependencies.
Handles decks, dice, and hand evaluation for the three tournament modes.
"""

from src.engine.base import (
    Card,
    DiceHand,
    GameMode,
    HandCategory,
    PokerHand,
    Suit,
)
from src.engine.deck import build_deck, roll_four_dice, shuffle, shuffled_deck
from src.engine.eighteen import DiceShowdown, EighteenEngine
from src.engine.errors import DiceExhaustedError, IllegalActionError, MatchStalledError
from src.engine.poker import PokerEngine
from src.engine.ten_half import TenHalfEngine

__all__ = [
    # Data Classes
    "Card",
    "DiceHand",
    "DiceShowdown",
    "PokerHand",
    # Enums
    "GameMode",
    "HandCategory",
    "Suit",
    # Engines
    "EighteenEngine",
    "PokerEngine",
    "TenHalfEngine",
    # Deck and dice
    "build_deck",
    "roll_four_dice",
    "shuffle",
    "shuffled_deck",
    # Errors
    "DiceExhaustedError",
    "IllegalActionError",
    "MatchStalledError",
]
