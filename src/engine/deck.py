"""
Gala Showdown - Deck and Dice

Pure helpers producing decks, shuffles and dice rolls. Every function takes an
optional ``random.Random`` so callers (and tests) can make the output
deterministic; the module-level generator is used otherwise.
"""

import random
from typing import Sequence, TypeVar

from src.engine.base import FACES, Card, Suit

T = TypeVar("T")

DICE_COUNT = 4
DIE_FACES = 6


def build_deck() -> list[Card]:
    """Return the 52-card deck in suit-major, face-minor order."""
    return [Card.of(face, suit) for suit in Suit for face in FACES]


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a uniformly shuffled copy of ``items`` (Fisher-Yates)."""
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def shuffled_deck(rng: random.Random | None = None) -> list[Card]:
    """Build a fresh deck in uniformly random order."""
    return shuffle(build_deck(), rng)


def roll_die(rng: random.Random | None = None) -> int:
    return (rng or random).randint(1, DIE_FACES)


def roll_four_dice(rng: random.Random | None = None) -> list[int]:
    """Roll four independent D6."""
    return [roll_die(rng) for _ in range(DICE_COUNT)]
