"""
Gala Showdown - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

from typing import Sequence

from src.engine.base import Card
from src.engine.deck import DICE_COUNT, DIE_FACES

MAX_NAME_LENGTH = 30


def validate_dice_values(values: Sequence[int], count: int = DICE_COUNT) -> tuple[int, ...]:
    """
    Validate a set of D6 values.

    Args:
        values: Sequence of dice values to validate
        count: Exact number of dice required

    Returns:
        Validated values as a tuple

    Raises:
        ValueError: If validation fails
    """
    values_tuple = tuple(values)
    if len(values_tuple) != count:
        raise ValueError(f"Exactly {count} dice required, got {len(values_tuple)}.")

    for i, value in enumerate(values_tuple):
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Die value at index {i} must be an integer, got {type(value).__name__}.")
        if not (1 <= value <= DIE_FACES):
            raise ValueError(
                f"Die value at index {i} is {value}, must be between 1 and {DIE_FACES}."
            )

    return values_tuple


def validate_poker_hand(cards: Sequence[Card], size: int = 5) -> tuple[Card, ...]:
    """
    Validate a poker hand: exact size, real cards, no duplicates.

    Raises:
        ValueError: If the hand is malformed
    """
    hand = tuple(cards)
    if len(hand) != size:
        raise ValueError(f"A poker hand needs exactly {size} cards, got {len(hand)}.")
    for i, card in enumerate(hand):
        if not isinstance(card, Card):
            raise ValueError(f"Card at index {i} must be a Card, got {type(card).__name__}.")
    if len({(c.face, c.suit) for c in hand}) != size:
        raise ValueError("A poker hand cannot contain the same card twice.")
    return hand


def validate_participant_name(name: str) -> str:
    """
    Normalize and validate a participant display name.

    Returns:
        The stripped name

    Raises:
        ValueError: If the name is blank or too long
    """
    if not isinstance(name, str):
        raise ValueError(f"Name must be a string, got {type(name).__name__}.")
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Name cannot be blank.")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValueError(f"Name must be at most {MAX_NAME_LENGTH} characters, got {len(cleaned)}.")
    return cleaned
