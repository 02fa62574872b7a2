"""
Gala Showdown - Bracket Helpers

Round pairing and the default roster.
"""

import random
import uuid
from typing import Sequence

from src.database.models import Match, Participant
from src.engine.deck import shuffle


def pair_round(pool: Sequence[Participant], rng: random.Random | None = None) -> list[Match]:
    """
    Shuffle the pool and pair consecutive entries.

    With an odd pool the last participant gets a bye (``p2`` is None), so a
    pool of N yields ceil(N / 2) matches.
    """
    shuffled = shuffle(pool, rng)
    return [
        Match(p1=shuffled[i], p2=shuffled[i + 1] if i + 1 < len(shuffled) else None)
        for i in range(0, len(shuffled), 2)
    ]


def roster_from_names(names: Sequence[str]) -> list[Participant]:
    """Build the default roster with stable ids p1..pN."""
    return [Participant(id=f"p{i}", name=name) for i, name in enumerate(names, start=1)]


def new_participant_id() -> str:
    return uuid.uuid4().hex[:9]
