"""
Gala Showdown - Test Configuration and Fixtures

Common fixtures and helpers for all test modules.
"""

import random

import pytest

from src.config.settings import Settings
from src.database.models import GameState, Match, MatchView, Participant
from src.database.store import MemoryRoomStore
from src.engine.base import Card
from src.match.pacing import Pacer
from src.match.screen import MatchScreen
from src.realtime.replication import RoomPublisher


def cards(*labels: str) -> list[Card]:
    """Build cards from short labels, e.g. ``cards("A♠", "10♥")``."""
    return [Card.parse(label) for label in labels]


def stacked_deck(*labels: str) -> list[Card]:
    """A deck whose ``pop()`` order follows ``labels``."""
    return list(reversed(cards(*labels)))


# =============================================================================
# PARTICIPANTS
# =============================================================================

@pytest.fixture
def alice() -> Participant:
    return Participant(id="p-alice", name="Alice")


@pytest.fixture
def bob() -> Participant:
    return Participant(id="p-bob", name="Bob")


@pytest.fixture
def duel(alice, bob) -> Match:
    return Match(p1=alice, p2=bob)


# =============================================================================
# RUNTIME
# =============================================================================

@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def pacer() -> Pacer:
    return Pacer.instant()


@pytest.fixture
def screen() -> MatchScreen:
    return MatchScreen()


@pytest.fixture
def settings() -> Settings:
    """Instant, frame-free settings with no external services."""
    return Settings(
        _env_file=None,
        supabase_url=None,
        supabase_anon_key=None,
        gemini_api_key=None,
        pace_scale=0.0,
        show_frames=False,
    )


@pytest.fixture
def store() -> MemoryRoomStore:
    return MemoryRoomStore(drop_empty=True)


# =============================================================================
# HOSTED ROOM
# =============================================================================

ROOM_CODE = "ABC234"


@pytest.fixture
def publisher(store) -> RoomPublisher:
    return RoomPublisher(store, ROOM_CODE)


@pytest.fixture
async def hosted(store, publisher) -> MemoryRoomStore:
    """A store holding a freshly created room under ``ROOM_CODE``."""
    await publisher.create(GameState(), MatchView())
    return store
