"""
Gala Showdown - Room Models

Pydantic models that mirror the replicated room record: the authoritative
tournament state, the per-match view and the room envelope.

The store may drop empty containers, so every list field accepts a missing or
null value as an empty list and every flag accepts it as False.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from src.engine.base import Card


class GameStage(str, Enum):
    SETUP = "SETUP"
    ROUND_PREPARING = "ROUND_PREPARING"
    SIMULATING_MATCHES = "SIMULATING_MATCHES"
    WINNER = "WINNER"


class MatchStatus(str, Enum):
    IDLE = "IDLE"
    ACTION = "ACTION"
    RESULT = "RESULT"
    P1_TURN = "P1_TURN"
    P2_TURN = "P2_TURN"


def _none_as_empty_list(value: Any) -> Any:
    return [] if value is None else value


def _none_as_false(value: Any) -> Any:
    return False if value is None else value


class Participant(BaseModel):
    """A registered player. Immutable; ``id`` is unique, ``name`` is display only."""

    id: str
    name: str

    model_config = {"frozen": True}


class Match(BaseModel):
    """One pairing of a round; ``p2`` is None for a bye."""

    p1: Participant
    p2: Participant | None = None
    winner: Participant | None = None
    game_log: list[str] = Field(default_factory=list)

    @field_validator("game_log", mode="before")
    @classmethod
    def default_lists(cls, value: Any) -> Any:
        return _none_as_empty_list(value)

    @property
    def is_bye(self) -> bool:
        return self.p2 is None


class GameState(BaseModel):
    """Authoritative tournament state, owned and written only by the host."""

    stage: GameStage = GameStage.SETUP
    round_number: int = Field(default=0, ge=0)
    all_participants: list[Participant] = Field(default_factory=list)
    current_pool: list[Participant] = Field(default_factory=list)
    matches: list[Match] = Field(default_factory=list)
    current_match_index: int = Field(default=0, ge=0)
    winners_of_round: list[Participant] = Field(default_factory=list)
    commentary: str = ""
    is_simulating: bool = False
    final_winner: Participant | None = None

    @field_validator(
        "all_participants", "current_pool", "matches", "winners_of_round", mode="before"
    )
    @classmethod
    def default_lists(cls, value: Any) -> Any:
        return _none_as_empty_list(value)

    @field_validator("is_simulating", mode="before")
    @classmethod
    def default_flags(cls, value: Any) -> Any:
        return _none_as_false(value)

    @property
    def round_complete(self) -> bool:
        return bool(self.matches) and self.current_match_index >= len(self.matches)

    @property
    def current_match(self) -> Match | None:
        if self.current_match_index < len(self.matches):
            return self.matches[self.current_match_index]
        return None


class MatchView(BaseModel):
    """Replicated per-match presentation state, rebuilt for every match."""

    p1_hand: list[Card] = Field(default_factory=list)
    p2_hand: list[Card] = Field(default_factory=list)
    p1_score: float = 0
    p2_score: float = 0
    status: MatchStatus = MatchStatus.IDLE
    round_message: str = ""
    deck: list[Card] = Field(default_factory=list)
    current_player: Literal[1, 2] = 1
    p1_passed: bool = False
    p2_passed: bool = False
    p1_dice: list[int] = Field(default_factory=list)
    p2_dice: list[int] = Field(default_factory=list)
    p1_dice_result: str = ""
    p2_dice_result: str = ""

    @field_validator("p1_hand", "p2_hand", "deck", "p1_dice", "p2_dice", mode="before")
    @classmethod
    def default_lists(cls, value: Any) -> Any:
        return _none_as_empty_list(value)

    @field_validator("p1_passed", "p2_passed", mode="before")
    @classmethod
    def default_flags(cls, value: Any) -> Any:
        return _none_as_false(value)

    @field_validator("round_message", "p1_dice_result", "p2_dice_result", mode="before")
    @classmethod
    def default_strings(cls, value: Any) -> Any:
        return "" if value is None else value


def utc_now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class Room(BaseModel):
    """Mirrors the replicated room record keyed by its join code."""

    code: str = Field(min_length=6, max_length=6)
    game_state: GameState = Field(default_factory=GameState)
    match_view: MatchView = Field(default_factory=MatchView)
    host_connected: bool = False
    timestamp: int = Field(default_factory=utc_now_ms)

    @field_validator("host_connected", mode="before")
    @classmethod
    def default_flags(cls, value: Any) -> Any:
        return _none_as_false(value)

    @field_validator("game_state", "match_view", mode="before")
    @classmethod
    def default_parts(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("timestamp", mode="before")
    @classmethod
    def default_timestamp(cls, value: Any) -> Any:
        return 0 if value is None else value
