"""
Gala Showdown Database Layer.

Replicated room models and the stores that hold them.
"""

from src.database.client import get_supabase_client
from src.database.models import GameStage, GameState, Match, MatchStatus, MatchView, Participant, Room
from src.database.room import (
    InvalidRoomCodeError,
    RoomError,
    RoomManager,
    RoomNotFoundError,
    generate_room_code,
    normalize_room_code,
)
from src.database.store import MemoryRoomStore, RoomStore, room_path

__all__ = [
    "get_supabase_client",
    "GameStage",
    "GameState",
    "InvalidRoomCodeError",
    "Match",
    "MatchStatus",
    "MatchView",
    "MemoryRoomStore",
    "Participant",
    "Room",
    "RoomError",
    "RoomManager",
    "RoomNotFoundError",
    "RoomStore",
    "generate_room_code",
    "normalize_room_code",
    "room_path",
]
