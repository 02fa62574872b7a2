"""
Gala Showdown - Room Manager

Join codes and CRUD operations for the `rooms` table.
"""

import secrets
from typing import Any

from supabase import Client

ROOM_CODE_LENGTH = 6
# Uppercase letters and digits without the easily confused O/0 and I/1
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

ROOM_FIELDS = ("game_state", "match_view", "host_connected", "timestamp")


class RoomError(Exception):
    """Base class for recoverable room selection errors."""


class InvalidRoomCodeError(RoomError, ValueError):
    """The code is not six characters from the room alphabet."""


class RoomNotFoundError(RoomError, LookupError):
    """No room exists under the code."""


def generate_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    """Generate a join code, avoiding ambiguous characters."""
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


def normalize_room_code(code: str) -> str:
    """
    Upper-case and strip a user-typed code.

    Raises:
        InvalidRoomCodeError: If the result is not a well-formed code
    """
    if not isinstance(code, str):
        raise InvalidRoomCodeError("Room code must be a string.")
    cleaned = code.strip().upper()
    if len(cleaned) != ROOM_CODE_LENGTH:
        raise InvalidRoomCodeError(f"Room code must be {ROOM_CODE_LENGTH} characters.")
    bad = sorted({ch for ch in cleaned if ch not in ROOM_CODE_ALPHABET})
    if bad:
        raise InvalidRoomCodeError(f"Room code contains invalid characters: {''.join(bad)}")
    return cleaned


class RoomManager:
    """Manages room records in Supabase."""

    def __init__(self, client: Client, table: str = "rooms") -> None:
        self.client = client
        self.table = client.table(table)

    def get_record(self, code: str) -> dict[str, Any] | None:
        """Fetch the raw room row."""
        data = (
            self.table
            .select("*")
            .eq("code", code)
            .execute()
        )
        if data.data:
            return data.data[0]
        return None

    def get_field(self, code: str, field: str) -> Any:
        """Read one column of a room, or None when the room is missing."""
        _check_field(field)
        data = (
            self.table
            .select(field)
            .eq("code", code)
            .execute()
        )
        if data.data:
            return data.data[0].get(field)
        return None

    def upsert(self, code: str, **fields: Any) -> None:
        """Insert or fully overwrite a room row."""
        for field in fields:
            _check_field(field)
        self.table.upsert({"code": code, **fields}).execute()

    def update_fields(self, code: str, **fields: Any) -> None:
        """Overwrite the given columns of a room."""
        for field in fields:
            _check_field(field)
        if not fields:
            return
        self.table.update(fields).eq("code", code).execute()

    def delete(self, code: str) -> None:
        """Delete a room."""
        self.table.delete().eq("code", code).execute()


def _check_field(field: str) -> None:
    if field not in ROOM_FIELDS:
        raise ValueError(f"Unknown room field {field!r}. Expected one of {ROOM_FIELDS}.")
