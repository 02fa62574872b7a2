"""
Gala Showdown - Realtime Event Definitions

Event types and payloads for replicated room changes.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class RoomEvent(Enum):
    """Changes a viewer can observe on a room."""

    ROOM_CREATED = auto()
    ROOM_CLOSED = auto()
    GAME_STATE_CHANGED = auto()
    MATCH_VIEW_CHANGED = auto()
    HOST_DISCONNECTED = auto()
    HOST_RECONNECTED = auto()
    HEARTBEAT = auto()


@dataclass
class EventPayload:
    """Wrapper for realtime event data."""

    event: RoomEvent
    room_code: str
    data: dict[str, Any] = field(default_factory=dict)


# Room columns that carry replicated snapshots, and the event each one raises
_FIELD_EVENTS: dict[str, RoomEvent] = {
    "game_state": RoomEvent.GAME_STATE_CHANGED,
    "match_view": RoomEvent.MATCH_VIEW_CHANGED,
    "timestamp": RoomEvent.HEARTBEAT,
}

EVENT_FIELDS: dict[RoomEvent, str] = {
    RoomEvent.GAME_STATE_CHANGED: "game_state",
    RoomEvent.MATCH_VIEW_CHANGED: "match_view",
    RoomEvent.HOST_DISCONNECTED: "host_connected",
    RoomEvent.HOST_RECONNECTED: "host_connected",
    RoomEvent.HEARTBEAT: "timestamp",
}


def classify_room_change(
    change_type: str, record: dict[str, Any], old_record: dict[str, Any]
) -> list[RoomEvent]:
    """Determine the room events raised by a rooms table change.

    Without full replica identity the old record only carries the key, so a
    column missing from ``old_record`` counts as changed.
    """
    if change_type == "INSERT":
        return [RoomEvent.ROOM_CREATED]
    if change_type == "DELETE":
        return [RoomEvent.ROOM_CLOSED]
    if change_type != "UPDATE":
        return []

    events: list[RoomEvent] = []
    for column, event in _FIELD_EVENTS.items():
        if column in record and record.get(column) != old_record.get(column):
            events.append(event)

    if "host_connected" in record:
        connected = record.get("host_connected")
        was_connected = old_record.get("host_connected")
        if connected is False and was_connected is not False:
            events.append(RoomEvent.HOST_DISCONNECTED)
        elif connected is True and was_connected is False:
            events.append(RoomEvent.HOST_RECONNECTED)

    return events
