"""
Gala Showdown Real-time Sync.

WebSocket subscriptions, the Supabase room store, and host/viewer replication.
"""

from src.realtime.events import EventPayload, RoomEvent, classify_room_change
from src.realtime.replication import RoomPublisher, RoomViewer
from src.realtime.subscriptions import ChannelManager
from src.realtime.sync_manager import SupabaseRoomStore

__all__ = [
    "ChannelManager",
    "EventPayload",
    "RoomEvent",
    "RoomPublisher",
    "RoomViewer",
    "SupabaseRoomStore",
    "classify_room_change",
]
