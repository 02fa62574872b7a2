"""Tests for src/realtime/sync_manager.py: SupabaseRoomStore."""

from unittest.mock import MagicMock, patch

import pytest

from src.config.settings import Settings
from src.realtime.events import EventPayload, RoomEvent
from src.realtime.sync_manager import SupabaseRoomStore


@pytest.fixture
def mock_client():
    """Minimal mock Supabase client for SupabaseRoomStore."""
    return MagicMock()


@pytest.fixture
def store_parts():
    with patch("src.realtime.sync_manager.ChannelManager") as MockCM, \
            patch("src.realtime.sync_manager.RoomManager") as MockRM:
        MockRM.return_value.get_record.return_value = None
        MockRM.return_value.get_field.return_value = None
        yield MockCM.return_value, MockRM.return_value


class TestStoreContract:
    def test_field_put_updates_column(self, mock_client, store_parts):
        _, rooms = store_parts
        SupabaseRoomStore(mock_client).put("rooms/ABC234/timestamp", 42)
        rooms.update_fields.assert_called_once_with("ABC234", timestamp=42)

    def test_room_put_upserts_known_columns(self, mock_client, store_parts):
        _, rooms = store_parts
        SupabaseRoomStore(mock_client).put("rooms/ABC234", {"host_connected": True, "junk": 1})
        rooms.upsert.assert_called_once_with("ABC234", host_connected=True)

    def test_room_put_none_deletes(self, mock_client, store_parts):
        _, rooms = store_parts
        SupabaseRoomStore(mock_client).put("rooms/ABC234", None)
        rooms.delete.assert_called_once_with("ABC234")

    def test_get(self, mock_client, store_parts):
        _, rooms = store_parts
        rooms.get_field.return_value = True
        store = SupabaseRoomStore(mock_client)
        assert store.get("rooms/ABC234/host_connected") is True
        rooms.get_field.assert_called_with("ABC234", "host_connected")

    def test_bad_path(self, mock_client, store_parts):
        with pytest.raises(ValueError):
            SupabaseRoomStore(mock_client).put("lobbies/ABC234", 1)

    def test_from_settings(self, mock_client, store_parts):
        settings = Settings(_env_file=None, room_table="party_rooms", poll_interval=0.5)
        with patch("src.realtime.sync_manager.RoomManager") as MockRM:
            store = SupabaseRoomStore.from_settings(mock_client, settings)
        MockRM.assert_called_once_with(mock_client, "party_rooms")
        assert store._poll_interval == 0.5


class TestWatch:
    def test_first_watcher_subscribes_once(self, mock_client, store_parts):
        channels, _ = store_parts
        store = SupabaseRoomStore(mock_client)
        store.watch("rooms/ABC234/game_state", lambda v: None)
        store.watch("rooms/ABC234/match_view", lambda v: None)
        channels.subscribe.assert_called_once()

    def test_last_unsubscribe_stops_channel(self, mock_client, store_parts):
        channels, _ = store_parts
        store = SupabaseRoomStore(mock_client)
        first = store.watch("rooms/ABC234/game_state", lambda v: None)
        second = store.watch("rooms/ABC234/timestamp", lambda v: None)
        first()
        channels.unsubscribe.assert_not_called()
        second()
        channels.unsubscribe.assert_called_once_with("ABC234")

    def test_watch_delivers_current_value(self, mock_client, store_parts):
        _, rooms = store_parts
        rooms.get_field.return_value = 7
        seen = []
        SupabaseRoomStore(mock_client).watch("rooms/ABC234/timestamp", seen.append)
        assert seen == [7]

    def test_dispatch_routes_field_events(self, mock_client, store_parts):
        store = SupabaseRoomStore(mock_client)
        states, beats, rooms_seen = [], [], []
        store.watch("rooms/ABC234/game_state", states.append)
        store.watch("rooms/ABC234/timestamp", beats.append)
        store.watch("rooms/ABC234", rooms_seen.append)

        record = {"game_state": {"stage": "WINNER"}, "timestamp": 9}
        store._dispatch(EventPayload(RoomEvent.GAME_STATE_CHANGED, "ABC234", {"record": record}))
        store._dispatch(EventPayload(RoomEvent.HEARTBEAT, "ABC234", {"record": record}))

        assert states == [{"stage": "WINNER"}]
        assert beats == [9]
        assert rooms_seen == [record]

    def test_room_closed_sends_none(self, mock_client, store_parts):
        store = SupabaseRoomStore(mock_client)
        seen = []
        store.watch("rooms/ABC234/host_connected", seen.append)
        store._dispatch(EventPayload(RoomEvent.ROOM_CLOSED, "ABC234", {"record": {}}))
        assert seen == [None]


class TestPollingFallback:
    def test_falls_back_to_polling_on_failure(self, mock_client, store_parts):
        channels, _ = store_parts
        channels.subscribe.side_effect = Exception("WS failed")
        store = SupabaseRoomStore(mock_client, poll_interval=0.01)

        store.watch("rooms/ABC234/game_state", lambda v: None)
        assert "ABC234" in store._poll_threads

        store.close()
        assert store._poll_threads == {}

    def test_raises_without_fallback(self, mock_client, store_parts):
        channels, _ = store_parts
        channels.subscribe.side_effect = Exception("WS failed")
        store = SupabaseRoomStore(mock_client, use_polling_fallback=False)

        with pytest.raises(Exception, match="WS failed"):
            store.watch("rooms/ABC234/game_state", lambda v: None)

    def test_diff(self):
        assert SupabaseRoomStore._diff("ABC234", None, None) == []
        created = SupabaseRoomStore._diff("ABC234", None, {"host_connected": True})
        assert [p.event for p in created] == [RoomEvent.ROOM_CREATED]
        closed = SupabaseRoomStore._diff("ABC234", {"host_connected": True}, None)
        assert [p.event for p in closed] == [RoomEvent.ROOM_CLOSED]
        lost = SupabaseRoomStore._diff("ABC234", {"host_connected": True}, {"host_connected": False})
        assert [p.event for p in lost] == [RoomEvent.HOST_DISCONNECTED]


class TestClose:
    def test_close_applies_disconnect_writes(self, mock_client, store_parts):
        channels, rooms = store_parts
        store = SupabaseRoomStore(mock_client)
        store.on_disconnect_set("rooms/ABC234/host_connected", False)

        store.close()

        rooms.update_fields.assert_called_once_with("ABC234", host_connected=False)
        channels.shutdown.assert_called_once()

    def test_close_survives_write_failure(self, mock_client, store_parts):
        channels, rooms = store_parts
        rooms.update_fields.side_effect = Exception("network down")
        store = SupabaseRoomStore(mock_client)
        store.on_disconnect_set("rooms/ABC234/host_connected", False)

        store.close()
        channels.shutdown.assert_called_once()
