"""
Gala Showdown - In-Memory Room Store Tests
"""

import pytest

from src.database.store import MemoryRoomStore, prune_empty, room_path, split_path


class TestPaths:
    def test_room_path(self):
        assert room_path("ABC234") == "rooms/ABC234"
        assert room_path("ABC234", "match_view") == "rooms/ABC234/match_view"

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            room_path("ABC234", "players")

    def test_split(self):
        assert split_path("rooms/ABC234/timestamp") == ("ABC234", "timestamp")
        assert split_path("rooms/ABC234") == ("ABC234", None)

    @pytest.mark.parametrize("path", ["lobbies/ABC234", "rooms", "rooms/ABC234/x/y"])
    def test_split_rejects(self, path):
        with pytest.raises(ValueError):
            split_path(path)

    def test_prune_empty(self):
        assert prune_empty({"a": [], "b": None, "c": {"d": []}, "e": 0, "f": False}) == {
            "e": 0,
            "f": False,
        }


class TestMemoryRoomStore:
    def test_put_get_field(self):
        store = MemoryRoomStore()
        store.put("rooms/ABC234/timestamp", 10)
        assert store.get("rooms/ABC234/timestamp") == 10
        assert store.get("rooms/ABC234") == {"timestamp": 10}

    def test_values_are_copied(self):
        store = MemoryRoomStore()
        value = {"stage": "SETUP", "matches": []}
        store.put("rooms/ABC234/game_state", value)
        value["matches"].append("mutated")
        assert store.get("rooms/ABC234/game_state")["matches"] == []

    def test_whole_room_put_and_delete(self):
        store = MemoryRoomStore()
        store.put("rooms/ABC234", {"host_connected": True, "junk": 1})
        assert store.get("rooms/ABC234") == {"host_connected": True}
        store.put("rooms/ABC234", None)
        assert store.get("rooms/ABC234") is None

    def test_drop_empty(self, store):
        store.put("rooms/ABC234/match_view", {"p1_hand": [], "round_message": "hi"})
        assert store.get("rooms/ABC234/match_view") == {"round_message": "hi"}

    def test_watch_fires_with_current_value_then_changes(self):
        store = MemoryRoomStore()
        store.put("rooms/ABC234/timestamp", 1)
        seen = []
        unsubscribe = store.watch("rooms/ABC234/timestamp", seen.append)
        store.put("rooms/ABC234/timestamp", 2)
        unsubscribe()
        store.put("rooms/ABC234/timestamp", 3)
        assert seen == [1, 2]

    def test_room_watcher_sees_field_writes(self):
        store = MemoryRoomStore()
        seen = []
        store.watch("rooms/ABC234", seen.append)
        store.put("rooms/ABC234/host_connected", True)
        assert seen == [{"host_connected": True}]

    def test_failing_watcher_does_not_break_put(self):
        store = MemoryRoomStore()

        def boom(value):
            raise RuntimeError("viewer crashed")

        store.watch("rooms/ABC234/timestamp", boom)
        store.put("rooms/ABC234/timestamp", 5)
        assert store.get("rooms/ABC234/timestamp") == 5

    def test_disconnect_applies_registered_writes(self):
        store = MemoryRoomStore()
        store.put("rooms/ABC234/host_connected", True)
        store.on_disconnect_set("rooms/ABC234/host_connected", False)
        assert store.get("rooms/ABC234/host_connected") is True
        store.disconnect()
        assert store.get("rooms/ABC234/host_connected") is False
