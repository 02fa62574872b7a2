"""
Gala Showdown - Room Store Contract

The replication layer only needs four primitives from the shared store:
full-overwrite ``put``, ``get``, ``watch`` and a dead-man's-switch
``on_disconnect_set``. Rooms live under ``rooms/{code}/{field}``.

``MemoryRoomStore`` implements the contract in-process for tests and
single-machine demos. The Supabase implementation lives in
``src.realtime.sync_manager``.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Callable, Protocol

from src.database.room import ROOM_FIELDS

logger = logging.getLogger(__name__)

ROOT = "rooms"

Unsubscribe = Callable[[], None]


class RoomStore(Protocol):
    """Key-value pub/sub store holding replicated rooms."""

    def put(self, path: str, value: Any) -> None:
        """Overwrite the value at ``path``; ``None`` deletes it."""

    def get(self, path: str) -> Any | None:
        """Current value at ``path`` or None when absent."""

    def watch(self, path: str, on_change: Callable[[Any], None]) -> Unsubscribe:
        """Call ``on_change`` with the latest value whenever ``path`` changes."""

    def on_disconnect_set(self, path: str, value: Any) -> None:
        """Register a write the store applies when this client disconnects."""


def room_path(code: str, field: str | None = None) -> str:
    """Build ``rooms/{code}`` or ``rooms/{code}/{field}``."""
    if field is None:
        return f"{ROOT}/{code}"
    if field not in ROOM_FIELDS:
        raise ValueError(f"Unknown room field {field!r}.")
    return f"{ROOT}/{code}/{field}"


def split_path(path: str) -> tuple[str, str | None]:
    """
    Split a room path into its code and optional field.

    Raises:
        ValueError: If the path is not a room path
    """
    parts = path.strip("/").split("/")
    if len(parts) not in (2, 3) or parts[0] != ROOT or not parts[1]:
        raise ValueError(f"Not a room path: {path!r}")
    field = parts[2] if len(parts) == 3 else None
    if field is not None and field not in ROOM_FIELDS:
        raise ValueError(f"Unknown room field {field!r} in {path!r}")
    return parts[1], field


def prune_empty(value: Any) -> Any:
    """Drop empty containers and nulls the way schemaless stores do."""
    if isinstance(value, dict):
        pruned = {k: prune_empty(v) for k, v in value.items()}
        return {k: v for k, v in pruned.items() if v not in (None, [], {})}
    if isinstance(value, list):
        return [prune_empty(v) for v in value]
    return value


class MemoryRoomStore:
    """In-process room store.

    Values are deep-copied on the way in and out so callers never share
    structure with the store. Watchers fire synchronously on the writing
    thread, first with the current value on subscription.

    Args:
        drop_empty: Mimic transports that omit empty lists and nulls.
    """

    def __init__(self, *, drop_empty: bool = False) -> None:
        self._rooms: dict[str, dict[str, Any]] = {}
        self._watchers: dict[str, list[Callable[[Any], None]]] = {}
        self._on_disconnect: dict[str, Any] = {}
        self._drop_empty = drop_empty
        self._lock = threading.RLock()

    def put(self, path: str, value: Any) -> None:
        code, field = split_path(path)
        value = copy.deepcopy(value)
        if self._drop_empty and value is not None:
            value = prune_empty(value)

        with self._lock:
            if field is None:
                if value is None:
                    self._rooms.pop(code, None)
                else:
                    self._rooms[code] = {k: v for k, v in value.items() if k in ROOM_FIELDS}
                touched = [room_path(code)] + [room_path(code, f) for f in ROOM_FIELDS]
            else:
                room = self._rooms.setdefault(code, {})
                if value is None:
                    room.pop(field, None)
                else:
                    room[field] = value
                touched = [room_path(code), path]
            pending = [(p, list(self._watchers.get(p, ()))) for p in touched]

        for watched, callbacks in pending:
            if not callbacks:
                continue
            current = self.get(watched)
            for callback in callbacks:
                self._notify(callback, current, watched)

    def get(self, path: str) -> Any | None:
        code, field = split_path(path)
        with self._lock:
            room = self._rooms.get(code)
            if room is None:
                return None
            if field is None:
                return copy.deepcopy(room)
            return copy.deepcopy(room.get(field))

    def watch(self, path: str, on_change: Callable[[Any], None]) -> Unsubscribe:
        split_path(path)
        with self._lock:
            self._watchers.setdefault(path, []).append(on_change)
        current = self.get(path)
        if current is not None:
            self._notify(on_change, current, path)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._watchers.get(path, [])
                if on_change in callbacks:
                    callbacks.remove(on_change)

        return unsubscribe

    def on_disconnect_set(self, path: str, value: Any) -> None:
        split_path(path)
        with self._lock:
            self._on_disconnect[path] = value

    def disconnect(self) -> None:
        """Simulate losing the connection: apply the registered writes."""
        with self._lock:
            pending = list(self._on_disconnect.items())
            self._on_disconnect.clear()
        for path, value in pending:
            self.put(path, value)

    @staticmethod
    def _notify(callback: Callable[[Any], None], value: Any, path: str) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("Watcher for %s failed", path)
