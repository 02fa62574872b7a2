"""
Gala Showdown - Realtime Sync Manager

Supabase implementation of the room store contract. Ties channel
subscriptions to per-path watchers, with a polling fallback when
WebSocket connections fail.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from supabase import Client

from src.config.settings import Settings
from src.database.room import ROOM_FIELDS, RoomManager
from src.database.store import Unsubscribe, split_path
from src.realtime.events import EVENT_FIELDS, EventPayload, RoomEvent, classify_room_change
from src.realtime.subscriptions import ChannelManager

logger = logging.getLogger(__name__)

Watcher = Callable[[Any], None]


class SupabaseRoomStore:
    """Room store backed by a Supabase table and Realtime channels.

    Postgres has no server-side dead-man's switch, so writes registered
    with ``on_disconnect_set`` are applied by ``close()``; viewers also
    watch the heartbeat ``timestamp`` to notice a host that vanished
    without closing.
    """

    def __init__(
        self,
        client: Client,
        *,
        table: str = "rooms",
        poll_interval: float = 2.0,
        use_polling_fallback: bool = True,
    ) -> None:
        self._client = client
        self._rooms = RoomManager(client, table)
        self._channel_mgr = ChannelManager(client, table)
        self._poll_interval = poll_interval
        self._use_polling_fallback = use_polling_fallback
        self._watchers: dict[str, dict[str | None, list[Watcher]]] = {}
        self._poll_threads: dict[str, threading.Event] = {}
        self._on_disconnect: dict[str, Any] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, client: Client, settings: Settings) -> "SupabaseRoomStore":
        return cls(client, table=settings.room_table, poll_interval=settings.poll_interval)

    # -- Store contract ----------------------------------------------------

    def put(self, path: str, value: Any) -> None:
        code, field = split_path(path)
        if field is None:
            if value is None:
                self._rooms.delete(code)
            else:
                fields = {k: v for k, v in value.items() if k in ROOM_FIELDS}
                self._rooms.upsert(code, **fields)
            return
        self._rooms.update_fields(code, **{field: value})

    def get(self, path: str) -> Any | None:
        code, field = split_path(path)
        if field is None:
            return self._rooms.get_record(code)
        return self._rooms.get_field(code, field)

    def watch(self, path: str, on_change: Watcher) -> Unsubscribe:
        code, field = split_path(path)
        with self._lock:
            first = code not in self._watchers
            self._watchers.setdefault(code, {}).setdefault(field, []).append(on_change)
        if first:
            self._subscribe(code)

        current = self.get(path)
        if current is not None:
            self._notify(on_change, current, path)

        def unsubscribe() -> None:
            with self._lock:
                fields = self._watchers.get(code, {})
                callbacks = fields.get(field, [])
                if on_change in callbacks:
                    callbacks.remove(on_change)
                idle = not any(fields.values())
                if idle:
                    self._watchers.pop(code, None)
            if idle:
                self._channel_mgr.unsubscribe(code)
                self._stop_polling(code)

        return unsubscribe

    def on_disconnect_set(self, path: str, value: Any) -> None:
        split_path(path)
        with self._lock:
            self._on_disconnect[path] = value

    def close(self) -> None:
        """Apply dead-man writes, then tear down subscriptions and polling."""
        with self._lock:
            pending = list(self._on_disconnect.items())
            self._on_disconnect.clear()
        for path, value in pending:
            try:
                self.put(path, value)
            except Exception:
                logger.exception("Failed to apply disconnect write to %s", path)

        for code in list(self._poll_threads.keys()):
            self._stop_polling(code)
        self._channel_mgr.shutdown()

    # -- Dispatch ----------------------------------------------------------

    def _subscribe(self, code: str) -> None:
        """Subscribe over WebSocket, falling back to polling on failure."""
        try:
            self._channel_mgr.subscribe(code, self._dispatch)
            logger.info("Realtime subscription active for room %s", code)
        except Exception:
            logger.exception("WebSocket subscription failed for room %s", code)
            if not self._use_polling_fallback:
                raise
            logger.info("Falling back to polling for room %s", code)
            self._start_polling(code)

    def _dispatch(self, payload: EventPayload) -> None:
        """Route a room event to the watchers of the affected paths."""
        record = payload.data.get("record") or {}
        with self._lock:
            fields = {f: list(cbs) for f, cbs in self._watchers.get(payload.room_code, {}).items()}

        if payload.event == RoomEvent.ROOM_CLOSED:
            targets = {f: None for f in fields}
        elif payload.event == RoomEvent.ROOM_CREATED:
            targets = {f: (record if f is None else record.get(f)) for f in fields}
        else:
            field = EVENT_FIELDS.get(payload.event)
            targets = {}
            if field in fields:
                targets[field] = record.get(field)
            if None in fields and payload.event != RoomEvent.HEARTBEAT:
                targets[None] = record

        for field, value in targets.items():
            for callback in fields[field]:
                self._notify(callback, value, f"{payload.room_code}/{field or '*'}")

    @staticmethod
    def _notify(callback: Watcher, value: Any, label: str) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("Watcher for %s failed", label)

    # -- Polling fallback --------------------------------------------------

    def _start_polling(self, code: str) -> None:
        """Start a background polling thread for a room."""
        if code in self._poll_threads:
            return

        stop_event = threading.Event()
        self._poll_threads[code] = stop_event

        thread = threading.Thread(
            target=self._poll_loop,
            args=(code, stop_event),
            daemon=True,
            name=f"poll-{code}",
        )
        thread.start()

    def _stop_polling(self, code: str) -> None:
        """Signal a polling thread to stop."""
        stop_event = self._poll_threads.pop(code, None)
        if stop_event:
            stop_event.set()

    def _poll_loop(self, code: str, stop_event: threading.Event) -> None:
        """Poll the room row and emit events for differences."""
        last_record: dict[str, Any] | None = None

        while not stop_event.is_set():
            try:
                record = self._rooms.get_record(code)
                for payload in self._diff(code, last_record, record):
                    self._dispatch(payload)
                last_record = record
            except Exception:
                logger.exception("Polling error for room %s", code)

            stop_event.wait(self._poll_interval)

    @staticmethod
    def _diff(
        code: str,
        previous: dict[str, Any] | None,
        current: dict[str, Any] | None,
    ) -> list[EventPayload]:
        """Compare two polled rows and build the matching payloads."""
        if previous is None and current is None:
            return []
        if previous is None:
            events = [RoomEvent.ROOM_CREATED]
        elif current is None:
            events = [RoomEvent.ROOM_CLOSED]
        else:
            events = classify_room_change("UPDATE", current, previous)
        record = current or {}
        return [
            EventPayload(event=event, room_code=code, data={"record": record})
            for event in events
        ]
