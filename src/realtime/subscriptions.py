"""
Gala Showdown - Channel Subscription Management

Manages Supabase Realtime channel subscriptions on the rooms table.
Uses a background thread with an asyncio event loop since the sync
Realtime client in supabase-py is not implemented.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable

from supabase import Client

from src.realtime.events import EventPayload, classify_room_change

logger = logging.getLogger(__name__)


class ChannelManager:
    """Manages Supabase Realtime channel subscriptions.

    Bridges async Realtime API with sync code by running an asyncio
    event loop in a daemon thread. Callbacks are invoked from that
    background thread; callers should handle thread safety.
    """

    def __init__(self, client: Client, table: str = "rooms") -> None:
        self._client = client
        self._table = table
        self._channels: dict[str, Any] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        """Start the background event loop if not running."""
        with self._lock:
            if self._loop is None or not self._loop.is_running():
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._run_loop, daemon=True, name="realtime-loop"
                )
                self._thread.start()
            return self._loop

    def _run_loop(self) -> None:
        """Run the asyncio event loop in the background thread."""
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def subscribe(
        self,
        room_code: str,
        on_event: Callable[[EventPayload], None],
    ) -> None:
        """Subscribe to row changes of one room.

        Changes are classified into RoomEvent types and dispatched via
        the on_event callback, one payload per event.

        Args:
            room_code: Join code of the room to watch.
            on_event: Callback receiving EventPayload for each change.
        """
        if room_code in self._channels:
            logger.warning("Already subscribed to room %s", room_code)
            return

        loop = self._ensure_loop()
        future = asyncio.run_coroutine_threadsafe(
            self._subscribe_async(room_code, on_event), loop
        )
        future.result(timeout=10)

    async def _subscribe_async(
        self,
        room_code: str,
        on_event: Callable[[EventPayload], None],
    ) -> None:
        """Set up the async channel subscription for a room."""
        channel = self._client.realtime.channel(f"room:{room_code}")

        channel.on_postgres_changes(
            event="*",
            callback=lambda payload: self._handle_change(payload, room_code, on_event),
            table=self._table,
            schema="public",
            filter=f"code=eq.{room_code}",
        )

        await channel.subscribe(
            callback=lambda state, err: self._on_subscribe_state(state, err, room_code)
        )

        self._channels[room_code] = channel
        logger.info("Subscribed to room %s", room_code)

    def _handle_change(
        self,
        payload: dict[str, Any],
        room_code: str,
        on_event: Callable[[EventPayload], None],
    ) -> None:
        """Process a postgres_changes payload into RoomEvents."""
        try:
            data = payload.get("data", payload)
            change_type = data.get("type", data.get("eventType", ""))
            record = data.get("record") or {}
            old_record = data.get("old_record") or {}

            for event in classify_room_change(change_type, record, old_record):
                on_event(EventPayload(
                    event=event,
                    room_code=room_code,
                    data={
                        "change_type": change_type,
                        "record": record,
                        "old_record": old_record,
                    },
                ))
        except Exception:
            logger.exception("Error handling change for room %s", room_code)

    def _on_subscribe_state(
        self, state: str, error: Exception | None, room_code: str
    ) -> None:
        """Log subscription state changes."""
        if error:
            logger.error("Subscription error for room %s: %s", room_code, error)
        else:
            logger.debug("Channel for room %s state: %s", room_code, state)

    def unsubscribe(self, room_code: str) -> None:
        """Unsubscribe from a room's channel."""
        channel = self._channels.pop(room_code, None)
        if channel is None:
            return

        loop = self._ensure_loop()
        future = asyncio.run_coroutine_threadsafe(
            self._unsubscribe_async(channel), loop
        )
        try:
            future.result(timeout=10)
        except Exception:
            logger.exception("Error unsubscribing from room %s", room_code)

        logger.info("Unsubscribed from room %s", room_code)

    async def _unsubscribe_async(self, channel: Any) -> None:
        """Unsubscribe and remove a channel."""
        try:
            await channel.unsubscribe()
            await self._client.realtime.remove_channel(channel)
        except Exception:
            logger.exception("Error removing channel")

    def unsubscribe_all(self) -> None:
        """Unsubscribe from all rooms."""
        for room_code in list(self._channels.keys()):
            self.unsubscribe(room_code)

    @property
    def active_subscriptions(self) -> list[str]:
        """Return list of room codes with active subscriptions."""
        return list(self._channels.keys())

    def shutdown(self) -> None:
        """Stop the background event loop and clean up."""
        self.unsubscribe_all()
        if self._loop and self._loop.is_running():
            self._loop.call_soon_threadsafe(self._loop.stop)
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5)
        self._loop = None
        self._thread = None
