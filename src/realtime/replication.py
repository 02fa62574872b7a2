"""
Gala Showdown - Room Replication

The host side publishes full snapshots of the tournament state and the
match view; the viewer side mirrors them. Every write is a full overwrite,
so a viewer that missed intermediate frames still converges on the
latest host state.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Any, Callable

from pydantic import ValidationError

from src.database.models import GameState, MatchView, Room, utc_now_ms
from src.database.room import RoomNotFoundError, normalize_room_code
from src.database.store import RoomStore, Unsubscribe, room_path

logger = logging.getLogger(__name__)


class RoomPublisher:
    """Pushes host-owned state to the shared store.

    Write failures are logged and swallowed: the host keeps advancing
    locally and the next successful publish carries the newer state.
    """

    def __init__(self, store: RoomStore, room_code: str) -> None:
        self.store = store
        self.room_code = room_code
        self.failed_writes = 0

    async def create(self, game_state: GameState, match_view: MatchView) -> bool:
        """Write the whole room and arm the host-connected dead-man switch."""
        room = {
            "game_state": game_state.model_dump(mode="json"),
            "match_view": match_view.model_dump(mode="json"),
            "host_connected": True,
            "timestamp": utc_now_ms(),
        }
        created = await self._write(room_path(self.room_code), room)
        if created:
            try:
                await asyncio.to_thread(
                    self.store.on_disconnect_set,
                    room_path(self.room_code, "host_connected"),
                    False,
                )
            except Exception:
                logger.exception("Could not arm disconnect handler for room %s", self.room_code)
            logger.info("Room %s created", self.room_code)
        return created

    async def publish_game_state(self, state: GameState) -> bool:
        ok = await self._write(room_path(self.room_code, "game_state"), state.model_dump(mode="json"))
        if ok:
            ok = await self._write(room_path(self.room_code, "timestamp"), utc_now_ms())
        return ok

    async def publish_match_view(self, view: MatchView) -> bool:
        return await self._write(room_path(self.room_code, "match_view"), view.model_dump(mode="json"))

    async def heartbeat(self) -> bool:
        return await self._write(room_path(self.room_code, "timestamp"), utc_now_ms())

    async def close(self) -> bool:
        """Mark the host as gone."""
        return await self._write(room_path(self.room_code, "host_connected"), False)

    async def _write(self, path: str, value: Any) -> bool:
        try:
            await asyncio.to_thread(self.store.put, path, value)
        except Exception:
            self.failed_writes += 1
            logger.exception("Failed to publish %s", path)
            return False
        return True


class RoomViewer:
    """Read-only mirror of a room.

    A viewer can join, observe and leave; it has no way to mutate the
    tournament. Incoming snapshots fully replace the local copy.

    Args:
        store: Shared room store
        host_timeout: Seconds without a heartbeat after which the host
            counts as lost; None disables the check.
    """

    def __init__(self, store: RoomStore, *, host_timeout: float | None = None) -> None:
        self.store = store
        self.host_timeout = host_timeout
        self.room_code: str | None = None
        self._game_state = GameState()
        self._match_view = MatchView()
        self._host_disconnected = False
        self._last_heartbeat: float | None = None
        self._unsubscribers: list[Unsubscribe] = []
        self._on_game_state: Callable[[GameState], None] | None = None
        self._on_match_view: Callable[[MatchView], None] | None = None
        self._on_host_disconnect: Callable[[], None] | None = None
        self._lock = threading.Lock()

    def join(
        self,
        code: str,
        *,
        on_game_state: Callable[[GameState], None] | None = None,
        on_match_view: Callable[[MatchView], None] | None = None,
        on_host_disconnect: Callable[[], None] | None = None,
    ) -> str:
        """
        Join a room by its code.

        Returns:
            The normalized room code

        Raises:
            InvalidRoomCodeError: If the code is malformed
            RoomNotFoundError: If no room exists under the code
        """
        normalized = normalize_room_code(code)
        record = self.store.get(room_path(normalized))
        if record is None:
            raise RoomNotFoundError(f"Room {normalized} does not exist.")

        if self.room_code is not None:
            self.leave()

        self.room_code = normalized
        try:
            room = Room.model_validate({**record, "code": normalized})
        except ValidationError:
            logger.warning("Ignoring malformed room record for %s", normalized)
        else:
            with self._lock:
                self._game_state = room.game_state
                self._match_view = room.match_view
        self._on_game_state = on_game_state
        self._on_match_view = on_match_view
        self._on_host_disconnect = on_host_disconnect

        self._unsubscribers = [
            self.store.watch(room_path(normalized, "game_state"), self._receive_game_state),
            self.store.watch(room_path(normalized, "match_view"), self._receive_match_view),
            self.store.watch(room_path(normalized, "host_connected"), self._receive_host_connected),
            self.store.watch(room_path(normalized, "timestamp"), self._receive_heartbeat),
        ]
        logger.info("Joined room %s", normalized)
        return normalized

    def leave(self) -> None:
        """Stop mirroring and reset the local copy."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        if self.room_code is not None:
            logger.info("Left room %s", self.room_code)
        self.room_code = None
        with self._lock:
            self._game_state = GameState()
            self._match_view = MatchView()
            self._host_disconnected = False
            self._last_heartbeat = None

    @property
    def game_state(self) -> GameState:
        with self._lock:
            return self._game_state.model_copy(deep=True)

    @property
    def match_view(self) -> MatchView:
        with self._lock:
            return self._match_view.model_copy(deep=True)

    @property
    def host_disconnected(self) -> bool:
        with self._lock:
            if self._host_disconnected:
                return True
            if self.host_timeout is None or self._last_heartbeat is None:
                return False
            return time.monotonic() - self._last_heartbeat > self.host_timeout

    # -- Watch callbacks ---------------------------------------------------

    def _receive_game_state(self, raw: Any) -> None:
        if raw is None:
            return
        try:
            state = GameState.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed game state snapshot for room %s", self.room_code)
            return
        with self._lock:
            self._game_state = state
        if self._on_game_state:
            self._on_game_state(state.model_copy(deep=True))

    def _receive_match_view(self, raw: Any) -> None:
        if raw is None:
            return
        try:
            view = MatchView.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed match view snapshot for room %s", self.room_code)
            return
        with self._lock:
            self._match_view = view
        if self._on_match_view:
            self._on_match_view(view.model_copy(deep=True))

    def _receive_host_connected(self, raw: Any) -> None:
        if raw is None:
            return
        lost = raw is False
        with self._lock:
            newly_lost = lost and not self._host_disconnected
            self._host_disconnected = lost
        if newly_lost:
            logger.warning("Host of room %s disconnected", self.room_code)
            if self._on_host_disconnect:
                self._on_host_disconnect()

    def _receive_heartbeat(self, raw: Any) -> None:
        if raw is None:
            return
        with self._lock:
            self._last_heartbeat = time.monotonic()
