"""
Gala Showdown - Host Session

Wires a tournament controller to a room in the shared store. The host is
the single writer of the room: viewers join with ``RoomViewer`` and only
read.

Run an unattended tournament on a new room with::

    python -m src.tournament.host --pace 0
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import random
from typing import Sequence

from src.commentary.service import CommentaryService
from src.config.settings import Settings, configure_logging, get_settings
from src.database.models import Participant
from src.database.room import generate_room_code, normalize_room_code
from src.database.store import MemoryRoomStore, RoomStore
from src.match.pacing import Pacer
from src.match.ten_half import TenHalfStrategy
from src.realtime.replication import RoomPublisher
from src.tournament.controller import Commentator, TournamentController

logger = logging.getLogger(__name__)


class HostSession:
    """
    A host's room plus the controller that drives it.

    Attributes:
        room_code: Code viewers use to join
        controller: The tournament state machine; every mutating operation
            goes through it
        publisher: Writes the controller's state to the store
    """

    def __init__(
        self,
        store: RoomStore,
        *,
        settings: Settings | None = None,
        code: str | None = None,
        commentator: Commentator | None = None,
        pacer: Pacer | None = None,
        rng: random.Random | None = None,
        strategy: TenHalfStrategy | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store
        self.room_code = normalize_room_code(code) if code else generate_room_code()
        self.publisher = RoomPublisher(store, self.room_code)
        self.controller = TournamentController(
            self.publisher,
            commentator=commentator,
            settings=self.settings,
            pacer=pacer,
            rng=rng,
            strategy=strategy,
        )
        self.is_open = False
        self._heartbeat: asyncio.Task | None = None

    async def open(self) -> str:
        """Create the room, publish the initial state and start the heartbeat."""
        await self.publisher.create(self.controller.state, self.controller.screen.view)
        self.is_open = True
        interval = self.settings.heartbeat_interval
        if interval > 0:
            self._heartbeat = asyncio.create_task(self._beat(interval))
        logger.info("Hosting room %s", self.room_code)
        return self.room_code

    async def close(self) -> None:
        if not self.is_open:
            return
        if self._heartbeat is not None:
            self._heartbeat.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._heartbeat
            self._heartbeat = None
        await self.publisher.close()
        self.is_open = False
        logger.info("Room %s closed", self.room_code)

    async def _beat(self, interval: float) -> None:
        """Refresh the room timestamp so viewers with a ``host_timeout`` see a live host."""
        while True:
            await asyncio.sleep(interval)
            await self.publisher.heartbeat()

    async def __aenter__(self) -> "HostSession":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def build_store(settings: Settings) -> RoomStore:
    """Supabase store when credentials are configured, otherwise in-memory."""
    if settings.has_supabase:
        from src.database.client import get_supabase_client
        from src.realtime.sync_manager import SupabaseRoomStore

        return SupabaseRoomStore.from_settings(get_supabase_client(), settings)
    logger.warning("Supabase is not configured, using an in-memory room store")
    return MemoryRoomStore()


async def run_unattended(
    store: RoomStore,
    settings: Settings,
    *,
    code: str | None = None,
    seed: int | None = None,
) -> Participant:
    """Host one full tournament without a human at the controls."""
    session = HostSession(
        store,
        settings=settings,
        code=code,
        commentator=CommentaryService.from_settings(settings),
        rng=random.Random(seed),
    )
    async with session:
        champion = await session.controller.run_tournament()
    logger.info("Room %s champion: %s", session.room_code, champion.name)
    return champion


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Host an unattended Gala Showdown tournament.")
    parser.add_argument("--room", help="room code to host (default: a new random code)")
    parser.add_argument("--pace", type=float, help="delay multiplier, 0 for instant")
    parser.add_argument("--seed", type=int, help="seed for dice, decks and pairings")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.pace is not None:
        settings = settings.model_copy(update={"pace_scale": args.pace})
    configure_logging(settings)

    store = build_store(settings)
    try:
        asyncio.run(run_unattended(store, settings, code=args.room, seed=args.seed))
    finally:
        close = getattr(store, "close", None)
        if close is not None:
            close()


if __name__ == "__main__":
    main()
