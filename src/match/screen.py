"""
Gala Showdown - Match Screen

Handle on the authoritative match view. Resolvers read the latest view
through it and change it in two ways:

- ``frame``: an intermediate presentation frame (dice flicker, card by
  card dealing). Skipped entirely when frames are disabled.
- ``commit``: a state change that must reach viewers.

Every publish is awaited so viewers receive frames in order.
"""

from typing import Any, Awaitable, Callable

from src.database.models import MatchView

ViewSink = Callable[[MatchView], Awaitable[Any]]


class MatchScreen:
    def __init__(self, sink: ViewSink | None = None, *, show_frames: bool = True) -> None:
        self.view = MatchView()
        self.show_frames = show_frames
        self.frames = 0
        self.commits = 0
        self._sink = sink

    async def reset(self, **fields: Any) -> MatchView:
        """Replace the view with a fresh one and publish it."""
        self.view = MatchView(**fields)
        return await self._publish()

    async def frame(self, **changes: Any) -> MatchView:
        if not self.show_frames:
            return self.view
        self.view = self.view.model_copy(update=changes)
        self.frames += 1
        return await self._publish(commit=False)

    async def commit(self, **changes: Any) -> MatchView:
        self.view = self.view.model_copy(update=changes)
        return await self._publish()

    async def _publish(self, commit: bool = True) -> MatchView:
        if commit:
            self.commits += 1
        if self._sink is not None:
            await self._sink(self.view)
        return self.view
