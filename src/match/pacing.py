"""
Gala Showdown - Match Pacing

Delays between match steps exist only to pace the replicated animation.
The pacer scales them (0 = instant) and lets a caller cut a pending delay
short, so tests run a whole tournament without waiting.
"""

import asyncio


class Pacer:
    """Scheduler for presentation delays.

    Attributes:
        scale: Multiplier applied to every requested delay
        elapsed: Total unscaled seconds requested so far
    """

    def __init__(self, scale: float = 1.0) -> None:
        if scale < 0:
            raise ValueError(f"Pace scale cannot be negative, got {scale}.")
        self.scale = scale
        self.elapsed = 0.0
        self._sleepers: set[asyncio.Future] = set()

    @classmethod
    def instant(cls) -> "Pacer":
        return cls(scale=0.0)

    async def pause(self, seconds: float) -> None:
        """Wait ``seconds * scale``; returns early if ``skip()`` is called."""
        self.elapsed += seconds
        delay = seconds * self.scale
        if delay <= 0:
            await asyncio.sleep(0)
            return

        sleeper = asyncio.ensure_future(asyncio.sleep(delay))
        self._sleepers.add(sleeper)
        try:
            await asyncio.wait({sleeper})
        finally:
            self._sleepers.discard(sleeper)
            sleeper.cancel()

    def skip(self) -> int:
        """Cut every pending pause short. Returns how many were pending."""
        pending = list(self._sleepers)
        for sleeper in pending:
            sleeper.cancel()
        return len(pending)
