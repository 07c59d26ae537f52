"""
AI Timer - Calls GameLoop.tick() on a fixed interval.

Runs as an asyncio task on the same event loop as the request
handlers, so ticks and clicks never overlap. Stops by itself when the
game ends or a tick raises.
"""

from __future__ import annotations
import asyncio
import logging

from .game_loop import GameLoop

logger = logging.getLogger(__name__)


class AITimer:
    """
    Recurring AI tick.

    Usage:
        timer = AITimer(session.loop, session.interval_ms)
        timer.start()   # inside a running event loop
        ...
        timer.stop()
    """

    def __init__(self, loop: GameLoop, interval_ms: int, max_ticks: int | None = None):
        self.loop = loop
        self.interval_ms = interval_ms
        self.max_ticks = max_ticks
        self.ticks = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    def stop(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def run(self):
        """Tick until the game is over or max_ticks is reached."""
        interval = self.interval_ms / 1000
        while not self.loop.session.game_state.is_over:
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                break
            await asyncio.sleep(interval)
            try:
                result = self.loop.tick()
            except Exception:
                logger.exception(
                    "AI tick failed for session %s; stopping timer",
                    self.loop.session.session_id,
                )
                break
            self.ticks += 1
            if result.ai_action:
                logger.debug("AI tick %d: %s", self.ticks, result.ai_action)
