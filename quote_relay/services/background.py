"""
Detached background work for the request path.

Tasks submitted here are not awaited by the request that created them.
Their failures go to this module's logger and never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """Runs fire-and-forget coroutines on the current event loop."""

    def __init__(self) -> None:
        # Strong references; the loop only keeps weak ones
        self._tasks: set[asyncio.Task[Any]] = set()

    def submit(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("%s cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error("%s failed", task.get_name(), exc_info=exc)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every submitted task to finish (errors are only logged)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def stop(self) -> None:
        """Cancel whatever is still running."""
        tasks = [task for task in self._tasks if not task.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        if tasks:
            logger.info("Cancelled %d background task(s)", len(tasks))

    async def shutdown(self, timeout: float | None = None) -> None:
        """Give pending tasks up to *timeout* seconds, then cancel the rest."""
        if self._tasks:
            logger.info("Waiting for %d background task(s)", len(self._tasks))
            _, still_running = await asyncio.wait(list(self._tasks), timeout=timeout)
            if still_running:
                logger.warning(
                    "%d background task(s) still running after %ss",
                    len(still_running),
                    timeout,
                )
        await self.stop()


# ── Singleton instance ────────────────────────────────────────────────────
background = BackgroundTaskRunner()
