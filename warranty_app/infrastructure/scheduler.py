"""Cancellable repeating background task for the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta

logger = logging.getLogger(__name__)


class RepeatingTask:
    """Run ``callback`` every ``interval`` until stopped.

    The first run happens after ``initial_delay``. A failing run is logged and
    the loop carries on with the next interval. Every wait can be interrupted
    by :meth:`stop`.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[object]],
        *,
        interval: timedelta,
        initial_delay: timedelta = timedelta(minutes=1),
        name: str = "repeating-task",
    ) -> None:
        if interval.total_seconds() <= 0:
            raise ValueError("interval must be positive")
        self._callback = callback
        self._interval = interval
        self._initial_delay = initial_delay
        self.name = name
        self._stopping = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop on the running event loop."""

        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        """Signal the loop to finish and wait until it has."""

        task = self._task
        if task is None:
            return
        self._stopping.set()
        try:
            await task
        finally:
            self._task = None
        logger.info("%s stopped", self.name)

    async def run_once(self) -> bool:
        """Run a single cycle, returning ``False`` when it raised."""

        try:
            await self._callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("%s cycle failed", self.name)
            return False
        return True

    async def _run(self) -> None:
        logger.info(
            "%s started; first run in %s, then every %s",
            self.name,
            self._initial_delay,
            self._interval,
        )
        if await self._wait(self._initial_delay):
            return
        while not self._stopping.is_set():
            await self.run_once()
            if await self._wait(self._interval):
                return

    async def _wait(self, delay: timedelta) -> bool:
        """Sleep for ``delay``; return ``True`` when stop was requested meanwhile."""

        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=delay.total_seconds())
        except asyncio.TimeoutError:
            return False
        return True


__all__ = ["RepeatingTask"]
