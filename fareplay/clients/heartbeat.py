"""
Heartbeat Scheduler

Runs an async callback every `interval` milliseconds on its own task until
stopped.

- stop() is synchronous and idempotent: safe before start, repeatedly, or
  never. An invocation in flight when stop() is called runs to completion;
  no further invocations start.
- Callback failures are logged and counted; they never end the loop or
  propagate to the caller.

Example:
    scheduler = HeartbeatScheduler(client.go_online, interval=60000).start()
    ...
    scheduler.stop()
    await scheduler.wait()
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from fareplay.core.constants import DEFAULT_HEARTBEAT_INTERVAL

logger = logging.getLogger(__name__)


class HeartbeatScheduler:
    """Periodic async callback with an explicit stop handle."""

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval: int = DEFAULT_HEARTBEAT_INTERVAL,
        name: str = "heartbeat",
    ):
        """
        Initialize the scheduler (does not start it).

        Args:
            callback: Coroutine function invoked once per interval
            interval: Milliseconds between invocations
            name: Label used in log messages
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")

        self._callback = callback
        self.interval = interval
        self.name = name
        self.invocations = 0
        self.failures = 0
        self._task: Optional[asyncio.Task] = None
        self._stop_requested = False
        self._wake = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stopped(self) -> bool:
        return self._stop_requested

    def start(self) -> "HeartbeatScheduler":
        """
        Start invoking the callback. Must be called from a running event loop.

        Returns:
            self, for chaining
        """
        if self._task is not None or self._stop_requested:
            return self

        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"fareplay-{self.name}")
        logger.info(f"Scheduler '{self.name}' started (every {self.interval}ms)")
        return self

    def stop(self) -> None:
        """Stop scheduling further invocations."""
        if self._stop_requested:
            return
        self._stop_requested = True
        self._wake.set()
        if self._task is not None:
            logger.info(f"Scheduler '{self.name}' stopped after {self.invocations} invocations")

    async def wait(self) -> None:
        """Wait until the scheduler task has finished."""
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        while not self._stop_requested:
            try:
                await asyncio.wait_for(self._wake.wait(), timeout=self.interval / 1000)
            except asyncio.TimeoutError:
                pass

            if self._stop_requested:
                break
            await self._invoke()

    async def _invoke(self) -> None:
        self.invocations += 1
        try:
            await self._callback()
        except Exception as e:
            self.failures += 1
            logger.error(f"Scheduler '{self.name}' invocation {self.invocations} failed: {e}")

    async def __aenter__(self) -> "HeartbeatScheduler":
        return self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.stop()
        await self.wait()
