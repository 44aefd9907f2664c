from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any


class Debouncer:
    """Run a coroutine callback once input has been quiet for ``delay`` seconds.

    Each ``schedule`` call cancels the pending timer and starts a new one. Once
    the timer fires the callback runs as a task and is never cancelled by a
    later ``schedule``.
    """

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[..., Awaitable[Any]], *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, callback, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, callback: Callable[..., Awaitable[Any]], args: tuple) -> None:
        self._handle = None
        task = asyncio.ensure_future(callback(*args))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for the pending timer (if any) and every fired callback."""
        loop = asyncio.get_running_loop()
        while self._handle is not None or self._tasks:
            if self._handle is not None:
                await asyncio.sleep(max(0.0, self._handle.when() - loop.time()))
                await asyncio.sleep(0)
                continue
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
