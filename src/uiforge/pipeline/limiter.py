"""Bounded-concurrency scheduler for outbound generation calls."""

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from typing import TypeVar

from uiforge.core import get_logger
from uiforge.monitoring import metrics_collector

logger = get_logger(__name__)

T = TypeVar("T")


class RateLimitedInvoker:
    """
    Caps the number of in-flight tasks process-wide.

    Excess tasks wait in FIFO submission order. A slot is handed to the next
    waiter as soon as a running task settles, whether it succeeded or failed.

    Examples:
        >>> invoker = RateLimitedInvoker(limit=9)
        >>> result = await invoker.schedule(lambda: client.generate(request))
    """

    def __init__(self, limit: int = 9) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")

        self.limit = limit
        self._active = 0
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def active_count(self) -> int:
        """Tasks currently holding a slot."""
        return self._active

    @property
    def pending_count(self) -> int:
        """Tasks waiting for a slot."""
        return len(self._waiters)

    def schedule(self, task: Callable[[], Awaitable[T]]) -> "asyncio.Task[T]":
        """
        Queue a task and start it once a slot is free.

        The task runs to completion even if the caller never awaits the
        returned handle.

        Args:
            task: Zero-argument callable returning an awaitable

        Returns:
            asyncio.Task resolving to the task's result
        """
        return asyncio.ensure_future(self._run(task))

    async def _run(self, task: Callable[[], Awaitable[T]]) -> T:
        await self._acquire()
        try:
            return await task()
        finally:
            self._release()

    async def _acquire(self) -> None:
        if self._active < self.limit and not self._waiters:
            self._active += 1
            self._report()
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        self._report()
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # Slot was already handed over
                self._release()
            else:
                self._waiters.remove(waiter)
                self._report()
            raise

    def _release(self) -> None:
        # Hand the slot straight to the oldest waiter, keeping _active unchanged
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                self._report()
                return
        self._active -= 1
        self._report()

    def _report(self) -> None:
        metrics_collector.set_limiter_state(self._active, len(self._waiters))
