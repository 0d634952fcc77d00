"""Trailing-edge debouncer bound to the running asyncio loop."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

Callback = Callable[[Any], Awaitable[None] | None]


class Debouncer:
    """Coalesces rapid ``feed`` calls into one call of ``on_fire``.

    Each ``feed`` restarts the idle timer and replaces the pending value.
    When the timer expires, ``on_fire`` runs once with the most recent
    value. Superseded values never fire. Coroutine callbacks are scheduled
    as tasks on the same loop.
    """

    def __init__(self, on_fire: Callback, wait_ms: int = 1200):
        self.on_fire = on_fire
        self.wait = wait_ms / 1000
        self._handle: asyncio.TimerHandle | None = None
        self._value: Any = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def feed(self, value: Any) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._value = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.wait, self._fire)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._value = None

    async def drain(self) -> None:
        """Wait for callbacks already started by the timer."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _fire(self) -> None:
        value = self._value
        self._handle = None
        self._value = None
        try:
            result = self.on_fire(value)
        except Exception:
            logger.exception("Debounced callback failed")
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Debounced callback failed: %s", task.exception())
