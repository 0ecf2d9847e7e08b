"""Deferred callbacks for highlight reverts and overlay auto-dismissal.

Everything runs on a single thread. A scheduler only decides *when* a callback
runs; it never runs one concurrently with an event handler.

Two implementations:
    ManualScheduler   virtual clock advanced explicitly (tests, headless use)
    AsyncioScheduler  delegates to ``loop.call_later`` on a running event loop
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after ``delay`` seconds unless cancelled."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class _ManualTimer:
    __slots__ = ("due", "seq", "callback", "cancelled")

    def __init__(self, due: float, seq: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: _ManualTimer) -> bool:
        return (self.due, self.seq) < (other.due, other.seq)


class ManualScheduler:
    """Deterministic scheduler driven by ``advance()``.

    Timers due at the same instant fire in the order they were scheduled.
    Callbacks scheduled while advancing fire in the same ``advance`` call if
    they fall due before its end.

    Example:
        >>> scheduler = ManualScheduler()
        >>> fired = []
        >>> _ = scheduler.call_later(1.5, lambda: fired.append("toast"))
        >>> scheduler.advance(1.0); fired
        []
        >>> scheduler.advance(0.5); fired
        ['toast']
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[_ManualTimer] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(self.now + max(0.0, delay), next(self._seq), callback)
        heapq.heappush(self._queue, timer)
        return timer

    @property
    def pending(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every timer that falls due."""
        deadline = self.now + seconds
        while self._queue and self._queue[0].due <= deadline:
            timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = timer.due
            timer.callback()
        self.now = deadline


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    Must be created (or given a loop) on the thread that runs the loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(delay, callback)


class TimerGroup:
    """Tracks the timers one owner scheduled so they can all be cancelled.

    Fired timers remove themselves. ``cancel_all`` is what the surface calls on
    element replacement and unmount.
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handles: dict[int, TimerHandle] = {}
        self._ids = itertools.count()

    def __len__(self) -> int:
        return len(self._handles)

    def call_later(self, delay: float, callback: Callable[[], None]) -> int:
        """Schedule callback and return a key usable with ``cancel``."""
        key = next(self._ids)

        def fire() -> None:
            if self._handles.pop(key, None) is None:
                return
            callback()

        self._handles[key] = self._scheduler.call_later(delay, fire)
        return key

    def cancel(self, key: int | None) -> None:
        if key is None:
            return
        handle = self._handles.pop(key, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        handles = list(self._handles.values())
        self._handles.clear()
        for handle in handles:
            handle.cancel()
        if handles:
            logger.debug("Cancelled %d pending timer(s)", len(handles))
