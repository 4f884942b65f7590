"""Timers with cancellation handles.

Every delay in the engine is expressed in milliseconds. Components never
call ``asyncio`` timer APIs directly; they go through a Scheduler so that
production code runs on the event loop while tests drive a virtual clock:

    AsyncioScheduler  — wraps loop.time() / loop.call_later().
    ManualScheduler   — virtual clock advanced explicitly with advance(ms).

A Scope groups the handles one owner creates so they can all be cancelled
in one call when the owner's scene is exited or the session is reset.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Handle — cancellation token for one scheduled callback
# ---------------------------------------------------------------------------

class Handle:
    """A scheduled callback that can be cancelled until it has fired."""

    def __init__(self, callback: Callable[[], Any]) -> None:
        self._callback = callback
        self._cancelled = False
        self._fired = False
        self._inner: Any = None  # backend timer (asyncio.TimerHandle or Handle)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._fired)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._inner is not None:
            self._inner.cancel()

    def _run(self) -> None:
        if not self.active:
            return
        self._fired = True
        self._callback()


# ---------------------------------------------------------------------------
# Scheduler protocol and implementations
# ---------------------------------------------------------------------------

class Scheduler(Protocol):
    def now(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> Handle: ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop.

    The loop is looked up lazily so the scheduler can be constructed before
    the loop starts (e.g. at app import time).
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._get_loop().time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> Handle:
        handle = Handle(callback)
        handle._inner = self._get_loop().call_later(max(0.0, delay_ms) / 1000.0, handle._run)
        return handle


class ManualScheduler:
    """Virtual clock. Nothing fires until advance() is called.

    Callbacks fire in (due time, scheduling order) order. While a callback
    runs, now() equals its due time, so callbacks that schedule further
    timers see exact arithmetic.
    """

    def __init__(self, start: float = 0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, Handle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> Handle:
        handle = Handle(callback)
        due = self._now + max(0, delay_ms)
        heapq.heappush(self._queue, (due, next(self._seq), handle))
        return handle

    def advance(self, ms: float) -> None:
        """Move the clock forward by ms, firing every callback that falls due."""
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = due
            handle._run()
        self._now = target

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if h.active)


# ---------------------------------------------------------------------------
# Scope — owns every timer its owner creates
# ---------------------------------------------------------------------------

class Scope:
    """A group of timers cancelled together with cancel_all()."""

    def __init__(self, scheduler: Scheduler, name: str = "") -> None:
        self._scheduler = scheduler
        self._name = name
        self._handles: list[Handle] = []

    def now(self) -> float:
        return self._scheduler.now()

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> Handle:
        self._prune()
        handle = self._scheduler.call_later(delay_ms, callback)
        self._handles.append(handle)
        return handle

    def call_every(self, interval_ms: float, callback: Callable[[], Any]) -> Handle:
        """Run callback every interval_ms until cancelled or it returns False."""
        self._prune()
        outer = Handle(callback)

        def fire() -> None:
            if not outer.active:
                return
            if callback() is False:
                outer._fired = True
                return
            outer._inner = self._scheduler.call_later(interval_ms, fire)

        outer._inner = self._scheduler.call_later(interval_ms, fire)
        self._handles.append(outer)
        return outer

    def cancel_all(self) -> int:
        """Cancel every live timer; return how many were still pending."""
        live = [h for h in self._handles if h.active]
        for handle in live:
            handle.cancel()
        self._handles.clear()
        if live:
            logger.debug("scope %s cancelled %d timer(s)", self._name or "-", len(live))
        return len(live)

    @property
    def active(self) -> int:
        return sum(1 for h in self._handles if h.active)

    def _prune(self) -> None:
        self._handles = [h for h in self._handles if h.active]
