"""Clock and timer capabilities injected into every engine.

An engine never touches the event loop directly. It asks its
:class:`Scheduler` for the current time, to run a callback later, and to
cancel a previously scheduled callback. Two implementations ship:

- :class:`AsyncioScheduler` drives real timers on an asyncio event loop.
- :class:`ManualScheduler` is a virtual clock that only moves when told to,
  which makes timing behaviour testable without real waits.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from lull._sync import _EventLoopThread, call_in_loop, get_shared_loop

logger = logging.getLogger(__name__)

Callback = Callable[[], Any]


class Scheduler(ABC):
    """Source of time and deferred callbacks for an engine.

    Times are in seconds and must come from a monotonic source.
    """

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds."""

    @abstractmethod
    def schedule(self, delay: float, callback: Callback) -> Any:
        """Run *callback* after *delay* seconds and return a cancellable handle."""

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancel *handle*. Cancelling an already fired handle is a no-op."""

    def run(self, func: Callable[[], Any]) -> Any:
        """Run an engine transition on the thread that owns the timers."""
        return func()

    @property
    def generation(self) -> int:
        """Bumped whenever handles returned earlier can no longer fire."""
        return 0


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class AsyncioScheduler(Scheduler):
    """Scheduler backed by ``loop.time()`` and ``loop.call_later()``.

    The loop is resolved lazily on first use: the loop running in the
    calling thread if there is one, otherwise the shared background loop
    from :mod:`lull._sync`. Transitions requested from any thread other
    than the loop's own are run on the loop thread via :meth:`run`.

    A closed loop is replaced on the next use. Timers armed on it can never
    fire, so :attr:`generation` is bumped to tell engines to forget them.

    Exceptions raised by timer callbacks are reported through the loop's
    exception handler.
    """

    __slots__ = ("_bridge", "_generation", "_loop")

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._bridge: _EventLoopThread | None = None
        self._generation = 0

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None or self._loop.is_closed():
            if self._loop is not None:
                self._generation += 1
                logger.debug("Bound event loop was closed, rebinding")
            running = _running_loop()
            if running is not None:
                self._loop = running
                self._bridge = None
            else:
                self._bridge = get_shared_loop()
                self._loop = self._bridge.loop
                logger.debug("No running event loop, using the shared loop thread")
        return self._loop

    @property
    def generation(self) -> int:
        return self._generation

    def now(self) -> float:
        return self._get_loop().time()

    def schedule(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        return self._get_loop().call_later(max(0.0, delay), callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()

    def run(self, func: Callable[[], Any]) -> Any:
        loop = self._get_loop()
        if self._bridge is not None:
            return self._bridge.call(func)
        if loop.is_running() and _running_loop() is not loop:
            # loop is driven by another thread
            return call_in_loop(loop, func)
        return func()

    def __repr__(self) -> str:
        return f"AsyncioScheduler(loop={self._loop!r})"


@dataclass(order=True, slots=True)
class ManualTimer:
    """Handle returned by :meth:`ManualScheduler.schedule`."""

    when: float
    seq: int
    callback: Callback = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


def _log_exception(exc: BaseException) -> None:
    logger.error("Exception in timer callback", exc_info=exc)


class ManualScheduler(Scheduler):
    """Virtual clock for deterministic tests.

    Time only moves through :meth:`advance`. Due callbacks fire in deadline
    order, ties in the order they were scheduled, and the clock reads each
    callback's deadline while it runs.

    Exceptions escaping a callback are passed to :attr:`exception_handler`,
    which logs them by default. Replace it to collect them instead.

    Example::

        clock = ManualScheduler()
        greet = make_debounced(print, 0.5, scheduler=clock)
        greet("hi")
        clock.advance(0.5)  # prints "hi"
    """

    __slots__ = ("_now", "_seq", "_timers", "exception_handler")

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._timers: list[ManualTimer] = []
        self._seq = itertools.count()
        self.exception_handler: Callable[[BaseException], None] = _log_exception

    def now(self) -> float:
        return self._now

    def schedule(self, delay: float, callback: Callback) -> ManualTimer:
        timer = ManualTimer(self._now + max(0.0, delay), next(self._seq), callback)
        heapq.heappush(self._timers, timer)
        return timer

    def cancel(self, handle: ManualTimer) -> None:
        handle.cancel()

    @property
    def pending_count(self) -> int:
        """Number of scheduled callbacks that have neither fired nor been cancelled."""
        return sum(1 for timer in self._timers if not timer.cancelled)

    def advance(self, delta: float) -> None:
        """Move the clock by *delta* seconds, firing every callback that comes due.

        A negative *delta* simulates a backward clock jump and fires nothing.
        """
        if delta < 0:
            self._now += delta
            return

        target = self._now + delta
        while self._timers and self._timers[0].when <= target:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = max(self._now, timer.when)
            try:
                timer.callback()
            except Exception as exc:
                self.exception_handler(exc)
        self._now = target

    def __repr__(self) -> str:
        return f"ManualScheduler(now={self._now}, pending={self.pending_count})"
