"""Debounce engine with optional max_wait ceiling."""

from __future__ import annotations

import logging
from typing import Any

from lull.config import Policy
from lull.engines.base import BaseEngine, PendingInvocation

logger = logging.getLogger(__name__)


class Debouncer(BaseEngine):
    """Invoke the target once calls have been quiet for ``wait`` seconds.

    How it works:
        - The first call of a burst runs the leading edge: it anchors
          ``last_invoke_time``, invokes at once if ``leading`` is set, and arms
          the wait-timer (and the max-timer when ``max_wait`` is set).
        - Every later call in the burst replaces the pending arguments and
          pushes the wait-timer back.
        - When the wait-timer fires after a quiet period the trailing edge
          runs: both timers are cleared and, if ``trailing`` is set, the target
          is invoked with the latest pending arguments.
        - ``max_wait`` caps the time between invocations. Once it is reached,
          the max-timer flushes the running burst even though calls keep
          arriving. Trailing invocations always run from a timer callback.

    Example::

        wait=0.05, leading=False, trailing=True

        t=0.00 f("a")  -> burst starts, wait-timer due at 0.05
        t=0.01 f("b")  -> wait-timer pushed to 0.06
        t=0.03 f("d")  -> wait-timer pushed to 0.08
        t=0.08         -> invoke f("d")

    Complexity:
        Time:   O(1) per call
        Memory: O(1), only the latest call is kept
    """

    policy = Policy.DEBOUNCE

    def _on_call(self, pending: PendingInvocation) -> Any:
        state = self._state
        now = self._scheduler.now()
        invoking = self._should_invoke(now)

        state.pending = pending
        state.last_call_time = now

        ceiling = invoking and state.wait_timer is not None and self._max_wait_reached(now)
        if ceiling and not self._config.trailing:
            # nothing to flush: close the running burst so this call opens a new one
            self._disarm("wait_timer")
            self._disarm("max_timer")
            ceiling = False

        if invoking:
            if state.wait_timer is None:
                return self._leading_edge(now)
            if ceiling:
                # the max-timer is overdue: flush on the next tick
                logger.debug("%s: max_wait reached at %.6f, flushing", self._label, now)
                self._arm("max_timer", 0, self._max_wait_expired)
            elif self._config.max_wait is not None:
                self._arm("max_timer", self._config.max_wait, self._max_wait_expired)
        elif self._config.max_wait is not None and state.max_timer is None:
            # burst outlived a max-timer that already fired
            self._arm("max_timer", self._remaining_max_wait(now), self._max_wait_expired)

        self._arm("wait_timer", self._config.wait, self._timer_expired)
        return state.last_result

    def _should_invoke(self, now: float) -> bool:
        state = self._state
        if state.last_call_time is None:
            return True

        since_call = now - state.last_call_time
        return since_call >= self._config.wait or since_call < 0 or self._max_wait_reached(now)

    def _max_wait_reached(self, now: float) -> bool:
        max_wait = self._config.max_wait
        last_invoke = self._state.last_invoke_time
        return max_wait is not None and last_invoke is not None and now - last_invoke >= max_wait

    def _remaining_max_wait(self, now: float) -> float:
        assert self._config.max_wait is not None
        last_invoke = self._state.last_invoke_time
        if last_invoke is None:
            return self._config.max_wait
        return self._config.max_wait - (now - last_invoke)

    def _remaining_wait(self, now: float) -> float:
        state = self._state
        assert state.last_call_time is not None
        remaining = self._config.wait - (now - state.last_call_time)

        if self._config.max_wait is None:
            return remaining
        return min(remaining, self._remaining_max_wait(now))

    def _leading_edge(self, now: float) -> Any:
        state = self._state
        state.last_invoke_time = now
        self._arm("wait_timer", self._config.wait, self._timer_expired)
        if self._config.max_wait is not None:
            self._arm("max_timer", self._config.max_wait, self._max_wait_expired)

        if self._config.leading and state.pending is not None:
            pending = self._take_pending()
            assert pending is not None
            logger.debug("%s: leading invocation at %.6f", self._label, now)
            self._invoke(pending)
        return state.last_result

    def _trailing_edge(self, now: float) -> Any:
        state = self._state
        self._disarm("wait_timer")
        self._disarm("max_timer")

        pending = self._take_pending()
        if pending is not None and self._config.trailing:
            state.last_invoke_time = now
            logger.debug("%s: trailing invocation at %.6f", self._label, now)
            self._invoke(pending)
        elif pending is not None:
            logger.debug("%s: discarding pending call, trailing disabled", self._label)
        return state.last_result

    def _timer_expired(self) -> None:
        now = self._scheduler.now()
        if self._should_invoke(now):
            self._trailing_edge(now)
            return
        self._arm("wait_timer", self._remaining_wait(now), self._timer_expired)

    def _max_wait_expired(self) -> None:
        now = self._scheduler.now()
        logger.debug("%s: max_wait timer fired at %.6f", self._label, now)
        self._trailing_edge(now)
