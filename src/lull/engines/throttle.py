"""Throttle engine: at most one invocation per window."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from lull.clock import Scheduler
from lull.config import Policy, WrapperConfig
from lull.engines.base import BaseEngine, PendingInvocation
from lull.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Throttler(BaseEngine):
    """Invoke the target at most once per ``wait``-second window.

    Leading and trailing are independent triggers sharing one window timer.
    A call that finds the window open invokes at once when ``leading`` is
    set. Every call, including that one, becomes the pending call, so the
    trailing invocation at window close always sees the freshest arguments.
    A leading invocation that raises leaves the state untouched.

    Example::

        wait=0.1, leading=True, trailing=True

        t=0.00 f(1)  -> invoke f(1), window closes at 0.10
        t=0.03 f(2)  -> pending
        t=0.06 f(3)  -> pending, replaces f(2)
        t=0.10       -> invoke f(3)
    """

    policy = Policy.THROTTLE

    def __init__(
        self,
        fn: Callable[..., Any],
        config: WrapperConfig,
        scheduler: Scheduler | None = None,
    ) -> None:
        if config.max_wait is not None:
            raise ConfigurationError("max_wait is only supported by the debounce policy")
        super().__init__(fn, config, scheduler)

    def _on_call(self, pending: PendingInvocation) -> Any:
        state = self._state
        now = self._scheduler.now()

        if self._config.leading and self._window_open(now):
            logger.debug("%s: leading invocation at %.6f", self._label, now)
            self._invoke(pending)
            state.last_invoke_time = now

        if state.wait_timer is None:
            state.wait_timer = self._scheduler.schedule(self._config.wait, self._window_closed)
        state.pending = pending
        return state.last_result

    def _window_open(self, now: float) -> bool:
        last_invoke = self._state.last_invoke_time
        if last_invoke is None:
            return True
        elapsed = now - last_invoke
        return elapsed >= self._config.wait or elapsed < 0

    def _window_closed(self) -> None:
        state = self._state
        state.wait_timer = None

        pending = self._take_pending()
        if pending is None or not self._config.trailing:
            return

        state.last_invoke_time = self._scheduler.now()
        logger.debug("%s: trailing invocation at %.6f", self._label, state.last_invoke_time)
        self._invoke(pending)
