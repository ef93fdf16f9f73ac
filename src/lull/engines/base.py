"""Shared state and invocation plumbing for every rate-limiting engine."""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from lull.clock import AsyncioScheduler, Callback, Scheduler
from lull.config import Policy, WrapperConfig

logger = logging.getLogger(__name__)


class _Unbound:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNBOUND"


UNBOUND: Any = _Unbound()
"""Call-context of a call made without a receiver."""


@dataclass(frozen=True, slots=True)
class PendingInvocation:
    """Arguments and call-context captured from the most recent call."""

    args: tuple[Any, ...]
    kwargs: dict[str, Any] = field(default_factory=dict)
    context: Any = UNBOUND


@dataclass(slots=True)
class WrapperState:
    """Timing state owned by exactly one engine.

    ``None`` stands for "not yet happened" (times) or "empty" (pending call
    and timer slots).
    """

    last_call_time: float | None = None
    last_invoke_time: float | None = None
    last_result: Any = None
    pending: PendingInvocation | None = None
    wait_timer: Any = None
    max_timer: Any = None


class BaseEngine(ABC):
    """Base class for rate-limited wrappers around a target callable.

    An engine is itself callable. Calling it records the call, may invoke
    the target now or later, and returns the result of the most recent
    invocation, which can be stale relative to the call that returned it.

    Subclasses implement :meth:`_on_call`. Timer slots are managed through
    :meth:`_arm` and :meth:`_disarm` so that a slot never holds more than one
    live handle.

    Args:
        fn: The target callable.
        config: Timing configuration.
        scheduler: Clock and timer source. Defaults to an
            :class:`~lull.clock.AsyncioScheduler`.
    """

    policy: ClassVar[Policy]

    def __init__(
        self,
        fn: Callable[..., Any],
        config: WrapperConfig,
        scheduler: Scheduler | None = None,
    ) -> None:
        if not callable(fn):
            raise TypeError(f"fn must be callable, got {fn!r}")
        functools.update_wrapper(self, fn)
        self._fn = fn
        self._config = config
        self._scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._state = WrapperState()
        self._generation = self._scheduler.generation

    @property
    def config(self) -> WrapperConfig:
        return self._config

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def state(self) -> WrapperState:
        """Live timing state. Read it, do not mutate it."""
        return self._state

    @property
    def last_result(self) -> Any:
        return self._state.last_result

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.call_with(UNBOUND, *args, **kwargs)

    def call_with(self, context: Any, /, *args: Any, **kwargs: Any) -> Any:
        """Call with an explicit call-context.

        At invocation time the target receives *context* as its first
        positional argument, ahead of the forwarded arguments.
        """
        pending = PendingInvocation(args, kwargs, context)
        return self._scheduler.run(functools.partial(self._dispatch, pending))

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return functools.partial(self.call_with, instance)

    def _dispatch(self, pending: PendingInvocation) -> Any:
        generation = self._scheduler.generation
        if generation != self._generation:
            # handles from before a loop change can never fire
            logger.debug("%s: scheduler changed loops, dropping stale timers", self._label)
            self._state.wait_timer = None
            self._state.max_timer = None
            self._generation = generation
        return self._on_call(pending)

    @abstractmethod
    def _on_call(self, pending: PendingInvocation) -> Any:
        """Apply one call to the state machine and return ``last_result``."""

    def _invoke(self, pending: PendingInvocation) -> Any:
        if pending.context is UNBOUND:
            result = self._fn(*pending.args, **pending.kwargs)
        else:
            result = self._fn(pending.context, *pending.args, **pending.kwargs)
        self._state.last_result = result
        return result

    def _take_pending(self) -> PendingInvocation | None:
        pending, self._state.pending = self._state.pending, None
        return pending

    def _arm(self, slot: str, delay: float, callback: Callback) -> None:
        self._disarm(slot)
        setattr(self._state, slot, self._scheduler.schedule(delay, callback))

    def _disarm(self, slot: str) -> None:
        handle = getattr(self._state, slot)
        if handle is not None:
            self._scheduler.cancel(handle)
            setattr(self._state, slot, None)

    @property
    def _label(self) -> str:
        return getattr(self._fn, "__qualname__", None) or repr(self._fn)

    def __repr__(self) -> str:
        cfg = self._config
        return (
            f"{type(self).__name__}({self._label}, wait={cfg.wait}, "
            f"leading={cfg.leading}, trailing={cfg.trailing}, "
            f"max_wait={cfg.max_wait})"
        )
