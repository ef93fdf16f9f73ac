"""Constructors that wrap a callable in a rate-limiting engine."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, cast

from lull.config import Policy, WrapperConfig
from lull.engines.registry import build_engine

if TYPE_CHECKING:
    from lull.clock import Scheduler
    from lull.engines.base import BaseEngine
    from lull.engines.debounce import Debouncer
    from lull.engines.throttle import Throttler


def rate_limited(
    fn: Callable[..., Any],
    policy: Policy | str,
    wait: float,
    *,
    leading: bool | None = None,
    trailing: bool | None = None,
    max_wait: float | None = None,
    scheduler: Scheduler | None = None,
) -> BaseEngine:
    """Wrap *fn* according to *policy*.

    Edges left as ``None`` take the policy's defaults: debounce fires on the
    trailing edge only, throttle on both edges.

    Raises:
        ConfigurationError: If the options are inconsistent. No wrapper is
            produced in that case.
    """
    policy = Policy(policy)
    config = WrapperConfig.for_policy(
        policy,
        wait,
        leading=leading,
        trailing=trailing,
        max_wait=max_wait,
    )
    return build_engine(policy, fn, config, scheduler)


def make_debounced(
    fn: Callable[..., Any],
    wait: float,
    *,
    leading: bool = False,
    trailing: bool = True,
    max_wait: float | None = None,
    scheduler: Scheduler | None = None,
) -> Debouncer:
    """Return a debounced wrapper around *fn*.

    Args:
        fn: The target callable.
        wait: Quiet period in seconds.
        leading: Invoke on the first call of a burst.
        trailing: Invoke with the latest arguments once the burst goes quiet.
        max_wait: Longest time in seconds between invocations while calls keep
            arriving. Must be >= *wait*. None means no bound.
        scheduler: Clock and timer source, an
            :class:`~lull.clock.AsyncioScheduler` by default.
    """
    engine = rate_limited(
        fn,
        Policy.DEBOUNCE,
        wait,
        leading=leading,
        trailing=trailing,
        max_wait=max_wait,
        scheduler=scheduler,
    )
    return cast("Debouncer", engine)


def make_throttled(
    fn: Callable[..., Any],
    wait: float,
    *,
    leading: bool = True,
    trailing: bool = True,
    scheduler: Scheduler | None = None,
) -> Throttler:
    """Return a wrapper around *fn* that invokes it at most once per *wait* seconds."""
    engine = rate_limited(
        fn,
        Policy.THROTTLE,
        wait,
        leading=leading,
        trailing=trailing,
        scheduler=scheduler,
    )
    return cast("Throttler", engine)
