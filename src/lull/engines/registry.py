"""Maps each ``Policy`` enum member to the engine class that implements it.

When you add a new policy:

1. Add a variant to the ``Policy`` enum in ``config.py``.
2. Add an entry to ``REGISTRY`` pointing to a factory that builds the
   engine from a target callable, a :class:`WrapperConfig` and a scheduler.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from lull.clock import Scheduler
from lull.config import Policy, WrapperConfig
from lull.engines.base import BaseEngine
from lull.engines.debounce import Debouncer
from lull.engines.throttle import Throttler

EngineFactory = Callable[[Callable[..., Any], WrapperConfig, Scheduler | None], BaseEngine]

REGISTRY: dict[Policy, EngineFactory] = {
    Policy.DEBOUNCE: Debouncer,
    Policy.THROTTLE: Throttler,
}


def build_engine(
    policy: Policy,
    fn: Callable[..., Any],
    config: WrapperConfig,
    scheduler: Scheduler | None = None,
) -> BaseEngine:
    """Resolve *policy* to a concrete engine wrapping *fn*."""
    factory = REGISTRY.get(policy)
    if not factory:
        raise ValueError(
            f"Unknown policy: {policy!r}. Registered: {', '.join(p.value for p in REGISTRY)}"
        )
    return factory(fn, config, scheduler)
