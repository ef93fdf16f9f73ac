"""lull: debounce and throttle for Python callables.

Wraps a function so that rapid repeated calls coalesce into fewer actual
invocations, driven by an asyncio event loop or any injected scheduler.

Basic usage:

    from lull import make_debounced, make_throttled

    save = make_debounced(write_to_disk, 0.5, max_wait=5.0)
    save(doc)  # runs write_to_disk(doc) after 0.5s of quiet

    redraw = make_throttled(render, 0.1)
    redraw(frame)  # runs at most once every 0.1s

Decorator usage:

    from lull import debounce

    @debounce(wait=0.3)
    def on_resize(width: int, height: int) -> None:
        layout(width, height)
"""

from lull.clock import AsyncioScheduler, ManualScheduler, Scheduler
from lull.config import Policy, WrapperConfig
from lull.core import make_debounced, make_throttled, rate_limited
from lull.decorator import debounce, throttle
from lull.engines.base import UNBOUND, BaseEngine, PendingInvocation, WrapperState
from lull.engines.debounce import Debouncer
from lull.engines.throttle import Throttler
from lull.errors import ConfigurationError, LullError

__all__ = [
    "UNBOUND",
    "AsyncioScheduler",
    "BaseEngine",
    "ConfigurationError",
    "Debouncer",
    "LullError",
    "ManualScheduler",
    "PendingInvocation",
    "Policy",
    "Scheduler",
    "Throttler",
    "WrapperConfig",
    "WrapperState",
    "debounce",
    "make_debounced",
    "make_throttled",
    "rate_limited",
    "throttle",
]

__version__ = "0.1.0"
