from lull.engines.base import UNBOUND, BaseEngine, PendingInvocation, WrapperState
from lull.engines.debounce import Debouncer
from lull.engines.registry import build_engine
from lull.engines.throttle import Throttler

__all__ = [
    "UNBOUND",
    "BaseEngine",
    "Debouncer",
    "PendingInvocation",
    "Throttler",
    "WrapperState",
    "build_engine",
]
