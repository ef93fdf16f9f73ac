"""Decorator API for applying debounce and throttle behavior to functions."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, overload

from lull.config import DEFAULT_WAIT, Policy
from lull.core import rate_limited

if TYPE_CHECKING:
    from lull.clock import Scheduler
    from lull.engines.base import BaseEngine

F = TypeVar("F", bound=Callable[..., Any])


def _wrap(
    name: str,
    func: F | None,
    policy: Policy,
    **options: Any,
) -> BaseEngine | Callable[[F], BaseEngine]:
    def decorator(fn: F) -> BaseEngine:
        if inspect.iscoroutinefunction(fn):
            raise TypeError(f"@{name} only supports synchronous functions.")
        return rate_limited(fn, policy, **options)

    if func is not None:
        return decorator(func)

    return decorator


@overload
def debounce(
    func: F,
    /,
) -> BaseEngine: ...


@overload
def debounce(
    *,
    wait: float = DEFAULT_WAIT,
    leading: bool = False,
    trailing: bool = True,
    max_wait: float | None = None,
    scheduler: Scheduler | None = None,
) -> Callable[[F], BaseEngine]: ...


def debounce(
    func: F | None = None,
    /,
    *,
    wait: float = DEFAULT_WAIT,
    leading: bool = False,
    trailing: bool = True,
    max_wait: float | None = None,
    scheduler: Scheduler | None = None,
) -> BaseEngine | Callable[[F], BaseEngine]:
    """Decorator that debounces calls to a function.

    Calls return immediately with the result of the most recent invocation.
    The function itself runs once calls have been quiet for *wait* seconds,
    with the arguments of the last call.

    Args:
        func: The function to decorate (when used without parentheses).
        wait: Quiet period in seconds.
        leading: Invoke on the first call of a burst.
        trailing: Invoke at the end of a burst.
        max_wait: Longest time in seconds between invocations under
            continuous calls, or None for no limit.
        scheduler: Clock and timer source.

    Examples:
    ```python
        @debounce(wait=0.3)
        def on_resize(width: int, height: int) -> None:
            layout(width, height)

        @debounce
        def save() -> None:
            write_to_disk()
    ```
    """
    return _wrap(
        "debounce",
        func,
        Policy.DEBOUNCE,
        wait=wait,
        leading=leading,
        trailing=trailing,
        max_wait=max_wait,
        scheduler=scheduler,
    )


@overload
def throttle(
    func: F,
    /,
) -> BaseEngine: ...


@overload
def throttle(
    *,
    wait: float = DEFAULT_WAIT,
    leading: bool = True,
    trailing: bool = True,
    scheduler: Scheduler | None = None,
) -> Callable[[F], BaseEngine]: ...


def throttle(
    func: F | None = None,
    /,
    *,
    wait: float = DEFAULT_WAIT,
    leading: bool = True,
    trailing: bool = True,
    scheduler: Scheduler | None = None,
) -> BaseEngine | Callable[[F], BaseEngine]:
    """Decorator that lets a function run at most once per *wait* seconds.

    Examples:
    ```python
        @throttle(wait=0.1, trailing=False)
        def on_scroll(offset: int) -> None:
            render(offset)
    ```
    """
    return _wrap(
        "throttle",
        func,
        Policy.THROTTLE,
        wait=wait,
        leading=leading,
        trailing=trailing,
        scheduler=scheduler,
    )
