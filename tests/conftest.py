"""Shared fixtures for lull tests."""

from typing import Any, NamedTuple

import pytest

from lull.clock import ManualScheduler, Scheduler


class Call(NamedTuple):
    at: float | None
    args: tuple[Any, ...]
    kwargs: dict[str, Any]


class Recorder:
    """Target callable that records every invocation and returns its args."""

    def __init__(self, clock: Scheduler | None = None, *, fail: bool = False) -> None:
        self.calls: list[Call] = []
        self.fail = fail
        self._clock = clock

    def __call__(self, *args: Any, **kwargs: Any) -> tuple[Any, ...]:
        at = self._clock.now() if self._clock is not None else None
        self.calls.append(Call(at, args, kwargs))
        if self.fail:
            raise RuntimeError(f"boom {args!r}")
        return args

    @property
    def args(self) -> list[tuple[Any, ...]]:
        return [call.args for call in self.calls]

    @property
    def times(self) -> list[float | None]:
        return [call.at for call in self.calls]


@pytest.fixture
def clock():
    return ManualScheduler()


@pytest.fixture
def recorder(clock):
    return Recorder(clock)


@pytest.fixture
def errors(clock):
    """Collect exceptions escaping timer callbacks instead of logging them."""
    collected: list[BaseException] = []
    clock.exception_handler = collected.append
    return collected
