"""Configuration types for the lull library."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from lull.errors import ConfigurationError


class Policy(StrEnum):
    """Available rate-limiting policies.

    DEBOUNCE: Invoke after ``wait`` seconds with no new call, optionally
              bounded by ``max_wait`` under continuous call pressure.
    THROTTLE: Invoke at most once per ``wait``-second window, on the
              leading and/or trailing edge.
    """

    DEBOUNCE = "debounce"
    THROTTLE = "throttle"


# Seconds used by the decorators when applied without arguments.
DEFAULT_WAIT = 0.25

# (leading, trailing) used when the caller leaves a flag unspecified.
DEFAULT_EDGES: dict[Policy, tuple[bool, bool]] = {
    Policy.DEBOUNCE: (False, True),
    Policy.THROTTLE: (True, True),
}


@dataclass(frozen=True, slots=True)
class WrapperConfig:
    """Configuration for a single rate-limited wrapper.

    Attributes:
        wait: Quiet period (debounce) or window length (throttle) in seconds.
        leading: Invoke at the start of a burst or window.
        trailing: Invoke at the end of a burst or window with the most
                  recent call's arguments.
        max_wait: Debounce only. Upper bound in seconds on the time between
                  invocations while calls keep arriving. None means no bound.

    With both ``leading`` and ``trailing`` false the target is never invoked.
    """

    wait: float
    leading: bool = False
    trailing: bool = True
    max_wait: float | None = None

    def __post_init__(self) -> None:
        if isinstance(self.wait, bool) or not isinstance(self.wait, (int, float)):
            raise ConfigurationError(f"wait must be a number, got {self.wait!r}")

        if self.wait < 0:
            raise ConfigurationError(f"wait must be non-negative, got {self.wait}")

        for name in ("leading", "trailing"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigurationError(f"{name} must be a bool, got {value!r}")

        if self.max_wait is not None and self.max_wait < self.wait:
            raise ConfigurationError(f"max_wait ({self.max_wait}) must be >= wait ({self.wait})")

    @classmethod
    def for_policy(
        cls,
        policy: Policy,
        wait: float,
        *,
        leading: bool | None = None,
        trailing: bool | None = None,
        max_wait: float | None = None,
    ) -> WrapperConfig:
        """Build a config, filling unspecified edges with *policy*'s defaults."""
        policy = Policy(policy)
        if policy is Policy.THROTTLE and max_wait is not None:
            raise ConfigurationError("max_wait is only supported by the debounce policy")

        default_leading, default_trailing = DEFAULT_EDGES[policy]
        return cls(
            wait=wait,
            leading=default_leading if leading is None else leading,
            trailing=default_trailing if trailing is None else trailing,
            max_wait=max_wait,
        )
