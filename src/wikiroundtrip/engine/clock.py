# src/wikiroundtrip/engine/clock.py
"""Clock abstraction for testable timing.

The replay oracle measures wall-clock time for a whole run and the time
spent strictly inside transformer calls. Production code uses SystemClock
(the default); tests inject MockClock to control elapsed time.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Abstract high-resolution clock.

    Implementations:
    - SystemClock: Uses time.perf_counter() (production)
    - MockClock: Returns controllable times (testing)
    """

    def now(self) -> float:
        """Return a monotonic timestamp in seconds, suitable for differences."""
        ...


class SystemClock:
    """Production clock using time.perf_counter()."""

    def now(self) -> float:
        return time.perf_counter()


class MockClock:
    """Controllable clock for deterministic testing.

    Example:
        clock = MockClock(start=0.0, step=0.5)
        clock.now()  # 0.0
        clock.now()  # 0.5
    """

    def __init__(self, start: float = 0.0, step: float = 0.0) -> None:
        """Initialize mock clock.

        Args:
            start: Initial time value.
            step: Amount the clock advances after every now() call.
        """
        if step < 0:
            raise ValueError(f"Clock step must be non-negative: {step}")
        self._current = start
        self._step = step

    def now(self) -> float:
        value = self._current
        self._current += self._step
        return value

    def advance(self, seconds: float) -> None:
        """Advance mock time by specified seconds.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance time by negative amount: {seconds}")
        self._current += seconds


DEFAULT_CLOCK: Clock = SystemClock()
