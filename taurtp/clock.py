"""Nanosecond timepoints and clocks."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

SEC = 1_000_000_000
MS = 1_000_000
MICRO = 1_000


class Clock(ABC):
    """Source of timepoints in nanoseconds."""

    @abstractmethod
    def now(self) -> int:
        """Return the current timepoint in nanoseconds."""


class SteadyClock(Clock):
    """Monotonic clock."""

    def now(self) -> int:
        return time.monotonic_ns()


def duration_sec(a: int, b: int) -> float:
    """Return the time from timepoint ``a`` to timepoint ``b`` in seconds."""
    return (b - a) * 1e-9