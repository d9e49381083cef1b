"""Monotonic time points and millisecond durations."""

from __future__ import annotations

import time

_NS_PER_MS = 1_000_000


def now() -> int:
    """Current reading of the monotonic clock, in nanoseconds."""
    return time.monotonic_ns()


def duration_ms(begin: int, end: int) -> int:
    """Whole milliseconds between two time points, truncated towards zero."""
    delta = end - begin
    if delta < 0:
        return -((-delta) // _NS_PER_MS)
    return delta // _NS_PER_MS