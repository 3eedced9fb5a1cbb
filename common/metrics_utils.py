"""
Timing and aggregation helpers shared by the transfer primitives and reports.
"""

import time
from typing import Iterable, Optional


def current_time_ms() -> int:
    """Wall-clock time in integer milliseconds since the epoch."""
    return int(time.time() * 1000)


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds, for measuring durations."""
    return time.monotonic() * 1000


def elapsed_ms(start_monotonic_ms: float) -> int:
    """Whole milliseconds elapsed since a monotonic_ms() reading."""
    return max(0, int(round(monotonic_ms() - start_monotonic_ms)))


def mean_or_none(values: Iterable[float]) -> Optional[float]:
    """Arithmetic mean of values, or None when there are none.

    Args:
        values: Durations of successful trials

    Returns:
        Mean as float, None for an empty input
    """
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)


def format_duration(duration_ms: Optional[float]) -> str:
    """Human readable duration for log lines."""
    if duration_ms is None:
        return "n/a"
    if duration_ms >= 1000:
        return f"{duration_ms / 1000:.2f} s"
    return f"{duration_ms:.1f} ms"


def throughput_mbps(size_bytes: int, duration_ms: Optional[float]) -> Optional[float]:
    """Megabits per second for size_bytes moved in duration_ms."""
    if not duration_ms or duration_ms <= 0:
        return None
    return (size_bytes * 8 / 1_000_000) / (duration_ms / 1000)
