"""Volume spike detection over a sliding window of mention timestamps."""

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_WINDOW_MS = 60 * 1000
DEFAULT_MULTIPLIER = 3.0

# The baseline spans this many windows before the recent one
_BASELINE_WINDOWS = 5

# Minimum recent count for any spike
_MIN_COUNT = 3


def detect_spike(
    timestamps: Iterable[int],
    now: int,
    window_ms: int = DEFAULT_WINDOW_MS,
    multiplier: float = DEFAULT_MULTIPLIER,
) -> bool:
    """Return True if the last window is abnormally busy versus the baseline.

    ``current`` counts timestamps in ``[now - W, now]``; the baseline average is
    the count in ``[now - 6W, now - W)`` divided by 5. With no baseline at all
    nothing is flagged.
    """
    window_start = now - window_ms
    baseline_start = now - (_BASELINE_WINDOWS + 1) * window_ms

    current = 0
    baseline = 0
    for ts in timestamps:
        if window_start <= ts <= now:
            current += 1
        elif baseline_start <= ts < window_start:
            baseline += 1

    prev_avg = baseline / _BASELINE_WINDOWS
    if prev_avg == 0:
        return False
    return current >= max(_MIN_COUNT, multiplier * prev_avg)
