from __future__ import annotations
from datetime import time
from typing import Optional

from .rounding import round_half_up

MINUTES_PER_DAY = 24 * 60

def parse_hhmm(s: str) -> Optional[time]:
    try:
        parts = s.strip().split(":")
        if len(parts) != 2:
            return None
        h, m = int(parts[0]), int(parts[1])
        if not (0 <= h <= 23 and 0 <= m <= 59):
            return None
        return time(hour=h, minute=m)
    except (AttributeError, ValueError):
        return None


def _minutes(s: str) -> int:
    t = parse_hhmm(s)
    if t is None:
        raise ValueError(f"Time must be in HH:MM format, got {s!r}")
    return t.hour * 60 + t.minute


def calculate_sleep_hours(bedtime: str, wake_time: str) -> float:
    """
    Hours slept between two HH:MM clock values, to one decimal.

    A wake time earlier on the clock than the bedtime means the night crossed
    midnight, so the result is always in [0, 24).
    """
    bed = _minutes(bedtime)
    wake = _minutes(wake_time)
    if wake < bed:
        wake += MINUTES_PER_DAY
    # tenths of an hour are 6-minute steps
    return round_half_up((wake - bed) / 6) / 10
