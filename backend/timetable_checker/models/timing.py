from __future__ import annotations

from datetime import time

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

DAY_VALUES = frozenset(WEEKDAYS)


def minutes_of(value: time) -> int:
    return value.hour * 60 + value.minute


def minutes_between(start: time, end: time) -> int:
    return minutes_of(end) - minutes_of(start)


def windows_touch_or_overlap(start1: time, end1: time, start2: time, end2: time) -> bool:
    """Closed-interval overlap: windows that only share a boundary count."""
    return not end1 < start2 and not start1 > end2
