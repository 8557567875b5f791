from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import time
from types import MappingProxyType

from timetable_checker.core.exceptions import DomainError, require
from timetable_checker.models.timing import minutes_between, minutes_of

logger = logging.getLogger(__name__)

DAY_NAME_MAP = MappingProxyType(
    {
        "MONDAY": "Monday",
        "TUESDAY": "Tuesday",
        "WEDNESDAY": "Wednesday",
        "THURSDAY": "Thursday",
        "FRIDAY": "Friday",
        "SATURDAY": "Saturday",
        "SUNDAY": "Sunday",
        "LUNES": "Monday",
        "MARTES": "Tuesday",
        "MIÉRCOLES": "Wednesday",
        "MIERCOLES": "Wednesday",
        "JUEVES": "Thursday",
        "VIERNES": "Friday",
        "SÁBADO": "Saturday",
        "SABADO": "Saturday",
        "DOMINGO": "Sunday",
    }
)

AFTERNOON_START = time(16, 0)
AFTERNOON_END = time(18, 0)
EVENING_START = time(18, 0)
EVENING_MIN_END = time(20, 0)


@dataclass(frozen=True)
class TimeRange:
    start: time
    end: time

    def __post_init__(self) -> None:
        require(self.start, "Range start must not be None")
        require(self.end, "Range end must not be None")
        if not self.end > self.start:
            raise DomainError(
                f"Range end ({self.end:%H:%M}) must be after range start ({self.start:%H:%M})"
            )

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.start, self.end)

    def contains(self, start: time, end: time) -> bool:
        return not start < self.start and not end > self.end

    def distance_minutes(self, moment: time) -> int:
        if self.start <= moment <= self.end:
            return 0
        if moment < self.start:
            return minutes_of(self.start) - minutes_of(moment)
        return minutes_of(moment) - minutes_of(self.end)

    def __str__(self) -> str:
        return f"{self.start:%H:%M} - {self.end:%H:%M}"


_WEEKDAY_RANGES = (
    TimeRange(time(8, 0), time(12, 0)),
    TimeRange(time(14, 0), time(16, 0)),
    TimeRange(time(16, 0), time(18, 0)),
    TimeRange(time(18, 0), time(22, 0)),
)

VALID_TIME_SLOTS = MappingProxyType(
    {
        "Monday": _WEEKDAY_RANGES,
        "Tuesday": _WEEKDAY_RANGES,
        "Wednesday": _WEEKDAY_RANGES,
        "Thursday": _WEEKDAY_RANGES,
        "Friday": _WEEKDAY_RANGES,
        "Saturday": (TimeRange(time(14, 0), time(17, 0)),),
        "Sunday": (),
    }
)


def parse_day_of_week(day_name: str) -> str:
    """Map an English or Spanish weekday name, in any case, to its canonical form."""
    if day_name is None or not day_name.strip():
        raise DomainError("Day name must not be empty")
    day = DAY_NAME_MAP.get(day_name.strip().upper())
    if day is None:
        raise DomainError(f"Unrecognized day name: {day_name}", details={"day": day_name})
    return day


def get_valid_time_slots(day: str) -> tuple[TimeRange, ...]:
    return VALID_TIME_SLOTS.get(parse_day_of_week(day), ())


def is_valid_time_range(day: str, start_time: time, end_time: time) -> bool:
    require(start_time, "Start time must not be None")
    require(end_time, "End time must not be None")
    canonical = parse_day_of_week(day)
    if not end_time > start_time:
        raise DomainError("End time must be after start time")

    ranges = VALID_TIME_SLOTS.get(canonical, ())
    if not ranges:
        logger.debug("No permitted time ranges on %s", canonical)
        return False
    valid = any(time_range.contains(start_time, end_time) for time_range in ranges)
    if not valid:
        logger.debug(
            "Range %s-%s is not permitted on %s. Permitted: %s",
            start_time,
            end_time,
            canonical,
            ", ".join(str(time_range) for time_range in ranges),
        )
    return valid


def has_workload_conflict(
    existing_start: time,
    existing_end: time,
    new_start: time,
    new_end: time,
) -> bool:
    """A 16:00-18:00 session back to back with an evening session running to 20:00 or later."""

    def in_afternoon(start: time, end: time) -> bool:
        return start == AFTERNOON_START and end == AFTERNOON_END

    def in_evening(start: time, end: time) -> bool:
        return start == EVENING_START and end >= EVENING_MIN_END

    overloaded = (in_afternoon(existing_start, existing_end) and in_evening(new_start, new_end)) or (
        in_afternoon(new_start, new_end) and in_evening(existing_start, existing_end)
    )
    if overloaded:
        logger.debug(
            "Workload overload: %s-%s next to %s-%s",
            existing_start,
            existing_end,
            new_start,
            new_end,
        )
    return overloaded


def find_closest_valid_time_slot(day: str, preferred_start: time, preferred_end: time) -> TimeRange | None:
    require(preferred_start, "Preferred start must not be None")
    require(preferred_end, "Preferred end must not be None")
    ranges = VALID_TIME_SLOTS.get(parse_day_of_week(day), ())
    duration = minutes_between(preferred_start, preferred_end)
    candidates = [time_range for time_range in ranges if time_range.duration_minutes >= duration]
    if not candidates:
        return None
    # min() keeps the first of equally distant ranges.
    return min(candidates, key=lambda time_range: time_range.distance_minutes(preferred_start))
