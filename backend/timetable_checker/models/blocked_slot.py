from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import time

from timetable_checker.core.exceptions import BlockedSlotConflictError, DomainError, require
from timetable_checker.models.timing import DAY_VALUES, WEEKDAYS, minutes_between, windows_touch_or_overlap

logger = logging.getLogger(__name__)

MIN_DURATION_MINUTES = 30


@dataclass(frozen=True)
class BlockedSlot:
    """A weekly window in which a professor cannot teach."""

    day: str
    start_time: time
    end_time: time

    def __post_init__(self) -> None:
        require(self.day, "Blocked slot day must not be None")
        require(self.start_time, "Blocked slot start_time must not be None")
        require(self.end_time, "Blocked slot end_time must not be None")
        if self.day not in DAY_VALUES:
            raise DomainError(
                f"Invalid day '{self.day}'. Must be one of: {', '.join(WEEKDAYS)}",
                details={"day": self.day},
            )
        if not self.end_time > self.start_time:
            message = f"end_time ({self.end_time:%H:%M}) must be after start_time ({self.start_time:%H:%M})"
            logger.error(message)
            raise DomainError(message)
        duration = minutes_between(self.start_time, self.end_time)
        if duration < MIN_DURATION_MINUTES:
            message = f"Blocked slot lasts {duration} minutes; the minimum is {MIN_DURATION_MINUTES}"
            logger.error(message)
            raise DomainError(message, details={"duration_minutes": duration})

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.start_time, self.end_time)

    def overlaps(self, day: str, start_time: time, end_time: time) -> bool:
        require(day, "Day to compare must not be None")
        require(start_time, "Start time to compare must not be None")
        require(end_time, "End time to compare must not be None")
        if self.day != day:
            return False
        return windows_touch_or_overlap(self.start_time, self.end_time, start_time, end_time)

    def overlaps_slot(self, other: "BlockedSlot") -> bool:
        require(other, "Blocked slot to compare must not be None")
        return self.overlaps(other.day, other.start_time, other.end_time)

    def verify_no_overlap(self, day: str, start_time: time, end_time: time, professor_id: int) -> None:
        if self.overlaps(day, start_time, end_time):
            raise BlockedSlotConflictError(
                f"Proposed window ({day} {start_time:%H:%M}-{end_time:%H:%M}) overlaps blocked slot "
                f"({self.day} {self.start_time:%H:%M}-{self.end_time:%H:%M})",
                professor_id=professor_id,
                day=self.day,
                start_time=f"{self.start_time:%H:%M}",
                end_time=f"{self.end_time:%H:%M}",
            )

    def with_day(self, day: str) -> "BlockedSlot":
        return dataclasses.replace(self, day=day)

    def with_start_time(self, start_time: time) -> "BlockedSlot":
        return dataclasses.replace(self, start_time=start_time)

    def with_end_time(self, end_time: time) -> "BlockedSlot":
        return dataclasses.replace(self, end_time=end_time)
