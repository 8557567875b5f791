from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import date, time

from timetable_checker.core.exceptions import BlockedSlotConflictError, DomainError, require
from timetable_checker.models.blocked_slot import BlockedSlot
from timetable_checker.models.professor import Professor
from timetable_checker.models.room import Room
from timetable_checker.models.subject import Subject

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False, kw_only=True)
class Assignment:
    """One scheduled class: who teaches what, where, to which group and when.

    Only the time window is validated here. Capacity, lab compatibility,
    authorization and blocked slots are detection queries: they report, and
    raise only through their opt-in ``raise_on_conflict`` variants.
    """

    id: int
    assignment_date: date
    professor: Professor
    room: Room
    group_id: int
    group_name: str
    day: str
    start_time: time
    end_time: time
    session_type: str
    enrolled_students: int = 0
    subject: Subject | None = field(default=None)

    def __post_init__(self) -> None:
        require(self.id, "Assignment id must not be None")
        require(self.assignment_date, "Assignment date must not be None")
        require(self.professor, "Professor must not be None")
        require(self.room, "Room must not be None")
        require(self.group_id, "Group id must not be None")
        require(self.group_name, "Group name must not be None")
        require(self.day, "Day must not be None")
        require(self.start_time, "Start time must not be None")
        require(self.end_time, "End time must not be None")
        require(self.session_type, "Session type must not be None")
        if not self.end_time > self.start_time:
            raise DomainError(
                f"end_time ({self.end_time:%H:%M}) must be after start_time ({self.start_time:%H:%M})",
                details={"assignment_id": self.id},
            )
        logger.debug(
            "Assignment created: id=%d, professor=%s, room=%s, day=%s, time=%s-%s",
            self.id,
            self.professor.name,
            self.room.name,
            self.day,
            self.start_time,
            self.end_time,
        )

    @property
    def professor_id(self) -> int:
        return self.professor.id

    @property
    def room_id(self) -> int:
        return self.room.id

    @property
    def requires_lab(self) -> bool:
        return self.subject is not None and self.subject.requires_lab

    def has_room_capacity(self) -> bool:
        return self.room.has_capacity_for(self.enrolled_students)

    def has_room_compatibility(self) -> bool:
        return self.subject is None or self.room.is_compatible_with_lab_requirement(self.subject.requires_lab)

    def has_professor_subject_authorization(self, raise_on_conflict: bool = False) -> bool:
        authorized = self.subject is None or self.professor.has_subject(self.subject.code)
        if not authorized and raise_on_conflict:
            self.professor.verify_has_subject(self.subject.code, self.id)
        return authorized

    def conflicting_blocked_slots(self) -> list[BlockedSlot]:
        return self.professor.conflicting_blocked_slots(self.day, self.start_time, self.end_time)

    def has_blocked_slot_conflict(self, raise_on_conflict: bool = False) -> bool:
        blocked = self.professor.has_blocked_slot_conflict(self.day, self.start_time, self.end_time)
        if blocked and raise_on_conflict:
            raise BlockedSlotConflictError(
                f"Assignment id={self.id} overlaps a blocked slot of professor {self.professor.name} "
                f"on {self.day} {self.start_time:%H:%M}-{self.end_time:%H:%M}",
                professor_id=self.professor.id,
                day=self.day,
                start_time=f"{self.start_time:%H:%M}",
                end_time=f"{self.end_time:%H:%M}",
            )
        return blocked

    def replace(self, **changes) -> "Assignment":
        return dataclasses.replace(self, **changes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Assignment):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        subject_code = self.subject.code if self.subject is not None else "N/A"
        return (
            f"Assignment(id={self.id}, professor={self.professor.name!r}, room={self.room.name!r}, "
            f"subject={subject_code}, day={self.day}, time={self.start_time:%H:%M}-{self.end_time:%H:%M}, "
            f"group={self.group_name!r})"
        )
