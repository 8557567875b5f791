from __future__ import annotations

import logging
import re
from datetime import time

from timetable_checker.core.exceptions import AssignmentConflictError, BlockedSlotConflictError, DomainError, require
from timetable_checker.models.blocked_slot import BlockedSlot
from timetable_checker.models.ids import IdSequence, professor_ids
from timetable_checker.models.subject import Subject

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@]+@[^@]+\.[^@]+$")


def validate_email(email: str) -> str:
    require(email, "Email must not be None")
    if not EMAIL_PATTERN.match(email):
        raise DomainError(f"Email is not well formed: {email}", details={"email": email})
    return email


class Professor:
    """A lecturer, the subjects they may teach and the windows they are unavailable.

    Identity is the integer id. ``id=None`` draws the next id from ``sequence``;
    an explicit id is kept as is and pushes the sequence past it.
    """

    def __init__(
        self,
        name: str,
        department: str,
        email: str,
        *,
        id: int | None = None,
        sequence: IdSequence | None = None,
    ) -> None:
        ids = sequence or professor_ids
        self._name = require(name, "Professor name must not be None")
        self._department = require(department, "Professor department must not be None")
        self._email = validate_email(email)
        self._subjects: list[Subject] = []
        self._blocked_slots: list[BlockedSlot] = []
        if id is None:
            self._id = ids.next_id()
            logger.debug("Professor created: id=%d, name=%s", self._id, name)
        else:
            self._id = ids.observe(id)
            logger.debug("Professor loaded: id=%d, name=%s", self._id, name)

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = require(value, "Professor name must not be None")

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, value: str) -> None:
        self._department = require(value, "Professor department must not be None")

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = validate_email(value)

    @property
    def subjects(self) -> tuple[Subject, ...]:
        return tuple(self._subjects)

    @property
    def blocked_slots(self) -> tuple[BlockedSlot, ...]:
        return tuple(self._blocked_slots)

    # Subjects

    def assign_subject(self, subject: Subject) -> None:
        require(subject, "Subject must not be None")
        if subject in self._subjects:
            return
        self._subjects.append(subject)
        logger.debug("Subject %s assigned to professor id=%d", subject.code, self._id)

    def remove_subject(self, subject: Subject) -> bool:
        require(subject, "Subject must not be None")
        if subject not in self._subjects:
            return False
        self._subjects.remove(subject)
        logger.debug("Subject %s removed from professor id=%d", subject.code, self._id)
        return True

    def has_subject(self, subject_code: str) -> bool:
        return any(subject.code == subject_code for subject in self._subjects)

    def verify_has_subject(self, subject_code: str, assignment_id: int) -> None:
        """Raise for ``assignment_id`` when this professor may not teach ``subject_code``."""
        if not self.has_subject(subject_code):
            raise AssignmentConflictError(
                f"Professor {self._name} (id={self._id}) is not authorized for subject {subject_code}",
                first_id=assignment_id,
                second_id=assignment_id,
                conflict_type="PROFESSOR_SUBJECT_MISMATCH",
            )

    # Blocked slots

    def add_blocked_slot(self, blocked_slot: BlockedSlot) -> None:
        require(blocked_slot, "Blocked slot must not be None")
        self._blocked_slots.append(blocked_slot)
        logger.debug(
            "Blocked slot %s %s-%s added for professor id=%d",
            blocked_slot.day,
            blocked_slot.start_time,
            blocked_slot.end_time,
            self._id,
        )

    def block(self, day: str, start_time: time, end_time: time) -> BlockedSlot:
        slot = BlockedSlot(day=day, start_time=start_time, end_time=end_time)
        self.add_blocked_slot(slot)
        return slot

    def remove_blocked_slot(self, blocked_slot: BlockedSlot) -> bool:
        require(blocked_slot, "Blocked slot must not be None")
        if blocked_slot not in self._blocked_slots:
            return False
        self._blocked_slots.remove(blocked_slot)
        logger.debug("Blocked slot %s removed for professor id=%d", blocked_slot, self._id)
        return True

    def clear_blocked_slots(self) -> None:
        count = len(self._blocked_slots)
        self._blocked_slots.clear()
        logger.debug("Cleared %d blocked slot(s) for professor id=%d", count, self._id)

    def conflicting_blocked_slots(self, day: str, start_time: time, end_time: time) -> list[BlockedSlot]:
        require(day, "Day must not be None")
        require(start_time, "Start time must not be None")
        require(end_time, "End time must not be None")
        return [slot for slot in self._blocked_slots if slot.overlaps(day, start_time, end_time)]

    def has_blocked_slot_conflict(self, day: str, start_time: time, end_time: time) -> bool:
        conflicting = self.conflicting_blocked_slots(day, start_time, end_time)
        if conflicting:
            logger.debug(
                "Professor id=%d is blocked on %s between %s and %s",
                self._id,
                day,
                start_time,
                end_time,
            )
        return bool(conflicting)

    def verify_no_blocked_slot_conflict(self, day: str, start_time: time, end_time: time) -> None:
        conflicting = self.conflicting_blocked_slots(day, start_time, end_time)
        if not conflicting:
            return
        slot = conflicting[0]
        raise BlockedSlotConflictError(
            f"Professor {self._name} (id={self._id}) has a blocked slot on {slot.day} "
            f"{slot.start_time:%H:%M}-{slot.end_time:%H:%M} overlapping the proposed window",
            professor_id=self._id,
            day=slot.day,
            start_time=f"{slot.start_time:%H:%M}",
            end_time=f"{slot.end_time:%H:%M}",
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Professor):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Professor(id={self._id}, name={self._name!r}, department={self._department!r}, "
            f"subjects={len(self._subjects)}, blocked_slots={len(self._blocked_slots)})"
        )
