from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, time
from threading import RLock

from timetable_checker.models.assignment import Assignment
from timetable_checker.models.blocked_slot import BlockedSlot
from timetable_checker.models.ids import IdSequence
from timetable_checker.models.professor import Professor
from timetable_checker.models.room import Room
from timetable_checker.models.subject import Subject
from timetable_checker.schemas.assignment import (
    AssignmentPayload,
    BlockedSlotPayload,
    ProfessorPayload,
    RoomPayload,
    SubjectPayload,
)

logger = logging.getLogger(__name__)


def parse_clock(value: str) -> time:
    hours, minutes = value.split(":")[:2]
    return time(int(hours), int(minutes))


def format_clock(value: time) -> str:
    return f"{value:%H:%M}"


class AssignmentLoader:
    """Turns wire records into domain entities.

    Professors and rooms are reused by id and subjects by code, so every
    assignment that names professor 7 shares one ``Professor`` object. The
    first record seen for an id wins. A subject known only by a bare code on a
    professor is a placeholder until a full subject record for that code
    arrives, which then fills it in place.

    One loader may serve concurrent requests; its caches sit behind a
    re-entrant lock because professor loading resolves subjects.
    """

    def __init__(
        self,
        *,
        professor_sequence: IdSequence | None = None,
        room_sequence: IdSequence | None = None,
    ) -> None:
        self._professor_sequence = professor_sequence or IdSequence()
        self._room_sequence = room_sequence or IdSequence()
        self._lock = RLock()
        self._professors: dict[int, Professor] = {}
        self._rooms: dict[int, Room] = {}
        self._subjects: dict[str, Subject] = {}
        self._placeholder_codes: set[str] = set()

    def subject(self, payload: SubjectPayload) -> Subject:
        with self._lock:
            cached = self._subjects.get(payload.code)
            if cached is None:
                subject = Subject(
                    code=payload.code,
                    name=payload.name,
                    description=payload.description,
                    credits=payload.credits,
                    requires_lab=payload.requires_lab,
                )
                self._subjects[subject.code] = subject
                return subject
            if payload.code in self._placeholder_codes:
                # Professors already hold this object, so update it rather than replace it.
                cached.credits = payload.credits
                cached.name = payload.name
                cached.description = payload.description
                cached.requires_lab = payload.requires_lab
                self._placeholder_codes.discard(payload.code)
                logger.debug("Subject %s filled in from a full record", payload.code)
            return cached

    def _subject_by_code(self, code: str) -> Subject:
        with self._lock:
            cached = self._subjects.get(code)
            if cached is not None:
                return cached
            subject = Subject(code=code, name=code, description="", credits=1)
            self._subjects[code] = subject
            self._placeholder_codes.add(code)
            return subject

    def professor(self, payload: ProfessorPayload) -> Professor:
        with self._lock:
            cached = self._professors.get(payload.id)
            if cached is not None:
                return cached
            professor = Professor(
                name=payload.name,
                department=payload.department,
                email=str(payload.email),
                id=payload.id,
                sequence=self._professor_sequence,
            )
            for item in payload.subjects:
                if isinstance(item, str):
                    professor.assign_subject(self._subject_by_code(item))
                else:
                    professor.assign_subject(self.subject(item))
            for slot in payload.blocked_slots:
                professor.add_blocked_slot(
                    BlockedSlot(
                        day=slot.day,
                        start_time=parse_clock(slot.start_time),
                        end_time=parse_clock(slot.end_time),
                    )
                )
            self._professors[professor.id] = professor
            return professor

    def room(self, payload: RoomPayload) -> Room:
        with self._lock:
            cached = self._rooms.get(payload.id)
            if cached is not None:
                return cached
            room = Room(
                name=payload.name,
                capacity=payload.capacity,
                is_lab=payload.is_lab,
                id=payload.id,
                sequence=self._room_sequence,
            )
            self._rooms[room.id] = room
            return room

    def load(self, payload: AssignmentPayload) -> Assignment:
        with self._lock:
            subject = self.subject(payload.subject) if payload.subject is not None else None
            professor = self.professor(payload.professor)
            room = self.room(payload.room)
        return Assignment(
            id=payload.id,
            assignment_date=payload.assignment_date or date.today(),
            professor=professor,
            room=room,
            subject=subject,
            group_id=payload.group_id,
            group_name=payload.group_name,
            day=payload.day,
            start_time=parse_clock(payload.start_time),
            end_time=parse_clock(payload.end_time),
            session_type=payload.session_type,
            enrolled_students=payload.enrolled_students,
        )

    def load_all(self, payloads: Iterable[AssignmentPayload]) -> list[Assignment]:
        assignments = [self.load(payload) for payload in payloads]
        logger.info(
            "Loaded %d assignment(s) with %d professor(s), %d room(s), %d subject(s)",
            len(assignments),
            len(self._professors),
            len(self._rooms),
            len(self._subjects),
        )
        return assignments


def dump_subject(subject: Subject) -> SubjectPayload:
    return SubjectPayload(
        code=subject.code,
        name=subject.name,
        description=subject.description,
        credits=subject.credits,
        requires_lab=subject.requires_lab,
    )


def dump_assignment(assignment: Assignment) -> AssignmentPayload:
    """Wire record for an assignment, shaped like the records it was loaded from."""
    professor = assignment.professor
    room = assignment.room
    return AssignmentPayload(
        id=assignment.id,
        assignment_date=assignment.assignment_date,
        day=assignment.day,
        start_time=format_clock(assignment.start_time),
        end_time=format_clock(assignment.end_time),
        group_id=assignment.group_id,
        group_name=assignment.group_name,
        session_type=assignment.session_type,
        enrolled_students=assignment.enrolled_students,
        professor=ProfessorPayload(
            id=professor.id,
            name=professor.name,
            department=professor.department,
            email=professor.email,
            subjects=[dump_subject(subject) for subject in professor.subjects],
            blocked_slots=[
                BlockedSlotPayload(
                    day=slot.day,
                    start_time=format_clock(slot.start_time),
                    end_time=format_clock(slot.end_time),
                )
                for slot in professor.blocked_slots
            ],
        ),
        room=RoomPayload(id=room.id, name=room.name, capacity=room.capacity, is_lab=room.is_lab),
        subject=dump_subject(assignment.subject) if assignment.subject is not None else None,
    )
