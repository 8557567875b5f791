"""Pairwise and self conflict classification between assignments."""
from __future__ import annotations

import logging
from datetime import time

from timetable_checker.core.exceptions import AssignmentConflictError, DomainError, require
from timetable_checker.models.assignment import Assignment
from timetable_checker.models.blocked_slot import BlockedSlot
from timetable_checker.models.conflict import ConflictEdge, ConflictType
from timetable_checker.models.timing import minutes_between, windows_touch_or_overlap

logger = logging.getLogger(__name__)

Classification = dict[ConflictType, list[ConflictEdge]]


def overlaps(first: Assignment, second: Assignment) -> bool:
    """Same weekday and overlapping windows; touching boundaries count as overlap."""
    require(first, "First assignment must not be None")
    require(second, "Second assignment must not be None")
    if first.day != second.day:
        return False
    return windows_touch_or_overlap(first.start_time, first.end_time, second.start_time, second.end_time)


def _record(result: Classification, conflict_type: ConflictType, first: Assignment, second: Assignment) -> None:
    result.setdefault(conflict_type, []).append(ConflictEdge(conflict_type, first.id, second.id))


def classify_self(assignment: Assignment) -> Classification:
    require(assignment, "Assignment must not be None")
    result: Classification = {}
    if not assignment.has_room_capacity():
        _record(result, ConflictType.ROOM_CAPACITY, assignment, assignment)
        logger.debug(
            "Room capacity exceeded for assignment id=%d: required=%d, available=%d",
            assignment.id,
            assignment.enrolled_students,
            assignment.room.capacity,
        )
    if not assignment.has_room_compatibility():
        _record(result, ConflictType.ROOM_COMPATIBILITY, assignment, assignment)
        logger.debug(
            "Room id=%d is not a lab but subject %s requires one (assignment id=%d)",
            assignment.room.id,
            assignment.subject.code,
            assignment.id,
        )
    if not assignment.has_professor_subject_authorization():
        _record(result, ConflictType.PROFESSOR_SUBJECT_MISMATCH, assignment, assignment)
        logger.debug(
            "Professor id=%d is not authorized for subject %s (assignment id=%d)",
            assignment.professor.id,
            assignment.subject.code,
            assignment.id,
        )
    return result


def classify_pair(first: Assignment, second: Assignment) -> Classification:
    result: Classification = {}
    if not overlaps(first, second):
        return result
    if first.professor.id == second.professor.id:
        _record(result, ConflictType.PROFESSOR, first, second)
    if first.room.id == second.room.id:
        _record(result, ConflictType.ROOM, first, second)
    if first.group_id == second.group_id:
        _record(result, ConflictType.GROUP, first, second)
    if first.session_type == second.session_type:
        _record(result, ConflictType.SESSION_TYPE, first, second)

    if result:
        logger.debug(
            "Found %d conflict type(s) between id=%d and id=%d: %s",
            len(result),
            first.id,
            second.id,
            ", ".join(kind.value for kind in result),
        )
    return result


def classify(first: Assignment, second: Assignment) -> Classification:
    """Every conflict type that applies to the pair, each with its edges.

    Passing the same assignment twice (same id) runs the self checks instead.
    """
    require(first, "First assignment must not be None")
    require(second, "Second assignment must not be None")
    if first.id == second.id:
        return classify_self(first)
    return classify_pair(first, second)


def verify_no_conflict(first: Assignment, second: Assignment) -> None:
    conflicts = classify(first, second)
    if not conflicts:
        return
    conflict_type = next(iter(conflicts))
    raise AssignmentConflictError(
        f"Conflict between assignments id={first.id} and id={second.id}: {conflict_type.label}",
        first_id=first.id,
        second_id=second.id,
        conflict_type=conflict_type.value,
    )


def conflicting_blocked_slots(assignment: Assignment) -> list[BlockedSlot]:
    require(assignment, "Assignment must not be None")
    return assignment.conflicting_blocked_slots()


def overlap_minutes(start1: time, end1: time, start2: time, end2: time) -> int:
    """Minutes shared by two windows on the same day, 0 when disjoint."""
    for start, end in ((start1, end1), (start2, end2)):
        require(start, "Start time must not be None")
        require(end, "End time must not be None")
        if not end > start:
            raise DomainError("End time must be after start time")
    if not windows_touch_or_overlap(start1, end1, start2, end2):
        return 0
    return minutes_between(max(start1, start2), min(end1, end2))


def overlap_percentage(range_start: time, range_end: time, other_start: time, other_end: time) -> float:
    shared = overlap_minutes(range_start, range_end, other_start, other_end)
    if shared == 0:
        return 0.0
    return shared * 100.0 / minutes_between(range_start, range_end)
