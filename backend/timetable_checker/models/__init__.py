from timetable_checker.models.assignment import Assignment  # noqa: F401
from timetable_checker.models.blocked_slot import BlockedSlot  # noqa: F401
from timetable_checker.models.conflict import ConflictCategory, ConflictEdge, ConflictType  # noqa: F401
from timetable_checker.models.ids import IdSequence  # noqa: F401
from timetable_checker.models.professor import Professor  # noqa: F401
from timetable_checker.models.room import Room  # noqa: F401
from timetable_checker.models.subject import Subject  # noqa: F401
