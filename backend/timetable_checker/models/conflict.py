from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConflictCategory(str, Enum):
    PROFESSOR = "PROFESSOR"
    RESOURCE = "RESOURCE"
    STUDENT = "STUDENT"
    SCHEDULE = "SCHEDULE"

    @property
    def description(self) -> str:
        return _CATEGORY_DESCRIPTIONS[self]

    @property
    def conflict_types(self) -> frozenset["ConflictType"]:
        return frozenset(kind for kind in ConflictType if kind.category is self)


class ConflictType(str, Enum):
    PROFESSOR_BLOCKED = "PROFESSOR_BLOCKED"
    PROFESSOR = "PROFESSOR"
    ROOM = "ROOM"
    GROUP = "GROUP"
    SESSION_TYPE = "SESSION_TYPE"
    PROFESSOR_SUBJECT_MISMATCH = "PROFESSOR_SUBJECT_MISMATCH"
    ROOM_CAPACITY = "ROOM_CAPACITY"
    ROOM_COMPATIBILITY = "ROOM_COMPATIBILITY"
    PROFESSOR_WORKLOAD = "PROFESSOR_WORKLOAD"
    INVALID_TIME_SLOT = "INVALID_TIME_SLOT"

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self][0]

    @property
    def category(self) -> ConflictCategory:
        return _TYPE_LABELS[self][1]

    def is_in_category(self, category: ConflictCategory) -> bool:
        if category is None:
            raise TypeError("Category must not be None")
        return self.category is category

    @property
    def is_professor_related(self) -> bool:
        return self.category is ConflictCategory.PROFESSOR

    @property
    def is_resource_related(self) -> bool:
        return self.category is ConflictCategory.RESOURCE

    @property
    def is_student_related(self) -> bool:
        return self.category is ConflictCategory.STUDENT

    @property
    def is_schedule_related(self) -> bool:
        return self.category is ConflictCategory.SCHEDULE

    @classmethod
    def find_by_label(cls, label: str) -> "ConflictType | None":
        if label is None:
            raise TypeError("Label must not be None")
        for kind in cls:
            if kind.label == label:
                return kind
        return None

    @classmethod
    def get_by_label(cls, label: str) -> "ConflictType":
        kind = cls.find_by_label(label)
        if kind is None:
            raise ValueError(f"No conflict type has the label: {label}")
        return kind

    @classmethod
    def by_category(cls, category: ConflictCategory) -> frozenset["ConflictType"]:
        if category is None:
            raise TypeError("Category must not be None")
        return category.conflict_types


_CATEGORY_DESCRIPTIONS = {
    ConflictCategory.PROFESSOR: "Professor",
    ConflictCategory.RESOURCE: "Resource",
    ConflictCategory.STUDENT: "Student",
    ConflictCategory.SCHEDULE: "Schedule",
}

_TYPE_LABELS = {
    ConflictType.PROFESSOR_BLOCKED: ("Overlaps a blocked slot of the professor", ConflictCategory.PROFESSOR),
    ConflictType.PROFESSOR: ("Schedule overlap (same professor)", ConflictCategory.PROFESSOR),
    ConflictType.ROOM: ("Schedule overlap (same room)", ConflictCategory.RESOURCE),
    ConflictType.GROUP: ("Schedule overlap (same group)", ConflictCategory.STUDENT),
    ConflictType.SESSION_TYPE: ("Same session type and time", ConflictCategory.SCHEDULE),
    ConflictType.PROFESSOR_SUBJECT_MISMATCH: (
        "Professor not authorized to teach this subject",
        ConflictCategory.PROFESSOR,
    ),
    ConflictType.ROOM_CAPACITY: ("Insufficient room capacity", ConflictCategory.RESOURCE),
    ConflictType.ROOM_COMPATIBILITY: (
        "Room incompatible with subject requirements",
        ConflictCategory.RESOURCE,
    ),
    ConflictType.PROFESSOR_WORKLOAD: (
        "Professor overload (consecutive heavy sessions)",
        ConflictCategory.PROFESSOR,
    ),
    ConflictType.INVALID_TIME_SLOT: ("Outside the permitted time slots", ConflictCategory.SCHEDULE),
}


@dataclass(frozen=True)
class ConflictEdge:
    """One typed reason why ``source_id`` and ``target_id`` clash.

    Self-conflicts use the same id on both ends.
    """

    type: ConflictType
    source_id: int
    target_id: int

    def __post_init__(self) -> None:
        if self.type is None:
            raise TypeError("Conflict type must not be None")

    @property
    def category(self) -> ConflictCategory:
        return self.type.category

    @property
    def description(self) -> str:
        return self.type.label

    @property
    def is_self_conflict(self) -> bool:
        return self.source_id == self.target_id

    def is_type(self, conflict_type: ConflictType) -> bool:
        if conflict_type is None:
            raise TypeError("Conflict type must not be None")
        return self.type is conflict_type

    def is_in_category(self, category: ConflictCategory) -> bool:
        return self.type.is_in_category(category)
