from __future__ import annotations

import re
from datetime import date
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from timetable_checker.models.timing import DAY_VALUES

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _validate_day(value: str) -> str:
    day = value.strip()
    if day not in DAY_VALUES:
        raise ValueError("Invalid day value")
    return day


def _validate_time(value: str) -> str:
    value = value.strip()
    # Accept the HH:MM:SS form some exports use and keep HH:MM.
    if len(value) == 8 and value.endswith(":00"):
        value = value[:5]
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return value


class WireModel(BaseModel):
    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }


class BlockedSlotPayload(WireModel):
    day: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        return _validate_day(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return _validate_time(value)


class SubjectPayload(WireModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    credits: int = 1
    requires_lab: bool = Field(default=False, alias="requiresLab")


class ProfessorPayload(WireModel):
    id: int
    name: str = Field(min_length=1, max_length=200)
    department: str = Field(min_length=1, max_length=200)
    email: EmailStr
    subjects: list[SubjectPayload | str] = Field(default_factory=list, max_length=200)
    blocked_slots: list[BlockedSlotPayload] = Field(default_factory=list, alias="blockedSlots", max_length=200)

    @field_validator("subjects")
    @classmethod
    def normalize_subject_codes(cls, value: list[SubjectPayload | str]) -> list[SubjectPayload | str]:
        normalized: list[SubjectPayload | str] = []
        for item in value:
            if isinstance(item, str):
                code = item.strip().upper()
                if not code:
                    continue
                normalized.append(code)
            else:
                normalized.append(item)
        return normalized


class RoomPayload(WireModel):
    id: int
    name: str = Field(min_length=1, max_length=100)
    capacity: int
    is_lab: bool = Field(default=False, alias="isLab")


class AssignmentPayload(WireModel):
    id: int
    assignment_date: date | None = Field(default=None, alias="assignmentDate")
    day: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    group_id: int = Field(alias="groupId")
    group_name: str = Field(min_length=1, max_length=100, alias="groupName")
    session_type: Literal["D", "N"] = Field(alias="sessionType")
    enrolled_students: int = Field(default=0, ge=0, le=5000, alias="enrolledStudents")
    professor: ProfessorPayload
    room: RoomPayload
    subject: SubjectPayload | None = None

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        return _validate_day(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return _validate_time(value)


class TimetablePayload(WireModel):
    assignments: list[AssignmentPayload] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "TimetablePayload":
        seen: set[int] = set()
        duplicates: set[int] = set()
        for item in self.assignments:
            if item.id in seen:
                duplicates.add(item.id)
            else:
                seen.add(item.id)
        if duplicates:
            raise ValueError(f"Duplicate assignment id(s): {', '.join(str(item) for item in sorted(duplicates))}")
        return self


class AssignmentPairPayload(WireModel):
    first: AssignmentPayload
    second: AssignmentPayload
