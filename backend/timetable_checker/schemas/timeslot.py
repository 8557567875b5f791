from pydantic import Field, field_validator
from typing import List, Optional

from timetable_checker.schemas.assignment import WireModel, _validate_time


class TimeRangeOut(WireModel):
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")


class TimeWindowPayload(WireModel):
    # Day names are resolved by the rule layer, which also accepts Spanish names.
    day: str = Field(min_length=1, max_length=20)
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return _validate_time(value)


class WorkloadPayload(WireModel):
    existing_start: str = Field(alias="existingStart")
    existing_end: str = Field(alias="existingEnd")
    new_start: str = Field(alias="newStart")
    new_end: str = Field(alias="newEnd")

    @field_validator("existing_start", "existing_end", "new_start", "new_end")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return _validate_time(value)


class TimeWindowValidation(WireModel):
    day: str
    valid: bool
    permitted: List[TimeRangeOut]


class ClosestSlotOut(WireModel):
    day: str
    slot: Optional[TimeRangeOut] = None


class WorkloadOut(WireModel):
    conflict: bool


class DaySlotsOut(WireModel):
    day: str
    slots: List[TimeRangeOut]
