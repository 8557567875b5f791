from fastapi import APIRouter

from timetable_checker.schemas.timeslot import (
    ClosestSlotOut,
    DaySlotsOut,
    TimeRangeOut,
    TimeWindowPayload,
    TimeWindowValidation,
    WorkloadOut,
    WorkloadPayload,
)
from timetable_checker.services import timeslots
from timetable_checker.services.assignment_loader import format_clock, parse_clock

router = APIRouter()


def _range_out(time_range: timeslots.TimeRange) -> TimeRangeOut:
    return TimeRangeOut(start_time=format_clock(time_range.start), end_time=format_clock(time_range.end))


@router.post("/validate", response_model=TimeWindowValidation)
def validate_window(payload: TimeWindowPayload):
    day = timeslots.parse_day_of_week(payload.day)
    valid = timeslots.is_valid_time_range(day, parse_clock(payload.start_time), parse_clock(payload.end_time))
    return TimeWindowValidation(
        day=day,
        valid=valid,
        permitted=[_range_out(item) for item in timeslots.get_valid_time_slots(day)],
    )


@router.post("/closest", response_model=ClosestSlotOut)
def closest_window(payload: TimeWindowPayload):
    day = timeslots.parse_day_of_week(payload.day)
    slot = timeslots.find_closest_valid_time_slot(
        day, parse_clock(payload.start_time), parse_clock(payload.end_time)
    )
    return ClosestSlotOut(day=day, slot=_range_out(slot) if slot else None)


@router.post("/workload", response_model=WorkloadOut)
def workload(payload: WorkloadPayload):
    return WorkloadOut(
        conflict=timeslots.has_workload_conflict(
            parse_clock(payload.existing_start),
            parse_clock(payload.existing_end),
            parse_clock(payload.new_start),
            parse_clock(payload.new_end),
        )
    )


@router.get("/{day}", response_model=DaySlotsOut)
def day_slots(day: str):
    canonical = timeslots.parse_day_of_week(day)
    return DaySlotsOut(day=canonical, slots=[_range_out(item) for item in timeslots.get_valid_time_slots(canonical)])
