from datetime import time

import pytest

from timetable_checker.core.exceptions import DomainError
from timetable_checker.services import timeslots
from timetable_checker.services.timeslots import TimeRange


@pytest.mark.parametrize(
    "name,expected",
    [
        ("monday", "Monday"),
        ("  FRIDAY ", "Friday"),
        ("Miércoles", "Wednesday"),
        ("miercoles", "Wednesday"),
        ("Sábado", "Saturday"),
        ("domingo", "Sunday"),
    ],
)
def test_parse_day_of_week(name, expected):
    assert timeslots.parse_day_of_week(name) == expected


def test_parse_day_of_week_rejects_unknown_names():
    with pytest.raises(DomainError):
        timeslots.parse_day_of_week("Someday")
    with pytest.raises(DomainError):
        timeslots.parse_day_of_week("   ")


def test_valid_time_slots_per_day():
    assert len(timeslots.get_valid_time_slots("Monday")) == 4
    assert timeslots.get_valid_time_slots("Saturday") == (TimeRange(time(14, 0), time(17, 0)),)
    assert timeslots.get_valid_time_slots("Sunday") == ()


def test_is_valid_time_range():
    assert timeslots.is_valid_time_range("Monday", time(8, 0), time(10, 0))
    assert timeslots.is_valid_time_range("Monday", time(8, 0), time(12, 0))
    # Spans the lunch gap, so no single permitted range contains it.
    assert not timeslots.is_valid_time_range("Monday", time(11, 0), time(13, 0))
    assert not timeslots.is_valid_time_range("Saturday", time(9, 0), time(11, 0))
    assert not timeslots.is_valid_time_range("Sunday", time(9, 0), time(11, 0))

    with pytest.raises(DomainError):
        timeslots.is_valid_time_range("Monday", time(10, 0), time(9, 0))


def test_workload_conflict_is_afternoon_next_to_long_evening():
    assert timeslots.has_workload_conflict(time(16, 0), time(18, 0), time(18, 0), time(20, 0))
    assert timeslots.has_workload_conflict(time(18, 0), time(21, 0), time(16, 0), time(18, 0))
    assert not timeslots.has_workload_conflict(time(16, 0), time(18, 0), time(18, 0), time(19, 0))
    assert not timeslots.has_workload_conflict(time(14, 0), time(16, 0), time(18, 0), time(20, 0))


def test_find_closest_valid_time_slot():
    closest = timeslots.find_closest_valid_time_slot("Monday", time(12, 30), time(13, 30))
    assert closest == TimeRange(time(8, 0), time(12, 0))

    closest = timeslots.find_closest_valid_time_slot("Monday", time(13, 45), time(15, 0))
    assert closest == TimeRange(time(14, 0), time(16, 0))

    assert timeslots.find_closest_valid_time_slot("Saturday", time(9, 0), time(13, 0)) is None
    assert timeslots.find_closest_valid_time_slot("Sunday", time(9, 0), time(10, 0)) is None


def test_time_range():
    window = TimeRange(time(14, 0), time(16, 0))
    assert window.duration_minutes == 120
    assert window.contains(time(14, 0), time(16, 0))
    assert not window.contains(time(13, 59), time(15, 0))
    assert window.distance_minutes(time(13, 0)) == 60
    assert window.distance_minutes(time(17, 30)) == 90
    assert str(window) == "14:00 - 16:00"
    with pytest.raises(DomainError):
        TimeRange(time(16, 0), time(14, 0))
    with pytest.raises(DomainError):
        TimeRange(time(14, 0), time(14, 0))
