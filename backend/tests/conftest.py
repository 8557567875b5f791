from datetime import date, time

import pytest
from fastapi.testclient import TestClient #fake http client: calls the routes without a running server

from timetable_checker.main import create_app
from timetable_checker.models import Assignment, IdSequence, Professor, Room, Subject


@pytest.fixture()
def client():
    app = create_app() #fresh app, so every test starts with an empty conflict graph
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def id_sequences():
    return {"professor": IdSequence(), "room": IdSequence()}


@pytest.fixture()
def make_subject():
    def factory(code="MAT101", requires_lab=False, credits=4, name=None):
        return Subject(code=code, name=name or f"Subject {code}", description="", credits=credits, requires_lab=requires_lab)

    return factory


@pytest.fixture()
def make_professor(id_sequences):
    def factory(name="Ana Lopez", subjects=(), **kwargs):
        professor = Professor(
            name=name,
            department=kwargs.pop("department", "Mathematics"),
            email=kwargs.pop("email", "ana.lopez@uni.edu"),
            sequence=id_sequences["professor"],
            **kwargs,
        )
        for subject in subjects:
            professor.assign_subject(subject)
        return professor

    return factory


@pytest.fixture()
def make_room(id_sequences):
    def factory(name="A-101", capacity=30, is_lab=False, **kwargs):
        return Room(name=name, capacity=capacity, is_lab=is_lab, sequence=id_sequences["room"], **kwargs)

    return factory


@pytest.fixture()
def make_assignment(make_professor, make_room):
    counter = iter(range(1, 10_000))

    def factory(**overrides):
        values = {
            "id": next(counter),
            "assignment_date": date(2025, 3, 3),
            "group_id": 1,
            "group_name": "G1",
            "day": "Monday",
            "start_time": time(8, 0),
            "end_time": time(10, 0),
            "session_type": "D",
            "enrolled_students": 20,
        }
        values.update(overrides)
        if "professor" not in values:
            values["professor"] = make_professor()
        if "room" not in values:
            values["room"] = make_room()
        return Assignment(**values)

    return factory


def _assignment_record(assignment_id, **overrides):
    """A camelCase wire record as the API receives it."""
    record = {
        "id": assignment_id,
        "assignmentDate": "2025-03-03",
        "day": "Monday",
        "startTime": "08:00",
        "endTime": "10:00",
        "groupId": assignment_id,
        "groupName": f"G{assignment_id}",
        "sessionType": "D",
        "enrolledStudents": 20,
        "professor": {
            "id": assignment_id,
            "name": f"Professor {assignment_id}",
            "department": "Mathematics",
            "email": f"prof{assignment_id}@uni.edu",
            "subjects": ["MAT101"],
            "blockedSlots": [],
        },
        "room": {"id": assignment_id, "name": f"A-{100 + assignment_id}", "capacity": 30, "isLab": False},
        "subject": {"code": "MAT101", "name": "Calculus I", "credits": 4, "requiresLab": False},
    }
    record.update(overrides)
    return record


@pytest.fixture()
def assignment_record():
    return _assignment_record
