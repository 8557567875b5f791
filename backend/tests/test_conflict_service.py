import pytest

from timetable_checker.models import ConflictEdge, ConflictType
from timetable_checker.schemas.assignment import TimetablePayload
from timetable_checker.services.conflict_service import ConflictService, primary_type


@pytest.fixture
def shared_professor():
    return {
        "id": 1,
        "name": "Ana Lopez",
        "department": "Mathematics",
        "email": "ana.lopez@uni.edu",
        "subjects": ["MAT101"],
        "blockedSlots": [],
    }


def test_detect_room_conflict(assignment_record):
    room = {"id": 9, "name": "A-101", "capacity": 100, "isLab": False}
    payload = TimetablePayload(assignments=[
        assignment_record(1, room=room),
        assignment_record(2, room=room, sessionType="N"),
    ])

    report = ConflictService(payload).detect_conflicts()

    assert len(report.graph.edges) == 1
    pair = report.graph.edges[0]
    assert pair.key == "1-2"
    assert pair.primary_type == ConflictType.ROOM
    assert [edge.type for edge in pair.conflicts] == [ConflictType.ROOM]
    assert report.graph.conflict_free_ids == [1]
    assert any(item.action_type == "change_room" for item in report.suggested_resolutions)


def test_detect_professor_conflict(assignment_record, shared_professor):
    payload = TimetablePayload(assignments=[
        assignment_record(1, professor=shared_professor),
        assignment_record(2, professor=shared_professor, sessionType="N", startTime="09:00", endTime="11:00"),
    ])

    report = ConflictService(payload).detect_conflicts()

    pair = report.graph.edges[0]
    assert pair.primary_type == ConflictType.PROFESSOR
    assert pair.conflicts[0].label == "Schedule overlap (same professor)"
    assert report.statistics[ConflictType.PROFESSOR] == 1
    assert [item.action_type for item in report.suggested_resolutions] == ["move_slot"]


def test_detect_capacity_conflict(assignment_record):
    payload = TimetablePayload(assignments=[assignment_record(3, enrolledStudents=150)])

    report = ConflictService(payload).detect_conflicts()

    assert len(report.graph.edges) == 1
    pair = report.graph.edges[0]
    assert pair.self_conflict
    assert pair.between == [3, 3]
    assert pair.conflicts[0].type == ConflictType.ROOM_CAPACITY
    assert report.suggested_resolutions[0].parameters == {"minCapacity": 150}
    assert report.graph.conflict_free_ids == []


def test_no_conflicts(assignment_record, shared_professor):
    payload = TimetablePayload(assignments=[
        assignment_record(1, professor=shared_professor),
        assignment_record(2, professor=shared_professor, startTime="10:30", endTime="12:00"),
    ])

    report = ConflictService(payload).detect_conflicts()

    assert report.graph.edges == []
    assert report.graph.conflict_free_ids == [1, 2]
    assert report.graph.total_conflicts == 0
    assert report.advisories == []


def test_retroactive_policy_in_report(assignment_record, shared_professor):
    payload = TimetablePayload(assignments=[
        assignment_record(1, professor=shared_professor),
        assignment_record(2, professor=shared_professor, sessionType="N", startTime="09:00", endTime="11:00"),
    ])

    report = ConflictService(payload, "retroactive").detect_conflicts()

    assert report.graph.conflict_free_ids == []


def test_advisories_for_blocked_slot_window_and_workload(assignment_record, shared_professor):
    shared_professor["blockedSlots"] = [{"day": "Tuesday", "startTime": "07:00", "endTime": "08:30"}]
    payload = TimetablePayload(assignments=[
        assignment_record(1, professor=shared_professor, day="Tuesday"),
        assignment_record(2, professor=shared_professor, day="Wednesday", startTime="16:00", endTime="18:00"),
        assignment_record(3, professor=shared_professor, day="Wednesday", startTime="18:00", endTime="20:00", sessionType="N"),
        assignment_record(4, day="Sunday"),
    ])

    report = ConflictService(payload).detect_conflicts()
    found = {(item.conflict_type, tuple(item.affected_ids)) for item in report.advisories}

    assert (ConflictType.PROFESSOR_BLOCKED, (1,)) in found
    assert (ConflictType.PROFESSOR_WORKLOAD, (2, 3)) in found
    assert (ConflictType.INVALID_TIME_SLOT, (4,)) in found
    # Advisories are not graph edges.
    assert report.statistics[ConflictType.PROFESSOR_BLOCKED] == 0


def test_nodes_echo_loaded_records(assignment_record):
    payload = TimetablePayload(assignments=[assignment_record(5)])

    report = ConflictService(payload).detect_conflicts()
    node = report.graph.nodes[0]

    assert node.id == 5
    assert node.start_time == "08:00"
    assert node.professor.subjects[0].code == "MAT101"
    assert node.subject.credits == 4


def test_primary_type_precedence():
    edges = [
        ConflictEdge(ConflictType.SESSION_TYPE, 1, 2),
        ConflictEdge(ConflictType.GROUP, 1, 2),
        ConflictEdge(ConflictType.ROOM, 1, 2),
    ]
    assert primary_type(edges) == ConflictType.ROOM
    assert primary_type([ConflictEdge(ConflictType.ROOM_CAPACITY, 3, 3)]) == ConflictType.ROOM_CAPACITY


def test_bare_subject_code_is_filled_in_by_later_full_record(assignment_record):
    professor = {
        "id": 1,
        "name": "Ana Lopez",
        "department": "Chemistry",
        "email": "ana.lopez@uni.edu",
        "subjects": ["LAB101"],
        "blockedSlots": [],
    }
    payload = TimetablePayload(assignments=[
        assignment_record(1, professor=professor, subject=None),
        assignment_record(
            2,
            professor=professor,
            day="Tuesday",
            subject={"code": "LAB101", "name": "Lab Practice", "credits": 3, "requiresLab": True},
        ),
    ])

    report = ConflictService(payload).detect_conflicts()
    pairs = {pair.key: pair for pair in report.graph.edges}

    assert ConflictType.ROOM_COMPATIBILITY in {edge.type for edge in pairs["2-2"].conflicts}
    assert report.graph.conflict_free_ids == [1]
    lab = report.graph.nodes[0].professor.subjects[0]
    assert (lab.name, lab.credits, lab.requires_lab) == ("Lab Practice", 3, True)


def test_blocked_slot_edges_in_report(assignment_record, shared_professor):
    shared_professor["blockedSlots"] = [{"day": "Monday", "startTime": "09:00", "endTime": "10:00"}]
    payload = TimetablePayload(assignments=[assignment_record(1, professor=shared_professor)])

    report = ConflictService(payload, record_blocked_slots=True).detect_conflicts()

    pair = report.graph.edges[0]
    assert pair.key == "1-1"
    assert pair.primary_type == ConflictType.PROFESSOR_BLOCKED
    assert report.statistics[ConflictType.PROFESSOR_BLOCKED] == 1
    assert report.graph.conflict_free_ids == []
    assert [item.action_type for item in report.suggested_resolutions] == ["move_slot"]
