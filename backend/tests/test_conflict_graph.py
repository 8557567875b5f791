from datetime import time
from threading import Barrier, Thread

import pytest

from timetable_checker.core.exceptions import DomainError
from timetable_checker.models import ConflictType
from timetable_checker.services.conflict_graph import ConflictGraph, pair_key, split_pair_key


@pytest.fixture()
def graph():
    return ConflictGraph()


def test_pair_key_is_canonical():
    assert pair_key(7, 3) == pair_key(3, 7) == "3-7"
    assert pair_key(4, 4) == "4-4"
    assert split_pair_key("3-7") == (3, 7)


def test_same_professor_overlap_records_one_professor_edge(graph, make_assignment, make_professor):
    professor = make_professor()
    a = make_assignment(professor=professor, group_id=1, session_type="D")
    b = make_assignment(
        professor=professor,
        group_id=2,
        session_type="N",
        start_time=time(9, 0),
        end_time=time(11, 0),
    )

    assert graph.add_assignment(a) is True
    assert graph.add_assignment(b) is False

    edges = graph.edge_conflicts[pair_key(a.id, b.id)]
    assert [edge.type for edge in edges] == [ConflictType.PROFESSOR]
    assert b.id not in graph.conflict_free_ids
    # Admitted before the clash, so it stays.
    assert a.id in graph.conflict_free_ids


def test_retroactive_policy_drops_both_sides(make_assignment, make_professor):
    graph = ConflictGraph("retroactive")
    professor = make_professor()
    a = make_assignment(professor=professor, group_id=1, session_type="D")
    b = make_assignment(professor=professor, group_id=2, session_type="N", start_time=time(9, 0), end_time=time(11, 0))

    graph.add_all([a, b])

    assert graph.conflict_free_ids == frozenset()
    assert graph.conflict_free_assignments == ()


def test_unknown_policy_is_rejected():
    with pytest.raises(ValueError):
        ConflictGraph("eventually")


def test_capacity_shortfall_is_a_self_edge(graph, make_assignment, make_room):
    assignment = make_assignment(room=make_room(capacity=25), enrolled_students=30)

    assert graph.add_assignment(assignment) is False

    edges = graph.edge_conflicts[f"{assignment.id}-{assignment.id}"]
    assert [edge.type for edge in edges] == [ConflictType.ROOM_CAPACITY]
    assert assignment.id not in graph.conflict_free_ids


def test_lab_subject_in_classroom_is_a_self_edge(graph, make_assignment, make_professor, make_room, make_subject):
    chemistry = make_subject("CHE201", requires_lab=True)
    assignment = make_assignment(
        professor=make_professor(subjects=[chemistry]),
        room=make_room(is_lab=False),
        subject=chemistry,
    )

    graph.add_assignment(assignment)

    assert graph.conflict_statistics()[ConflictType.ROOM_COMPATIBILITY] == 1
    assert graph.conflicts_for_assignment(assignment.id)[assignment.id][0].is_self_conflict


def test_blocked_slot_is_a_direct_query_not_a_graph_edge(graph, make_assignment, make_professor):
    professor = make_professor()
    professor.block("Monday", time(9, 0), time(10, 0))
    assignment = make_assignment(professor=professor, start_time=time(8, 0), end_time=time(10, 0))

    assert assignment.has_blocked_slot_conflict()
    assert graph.add_assignment(assignment) is True
    assert graph.edge_conflicts == {}


def test_different_weekdays_never_conflict(graph, make_assignment, make_professor, make_room):
    professor = make_professor()
    room = make_room()
    monday = make_assignment(professor=professor, room=room, day="Monday")
    tuesday = make_assignment(professor=professor, room=room, day="Tuesday")

    graph.add_all([monday, tuesday])

    assert graph.edge_conflicts == {}
    assert graph.conflict_free_ids == {monday.id, tuesday.id}
    assert graph.assignments_by_day("Tuesday") == (tuesday,)


def test_insertion_order_does_not_change_the_key(make_assignment, make_professor):
    professor = make_professor()
    a = make_assignment(professor=professor, session_type="D")
    b = make_assignment(professor=professor, session_type="N", group_id=2, start_time=time(9, 0))

    forward = ConflictGraph()
    forward.add_all([a, b])
    backward = ConflictGraph()
    backward.add_all([b, a])

    assert set(forward.edge_conflicts) == set(backward.edge_conflicts) == {pair_key(a.id, b.id)}
    # The first one in is always the one left conflict-free.
    assert forward.conflict_free_ids == {a.id}
    assert backward.conflict_free_ids == {b.id}


def test_statistics_and_totals(graph, make_assignment, make_professor, make_room):
    professor = make_professor()
    room = make_room(capacity=10)
    graph.add_assignment(make_assignment(professor=professor, room=room, enrolled_students=5))
    graph.add_assignment(make_assignment(professor=professor, room=room, enrolled_students=15, start_time=time(9, 0)))

    stats = graph.conflict_statistics()
    assert set(stats) == set(ConflictType)
    assert stats[ConflictType.PROFESSOR] == 1
    assert stats[ConflictType.ROOM] == 1
    assert stats[ConflictType.GROUP] == 1
    assert stats[ConflictType.SESSION_TYPE] == 1
    assert stats[ConflictType.ROOM_CAPACITY] == 1
    assert stats[ConflictType.PROFESSOR_BLOCKED] == 0
    assert graph.total_conflicts_count == 5
    assert len(graph) == 2


def test_remove_assignment_drops_its_edges(graph, make_assignment, make_professor):
    professor = make_professor()
    a = make_assignment(professor=professor)
    b = make_assignment(professor=professor, start_time=time(9, 0), session_type="N", group_id=2)
    c = make_assignment(day="Friday")
    graph.add_all([a, b, c])

    assert graph.remove_assignment(b) is True
    assert graph.remove_assignment(b) is False
    assert graph.edge_conflicts == {}
    assert [item.id for item in graph.assignments] == [a.id, c.id]
    assert graph.get_assignment(b.id) is None


def test_clear_empties_everything(graph, make_assignment):
    graph.add_all([make_assignment(), make_assignment(day="Friday")])
    graph.clear()
    assert len(graph) == 0
    assert graph.conflict_free_ids == frozenset()
    assert graph.total_conflicts_count == 0


def test_snapshots_are_detached(graph, make_assignment):
    first = make_assignment()
    graph.add_assignment(first)
    snapshot = graph.assignments
    edges = graph.edge_conflicts

    graph.add_assignment(make_assignment(day="Friday"))

    assert snapshot == (first,)
    assert len(edges) == 0
    with pytest.raises(TypeError):
        edges["1-1"] = ()


def test_add_assignment_requires_an_assignment(graph):
    with pytest.raises(TypeError):
        graph.add_assignment(None)


def test_concurrent_insertions_keep_state_consistent(graph, make_assignment, make_professor, make_room):
    shared_professor = make_professor()
    rooms = [make_room(name=f"R-{index}") for index in range(4)]
    assignments = [
        make_assignment(
            professor=shared_professor,
            room=rooms[index % 4],
            group_id=index,
            day="Monday" if index % 2 == 0 else "Tuesday",
            session_type="D" if index % 3 == 0 else "N",
        )
        for index in range(40)
    ]

    def insert(chunk):
        for assignment in chunk:
            graph.add_assignment(assignment)

    workers = [Thread(target=insert, args=(assignments[offset::4],)) for offset in range(4)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert len(graph) == 40
    assert len(graph.assignments_by_day("Monday")) == 20
    # Every pair on the same day shares the professor, so exactly one assignment per day is clean.
    assert len(graph.conflict_free_ids) == 2
    assert len(graph.edge_conflicts) == 2 * (20 * 19 // 2)


def test_blocked_slot_edges_are_opt_in(make_assignment, make_professor):
    professor = make_professor()
    professor.block("Monday", time(9, 0), time(10, 0))
    assignment = make_assignment(professor=professor, start_time=time(8, 0), end_time=time(10, 0))
    graph = ConflictGraph(record_blocked_slots=True)

    assert graph.add_assignment(assignment) is False
    edges = graph.edge_conflicts[pair_key(assignment.id, assignment.id)]
    assert [edge.type for edge in edges] == [ConflictType.PROFESSOR_BLOCKED]
    assert graph.conflict_statistics()[ConflictType.PROFESSOR_BLOCKED] == 1
    assert assignment.id not in graph.conflict_free_ids


def test_duplicate_id_is_rejected(graph, make_assignment):
    assignment = make_assignment(id=7)
    graph.add_assignment(assignment)

    with pytest.raises(DomainError) as exc_info:
        graph.add_assignment(make_assignment(id=7, day="Tuesday"))
    assert exc_info.value.status_code == 409
    assert len(graph) == 1
    assert graph.get_assignment(7).day == "Monday"

    assert graph.remove_assignment(assignment)
    assert graph.add_assignment(make_assignment(id=7, day="Tuesday")) is True


def test_concurrent_duplicate_ids_admit_one(graph, make_assignment):
    copies = [make_assignment(id=11), make_assignment(id=11)]
    start = Barrier(len(copies))
    outcomes = []

    def insert(assignment):
        start.wait()
        try:
            graph.add_assignment(assignment)
            outcomes.append("added")
        except DomainError as exc:
            outcomes.append(exc.status_code)

    workers = [Thread(target=insert, args=(assignment,)) for assignment in copies]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert sorted(outcomes, key=str) == [409, "added"]
    assert len(graph) == 1
