from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, List

from timetable_checker.models.assignment import Assignment
from timetable_checker.models.conflict import ConflictEdge, ConflictType
from timetable_checker.schemas.assignment import TimetablePayload
from timetable_checker.schemas.conflict import (
    AdvisoryOut,
    ConflictEdgeOut,
    ConflictGraphOut,
    ConflictPairOut,
    ConflictReport,
    ResolutionAction,
)
from timetable_checker.services import timeslots
from timetable_checker.services.assignment_loader import AssignmentLoader, dump_assignment
from timetable_checker.services.conflict_classifier import conflicting_blocked_slots
from timetable_checker.services.conflict_graph import ConflictFreePolicy, ConflictGraph, split_pair_key

logger = logging.getLogger(__name__)

# Display precedence when one pair carries several conflict types.
PRIMARY_TYPE_ORDER = (
    ConflictType.PROFESSOR_BLOCKED,
    ConflictType.PROFESSOR,
    ConflictType.ROOM,
    ConflictType.GROUP,
    ConflictType.SESSION_TYPE,
    ConflictType.INVALID_TIME_SLOT,
)


def primary_type(edges: List[ConflictEdge]) -> ConflictType:
    present = [edge.type for edge in edges]
    for candidate in PRIMARY_TYPE_ORDER:
        if candidate in present:
            return candidate
    return present[0]


def edge_out(edge: ConflictEdge) -> ConflictEdgeOut:
    return ConflictEdgeOut(
        type=edge.type,
        label=edge.type.label,
        category=edge.category,
        source_id=edge.source_id,
        target_id=edge.target_id,
    )


def pair_out(key: str, pair_edges: Iterable[ConflictEdge]) -> ConflictPairOut:
    pair_edges = list(pair_edges)
    low, high = split_pair_key(key)
    return ConflictPairOut(
        key=key,
        between=[low, high],
        conflicts=[edge_out(edge) for edge in pair_edges],
        primary_type=primary_type(pair_edges),
        self_conflict=low == high,
    )


def graph_out(graph: ConflictGraph) -> ConflictGraphOut:
    return ConflictGraphOut(
        nodes=[dump_assignment(assignment) for assignment in graph.assignments],
        edges=[pair_out(key, pair_edges) for key, pair_edges in graph.edge_conflicts.items()],
        conflict_free_ids=sorted(graph.conflict_free_ids),
        total_conflicts=graph.total_conflicts_count,
    )


def _advisory(conflict_type: ConflictType, description: str, affected_ids: List[int]) -> AdvisoryOut:
    return AdvisoryOut(
        conflict_type=conflict_type,
        label=conflict_type.label,
        category=conflict_type.category,
        description=description,
        affected_ids=affected_ids,
    )


class ConflictService:
    def __init__(
        self,
        payload: TimetablePayload,
        conflict_free_policy: ConflictFreePolicy = "as_of_insertion",
        record_blocked_slots: bool = False,
    ):
        self.payload = payload
        self.loader = AssignmentLoader()
        self.graph = ConflictGraph(conflict_free_policy, record_blocked_slots=record_blocked_slots)

    def detect_conflicts(self) -> ConflictReport:
        assignments = self.loader.load_all(self.payload.assignments)
        self.graph.add_all(assignments)

        report = ConflictReport(
            graph=graph_out(self.graph),
            statistics=self.graph.conflict_statistics(),
            advisories=self.detect_advisories(assignments),
        )
        for pair in report.graph.edges:
            report.suggested_resolutions.extend(self.generate_resolutions(pair))
        logger.info(
            "Conflict report: %d assignment(s), %d conflicting pair(s), %d advisory finding(s)",
            len(assignments),
            len(report.graph.edges),
            len(report.advisories),
        )
        return report

    def detect_advisories(self, assignments: List[Assignment]) -> List[AdvisoryOut]:
        """Blocked slots, permitted windows and workload: rules the graph does not record."""
        advisories: List[AdvisoryOut] = []
        by_professor_day = defaultdict(list)

        for assignment in assignments:
            by_professor_day[(assignment.professor.id, assignment.day)].append(assignment)

            for slot in conflicting_blocked_slots(assignment):
                advisories.append(_advisory(
                    ConflictType.PROFESSOR_BLOCKED,
                    f"Professor {assignment.professor.name} is blocked on {slot.day} "
                    f"{slot.start_time:%H:%M}-{slot.end_time:%H:%M}",
                    [assignment.id],
                ))

            if not timeslots.is_valid_time_range(assignment.day, assignment.start_time, assignment.end_time):
                suggestion = timeslots.find_closest_valid_time_slot(
                    assignment.day, assignment.start_time, assignment.end_time
                )
                hint = f"; closest permitted window is {suggestion}" if suggestion else ""
                advisories.append(_advisory(
                    ConflictType.INVALID_TIME_SLOT,
                    f"{assignment.day} {assignment.start_time:%H:%M}-{assignment.end_time:%H:%M} "
                    f"is outside the permitted windows{hint}",
                    [assignment.id],
                ))

        for (_, day), day_assignments in by_professor_day.items():
            n = len(day_assignments)
            for i in range(n):
                a1 = day_assignments[i]
                for j in range(i + 1, n):
                    a2 = day_assignments[j]
                    if timeslots.has_workload_conflict(a1.start_time, a1.end_time, a2.start_time, a2.end_time):
                        advisories.append(_advisory(
                            ConflictType.PROFESSOR_WORKLOAD,
                            f"Professor {a1.professor.name} teaches back-to-back heavy sessions on {day}",
                            [a1.id, a2.id],
                        ))
        return advisories

    def generate_resolutions(self, pair: ConflictPairOut) -> List[ResolutionAction]:
        resolutions = []
        kinds = {edge.type for edge in pair.conflicts}
        target_id = pair.between[1]

        if ConflictType.ROOM_CAPACITY in kinds:
            assignment = self.graph.get_assignment(target_id)
            resolutions.append(ResolutionAction(
                action_type="change_room",
                description="Find a larger room",
                target_assignment_id=target_id,
                parameters={"minCapacity": assignment.enrolled_students if assignment else None},
            ))
        if ConflictType.ROOM_COMPATIBILITY in kinds:
            resolutions.append(ResolutionAction(
                action_type="change_room",
                description="Move the class to a lab",
                target_assignment_id=target_id,
                parameters={"requiresLab": True},
            ))
        if ConflictType.PROFESSOR_SUBJECT_MISMATCH in kinds:
            resolutions.append(ResolutionAction(
                action_type="change_professor",
                description="Assign a professor authorized for the subject",
                target_assignment_id=target_id,
                parameters={},
            ))
        if ConflictType.ROOM in kinds:
            resolutions.append(ResolutionAction(
                action_type="change_room",
                description="Find a free room",
                target_assignment_id=target_id,
                parameters={},
            ))
        if kinds & {ConflictType.PROFESSOR, ConflictType.GROUP, ConflictType.PROFESSOR_BLOCKED}:
            resolutions.append(ResolutionAction(
                action_type="move_slot",
                description="Move to a different time slot",
                target_assignment_id=target_id,
                parameters={},
            ))

        return resolutions
