from fastapi import APIRouter, Depends, HTTPException, status

from timetable_checker.api.deps import get_graph, get_loader
from timetable_checker.schemas.assignment import AssignmentPayload
from timetable_checker.schemas.conflict import (
    AssignmentConflictsOut,
    ConflictGraphOut,
    GraphStatisticsOut,
    InsertResult,
)
from timetable_checker.services.assignment_loader import AssignmentLoader
from timetable_checker.services.conflict_graph import ConflictGraph, pair_key
from timetable_checker.services.conflict_service import graph_out, pair_out

router = APIRouter()


def _conflicts_of(graph: ConflictGraph, assignment_id: int) -> list:
    return [
        pair_out(pair_key(assignment_id, other_id), edges)
        for other_id, edges in sorted(graph.conflicts_for_assignment(assignment_id).items())
    ]


@router.get("", response_model=ConflictGraphOut)
def read_graph(graph: ConflictGraph = Depends(get_graph)):
    return graph_out(graph)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_graph(graph: ConflictGraph = Depends(get_graph)):
    graph.clear()


@router.get("/statistics", response_model=GraphStatisticsOut)
def read_statistics(graph: ConflictGraph = Depends(get_graph)):
    return GraphStatisticsOut(
        assignments=len(graph),
        conflict_free=len(graph.conflict_free_ids),
        total_conflicts=graph.total_conflicts_count,
        by_type=graph.conflict_statistics(),
    )


@router.post("/assignments", response_model=InsertResult, status_code=status.HTTP_201_CREATED)
def insert_assignment(
    payload: AssignmentPayload,
    graph: ConflictGraph = Depends(get_graph),
    loader: AssignmentLoader = Depends(get_loader),
):
    assignment = loader.load(payload)
    # Raises DomainError (409) when the id is already in the graph.
    conflict_free = graph.add_assignment(assignment)
    return InsertResult(
        assignment_id=assignment.id,
        conflict_free=conflict_free,
        conflicts=_conflicts_of(graph, assignment.id),
    )


@router.delete("/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_assignment(assignment_id: int, graph: ConflictGraph = Depends(get_graph)):
    assignment = graph.get_assignment(assignment_id)
    if assignment is None or not graph.remove_assignment(assignment):
        raise HTTPException(status_code=404, detail="Assignment not found")


@router.get("/assignments/{assignment_id}/conflicts", response_model=AssignmentConflictsOut)
def read_assignment_conflicts(assignment_id: int, graph: ConflictGraph = Depends(get_graph)):
    if graph.get_assignment(assignment_id) is None:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return AssignmentConflictsOut(
        assignment_id=assignment_id,
        conflicts=_conflicts_of(graph, assignment_id),
    )
