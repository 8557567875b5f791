from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from timetable_checker.api.deps import get_graph
from timetable_checker.services.conflict_graph import ConflictGraph

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live(graph: ConflictGraph = Depends(get_graph)) -> dict:
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "assignments": len(graph),
        "conflictFreePolicy": graph.conflict_free_policy,
    }
