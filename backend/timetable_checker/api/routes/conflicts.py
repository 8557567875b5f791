from fastapi import APIRouter, Depends

from timetable_checker.api.deps import get_app_settings
from timetable_checker.core.config import Settings
from timetable_checker.schemas.assignment import AssignmentPairPayload, TimetablePayload
from timetable_checker.schemas.conflict import ConflictReport, VerifyResult
from timetable_checker.services.assignment_loader import AssignmentLoader
from timetable_checker.services.conflict_classifier import verify_no_conflict
from timetable_checker.services.conflict_service import ConflictService

router = APIRouter()


@router.post("/detect", response_model=ConflictReport)
def detect_conflicts(
    payload: TimetablePayload,
    settings: Settings = Depends(get_app_settings),
):
    # Each report runs against its own graph; the shared one lives under /graph.
    service = ConflictService(
        payload,
        settings.conflict_free_policy,
        record_blocked_slots=settings.record_blocked_slot_edges,
    )
    return service.detect_conflicts()


@router.post("/verify", response_model=VerifyResult)
def verify_pair(payload: AssignmentPairPayload):
    loader = AssignmentLoader()
    first = loader.load(payload.first)
    second = loader.load(payload.second)
    # Raises AssignmentConflictError (409) on the first conflict found.
    verify_no_conflict(first, second)
    return VerifyResult(conflict=False)
