from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, List

from timetable_checker.models.conflict import ConflictCategory, ConflictType
from timetable_checker.schemas.assignment import AssignmentPayload


class OutModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ConflictEdgeOut(OutModel):
    type: ConflictType
    label: str
    category: ConflictCategory
    source_id: int = Field(alias="sourceId")
    target_id: int = Field(alias="targetId")


class ConflictPairOut(OutModel):
    key: str
    between: List[int]
    conflicts: List[ConflictEdgeOut]
    primary_type: ConflictType = Field(alias="primaryType")
    self_conflict: bool = Field(alias="selfConflict")


class ConflictGraphOut(OutModel):
    nodes: List[AssignmentPayload]
    edges: List[ConflictPairOut]
    conflict_free_ids: List[int] = Field(alias="conflictFreeIds")
    total_conflicts: int = Field(alias="totalConflicts")


class AdvisoryOut(OutModel):
    """A rule violation found by direct queries rather than by the graph."""
    conflict_type: ConflictType = Field(alias="conflictType")
    label: str
    category: ConflictCategory
    description: str
    affected_ids: List[int] = Field(alias="affectedIds")


class ResolutionAction(OutModel):
    action_type: Literal["move_slot", "change_room", "change_professor", "split_group"] = Field(
        alias="actionType"
    )
    description: str
    target_assignment_id: int = Field(alias="targetAssignmentId")
    parameters: dict  # e.g. {"minCapacity": 30}


class ConflictReport(OutModel):
    graph: ConflictGraphOut
    statistics: dict[ConflictType, int]
    advisories: List[AdvisoryOut] = Field(default_factory=list)
    suggested_resolutions: List[ResolutionAction] = Field(
        default_factory=list, alias="suggestedResolutions"
    )


class VerifyResult(OutModel):
    conflict: bool
    conflict_types: List[ConflictType] = Field(default_factory=list, alias="conflictTypes")


class AssignmentConflictsOut(OutModel):
    assignment_id: int = Field(alias="assignmentId")
    conflicts: List[ConflictPairOut]


class GraphStatisticsOut(OutModel):
    assignments: int
    conflict_free: int = Field(alias="conflictFree")
    total_conflicts: int = Field(alias="totalConflicts")
    by_type: dict[ConflictType, int] = Field(alias="byType")


class InsertResult(OutModel):
    assignment_id: int = Field(alias="assignmentId")
    conflict_free: bool = Field(alias="conflictFree")
    conflicts: List[ConflictPairOut] = Field(default_factory=list)
