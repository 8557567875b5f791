from __future__ import annotations

import logging
from collections.abc import Iterable
from threading import Lock
from time import perf_counter
from types import MappingProxyType
from typing import Literal, Mapping

from timetable_checker.core.exceptions import DomainError, require
from timetable_checker.models.assignment import Assignment
from timetable_checker.models.conflict import ConflictEdge, ConflictType
from timetable_checker.services.conflict_classifier import classify, classify_self, overlaps

logger = logging.getLogger(__name__)

ConflictFreePolicy = Literal["as_of_insertion", "retroactive"]


def pair_key(first_id: int, second_id: int) -> str:
    low, high = sorted((first_id, second_id))
    return f"{low}-{high}"


def split_pair_key(key: str) -> tuple[int, int]:
    low, high = key.split("-")
    return int(low), int(high)


class ConflictGraph:
    """Accumulates assignments and the conflict edges between them.

    Each insertion is compared only against earlier assignments on the same
    weekday. All state sits behind one lock; readers get snapshot copies.

    With the default ``"as_of_insertion"`` policy an assignment stays in the
    conflict-free set once admitted, even if a later insertion clashes with
    it; only the later assignment is left out. ``"retroactive"`` drops both.

    Ids are unique within a graph. Blocked slots are a direct query on the
    assignment unless ``record_blocked_slots`` is set, in which case an
    overlap is also kept as a PROFESSOR_BLOCKED self edge.
    """

    def __init__(
        self,
        conflict_free_policy: ConflictFreePolicy = "as_of_insertion",
        *,
        record_blocked_slots: bool = False,
    ) -> None:
        if conflict_free_policy not in ("as_of_insertion", "retroactive"):
            raise ValueError(f"Unknown conflict-free policy: {conflict_free_policy}")
        self.conflict_free_policy = conflict_free_policy
        self.record_blocked_slots = record_blocked_slots
        self._lock = Lock()
        self._assignments: list[Assignment] = []
        self._ids: set[int] = set()
        self._by_day: dict[str, list[Assignment]] = {}
        self._edges: dict[str, list[ConflictEdge]] = {}
        self._conflict_free: set[int] = set()

    # Mutation

    def add_assignment(self, assignment: Assignment) -> bool:
        """Insert ``assignment`` and return whether it was found conflict-free."""
        require(assignment, "Assignment must not be None")
        started = perf_counter()
        with self._lock:
            if assignment.id in self._ids:
                raise DomainError(
                    f"Assignment id={assignment.id} is already in the graph",
                    status_code=409,
                    details={"assignment_id": assignment.id},
                )
            self._assignments.append(assignment)
            self._ids.add(assignment.id)
            same_day = self._by_day.setdefault(assignment.day, [])
            conflicted = False

            self_key = pair_key(assignment.id, assignment.id)
            if self.record_blocked_slots and assignment.has_blocked_slot_conflict():
                self._edges.setdefault(self_key, []).append(
                    ConflictEdge(ConflictType.PROFESSOR_BLOCKED, assignment.id, assignment.id)
                )
                conflicted = True
            for edges in classify_self(assignment).values():
                self._edges.setdefault(self_key, []).extend(edges)
                conflicted = True

            for existing in same_day:
                if not overlaps(existing, assignment):
                    continue
                conflicts = classify(existing, assignment)
                if not conflicts:
                    continue
                key = pair_key(existing.id, assignment.id)
                for edges in conflicts.values():
                    self._edges.setdefault(key, []).extend(edges)
                conflicted = True
                if self.conflict_free_policy == "retroactive":
                    self._conflict_free.discard(existing.id)
                logger.debug(
                    "Recorded %d conflict type(s) under %s",
                    len(conflicts),
                    key,
                )

            if conflicted:
                logger.debug("Assignment id=%d has conflicts", assignment.id)
            else:
                self._conflict_free.add(assignment.id)
            same_day.append(assignment)

        logger.debug(
            "Inserted assignment id=%d on %s in %.2f ms",
            assignment.id,
            assignment.day,
            (perf_counter() - started) * 1000,
        )
        return not conflicted

    def add_all(self, assignments: Iterable[Assignment]) -> int:
        started = perf_counter()
        count = 0
        for assignment in assignments:
            self.add_assignment(assignment)
            count += 1
        logger.info(
            "Loaded %d assignment(s) in %.1f ms, %d conflicting pair(s)",
            count,
            (perf_counter() - started) * 1000,
            len(self.edge_conflicts),
        )
        return count

    def remove_assignment(self, assignment: Assignment) -> bool:
        """Drop ``assignment`` with every edge key that mentions its id."""
        require(assignment, "Assignment must not be None")
        with self._lock:
            day_bucket = self._by_day.get(assignment.day)
            if not day_bucket or assignment not in day_bucket:
                logger.debug("Assignment id=%d not found on %s", assignment.id, assignment.day)
                return False
            day_bucket.remove(assignment)
            self._assignments.remove(assignment)
            self._ids.discard(assignment.id)
            self._conflict_free.discard(assignment.id)
            stale = [key for key in self._edges if assignment.id in split_pair_key(key)]
            for key in stale:
                del self._edges[key]
            logger.debug("Removed assignment id=%d and %d conflict key(s)", assignment.id, len(stale))
            return True

    def clear(self) -> None:
        with self._lock:
            self._assignments.clear()
            self._ids.clear()
            self._by_day.clear()
            self._edges.clear()
            self._conflict_free.clear()
        logger.debug("Conflict graph cleared")

    # Snapshots

    @property
    def assignments(self) -> tuple[Assignment, ...]:
        with self._lock:
            return tuple(self._assignments)

    @property
    def conflict_free_ids(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._conflict_free)

    @property
    def conflict_free_assignments(self) -> tuple[Assignment, ...]:
        with self._lock:
            return tuple(item for item in self._assignments if item.id in self._conflict_free)

    @property
    def edge_conflicts(self) -> Mapping[str, tuple[ConflictEdge, ...]]:
        with self._lock:
            return MappingProxyType({key: tuple(edges) for key, edges in self._edges.items()})

    def assignments_by_day(self, day: str) -> tuple[Assignment, ...]:
        require(day, "Day must not be None")
        with self._lock:
            return tuple(self._by_day.get(day, ()))

    def get_assignment(self, assignment_id: int) -> Assignment | None:
        with self._lock:
            for assignment in self._assignments:
                if assignment.id == assignment_id:
                    return assignment
        return None

    def conflicts_for_assignment(self, assignment_id: int) -> dict[int, tuple[ConflictEdge, ...]]:
        """Edges touching ``assignment_id``, keyed by the other assignment's id."""
        with self._lock:
            result: dict[int, tuple[ConflictEdge, ...]] = {}
            for key, edges in self._edges.items():
                low, high = split_pair_key(key)
                if low == assignment_id:
                    result[high] = tuple(edges)
                elif high == assignment_id:
                    result[low] = tuple(edges)
            return result

    @property
    def total_conflicts_count(self) -> int:
        with self._lock:
            return sum(len(edges) for edges in self._edges.values())

    def conflict_statistics(self) -> dict[ConflictType, int]:
        with self._lock:
            stats = {kind: 0 for kind in ConflictType}
            for edges in self._edges.values():
                for edge in edges:
                    stats[edge.type] += 1
            return stats

    def __len__(self) -> int:
        with self._lock:
            return len(self._assignments)
