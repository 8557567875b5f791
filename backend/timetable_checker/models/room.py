from __future__ import annotations

import logging

from timetable_checker.core.exceptions import DomainError, IncompatibleRoomError, RoomCapacityExceededError, require
from timetable_checker.models.ids import IdSequence, room_ids

logger = logging.getLogger(__name__)


def validate_capacity(capacity: int) -> int:
    require(capacity, "Room capacity must not be None")
    if capacity < 0:
        raise DomainError(f"Room capacity cannot be negative: {capacity}", details={"capacity": capacity})
    return capacity


class Room:
    """A teaching room with a seat count and a lab flag.

    Pass ``id`` to load a room with a known id (the sequence is advanced past
    it); omit it to draw a fresh one from ``sequence``.
    """

    def __init__(
        self,
        name: str,
        capacity: int,
        is_lab: bool = False,
        *,
        id: int | None = None,
        sequence: IdSequence | None = None,
    ) -> None:
        ids = sequence or room_ids
        self._name = require(name, "Room name must not be None")
        self._capacity = validate_capacity(capacity)
        self._is_lab = bool(is_lab)
        if id is None:
            self._id = ids.next_id()
            logger.debug("Room created: id=%d, name=%s, capacity=%d, is_lab=%s", self._id, name, capacity, is_lab)
        else:
            self._id = ids.observe(id)
            logger.debug("Room loaded: id=%d, name=%s, capacity=%d, is_lab=%s", self._id, name, capacity, is_lab)

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = require(value, "Room name must not be None")

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        self._capacity = validate_capacity(value)

    @property
    def is_lab(self) -> bool:
        return self._is_lab

    @is_lab.setter
    def is_lab(self, value: bool) -> None:
        self._is_lab = bool(value)

    def has_capacity_for(self, student_count: int) -> bool:
        fits = student_count <= self._capacity
        if not fits:
            logger.debug(
                "Room id=%d lacks capacity: required=%d, available=%d",
                self._id,
                student_count,
                self._capacity,
            )
        return fits

    def verify_capacity_for(self, student_count: int) -> None:
        if not self.has_capacity_for(student_count):
            raise RoomCapacityExceededError(
                f"Room {self._name} (id={self._id}) cannot seat {student_count} students; capacity is {self._capacity}",
                room_id=self._id,
                room_capacity=self._capacity,
                assigned_students=student_count,
            )

    def is_compatible_with_lab_requirement(self, requires_lab: bool) -> bool:
        compatible = not requires_lab or self._is_lab
        if not compatible:
            logger.debug("Room id=%d does not satisfy a lab requirement", self._id)
        return compatible

    def verify_compatibility_with(self, subject) -> None:
        require(subject, "Subject must not be None")
        if not self.is_compatible_with_lab_requirement(subject.requires_lab):
            raise IncompatibleRoomError(
                f"Room {self._name} (id={self._id}) does not meet the lab requirement of subject {subject.code}",
                subject_code=subject.code,
                room_id=self._id,
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Room):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Room(id={self._id}, name={self._name!r}, capacity={self._capacity}, is_lab={self._is_lab})"
