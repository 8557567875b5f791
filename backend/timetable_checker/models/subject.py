from __future__ import annotations

import logging
import re

from timetable_checker.core.exceptions import DomainError, require

logger = logging.getLogger(__name__)

SUBJECT_CODE_PATTERN = re.compile(r"^[A-Z0-9]{2,10}$")
MIN_CREDITS = 1
MAX_CREDITS = 10


def validate_subject_code(code: str) -> str:
    require(code, "Subject code must not be None")
    if not SUBJECT_CODE_PATTERN.match(code):
        raise DomainError(
            f"Subject code must be 2-10 uppercase alphanumeric characters without spaces: {code}",
            details={"code": code},
        )
    return code


def validate_credits(credits: int) -> int:
    require(credits, "Credits must not be None")
    if credits < MIN_CREDITS or credits > MAX_CREDITS:
        raise DomainError(
            f"Credits must be between {MIN_CREDITS} and {MAX_CREDITS}: {credits}",
            details={"credits": credits},
        )
    return credits


class Subject:
    """A course that can be taught; identified by its code."""

    def __init__(
        self,
        code: str,
        name: str,
        description: str,
        credits: int,
        requires_lab: bool = False,
    ) -> None:
        self._code = validate_subject_code(code)
        self._name = require(name, "Subject name must not be None")
        self._description = require(description, "Subject description must not be None")
        self._credits = validate_credits(credits)
        self._requires_lab = bool(requires_lab)
        logger.debug(
            "Subject created: code=%s, name=%s, credits=%d, requires_lab=%s",
            code,
            name,
            credits,
            self._requires_lab,
        )

    @property
    def code(self) -> str:
        return self._code

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = require(value, "Subject name must not be None")

    @property
    def description(self) -> str:
        return self._description

    @description.setter
    def description(self, value: str) -> None:
        self._description = require(value, "Subject description must not be None")

    @property
    def credits(self) -> int:
        return self._credits

    @credits.setter
    def credits(self, value: int) -> None:
        self._credits = validate_credits(value)

    @property
    def requires_lab(self) -> bool:
        return self._requires_lab

    @requires_lab.setter
    def requires_lab(self, value: bool) -> None:
        self._requires_lab = bool(value)

    def is_compatible_with(self, room) -> bool:
        require(room, "Room must not be None")
        return not self._requires_lab or room.is_lab

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Subject):
            return NotImplemented
        return self._code == other._code

    def __hash__(self) -> int:
        return hash(self._code)

    def __repr__(self) -> str:
        return (
            f"Subject(code={self._code!r}, name={self._name!r}, "
            f"credits={self._credits}, requires_lab={self._requires_lab})"
        )
