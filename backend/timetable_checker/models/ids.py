from __future__ import annotations

from threading import Lock


class IdSequence:
    """Monotonic integer id source shared by entities of one kind.

    ``next_id`` hands out fresh ids; ``observe`` records an id that was loaded
    from outside so later fresh ids never collide with it.
    """

    def __init__(self, start: int = 1) -> None:
        self._next = start
        self._lock = Lock()

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
        return value

    def observe(self, explicit_id: int) -> int:
        with self._lock:
            if explicit_id >= self._next:
                self._next = explicit_id + 1
        return explicit_id

    def peek(self) -> int:
        with self._lock:
            return self._next

    def reset(self, start: int = 1) -> None:
        with self._lock:
            self._next = start


professor_ids = IdSequence()
room_ids = IdSequence()
