class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class DomainError(AppError):
    """Raised when an entity is built or updated with malformed data."""
    def __init__(self, message: str, status_code: int = 422, details: dict = None):
        super().__init__(message, status_code=status_code, details=details)

class AssignmentConflictError(DomainError):
    """Raised by the fail-fast checks when two assignments (or one with itself) clash."""
    def __init__(self, message: str, first_id: int, second_id: int, conflict_type: str):
        self.first_id = first_id
        self.second_id = second_id
        self.conflict_type = conflict_type
        super().__init__(
            message,
            status_code=409,
            details={"first_id": first_id, "second_id": second_id, "conflict_type": conflict_type},
        )

class BlockedSlotConflictError(DomainError):
    """Raised when a proposed window falls on one of the professor's blocked slots."""
    def __init__(self, message: str, professor_id: int, day: str, start_time: str, end_time: str):
        self.professor_id = professor_id
        self.day = day
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(
            message,
            status_code=409,
            details={
                "professor_id": professor_id,
                "day": day,
                "start_time": start_time,
                "end_time": end_time,
            },
        )

class RoomCapacityExceededError(DomainError):
    def __init__(self, message: str, room_id: int, room_capacity: int, assigned_students: int):
        self.room_id = room_id
        self.room_capacity = room_capacity
        self.assigned_students = assigned_students
        super().__init__(
            message,
            status_code=409,
            details={
                "room_id": room_id,
                "room_capacity": room_capacity,
                "assigned_students": assigned_students,
            },
        )

class IncompatibleRoomError(DomainError):
    def __init__(self, message: str, subject_code: str, room_id: int):
        self.subject_code = subject_code
        self.room_id = room_id
        super().__init__(
            message,
            status_code=409,
            details={"subject_code": subject_code, "room_id": room_id},
        )

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)


def require(value, message: str):
    """Return ``value`` unchanged, or raise ``TypeError`` when it is missing."""
    if value is None:
        raise TypeError(message)
    return value
