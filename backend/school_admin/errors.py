"""Domain exceptions raised by services.

Services raise these typed errors; translating them into HTTP responses
is the job of the exception handlers registered in `main`.
"""

from typing import Iterable, List, NamedTuple


class SchoolError(Exception):
    """Base class for all domain errors."""


class NotFoundError(SchoolError):
    """A referenced member or course does not exist."""

    def __init__(self, message: str, missing_ids: Iterable[int] = ()):
        super().__init__(message)
        self.message = message
        self.missing_ids = sorted(missing_ids)

    @classmethod
    def member(cls, member_id: int) -> "NotFoundError":
        return cls(f"Member not found with id: {member_id}", [member_id])

    @classmethod
    def course(cls, course_id: int) -> "NotFoundError":
        return cls(f"Course not found with id: {course_id}", [course_id])

    @classmethod
    def courses(cls, course_ids: Iterable[int]) -> "NotFoundError":
        ids = sorted(course_ids)
        return cls(f"Courses not found with ids: {', '.join(str(i) for i in ids)}", ids)


class FieldError(NamedTuple):
    field: str
    message: str


class ValidationFailed(SchoolError):
    """One or more input fields are missing, blank or out of range."""

    def __init__(self, errors: List[FieldError]):
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))
        self.errors = list(errors)


class ConflictError(SchoolError):
    """A business rule would be violated, e.g. a second teacher on a course.

    No current operation raises this; the HTTP layer maps it to 409.
    """
