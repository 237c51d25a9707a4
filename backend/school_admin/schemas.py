"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and are the validation
boundary: FastAPI rejects any payload that fails them before a service is
called. Member payloads reference courses by id (`courseIds`) instead of
embedding course objects.
"""

from typing import Annotated, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import models
from .errors import FieldError

REQUIRED_MESSAGE = "must not be null"
BLANK_MESSAGE = "must not be blank"

# bounds of the signed 64-bit INTEGER columns ids are stored in
SQL_INT_MIN = -(2 ** 63)
SQL_INT_MAX = 2 ** 63 - 1
AGE_MAX = 2_147_483_647

StoredId = Annotated[int, Field(ge=SQL_INT_MIN, le=SQL_INT_MAX)]


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError(BLANK_MESSAGE)
    return value


class CourseIn(BaseModel):
    """Payload for creating or replacing a course."""
    name: str
    type: models.CourseType

    @field_validator("name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)


class CourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: models.CourseType


class MemberIn(BaseModel):
    """Payload for creating or replacing a member.

    `courseIds` may be omitted or null, which means "no enrollments".
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str
    age: int = Field(ge=1, le=AGE_MAX)
    group: str
    type: models.MemberType
    course_ids: Optional[Set[StoredId]] = Field(default=None, alias="courseIds")

    @field_validator("name", "group")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)


class MemberOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    age: int
    group: str
    type: models.MemberType
    course_ids: List[int] = Field(default_factory=list, alias="courseIds")

    @classmethod
    def from_model(cls, member: models.Member) -> "MemberOut":
        """Flatten a `Member` and its enrolled courses into a response."""
        return cls(
            id=member.id,
            name=member.name,
            age=member.age,
            group=member.group,
            type=member.type,
            course_ids=sorted(c.id for c in member.courses),
        )


class CountOut(BaseModel):
    """Single integer result of a count report."""
    count: int


class GroupCourseReportOut(BaseModel):
    """Members of one group enrolled in one course, students first."""
    model_config = ConfigDict(populate_by_name=True)

    group: str
    course_id: int = Field(alias="courseId")
    members: List[MemberOut]

    @classmethod
    def from_report(cls, report: dict) -> "GroupCourseReportOut":
        return cls(
            group=report['group'],
            course_id=report['course_id'],
            members=[MemberOut.from_model(m) for m in report['members']],
        )


def field_errors(errors) -> List[FieldError]:
    """Convert pydantic/FastAPI error dicts into `FieldError` pairs.

    The first location element (`body`, `query`, `path`) is dropped so the
    field reads like the external name, e.g. `courseIds` or `type`.
    """
    out = []
    for err in errors:
        loc = [str(p) for p in err.get('loc', ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else (loc[0] if loc else "")
        # an explicit null is reported like an absent key
        if err.get('type') == 'missing' or ('input' in err and err['input'] is None):
            message = REQUIRED_MESSAGE
        else:
            message = err.get('msg', 'invalid value')
            # pydantic prefixes messages raised from validators
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
        out.append(FieldError(field=field or "body", message=message))
    return out
