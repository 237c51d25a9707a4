"""SQLModel data models.

This module defines the school's database tables using SQLModel. Members
own their enrollment set through the `member_courses` link table; courses
carry no back-reference and are joined against the link table when a
"members of this course" query is needed.
"""

import enum
from typing import List, Optional

from sqlmodel import SQLModel, Field, Relationship


class MemberType(str, enum.Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"


class CourseType(str, enum.Enum):
    MAIN = "MAIN"
    SECONDARY = "SECONDARY"


class MemberCourseLink(SQLModel, table=True):
    """Enrollment of a member in a course."""
    __tablename__ = "member_courses"

    member_id: Optional[int] = Field(default=None, foreign_key="members.id", primary_key=True)
    course_id: Optional[int] = Field(default=None, foreign_key="courses.id", primary_key=True, index=True)


class Course(SQLModel, table=True):
    """An instructional course of type MAIN or SECONDARY."""
    __tablename__ = "courses"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
    type: CourseType = Field(index=True, nullable=False)


class Member(SQLModel, table=True):
    """A student or teacher.

    Fields:
    - `group`: free-text label such as a class section, not a foreign key
    - `courses`: the member's enrollment set; replacing this list replaces
      the rows in `member_courses`
    """
    __tablename__ = "members"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
    age: int = Field(nullable=False)
    group: str = Field(index=True, nullable=False)
    type: MemberType = Field(index=True, nullable=False)
    courses: List[Course] = Relationship(link_model=MemberCourseLink)
