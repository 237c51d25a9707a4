"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (courses,
members). Repositories return SQLModel objects and perform
commits/refreshes where appropriate. Queries that return members load
their enrollment set eagerly so callers can build responses without
extra round trips.
"""

from typing import Iterable, List, Optional
from sqlmodel import Session, select
from sqlalchemy import func
from sqlalchemy.orm import selectinload
from . import models


class CourseRepository:
    """CRUD and count queries for `Course` objects."""
    def __init__(self, session: Session):
        self.session = session

    def save(self, course: models.Course) -> models.Course:
        """Persist a new or modified course and return the managed instance."""
        self.session.add(course)
        self.session.commit()
        self.session.refresh(course)
        return course

    def get(self, course_id: int) -> Optional[models.Course]:
        """Get a `Course` by primary key."""
        return self.session.get(models.Course, course_id)

    def exists(self, course_id: int) -> bool:
        stmt = select(models.Course.id).where(models.Course.id == course_id)
        return self.session.exec(stmt).first() is not None

    def list_all(self) -> List[models.Course]:
        """Return every course in insertion order."""
        stmt = select(models.Course).order_by(models.Course.id)
        return self.session.exec(stmt).all()

    def find_all_by_ids(self, course_ids: Iterable[int]) -> List[models.Course]:
        """Return the courses whose id is in `course_ids` with a single query.

        Unknown ids are silently absent from the result.
        """
        ids = list(course_ids)
        if not ids:
            return []
        stmt = select(models.Course).where(models.Course.id.in_(ids)).order_by(models.Course.id)
        return self.session.exec(stmt).all()

    def delete(self, course: models.Course) -> None:
        """Delete a course together with any enrollment links pointing at it.

        Members own the association, so the links are removed explicitly
        rather than relying on a back-reference.
        """
        links = self.session.exec(
            select(models.MemberCourseLink).where(models.MemberCourseLink.course_id == course.id)
        ).all()
        for link in links:
            self.session.delete(link)
        self.session.delete(course)
        self.session.commit()

    def count_by_type(self, course_type: models.CourseType) -> int:
        """Return how many courses have `course_type`."""
        stmt = select(func.count()).select_from(models.Course).where(models.Course.type == course_type)
        return self.session.exec(stmt).one()


class MemberRepository:
    """CRUD, count and report queries for `Member` objects."""
    def __init__(self, session: Session):
        self.session = session

    def _select(self):
        return select(models.Member).options(selectinload(models.Member.courses))

    def _select_in_course(self, course_id: int):
        return self._select().join(
            models.MemberCourseLink, models.MemberCourseLink.member_id == models.Member.id
        ).where(models.MemberCourseLink.course_id == course_id)

    def save(self, member: models.Member) -> models.Member:
        """Persist a member and its enrollment links in one commit."""
        self.session.add(member)
        self.session.commit()
        self.session.refresh(member)
        return member

    def get(self, member_id: int) -> Optional[models.Member]:
        """Get a `Member` by primary key with its courses loaded."""
        stmt = self._select().where(models.Member.id == member_id)
        return self.session.exec(stmt).first()

    def delete(self, member: models.Member) -> None:
        """Delete a member; its `member_courses` rows go with it."""
        self.session.delete(member)
        self.session.commit()

    def count_by_type(self, member_type: models.MemberType) -> int:
        stmt = select(func.count()).select_from(models.Member).where(models.Member.type == member_type)
        return self.session.exec(stmt).one()

    def list_by_type(self, member_type: models.MemberType) -> List[models.Member]:
        stmt = self._select().where(models.Member.type == member_type).order_by(models.Member.id)
        return self.session.exec(stmt).all()

    def find_by_group(self, group: str) -> List[models.Member]:
        """Return all members (any type) whose group equals `group`."""
        stmt = self._select().where(models.Member.group == group).order_by(models.Member.id)
        return self.session.exec(stmt).all()

    def find_by_type_and_course(self, member_type: models.MemberType, course_id: int) -> List[models.Member]:
        stmt = self._select_in_course(course_id).where(models.Member.type == member_type).order_by(models.Member.id)
        return self.session.exec(stmt).all()

    def find_by_type_and_group_and_course(self, member_type: models.MemberType, group: str, course_id: int) -> List[models.Member]:
        stmt = self._select_in_course(course_id).where(
            models.Member.type == member_type,
            models.Member.group == group
        ).order_by(models.Member.id)
        return self.session.exec(stmt).all()

    def find_by_type_and_min_age_and_course(self, member_type: models.MemberType, min_age: int, course_id: int) -> List[models.Member]:
        """Return members of `member_type` aged `min_age` or older enrolled in `course_id`."""
        stmt = self._select_in_course(course_id).where(
            models.Member.type == member_type,
            models.Member.age >= min_age
        ).order_by(models.Member.id)
        return self.session.exec(stmt).all()
