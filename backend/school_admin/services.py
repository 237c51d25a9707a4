"""Business logic services used by HTTP controllers.

This module holds the two domain services of the school backend. Services
are intentionally thin: they check existence, resolve enrollment sets and
persist aggregates via repositories. Every failure is raised as one of the
typed errors in `errors`; the HTTP layer decides how to present it.
"""

import logging
from typing import Iterable, List, Optional
from sqlmodel import Session
from . import models, repositories
from .errors import NotFoundError

logger = logging.getLogger("school_admin.services")


class CourseService:
    """Create, read, update, delete and count courses."""
    def __init__(self, session: Session):
        self.session = session
        self.course_repo = repositories.CourseRepository(session)

    def create_course(self, name: str, course_type: models.CourseType) -> models.Course:
        """Persist a new course and return it with its assigned id."""
        course = self.course_repo.save(models.Course(name=name, type=course_type))
        logger.info("course created id=%s type=%s", course.id, course.type.value)
        return course

    def get_course(self, course_id: int) -> models.Course:
        course = self.course_repo.get(course_id)
        if course is None:
            raise NotFoundError.course(course_id)
        return course

    def list_courses(self) -> List[models.Course]:
        return self.course_repo.list_all()

    def update_course(self, course_id: int, name: str, course_type: models.CourseType) -> models.Course:
        """Replace a course's name and type.

        Enrollments are owned by members and are left untouched.
        """
        course = self.get_course(course_id)
        course.name = name
        course.type = course_type
        course = self.course_repo.save(course)
        logger.info("course updated id=%s", course.id)
        return course

    def delete_course(self, course_id: int) -> None:
        """Delete a course; members enrolled in it simply lose that enrollment."""
        course = self.get_course(course_id)
        self.course_repo.delete(course)
        logger.info("course deleted id=%s", course_id)

    def count_by_type(self, course_type: models.CourseType) -> int:
        return self.course_repo.count_by_type(course_type)


class MemberService:
    """Manage members, their enrollments and the member reports."""
    def __init__(self, session: Session):
        self.session = session
        self.member_repo = repositories.MemberRepository(session)
        self.course_repo = repositories.CourseRepository(session)

    def create_member(self, name: str, age: int, group: str, member_type: models.MemberType, course_ids: Optional[Iterable[int]] = None) -> models.Member:
        """Create a member enrolled in `course_ids`.

        All requested courses must exist; otherwise `NotFoundError` names
        the missing ids and nothing is written.
        """
        courses = self._resolve_courses(course_ids)
        member = models.Member(name=name, age=age, group=group, type=member_type)
        member.courses = courses
        member = self.member_repo.save(member)
        logger.info("member created id=%s type=%s courses=%s", member.id, member.type.value, [c.id for c in courses])
        return member

    def get_member(self, member_id: int) -> models.Member:
        member = self.member_repo.get(member_id)
        if member is None:
            raise NotFoundError.member(member_id)
        return member

    def list_members_by_type(self, member_type: models.MemberType) -> List[models.Member]:
        return self.member_repo.list_by_type(member_type)

    def update_member(self, member_id: int, name: str, age: int, group: str, member_type: models.MemberType, course_ids: Optional[Iterable[int]] = None) -> models.Member:
        """Replace every field of a member, including the whole enrollment set.

        Courses missing from `course_ids` are dropped; resolution follows
        the same all-or-nothing rule as `create_member` and happens before
        the member is modified.
        """
        member = self.get_member(member_id)
        courses = self._resolve_courses(course_ids)
        member.name = name
        member.age = age
        member.group = group
        member.type = member_type
        member.courses = courses
        member = self.member_repo.save(member)
        logger.info("member updated id=%s courses=%s", member.id, [c.id for c in courses])
        return member

    def delete_member(self, member_id: int) -> None:
        member = self.get_member(member_id)
        self.member_repo.delete(member)
        logger.info("member deleted id=%s", member_id)

    def count_by_type(self, member_type: models.MemberType) -> int:
        return self.member_repo.count_by_type(member_type)

    def find_by_type_and_course(self, member_type: models.MemberType, course_id: int) -> List[models.Member]:
        """Members of `member_type` enrolled in an existing course."""
        self._require_course(course_id)
        return self.member_repo.find_by_type_and_course(member_type, course_id)

    def find_by_group(self, group: str) -> List[models.Member]:
        return self.member_repo.find_by_group(group)

    def find_by_type_and_group_and_course(self, member_type: models.MemberType, group: str, course_id: int) -> List[models.Member]:
        # course existence is the caller's concern here
        return self.member_repo.find_by_type_and_group_and_course(member_type, group, course_id)

    def find_by_type_and_min_age_and_course(self, member_type: models.MemberType, min_age: int, course_id: int) -> List[models.Member]:
        """Members of `member_type` in `course_id` whose age is at least `min_age`.

        The bound is inclusive: a member aged exactly `min_age` matches.
        """
        self._require_course(course_id)
        return self.member_repo.find_by_type_and_min_age_and_course(member_type, min_age, course_id)

    def build_group_course_report(self, group: str, course_id: int) -> dict:
        """Return every member of `group` enrolled in `course_id`.

        Students come first, then teachers, each in storage order. A group
        with nobody in the course yields an empty `members` list rather
        than an error.
        """
        self._require_course(course_id)
        students = self.find_by_type_and_group_and_course(models.MemberType.STUDENT, group, course_id)
        teachers = self.find_by_type_and_group_and_course(models.MemberType.TEACHER, group, course_id)
        return {
            'group': group,
            'course_id': course_id,
            'members': students + teachers
        }

    def _require_course(self, course_id: int) -> None:
        if not self.course_repo.exists(course_id):
            raise NotFoundError.course(course_id)

    def _resolve_courses(self, course_ids: Optional[Iterable[int]]) -> List[models.Course]:
        """Load all requested courses with one query or fail listing the missing ids."""
        if not course_ids:
            return []
        requested = set(course_ids)
        courses = self.course_repo.find_all_by_ids(requested)
        if len(courses) != len(requested):
            missing = requested - {c.id for c in courses}
            raise NotFoundError.courses(missing)
        return courses
