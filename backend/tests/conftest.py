import os

# keep the import-time table creation away from the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from school_admin.database import build_engine, create_db_and_tables, get_session
from school_admin.main import app
from school_admin.models import CourseType
from school_admin import services


@pytest.fixture()
def engine():
    """A fresh in-memory database per test."""
    eng = build_engine("sqlite://")
    create_db_and_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture()
def client(engine):
    def _session_override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def course_service(session):
    return services.CourseService(session)


@pytest.fixture()
def member_service(session):
    return services.MemberService(session)


@pytest.fixture()
def math_and_art(course_service):
    math = course_service.create_course("Math", CourseType.MAIN)
    art = course_service.create_course("Art", CourseType.SECONDARY)
    return math, art
