"""CLI script to load a small demo data set into the backend DB.
Usage: python scripts/seed_demo.py [--reset]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `school_admin` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session, SQLModel
from school_admin.database import engine, create_db_and_tables
from school_admin import services
from school_admin.models import CourseType, MemberType


def seed(session: Session) -> dict:
    """Create the Math/Art courses and a few members enrolled in Math.

    Returns the created ids keyed by name so callers can print or reuse them.
    """
    courses = services.CourseService(session)
    members = services.MemberService(session)
    math = courses.create_course('Math', CourseType.MAIN)
    art = courses.create_course('Art', CourseType.SECONDARY)
    john = members.create_member('John', 20, 'A1', MemberType.STUDENT, [math.id])
    jane = members.create_member('Jane', 22, 'A1', MemberType.STUDENT, [math.id, art.id])
    smith = members.create_member('Prof Smith', 45, 'A1', MemberType.TEACHER, [math.id])
    return {
        'Math': math.id,
        'Art': art.id,
        'John': john.id,
        'Jane': jane.id,
        'Prof Smith': smith.id,
    }


def main(reset: bool = False):
    """Create tables (optionally dropping them first) and insert demo rows."""
    if reset:
        SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    with Session(engine) as session:
        created = seed(session)
    for name, ident in created.items():
        print(f'{name}: id {ident}')


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--reset', action='store_true', help='Drop all tables before seeding')
    args = parser.parse_args()
    main(reset=args.reset)
