"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the school administration
backend. Controllers are intentionally thin: they accept requests,
construct a service for the request's session, delegate to it and shape
the JSON response. Domain errors raised by services are translated to
status codes by the exception handlers registered here.

Endpoints implemented:
- POST/GET /courses, GET/PUT/DELETE /courses/{id}
- POST/GET /members, GET/PUT/DELETE /members/{id}
- GET /reports/members/count
- GET /reports/courses/count
- GET /reports/courses/members
- GET /reports/groups/members
- GET /reports/groups/courses
- GET /reports/members/filter
- GET /health
"""

from typing import List
from fastapi import FastAPI, Depends, Path, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
import json
import logging
import time
import uuid
from .database import create_db_and_tables, get_session
from . import services, models
from .errors import ConflictError, NotFoundError, ValidationFailed
from .schemas import (
    CountOut,
    CourseIn,
    CourseOut,
    GroupCourseReportOut,
    MemberIn,
    MemberOut,
    SQL_INT_MAX,
    SQL_INT_MIN,
    field_errors,
)
from .config import settings

app = FastAPI(title="School Administration API")
logger = logging.getLogger("school_admin.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Wide-open CORS keeps local admin tools working without extra config in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


def _request_log_payload(request: Request, req_id: str, started: float, **extra) -> str:
    payload = {
        "request_id": req_id,
        "path": request.url.path,
        "method": request.method,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "client": request.client.host if request.client else "unknown",
    }
    payload.update(extra)
    return json.dumps(payload, ensure_ascii=True)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        logger.error("request_failed %s", _request_log_payload(request, req_id, started))
        raise
    response.headers["X-Request-ID"] = req_id
    logger.info("request_done %s", _request_log_payload(request, req_id, started, status_code=response.status_code))
    return response


def _validation_response(exc: ValidationFailed) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            'error': 'Validation failed',
            'fields': [{'field': e.field, 'message': e.message} for e in exc.errors],
        },
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={'error': exc.message})


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    return _validation_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _validation_response(ValidationFailed(field_errors(exc.errors())))


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={'error': str(exc)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(
        "unexpected_error %s",
        json.dumps({"request_id": getattr(request.state, "request_id", ""), "path": request.url.path}),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={'error': 'An unexpected error occurred'})


@app.post('/courses', response_model=CourseOut, status_code=201)
def create_course(payload: CourseIn, db: Session = Depends(get_session)):
    """Create a course and return it with its assigned id."""
    svc = services.CourseService(db)
    return CourseOut.model_validate(svc.create_course(payload.name, payload.type))


@app.get('/courses', response_model=List[CourseOut])
def list_courses(db: Session = Depends(get_session)):
    svc = services.CourseService(db)
    return [CourseOut.model_validate(c) for c in svc.list_courses()]


@app.get('/courses/{course_id}', response_model=CourseOut)
def get_course(course_id: int = Path(ge=SQL_INT_MIN, le=SQL_INT_MAX), db: Session = Depends(get_session)):
    svc = services.CourseService(db)
    return CourseOut.model_validate(svc.get_course(course_id))


@app.put('/courses/{course_id}', response_model=CourseOut)
def update_course(payload: CourseIn, course_id: int = Path(ge=SQL_INT_MIN, le=SQL_INT_MAX), db: Session = Depends(get_session)):
    """Replace a course's name and type. Enrollments are not affected."""
    svc = services.CourseService(db)
    return CourseOut.model_validate(svc.update_course(course_id, payload.name, payload.type))


@app.delete('/courses/{course_id}', status_code=204)
def delete_course(course_id: int = Path(ge=SQL_INT_MIN, le=SQL_INT_MAX), db: Session = Depends(get_session)):
    services.CourseService(db).delete_course(course_id)
    return Response(status_code=204)


@app.post('/members', response_model=MemberOut, status_code=201)
def create_member(payload: MemberIn, db: Session = Depends(get_session)):
    """Create a member enrolled in `courseIds`.

    Returns 404 naming the unknown ids if any course does not exist; in
    that case no member is created.
    """
    svc = services.MemberService(db)
    member = svc.create_member(payload.name, payload.age, payload.group, payload.type, payload.course_ids)
    return MemberOut.from_model(member)


@app.get('/members', response_model=List[MemberOut])
def list_members(member_type: models.MemberType = Query(alias="type"), db: Session = Depends(get_session)):
    """List all members of the given `type` (required)."""
    svc = services.MemberService(db)
    return [MemberOut.from_model(m) for m in svc.list_members_by_type(member_type)]


@app.get('/members/{member_id}', response_model=MemberOut)
def get_member(member_id: int = Path(ge=SQL_INT_MIN, le=SQL_INT_MAX), db: Session = Depends(get_session)):
    svc = services.MemberService(db)
    return MemberOut.from_model(svc.get_member(member_id))


@app.put('/members/{member_id}', response_model=MemberOut)
def update_member(payload: MemberIn, member_id: int = Path(ge=SQL_INT_MIN, le=SQL_INT_MAX), db: Session = Depends(get_session)):
    """Replace a member, including its whole enrollment set."""
    svc = services.MemberService(db)
    member = svc.update_member(member_id, payload.name, payload.age, payload.group, payload.type, payload.course_ids)
    return MemberOut.from_model(member)


@app.delete('/members/{member_id}', status_code=204)
def delete_member(member_id: int = Path(ge=SQL_INT_MIN, le=SQL_INT_MAX), db: Session = Depends(get_session)):
    services.MemberService(db).delete_member(member_id)
    return Response(status_code=204)


@app.get('/reports/members/count', response_model=CountOut)
def count_members(member_type: models.MemberType = Query(alias="type"), db: Session = Depends(get_session)):
    return CountOut(count=services.MemberService(db).count_by_type(member_type))


@app.get('/reports/courses/count', response_model=CountOut)
def count_courses(course_type: models.CourseType = Query(alias="type"), db: Session = Depends(get_session)):
    return CountOut(count=services.CourseService(db).count_by_type(course_type))


@app.get('/reports/courses/members', response_model=List[MemberOut])
def members_in_course(
    course_id: int = Query(alias="courseId", ge=SQL_INT_MIN, le=SQL_INT_MAX),
    member_type: models.MemberType = Query(alias="type"),
    db: Session = Depends(get_session),
):
    """Members of `type` enrolled in `courseId`; 404 if the course is unknown."""
    svc = services.MemberService(db)
    return [MemberOut.from_model(m) for m in svc.find_by_type_and_course(member_type, course_id)]


@app.get('/reports/groups/members', response_model=List[MemberOut])
def members_in_group(group: str, db: Session = Depends(get_session)):
    svc = services.MemberService(db)
    return [MemberOut.from_model(m) for m in svc.find_by_group(group)]


@app.get('/reports/groups/courses', response_model=GroupCourseReportOut)
def group_course_report(group: str, course_id: int = Query(alias="courseId", ge=SQL_INT_MIN, le=SQL_INT_MAX), db: Session = Depends(get_session)):
    """Students then teachers of `group` enrolled in `courseId`.

    An empty `members` list is a valid answer; only an unknown course
    yields 404.
    """
    svc = services.MemberService(db)
    return GroupCourseReportOut.from_report(svc.build_group_course_report(group, course_id))


@app.get('/reports/members/filter', response_model=List[MemberOut])
def filter_members(
    min_age: int = Query(alias="minAge", ge=SQL_INT_MIN, le=SQL_INT_MAX),
    course_id: int = Query(alias="courseId", ge=SQL_INT_MIN, le=SQL_INT_MAX),
    member_type: models.MemberType = Query(alias="type"),
    db: Session = Depends(get_session),
):
    """Members of `type` in `courseId` aged `minAge` or older (inclusive)."""
    svc = services.MemberService(db)
    return [MemberOut.from_model(m) for m in svc.find_by_type_and_min_age_and_course(member_type, min_age, course_id)]


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
