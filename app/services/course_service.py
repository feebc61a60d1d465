# app/services/course_service.py

from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.exceptions import Conflict
from app.core.identity import Principal
from app.core.visibility import course_filter, ensure_owner
from app.models.assignment import Assignment, Submission
from app.models.course import Course, CourseEnrollment, CourseMaterial
from app.schemas.course import CourseCreate, CourseRead, CourseUpdate
from app.services.enrollment_service import (
    enrolled_student_ids,
    replace_enrollment,
    sync_enrollment,
)


async def get_course(session: AsyncSession, course_id: UUID) -> Optional[Course]:
    return await session.get(Course, course_id)


async def to_course_read(session: AsyncSession, course: Course) -> CourseRead:
    read = CourseRead.model_validate(course)
    read.enrolled_students = await enrolled_student_ids(session, course.id)
    return read


# ------------------------------------------------------------
# CREATE (faculty)
# ------------------------------------------------------------
async def create_course(
    session: AsyncSession,
    principal: Principal,
    data: CourseCreate,
    current_year: Optional[int] = None,
) -> Course:
    existing = await session.execute(
        select(Course.id).where(
            (Course.course_code == data.course_code)
            & (Course.department == data.department)
            & (Course.year == data.year)
            & (Course.created_by == principal.id)
        )
    )
    if existing.first():
        raise Conflict("Course already exists for this faculty")

    course = Course(
        course_code=data.course_code,
        course_name=data.course_name,
        department=data.department,
        year=data.year,
        created_by=principal.id,
    )
    session.add(course)

    try:
        await session.flush()
        students = await replace_enrollment(session, course, current_year)
        await session.commit()
        await session.refresh(course)
    except IntegrityError:
        await session.rollback()
        raise Conflict("Course already exists for this faculty")

    logger.info(
        f"Course {course.course_code} created by {principal.id} "
        f"with {len(students)} students enrolled"
    )
    return course


# ------------------------------------------------------------
# LIST (faculty: own, student: enrolled)
# ------------------------------------------------------------
async def list_courses(session: AsyncSession, principal: Principal) -> list[Course]:
    result = await session.execute(
        select(Course).where(course_filter(principal)).order_by(Course.created_at.desc())
    )
    return list(result.scalars().all())


# ------------------------------------------------------------
# UPDATE (owner)
# ------------------------------------------------------------
async def update_course(
    session: AsyncSession,
    principal: Principal,
    course_id: UUID,
    data: CourseUpdate,
    current_year: Optional[int] = None,
) -> Course:
    course = await get_course(session, course_id)
    ensure_owner(course, principal, "Course", verb="update")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(course, field, value)
    session.add(course)

    try:
        await session.flush()
        # A new year means a different batch
        if "year" in changes:
            await replace_enrollment(session, course, current_year)
        await session.commit()
        await session.refresh(course)
    except IntegrityError:
        await session.rollback()
        raise Conflict("Course already exists for this faculty")

    logger.info(f"Course {course.id} updated: {sorted(changes)}")
    return course


# ------------------------------------------------------------
# DELETE (owner, cascades)
# ------------------------------------------------------------
async def delete_course(session: AsyncSession, principal: Principal, course_id: UUID) -> None:
    course = await get_course(session, course_id)
    ensure_owner(course, principal, "Course", verb="delete")

    assignment_ids = select(Assignment.id).where(Assignment.course_id == course_id)
    await session.execute(delete(Submission).where(Submission.assignment_id.in_(assignment_ids)))
    await session.execute(delete(Assignment).where(Assignment.course_id == course_id))
    await session.execute(delete(CourseMaterial).where(CourseMaterial.course_id == course_id))
    await session.execute(delete(CourseEnrollment).where(CourseEnrollment.course_id == course_id))
    await session.delete(course)
    await session.commit()

    logger.info(f"Course {course_id} deleted by {principal.id}")


# ------------------------------------------------------------
# SYNC ENROLLMENT (owner)
# ------------------------------------------------------------
async def sync_course(
    session: AsyncSession,
    principal: Principal,
    course_id: UUID,
    current_year: Optional[int] = None,
) -> tuple[Course, list[UUID]]:
    course = await get_course(session, course_id)
    ensure_owner(course, principal, "Course", verb="sync")

    students = await sync_enrollment(session, course, current_year)
    return course, students
