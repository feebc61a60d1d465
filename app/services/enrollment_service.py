# app/services/enrollment_service.py

"""
Course enrollment is derived data: the students of the course's department
whose admission year puts them in the course's year. It is recomputed, never
edited, and only this module writes ``course_enrollments``.
"""

from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.academic import admission_year_for
from app.models.course import Course, CourseEnrollment
from app.models.user import User, UserRole


async def matching_student_ids(
    session: AsyncSession,
    department: str,
    course_year: int,
    current_year: Optional[int] = None,
) -> list[UUID]:
    admission_year = admission_year_for(course_year, current_year)
    result = await session.execute(
        select(User.id)
        .where(
            (User.role == UserRole.Student)
            & (User.department == department)
            & (User.admission_year == admission_year)
        )
        .order_by(User.id)
    )
    return list(result.scalars().all())


async def enrolled_student_ids(session: AsyncSession, course_id: UUID) -> list[UUID]:
    result = await session.execute(
        select(CourseEnrollment.user_id)
        .where(CourseEnrollment.course_id == course_id)
        .order_by(CourseEnrollment.user_id)
    )
    return list(result.scalars().all())


async def is_enrolled(session: AsyncSession, course_id: UUID, user_id: UUID) -> bool:
    row = await session.get(CourseEnrollment, (course_id, user_id))
    return row is not None


async def replace_enrollment(
    session: AsyncSession,
    course: Course,
    current_year: Optional[int] = None,
) -> list[UUID]:
    """
    Overwrite the course's roster inside the caller's transaction.
    Flushes but does not commit.
    """
    student_ids = await matching_student_ids(session, course.department, course.year, current_year)

    await session.execute(delete(CourseEnrollment).where(CourseEnrollment.course_id == course.id))
    session.add_all(CourseEnrollment(course_id=course.id, user_id=sid) for sid in student_ids)
    await session.flush()

    return student_ids


async def sync_enrollment(
    session: AsyncSession,
    course: Course,
    current_year: Optional[int] = None,
) -> list[UUID]:
    """Recompute and commit the roster; on failure the previous roster stays."""
    try:
        student_ids = await replace_enrollment(session, course, current_year)
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception(f"Enrollment sync failed for course {course.id}")
        raise

    logger.info(f"Synced course {course.course_code} ({course.id}): {len(student_ids)} students")
    return student_ids
