import pytest
from sqlmodel import select

from app.models.course import Course, CourseEnrollment
from app.models.user import UserRole
from app.services.enrollment_service import (
    enrolled_student_ids,
    is_enrolled,
    matching_student_ids,
    sync_enrollment,
)

CURRENT_YEAR = 2025


async def _course(session, owner, department="CSE", year=2, code="CSE201"):
    course = Course(
        course_code=code,
        course_name="Data Structures",
        department=department,
        year=year,
        created_by=owner.id,
    )
    session.add(course)
    await session.commit()
    await session.refresh(course)
    return course


@pytest.mark.asyncio
async def test_sync_picks_department_and_batch(session, make_user):
    prof = await make_user(role=UserRole.Faculty)
    a = await make_user(admission_year=2024)
    b = await make_user(admission_year=2024)
    await make_user(admission_year=2023)                     # third year
    await make_user(department="ECE", admission_year=2024)   # other department
    await make_user(role=UserRole.Faculty)                   # not a student

    course = await _course(session, prof)
    enrolled = await sync_enrollment(session, course, CURRENT_YEAR)

    assert enrolled == sorted([a.id, b.id])
    assert await enrolled_student_ids(session, course.id) == enrolled
    assert await is_enrolled(session, course.id, a.id)


@pytest.mark.asyncio
async def test_sync_is_idempotent(session, make_user):
    prof = await make_user(role=UserRole.Faculty)
    await make_user(admission_year=2024)
    await make_user(admission_year=2024)

    course = await _course(session, prof)
    first = await sync_enrollment(session, course, CURRENT_YEAR)
    second = await sync_enrollment(session, course, CURRENT_YEAR)

    assert first == second
    rows = (await session.execute(
        select(CourseEnrollment).where(CourseEnrollment.course_id == course.id)
    )).scalars().all()
    assert len(rows) == 2


@pytest.mark.asyncio
async def test_sync_replaces_previous_roster(session, make_user):
    prof = await make_user(role=UserRole.Faculty)
    second_year = await make_user(admission_year=2024)
    first_year = await make_user(admission_year=2025)

    course = await _course(session, prof, year=2)
    assert await sync_enrollment(session, course, CURRENT_YEAR) == [second_year.id]

    course.year = 1
    session.add(course)
    await session.commit()

    assert await sync_enrollment(session, course, CURRENT_YEAR) == [first_year.id]
    assert not await is_enrolled(session, course.id, second_year.id)


@pytest.mark.asyncio
async def test_new_students_join_on_resync(session, make_user):
    prof = await make_user(role=UserRole.Faculty)
    course = await _course(session, prof)
    assert await sync_enrollment(session, course, CURRENT_YEAR) == []

    late = await make_user(admission_year=2024)
    assert await matching_student_ids(session, "CSE", 2, CURRENT_YEAR) == [late.id]
    assert await sync_enrollment(session, course, CURRENT_YEAR) == [late.id]
