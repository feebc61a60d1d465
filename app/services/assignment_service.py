# app/services/assignment_service.py

from uuid import UUID

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.exceptions import Conflict, Forbidden
from app.core.identity import Principal
from app.core.visibility import (
    Action,
    Resource,
    ensure_course_readable,
    ensure_exists,
    ensure_owner,
    role_gate,
    submission_filter,
)
from app.models.assignment import Assignment, Submission
from app.models.course import Course, CourseEnrollment
from app.models.user import User
from app.schemas.assignment import (
    AssignmentCreate,
    MySubmissionRead,
    SubmissionStatusRead,
    SubmissionWithStudent,
)
from app.schemas.user import UserBasicRead
from app.services.enrollment_service import is_enrolled


# ------------------------------------------------------------
# ASSIGNMENTS
# ------------------------------------------------------------
async def create_assignment(session: AsyncSession, principal: Principal, data: AssignmentCreate) -> Assignment:
    course = await session.get(Course, data.course_id)
    ensure_owner(course, principal, "Course", verb="create assignments for")

    assignment = Assignment(
        course_id=course.id,
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        created_by=principal.id,
    )
    session.add(assignment)
    await session.commit()
    await session.refresh(assignment)

    logger.info(f"Assignment '{assignment.title}' created for course {course.id}")
    return assignment


async def list_assignments(session: AsyncSession, principal: Principal, course_id: UUID) -> list[Assignment]:
    course = await session.get(Course, course_id)
    enrolled = principal.is_student and await is_enrolled(session, course_id, principal.id)
    ensure_course_readable(principal, course, enrolled)

    result = await session.execute(
        select(Assignment)
        .where(Assignment.course_id == course_id)
        .order_by(Assignment.due_date.asc())
    )
    return list(result.scalars().all())


# ------------------------------------------------------------
# SUBMIT (student, once per assignment)
# ------------------------------------------------------------
async def submit_assignment(
    session: AsyncSession,
    principal: Principal,
    assignment_id: UUID,
    file_url: str,
) -> Submission:
    role_gate(principal, Resource.Submission, Action.Create)

    assignment = await session.get(Assignment, assignment_id)
    ensure_exists(assignment, "Assignment")

    if not await is_enrolled(session, assignment.course_id, principal.id):
        raise Forbidden("You're not enrolled in this course")

    # The unique constraint decides between concurrent submissions
    submission = Submission(
        assignment_id=assignment_id,
        student_id=principal.id,
        file_url=file_url,
    )
    session.add(submission)

    try:
        await session.commit()
        await session.refresh(submission)
    except IntegrityError:
        await session.rollback()
        raise Conflict("Assignment already submitted")

    logger.info(f"Student {principal.id} submitted assignment {assignment_id}")
    return submission


# ------------------------------------------------------------
# SUBMISSION READS
# ------------------------------------------------------------
async def _owned_assignment(session: AsyncSession, principal: Principal, assignment_id: UUID) -> Assignment:
    assignment = await session.get(Assignment, assignment_id)
    return ensure_owner(assignment, principal, "Assignment", verb="view submissions for")


async def list_submissions(
    session: AsyncSession,
    principal: Principal,
    assignment_id: UUID,
) -> list[SubmissionWithStudent]:
    await _owned_assignment(session, principal, assignment_id)

    result = await session.execute(
        select(Submission, User)
        .join(User, User.id == Submission.student_id)
        .where((Submission.assignment_id == assignment_id) & submission_filter(principal))
        .order_by(Submission.submitted_at.asc())
    )

    return [
        SubmissionWithStudent(
            **submission.model_dump(),
            student=UserBasicRead.model_validate(student),
        )
        for submission, student in result.all()
    ]


async def list_my_submissions(session: AsyncSession, principal: Principal) -> list[MySubmissionRead]:
    result = await session.execute(
        select(Submission, Assignment)
        .join(Assignment, Assignment.id == Submission.assignment_id)
        .where(submission_filter(principal))
        .order_by(Submission.submitted_at.desc())
    )

    return [
        MySubmissionRead(
            **submission.model_dump(),
            assignment_title=assignment.title,
            course_id=assignment.course_id,
            due_date=assignment.due_date,
        )
        for submission, assignment in result.all()
    ]


async def submission_status(
    session: AsyncSession,
    principal: Principal,
    assignment_id: UUID,
) -> SubmissionStatusRead:
    """Split the course roster into who has and has not submitted."""
    assignment = await _owned_assignment(session, principal, assignment_id)

    roster = await session.execute(
        select(User)
        .join(CourseEnrollment, CourseEnrollment.user_id == User.id)
        .where(CourseEnrollment.course_id == assignment.course_id)
        .order_by(User.name)
    )
    submitted_ids = set(
        (
            await session.execute(
                select(Submission.student_id).where(Submission.assignment_id == assignment_id)
            )
        ).scalars().all()
    )

    submitted, not_submitted = [], []
    for student in roster.scalars().all():
        bucket = submitted if student.id in submitted_ids else not_submitted
        bucket.append(UserBasicRead.model_validate(student))

    return SubmissionStatusRead(submitted=submitted, not_submitted=not_submitted)
