# app/api/endpoints/assignments.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.identity import Principal
from app.core.rbac import Permit
from app.core.visibility import Action, Resource
from app.schemas.assignment import (
    AssignmentCreate,
    AssignmentRead,
    MySubmissionRead,
    SubmissionCreate,
    SubmissionRead,
    SubmissionStatusRead,
    SubmissionWithStudent,
)
from app.services import assignment_service

router = APIRouter(prefix="/api/assignments", tags=["Assignments"])


# -------------------------------------------------------------------
# ASSIGNMENTS
# -------------------------------------------------------------------
@router.post("", response_model=AssignmentRead, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    data: AssignmentCreate,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Assignment, Action.Create)),
):
    return await assignment_service.create_assignment(session, principal, data)


@router.get("/course/{course_id}", response_model=List[AssignmentRead])
async def course_assignments(
    course_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Assignment, Action.Read)),
):
    return await assignment_service.list_assignments(session, principal, course_id)


# -------------------------------------------------------------------
# SUBMISSIONS (student)
# -------------------------------------------------------------------
@router.get("/submissions/mine", response_model=List[MySubmissionRead])
async def my_submissions(
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Submission, Action.ReadOwn)),
):
    return await assignment_service.list_my_submissions(session, principal)


@router.post(
    "/{assignment_id}/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
async def submit_assignment(
    assignment_id: UUID,
    data: SubmissionCreate,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Submission, Action.Create)),
):
    return await assignment_service.submit_assignment(session, principal, assignment_id, data.file_url)


# -------------------------------------------------------------------
# SUBMISSIONS (assignment creator)
# -------------------------------------------------------------------
@router.get("/{assignment_id}/submissions", response_model=List[SubmissionWithStudent])
async def assignment_submissions(
    assignment_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Submission, Action.Read)),
):
    return await assignment_service.list_submissions(session, principal, assignment_id)


@router.get("/{assignment_id}/status", response_model=SubmissionStatusRead)
async def submission_status(
    assignment_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Submission, Action.Read)),
):
    return await assignment_service.submission_status(session, principal, assignment_id)
