# app/api/endpoints/courses.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.identity import Principal
from app.core.rbac import Permit, require_faculty, require_student
from app.core.visibility import Action, Resource
from app.schemas.common import MessageResponse
from app.schemas.course import CourseCreate, CourseRead, CourseSummaryRead, CourseSyncResponse, CourseUpdate
from app.services import course_service

router = APIRouter(prefix="/api/courses", tags=["Courses"])


# -------------------------------------------------------------------
# CREATE (faculty) - enrollment is synced immediately
# -------------------------------------------------------------------
@router.post("", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
async def create_course(
    data: CourseCreate,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Course, Action.Create)),
):
    course = await course_service.create_course(session, principal, data)
    return await course_service.to_course_read(session, course)


# -------------------------------------------------------------------
# LISTS
# -------------------------------------------------------------------
@router.get("/faculty", response_model=List[CourseRead])
async def faculty_courses(
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_faculty),
):
    courses = await course_service.list_courses(session, principal)
    return [await course_service.to_course_read(session, c) for c in courses]


@router.get("/student", response_model=List[CourseSummaryRead])
async def student_courses(
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(require_student),
):
    return await course_service.list_courses(session, principal)


# -------------------------------------------------------------------
# UPDATE / DELETE / SYNC (course creator)
# -------------------------------------------------------------------
@router.put("/{course_id}", response_model=CourseRead)
async def update_course(
    course_id: UUID,
    data: CourseUpdate,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Course, Action.Update)),
):
    course = await course_service.update_course(session, principal, course_id, data)
    return await course_service.to_course_read(session, course)


@router.delete("/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Course, Action.Delete)),
):
    await course_service.delete_course(session, principal, course_id)
    return MessageResponse(message="Course deleted successfully")


@router.put("/{course_id}/sync", response_model=CourseSyncResponse)
async def sync_course(
    course_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Course, Action.Sync)),
):
    course, students = await course_service.sync_course(session, principal, course_id)
    return CourseSyncResponse(
        message="Students synced successfully",
        enrolled_count=len(students),
        course=await course_service.to_course_read(session, course),
    )
