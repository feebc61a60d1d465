# app/schemas/assignment.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import UtcDateTime
from app.schemas.user import UserBasicRead


class AssignmentCreate(BaseModel):
    course_id: UUID
    title: str = Field(min_length=1)
    description: Optional[str] = None
    due_date: UtcDateTime


class AssignmentRead(BaseModel):
    id: UUID
    course_id: UUID
    title: str
    description: Optional[str] = None
    due_date: datetime
    created_by: UUID
    created_at: datetime

    class Config:
        from_attributes = True


class SubmissionCreate(BaseModel):
    file_url: str = Field(min_length=1)


class SubmissionRead(BaseModel):
    id: UUID
    assignment_id: UUID
    student_id: UUID
    file_url: str
    submitted_at: datetime

    class Config:
        from_attributes = True


# Faculty view of an assignment's submissions
class SubmissionWithStudent(SubmissionRead):
    student: UserBasicRead


# Student view of their own submissions
class MySubmissionRead(SubmissionRead):
    assignment_title: str
    course_id: UUID
    due_date: datetime


class SubmissionStatusRead(BaseModel):
    submitted: List[UserBasicRead]
    not_submitted: List[UserBasicRead]
