# app/schemas/course.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.enums import MaterialType
from app.schemas.common import RequiredCode


# ------------------------------------------------------------
# COURSES
# ------------------------------------------------------------
class CourseCreate(BaseModel):
    course_code: RequiredCode
    course_name: str = Field(min_length=1)
    department: RequiredCode
    year: int = Field(ge=1, le=4)


class CourseUpdate(BaseModel):
    course_name: Optional[str] = Field(default=None, min_length=1)
    year: Optional[int] = Field(default=None, ge=1, le=4)


# Student view: no roster
class CourseSummaryRead(BaseModel):
    id: UUID
    course_code: str
    course_name: str
    department: str
    year: int
    created_at: datetime

    class Config:
        from_attributes = True


class CourseRead(CourseSummaryRead):
    created_by: UUID
    enrolled_students: List[UUID] = []


class CourseSyncResponse(BaseModel):
    message: str
    enrolled_count: int
    course: CourseRead


# ------------------------------------------------------------
# MATERIALS
# ------------------------------------------------------------
class MaterialCreate(BaseModel):
    course_id: UUID
    title: str = Field(min_length=1)
    description: Optional[str] = None
    type: MaterialType = MaterialType.Other
    file_url: str = Field(min_length=1)


class MaterialRead(BaseModel):
    id: UUID
    course_id: UUID
    title: str
    description: Optional[str] = None
    type: MaterialType
    file_url: str
    uploaded_by: UUID
    uploaded_at: datetime

    class Config:
        from_attributes = True
