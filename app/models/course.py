# app/models/course.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, String, Text, UniqueConstraint
from sqlalchemy import Enum as PGEnum
from datetime import datetime
import uuid
from typing import Optional

from app.core.academic import utcnow
from app.models.enums import MaterialType, enum_values


class Course(SQLModel, table=True):
    __tablename__ = "courses"
    __table_args__ = (
        UniqueConstraint(
            "course_code", "department", "year", "created_by",
            name="uq_course_code_department_year_creator",
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    course_code: str = Field(sa_column=Column(String, nullable=False))   # e.g. CSE301
    course_name: str = Field(sa_column=Column(String, nullable=False))
    department: str = Field(sa_column=Column(String, nullable=False, index=True))
    year: int = Field(nullable=False)                                    # 1..4

    created_by: uuid.UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)


class CourseEnrollment(SQLModel, table=True):
    """
    Derived enrollment rows. Written only by the enrollment synchronizer,
    which replaces the full set for a course in one transaction.
    """
    __tablename__ = "course_enrollments"

    course_id: uuid.UUID = Field(foreign_key="courses.id", primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", primary_key=True, index=True)


class CourseMaterial(SQLModel, table=True):
    __tablename__ = "course_materials"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    course_id: uuid.UUID = Field(foreign_key="courses.id", index=True)

    title: str = Field(nullable=False)
    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True)
    )
    type: MaterialType = Field(
        default=MaterialType.Other,
        sa_column=Column(
            PGEnum(MaterialType, name="material_type", values_callable=enum_values),
            nullable=False,
        )
    )
    file_url: str = Field(nullable=False)

    uploaded_by: uuid.UUID = Field(foreign_key="users.id")
    uploaded_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
