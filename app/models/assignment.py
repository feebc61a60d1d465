# app/models/assignment.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, Text, UniqueConstraint
from datetime import datetime
import uuid
from typing import Optional

from app.core.academic import utcnow


class Assignment(SQLModel, table=True):
    __tablename__ = "assignments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    course_id: uuid.UUID = Field(foreign_key="courses.id", index=True)

    title: str = Field(nullable=False)
    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True)
    )
    due_date: datetime = Field(sa_type=DateTime(timezone=True), nullable=False)

    created_by: uuid.UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)


class Submission(SQLModel, table=True):
    __tablename__ = "submissions"
    # One submission per student per assignment, enforced by the store
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    assignment_id: uuid.UUID = Field(foreign_key="assignments.id", index=True)
    student_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    file_url: str = Field(nullable=False)
    submitted_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
