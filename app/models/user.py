# app/models/user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, String
from sqlalchemy import Enum as PGEnum
from datetime import datetime
import uuid
from enum import Enum
from typing import Optional

from app.core.academic import utcnow
from app.models.enums import enum_values


class UserRole(str, Enum):
    Admin = "admin"
    Faculty = "faculty"
    Student = "student"


class UserStatus(str, Enum):
    Active = "active"
    Inactive = "inactive"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    name: str = Field(nullable=False)
    email: str = Field(nullable=False, index=True, unique=True)
    password_hash: str = Field(nullable=False)

    role: UserRole = Field(
        sa_column=Column(
            PGEnum(UserRole, name="user_role", values_callable=enum_values),
            nullable=False,
        )
    )

    # Required for students and faculty, always upper case (e.g. "CSE")
    department: Optional[str] = Field(
        default=None,
        sa_column=Column(String, nullable=True, index=True)
    )

    # Calendar year the student was admitted; drives enrollment and feed targeting
    admission_year: Optional[int] = Field(default=None, index=True)

    # Institutional identifiers (roll number / staff number)
    student_code: Optional[str] = Field(
        default=None,
        sa_column=Column(String, nullable=True, unique=True)
    )
    faculty_code: Optional[str] = Field(
        default=None,
        sa_column=Column(String, nullable=True)
    )

    phone: Optional[str] = Field(default=None)

    status: UserStatus = Field(
        default=UserStatus.Active,
        sa_column=Column(
            PGEnum(UserStatus, name="user_status", values_callable=enum_values),
            nullable=False,
        )
    )

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
