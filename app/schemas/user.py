from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user import UserRole, UserStatus
from app.schemas.common import DepartmentCode, reject_null


# ---------------------------------------------------------
# BASE
# ---------------------------------------------------------
class UserBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr


# ---------------------------------------------------------
# CREATE USER (Admin creates any user)
# ---------------------------------------------------------
class UserCreate(UserBase):
    password: str = Field(min_length=6)
    role: UserRole
    department: DepartmentCode = None                            # student / faculty
    admission_year: Optional[int] = Field(default=None, ge=1900, le=2200)   # student
    student_code: Optional[str] = None                           # student
    faculty_code: Optional[str] = None                           # faculty
    phone: Optional[str] = None

    class Config:
        json_schema_extra = {
            "examples": [
                {
                    "name": "Asha Rao",
                    "email": "asha@example.edu",
                    "password": "password123",
                    "role": "student",
                    "department": "CSE",
                    "admission_year": 2023,
                    "student_code": "CSE23001"
                },
                {
                    "name": "Dr. Menon",
                    "email": "menon@example.edu",
                    "password": "password123",
                    "role": "faculty",
                    "department": "CSE",
                    "faculty_code": "F-107"
                }
            ]
        }


# ---------------------------------------------------------
# UPDATE USER (Admin edits)
# ---------------------------------------------------------
class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    department: DepartmentCode = None
    admission_year: Optional[int] = Field(default=None, ge=1900, le=2200)
    student_code: Optional[str] = None
    faculty_code: Optional[str] = None
    phone: Optional[str] = None

    # Profile fields may be cleared with null; these columns may not
    @field_validator("name", "email", "role")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


# ---------------------------------------------------------
# READ USER (response)
# ---------------------------------------------------------
class UserRead(UserBase):
    id: UUID
    role: UserRole
    department: Optional[str] = None
    admission_year: Optional[int] = None
    student_code: Optional[str] = None
    faculty_code: Optional[str] = None
    phone: Optional[str] = None
    status: UserStatus
    created_at: datetime

    class Config:
        from_attributes = True


# Fields faculty may see about the students they teach
class UserBasicRead(BaseModel):
    id: UUID
    name: str
    email: str
    student_code: Optional[str] = None
    department: Optional[str] = None

    class Config:
        from_attributes = True


class UserStatusResponse(BaseModel):
    message: str
    status: UserStatus
