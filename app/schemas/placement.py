# app/schemas/placement.py

import datetime as dt
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.enums import PlacementType
from app.models.user import UserRole
from app.schemas.common import RequiredCode, reject_null


class PlacementCreate(BaseModel):
    # Identity fields, checked against the student's profile
    student_code: str = Field(min_length=1)
    name: str
    email: EmailStr
    department: RequiredCode
    batch_year: int

    # Offer
    company: str = Field(min_length=1)
    role: str = Field(min_length=1)
    package: float = Field(ge=0)
    type: PlacementType
    drive_date: dt.date
    location: Optional[str] = None


# Only the offer can be edited; identity is fixed at creation
class PlacementUpdate(BaseModel):
    company: Optional[str] = Field(default=None, min_length=1)
    role: Optional[str] = Field(default=None, min_length=1)
    package: Optional[float] = Field(default=None, ge=0)
    type: Optional[PlacementType] = None
    drive_date: Optional[dt.date] = None
    location: Optional[str] = None

    @field_validator("company", "role", "package", "type", "drive_date")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class PlacementRead(BaseModel):
    id: UUID
    student_code: str
    name: str
    email: str
    department: str
    batch_year: int
    company: str
    role: str
    package: float
    type: PlacementType
    drive_date: dt.date
    location: Optional[str] = None
    created_by: UUID
    created_by_role: UserRole
    created_at: dt.datetime

    class Config:
        from_attributes = True


class PlacementSummary(BaseModel):
    total_placements: int
    average_package: float
    companies_visited: int
    companies: List[str]
