# app/models/placement.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, String
from sqlalchemy import Enum as PGEnum
import datetime as dt
import uuid
from typing import Optional

from app.core.academic import utcnow
from app.models.enums import PlacementType, enum_values
from app.models.user import UserRole


class Placement(SQLModel, table=True):
    __tablename__ = "placements"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Snapshot of the student's identity at creation time (not a live FK)
    student_code: str = Field(sa_column=Column(String, nullable=False, index=True))
    name: str = Field(nullable=False)
    email: str = Field(nullable=False, index=True)
    department: str = Field(sa_column=Column(String, nullable=False, index=True))
    batch_year: int = Field(nullable=False, index=True)

    # Offer details
    company: str = Field(nullable=False, index=True)
    role: str = Field(nullable=False)
    package: float = Field(nullable=False)
    type: PlacementType = Field(
        sa_column=Column(
            PGEnum(PlacementType, name="placement_type", values_callable=enum_values),
            nullable=False,
        )
    )
    drive_date: dt.date = Field(nullable=False)
    location: Optional[str] = Field(default=None)

    created_by: uuid.UUID = Field(foreign_key="users.id")
    created_by_role: UserRole = Field(
        sa_column=Column(
            PGEnum(UserRole, name="user_role", values_callable=enum_values),
            nullable=False,
        )
    )
    created_at: dt.datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
