# app/models/announcement.py

import datetime as dt
import uuid
from typing import Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, String, Text
from sqlalchemy import Enum as PGEnum

from app.core.academic import utcnow
from app.models.enums import AnnouncementType, Audience, enum_values
from app.models.user import UserRole


class Announcement(SQLModel, table=True):
    __tablename__ = "announcements"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    title: str = Field(nullable=False)
    description: str = Field(sa_column=Column(Text, nullable=False))

    type: AnnouncementType = Field(
        sa_column=Column(
            PGEnum(AnnouncementType, name="announcement_type", values_callable=enum_values),
            nullable=False,
        )
    )

    date: dt.date = Field(nullable=False)
    time: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    attachment_url: Optional[str] = Field(default=None)

    # --- Targeting tags ---
    # NULL department / year means "unrestricted within the audience"
    audience: Audience = Field(
        default=Audience.All,
        sa_column=Column(
            PGEnum(Audience, name="announcement_audience", values_callable=enum_values),
            nullable=False,
            index=True,
        )
    )
    department: Optional[str] = Field(
        default=None,
        sa_column=Column(String, nullable=True)
    )
    year: Optional[int] = Field(default=None)

    created_by: uuid.UUID = Field(foreign_key="users.id", index=True)
    created_by_role: UserRole = Field(
        sa_column=Column(
            PGEnum(UserRole, name="user_role", values_callable=enum_values),
            nullable=False,
        )
    )

    created_at: dt.datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False, index=True)
