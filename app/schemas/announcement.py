# app/schemas/announcement.py

import datetime as dt
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.announcement import Announcement
from app.models.enums import AnnouncementType, Audience
from app.models.user import UserRole
from app.schemas.common import DepartmentCode


class AnnouncementTags(BaseModel):
    """
    Who the announcement is for. ``department`` and ``year`` narrow the
    audience further; leaving them out means "everyone in the audience".
    """
    audience: Audience = Audience.All
    department: DepartmentCode = None
    year: Optional[int] = Field(default=None, ge=1)


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: AnnouncementType
    date: dt.date
    time: Optional[str] = None
    location: Optional[str] = None
    attachment_url: Optional[str] = None
    tags: AnnouncementTags = Field(default_factory=AnnouncementTags)


class AnnouncementRead(BaseModel):
    id: UUID
    title: str
    description: str
    type: AnnouncementType
    date: dt.date
    time: Optional[str] = None
    location: Optional[str] = None
    attachment_url: Optional[str] = None
    tags: AnnouncementTags
    created_by: UUID
    created_by_role: UserRole
    created_at: dt.datetime

    @classmethod
    def from_model(cls, announcement: Announcement) -> "AnnouncementRead":
        return cls(
            id=announcement.id,
            title=announcement.title,
            description=announcement.description,
            type=announcement.type,
            date=announcement.date,
            time=announcement.time,
            location=announcement.location,
            attachment_url=announcement.attachment_url,
            tags=AnnouncementTags(
                audience=announcement.audience,
                department=announcement.department,
                year=announcement.year,
            ),
            created_by=announcement.created_by,
            created_by_role=announcement.created_by_role,
            created_at=announcement.created_at,
        )
