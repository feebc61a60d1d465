# app/api/endpoints/announcements.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.identity import Principal
from app.core.rbac import Permit
from app.core.visibility import Action, Resource
from app.schemas.announcement import AnnouncementCreate, AnnouncementRead
from app.schemas.common import MessageResponse
from app.services import announcement_service

router = APIRouter(prefix="/api/announcements", tags=["Announcements"])


# -------------------------------------------------------------------
# POST (admin, faculty)
# -------------------------------------------------------------------
@router.post("", response_model=AnnouncementRead, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    data: AnnouncementCreate,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Announcement, Action.Create)),
):
    announcement = await announcement_service.create_announcement(session, principal, data)
    return AnnouncementRead.from_model(announcement)


# -------------------------------------------------------------------
# FEED (anyone signed in)
# -------------------------------------------------------------------
@router.get("/feed", response_model=List[AnnouncementRead])
async def feed(
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Announcement, Action.Read)),
):
    rows = await announcement_service.list_feed(session, principal)
    return [AnnouncementRead.from_model(a) for a in rows]


# -------------------------------------------------------------------
# OWN POSTS (admin, faculty)
# -------------------------------------------------------------------
@router.get("/mine", response_model=List[AnnouncementRead])
async def my_announcements(
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Announcement, Action.ReadOwn)),
):
    rows = await announcement_service.list_mine(session, principal)
    return [AnnouncementRead.from_model(a) for a in rows]


# -------------------------------------------------------------------
# ALL (admin)
# -------------------------------------------------------------------
@router.get("", response_model=List[AnnouncementRead])
async def list_announcements(
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(Permit(Resource.Announcement, Action.ReadAll)),
):
    rows = await announcement_service.list_all(session)
    return [AnnouncementRead.from_model(a) for a in rows]


@router.get("/{announcement_id}", response_model=AnnouncementRead)
async def get_announcement(
    announcement_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Announcement, Action.Read)),
):
    announcement = await announcement_service.get_announcement(session, principal, announcement_id)
    return AnnouncementRead.from_model(announcement)


@router.delete("/{announcement_id}", response_model=MessageResponse)
async def delete_announcement(
    announcement_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(Permit(Resource.Announcement, Action.Delete)),
):
    await announcement_service.delete_announcement(session, announcement_id)
    return MessageResponse(message="Announcement deleted successfully")
