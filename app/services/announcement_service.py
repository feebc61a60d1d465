# app/services/announcement_service.py

from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.exceptions import Forbidden
from app.core.feed import build_feed_query, can_read_announcement
from app.core.identity import Principal
from app.core.visibility import ensure_exists
from app.models.announcement import Announcement
from app.schemas.announcement import AnnouncementCreate


async def create_announcement(
    session: AsyncSession,
    principal: Principal,
    data: AnnouncementCreate,
) -> Announcement:
    announcement = Announcement(
        title=data.title,
        description=data.description,
        type=data.type,
        date=data.date,
        time=data.time,
        location=data.location,
        attachment_url=data.attachment_url,
        audience=data.tags.audience,
        department=data.tags.department,
        year=data.tags.year,
        created_by=principal.id,
        created_by_role=principal.role,
    )
    session.add(announcement)
    await session.commit()
    await session.refresh(announcement)

    logger.info(
        f"Announcement '{announcement.title}' posted by {principal.role.value} {principal.id} "
        f"for {announcement.audience.value} dept={announcement.department} year={announcement.year}"
    )
    return announcement


async def list_all(session: AsyncSession) -> list[Announcement]:
    result = await session.execute(select(Announcement).order_by(Announcement.created_at.desc()))
    return list(result.scalars().all())


async def list_feed(
    session: AsyncSession,
    principal: Principal,
    current_year: Optional[int] = None,
) -> list[Announcement]:
    result = await session.execute(build_feed_query(principal, current_year))
    return list(result.scalars().all())


async def list_mine(session: AsyncSession, principal: Principal) -> list[Announcement]:
    result = await session.execute(
        select(Announcement)
        .where(Announcement.created_by == principal.id)
        .order_by(Announcement.created_at.desc())
    )
    return list(result.scalars().all())


async def get_announcement(
    session: AsyncSession,
    principal: Principal,
    announcement_id: UUID,
    current_year: Optional[int] = None,
) -> Announcement:
    announcement = ensure_exists(await session.get(Announcement, announcement_id), "Announcement")
    if not can_read_announcement(principal, announcement, current_year):
        raise Forbidden("This announcement is not addressed to you")
    return announcement


async def delete_announcement(session: AsyncSession, announcement_id: UUID) -> None:
    announcement = ensure_exists(await session.get(Announcement, announcement_id), "Announcement")
    await session.delete(announcement)
    await session.commit()
    logger.info(f"Announcement {announcement_id} deleted")
