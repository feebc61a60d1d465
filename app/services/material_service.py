# app/services/material_service.py

from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.identity import Principal
from app.core.visibility import ensure_course_readable, ensure_owner
from app.models.course import Course, CourseMaterial
from app.schemas.course import MaterialCreate
from app.services.enrollment_service import is_enrolled


async def upload_material(session: AsyncSession, principal: Principal, data: MaterialCreate) -> CourseMaterial:
    course = await session.get(Course, data.course_id)
    ensure_owner(course, principal, "Course", verb="upload materials to")

    material = CourseMaterial(
        course_id=course.id,
        title=data.title,
        description=data.description,
        type=data.type,
        file_url=data.file_url,
        uploaded_by=principal.id,
    )
    session.add(material)
    await session.commit()
    await session.refresh(material)

    logger.info(f"Material '{material.title}' added to course {course.id}")
    return material


async def list_materials(session: AsyncSession, principal: Principal, course_id: UUID) -> list[CourseMaterial]:
    course = await session.get(Course, course_id)
    enrolled = principal.is_student and await is_enrolled(session, course_id, principal.id)
    ensure_course_readable(principal, course, enrolled)

    result = await session.execute(
        select(CourseMaterial)
        .where(CourseMaterial.course_id == course_id)
        .order_by(CourseMaterial.uploaded_at.desc())
    )
    return list(result.scalars().all())


async def delete_material(session: AsyncSession, principal: Principal, material_id: UUID) -> None:
    material = await session.get(CourseMaterial, material_id)
    ensure_owner(material, principal, "Material", owner_field="uploaded_by", verb="delete")

    await session.delete(material)
    await session.commit()
    logger.info(f"Material {material_id} deleted by {principal.id}")
