# app/api/endpoints/materials.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.identity import Principal
from app.core.rbac import Permit
from app.core.visibility import Action, Resource
from app.schemas.common import MessageResponse
from app.schemas.course import MaterialCreate, MaterialRead
from app.services import material_service

router = APIRouter(prefix="/api/materials", tags=["Course Materials"])


@router.post("", response_model=MaterialRead, status_code=status.HTTP_201_CREATED)
async def upload_material(
    data: MaterialCreate,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Material, Action.Create)),
):
    return await material_service.upload_material(session, principal, data)


@router.get("/course/{course_id}", response_model=List[MaterialRead])
async def course_materials(
    course_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Material, Action.Read)),
):
    return await material_service.list_materials(session, principal, course_id)


@router.delete("/{material_id}", response_model=MessageResponse)
async def delete_material(
    material_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Material, Action.Delete)),
):
    await material_service.delete_material(session, principal, material_id)
    return MessageResponse(message="Material deleted successfully")
