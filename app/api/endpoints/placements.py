# app/api/endpoints/placements.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.identity import Principal
from app.core.rbac import Permit
from app.core.visibility import Action, Resource
from app.schemas.common import MessageResponse, normalize_code
from app.schemas.placement import PlacementCreate, PlacementRead, PlacementSummary, PlacementUpdate
from app.services import placement_service

router = APIRouter(prefix="/api/placements", tags=["Placements"])


# -------------------------------------------------------------------
# CREATE (admin)
# -------------------------------------------------------------------
@router.post("", response_model=PlacementRead, status_code=status.HTTP_201_CREATED)
async def create_placement(
    data: PlacementCreate,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Placement, Action.Create)),
):
    return await placement_service.create_placement(session, principal, data)


# -------------------------------------------------------------------
# READS
# -------------------------------------------------------------------
@router.get("", response_model=List[PlacementRead])
async def list_placements(
    department: Optional[str] = Query(None),
    batch_year: Optional[int] = Query(None),
    company: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Placement, Action.ReadAll)),
):
    return await placement_service.list_placements(
        session, principal, normalize_code(department), batch_year, company
    )


@router.get("/summary", response_model=PlacementSummary)
async def placement_summary(
    department: Optional[str] = Query(None),
    batch_year: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Placement, Action.ReadAll)),
):
    return await placement_service.get_summary(session, principal, normalize_code(department), batch_year)


@router.get("/student", response_model=List[PlacementRead])
async def my_placements(
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.Placement, Action.ReadOwn)),
):
    return await placement_service.list_student_placements(session, principal)


# -------------------------------------------------------------------
# UPDATE / DELETE (admin)
# -------------------------------------------------------------------
@router.put("/{placement_id}", response_model=PlacementRead)
async def update_placement(
    placement_id: UUID,
    data: PlacementUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(Permit(Resource.Placement, Action.Update)),
):
    return await placement_service.update_placement(session, placement_id, data)


@router.delete("/{placement_id}", response_model=MessageResponse)
async def delete_placement(
    placement_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(Permit(Resource.Placement, Action.Delete)),
):
    await placement_service.delete_placement(session, placement_id)
    return MessageResponse(message="Placement deleted successfully")
