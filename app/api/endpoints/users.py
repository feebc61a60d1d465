# app/api/endpoints/users.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.exceptions import ValidationFailed
from app.core.identity import Principal
from app.core.rbac import Permit
from app.core.visibility import Action, Resource, UserView
from app.models.user import UserRole, UserStatus
from app.schemas.common import MessageResponse, normalize_code
from app.schemas.user import UserBasicRead, UserCreate, UserRead, UserStatusResponse, UserUpdate
from app.services.auth_service import create_user
from app.services import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


# -------------------------------------------------------------------
# Create ANY user (Admin only)
# -------------------------------------------------------------------
@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_new_user(
    data: UserCreate,
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(Permit(Resource.User, Action.Create)),
):
    return await create_user(session, **data.model_dump())


# -------------------------------------------------------------------
# List users (Admin only)
# -------------------------------------------------------------------
@router.get("", response_model=List[UserRead])
async def list_users(
    role: Optional[UserRole] = Query(None),
    department: Optional[str] = Query(None),
    user_status: Optional[UserStatus] = Query(None, alias="status"),
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(Permit(Resource.User, Action.ReadAll)),
):
    return await user_service.list_users(session, role, normalize_code(department), user_status)


# -------------------------------------------------------------------
# Get one user (admin, self, or faculty teaching the student)
# -------------------------------------------------------------------
@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.User, Action.Read)),
):
    user, view = await user_service.get_user_for(session, principal, user_id)
    if view == UserView.Basic:
        return UserBasicRead.model_validate(user)
    return UserRead.model_validate(user)


# -------------------------------------------------------------------
# Update user (Admin only)
# -------------------------------------------------------------------
@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(Permit(Resource.User, Action.Update)),
):
    return await user_service.update_user(session, user_id, data)


# -------------------------------------------------------------------
# Activate / deactivate (Admin only)
# -------------------------------------------------------------------
@router.patch("/{user_id}/toggle-status", response_model=UserStatusResponse)
async def toggle_status(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.User, Action.Update)),
):
    if user_id == principal.id:
        raise ValidationFailed("You cannot deactivate your own account")

    user = await user_service.toggle_user_status(session, user_id)
    return UserStatusResponse(message=f"User is now {user.status.value}", status=user.status)


# -------------------------------------------------------------------
# Delete user (Admin only)
# -------------------------------------------------------------------
@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(Permit(Resource.User, Action.Delete)),
):
    if user_id == principal.id:
        raise ValidationFailed("You cannot delete your own account")

    await user_service.delete_user(session, user_id)
    return MessageResponse(message="User deleted successfully")
