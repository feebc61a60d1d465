# app/api/endpoints/account.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_principal, get_db_session
from app.core.identity import Principal
from app.core.visibility import ensure_exists
from app.schemas.auth import ChangePasswordRequest
from app.schemas.user import UserRead
from app.services.auth_service import change_password as change_user_password, get_user_by_id

router = APIRouter(prefix="/api/account", tags=["Account"])


@router.get("/me", response_model=UserRead)
async def me(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
):
    return ensure_exists(await get_user_by_id(session, principal.id), "User")


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
):
    user = ensure_exists(await get_user_by_id(session, principal.id), "User")
    await change_user_password(session, user, payload.old_password, payload.new_password)

    return {"detail": "Password changed successfully"}
