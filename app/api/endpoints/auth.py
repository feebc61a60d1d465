# app/api/endpoints/auth.py

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

# Schemas
from app.schemas.auth import LoginRequest, TokenWithUser
from app.schemas.user import UserCreate, UserRead

# Services
from app.services.auth_service import create_user, login as login_user

# Deps
from app.api.deps import get_db_session
from app.core.config import settings
from app.core.identity import Principal
from app.core.rate_limiter import limiter
from app.core.rbac import require_admin

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# -------------------------------------------------------------------
# LOGIN (any role)
# -------------------------------------------------------------------
@router.post("/login", response_model=TokenWithUser)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
):
    return await login_user(session, payload.email, payload.password)


# -------------------------------------------------------------------
# REGISTER (admin creates accounts)
# -------------------------------------------------------------------
@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserCreate,
    session: AsyncSession = Depends(get_db_session),
    _: Principal = Depends(require_admin),
):
    return await create_user(session, **data.model_dump())
