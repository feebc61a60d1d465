# app/core/identity.py

from typing import Iterable, Optional
from uuid import UUID

import jwt
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import Forbidden, Unauthenticated
from app.core.security import decode_token
from app.models.user import User, UserRole, UserStatus


class Principal(BaseModel):
    """
    The authenticated actor of a request. Rebuilt on every request from the
    token subject and the current user row; never stored.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    role: UserRole
    department: Optional[str] = None
    admission_year: Optional[int] = None

    # Used to match self-owned placement records
    email: Optional[str] = None
    student_code: Optional[str] = None

    @model_validator(mode="after")
    def check_role_attributes(self):
        needs_department = self.role in (UserRole.Student, UserRole.Faculty)
        if needs_department and not self.department:
            raise ValueError(f"{self.role.value} principal requires a department")
        if not needs_department and self.department:
            raise ValueError("admin principal cannot carry a department")

        if self.role == UserRole.Student and self.admission_year is None:
            raise ValueError("student principal requires an admission year")
        if self.role != UserRole.Student and self.admission_year is not None:
            raise ValueError(f"{self.role.value} principal cannot carry an admission year")
        return self

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.Admin

    @property
    def is_faculty(self) -> bool:
        return self.role == UserRole.Faculty

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.Student


def principal_from_user(user: User) -> Principal:
    is_student = user.role == UserRole.Student
    return Principal(
        id=user.id,
        role=user.role,
        department=user.department if user.role != UserRole.Admin else None,
        admission_year=user.admission_year if is_student else None,
        email=user.email,
        student_code=user.student_code if is_student else None,
    )


async def resolve_principal(session: AsyncSession, token: Optional[str]) -> Principal:
    if not token:
        raise Unauthenticated("Not authenticated")

    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token has expired")
    except jwt.InvalidTokenError:
        raise Unauthenticated("Could not validate credentials")

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise Unauthenticated("Invalid token payload")

    user = await session.get(User, user_id)
    if not user:
        raise Unauthenticated("User not found")

    if user.status != UserStatus.Active:
        raise Unauthenticated("Account is inactive")

    try:
        return principal_from_user(user)
    except ValidationError:
        raise Unauthenticated("Account profile is incomplete")


def authorize(principal: Principal, allowed_roles: Iterable[UserRole]) -> Principal:
    if principal.role not in set(allowed_roles):
        raise Forbidden(f"Access denied for role '{principal.role.value}'")
    return principal
