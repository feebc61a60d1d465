# app/services/auth_service.py

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from loguru import logger
import uuid

from app.models.user import User, UserRole, UserStatus
from app.core.config import settings
from app.core.exceptions import Conflict, Forbidden, Unauthenticated, ValidationFailed
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
)
from app.schemas.auth import TokenWithUser
from app.schemas.user import UserRead


# ============================================================================
# FETCH USER BY EMAIL
# ============================================================================
async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


# ============================================================================
# FETCH USER BY ID
# ============================================================================
async def get_user_by_id(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await session.get(User, user_id)


# ============================================================================
# PROFILE RULES PER ROLE
# ============================================================================
def check_profile(
    role: UserRole,
    department: str | None,
    admission_year: int | None,
    student_code: str | None,
    faculty_code: str | None,
) -> None:
    # 1) Students and faculty belong to a department, admins do not
    if role in (UserRole.Student, UserRole.Faculty) and not department:
        raise ValidationFailed(f"{role.value} must be assigned to a department")
    if role == UserRole.Admin and department:
        raise ValidationFailed("admin cannot have a department")

    # 2) Only students have an admission year, and they must
    if role == UserRole.Student:
        if admission_year is None:
            raise ValidationFailed("student must have an admission_year")
        if not student_code:
            raise ValidationFailed("student must have a student_code")
    elif admission_year is not None:
        raise ValidationFailed(f"{role.value} cannot have an admission_year")

    # 3) Faculty carry their staff number
    if role == UserRole.Faculty and not faculty_code:
        raise ValidationFailed("faculty must have a faculty_code")


# ============================================================================
# CREATE USER
# ============================================================================
async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: UserRole,
    department: str | None = None,
    admission_year: int | None = None,
    student_code: str | None = None,
    faculty_code: str | None = None,
    phone: str | None = None,
) -> User:

    check_profile(role, department, admission_year, student_code, faculty_code)

    if await get_user_by_email(session, email):
        raise Conflict("User already exists")

    user = User(
        id=uuid.uuid4(),
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        department=department,
        admission_year=admission_year,
        student_code=student_code,
        faculty_code=faculty_code,
        phone=phone,
        status=UserStatus.Active,
    )

    session.add(user)

    try:
        await session.commit()
        await session.refresh(user)
    except IntegrityError:
        # Email or student_code taken by a concurrent request
        await session.rollback()
        raise Conflict("User with this email or student code already exists")

    logger.info(f"Created {role.value} user {user.email}")
    return user


# ============================================================================
# AUTHENTICATE
# ============================================================================
async def authenticate_user(session: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(session, email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


async def login(session: AsyncSession, email: str, password: str) -> TokenWithUser:
    user = await authenticate_user(session, email, password)
    if not user:
        raise Unauthenticated("Invalid credentials")

    if user.status != UserStatus.Active:
        logger.warning(f"Login refused for inactive account {email}")
        raise Forbidden("Account is inactive. Please contact admin.")

    return create_login_response(user)


# ============================================================================
# CREATE LOGIN RESPONSE
# ============================================================================
def create_login_response(user: User) -> TokenWithUser:
    token = create_access_token(
        subject=str(user.id),
        data={
            "role": user.role.value,
            "department": user.department,
        },
    )

    return TokenWithUser(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead.model_validate(user),
    )


# ============================================================================
# CHANGE PASSWORD
# ============================================================================
async def change_password(session: AsyncSession, user: User, old_password: str, new_password: str) -> None:
    if not verify_password(old_password, user.password_hash):
        raise ValidationFailed("Old password incorrect")

    if old_password == new_password:
        raise ValidationFailed("New password must be different")

    user.password_hash = hash_password(new_password)
    session.add(user)
    await session.commit()
