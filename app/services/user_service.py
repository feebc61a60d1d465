# app/services/user_service.py

from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.exceptions import Conflict, NotFound
from app.core.identity import Principal
from app.core.visibility import UserView, ensure_exists, taught_students_filter, user_view
from app.models.assignment import Submission
from app.models.course import CourseEnrollment
from app.models.user import User, UserRole, UserStatus
from app.schemas.user import UserUpdate
from app.services.auth_service import check_profile, get_user_by_email


# ------------------------------------------------------------
# LIST USERS (admin)
# ------------------------------------------------------------
async def list_users(
    session: AsyncSession,
    role: Optional[UserRole] = None,
    department: Optional[str] = None,
    status: Optional[UserStatus] = None,
) -> list[User]:
    query = select(User).order_by(User.created_at.desc())
    if role:
        query = query.where(User.role == role)
    if department:
        query = query.where(User.department == department)
    if status:
        query = query.where(User.status == status)

    result = await session.execute(query)
    return list(result.scalars().all())


# ------------------------------------------------------------
# READ ONE USER (visibility aware)
# ------------------------------------------------------------
async def teaches(session: AsyncSession, principal: Principal, user_id: UUID) -> bool:
    if not principal.is_faculty:
        return False
    result = await session.execute(
        select(func.count()).select_from(User).where(
            (User.id == user_id) & taught_students_filter(principal)
        )
    )
    return result.scalar_one() > 0


async def get_user_for(session: AsyncSession, principal: Principal, user_id: UUID) -> tuple[User, UserView]:
    target = await session.get(User, user_id)
    ensure_exists(target, "User")
    view = user_view(principal, target, await teaches(session, principal, user_id))
    return target, view


# ------------------------------------------------------------
# UPDATE USER (admin)
# ------------------------------------------------------------
async def update_user(session: AsyncSession, user_id: UUID, data: UserUpdate) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    changes = data.model_dump(exclude_unset=True)

    new_email = changes.get("email")
    if new_email and new_email != user.email:
        if await get_user_by_email(session, new_email):
            raise Conflict("Email already in use")

    # Validate the merged profile before touching the row
    merged = {
        field: changes.get(field, getattr(user, field))
        for field in ("role", "department", "admission_year", "student_code", "faculty_code")
    }
    check_profile(**merged)

    for field, value in changes.items():
        setattr(user, field, value)

    try:
        await session.commit()
        await session.refresh(user)
    except IntegrityError:
        await session.rollback()
        raise Conflict("Failed to update user: email or student code already in use")

    # Course rosters pick up department / year changes on their next sync
    logger.info(f"Updated user {user.id}: {sorted(changes)}")
    return user


# ------------------------------------------------------------
# TOGGLE STATUS (admin)
# ------------------------------------------------------------
async def toggle_user_status(session: AsyncSession, user_id: UUID) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    user.status = UserStatus.Inactive if user.status == UserStatus.Active else UserStatus.Active
    session.add(user)
    await session.commit()
    await session.refresh(user)

    logger.info(f"User {user.id} is now {user.status.value}")
    return user


# ------------------------------------------------------------
# DELETE USER (admin)
# ------------------------------------------------------------
async def delete_user(session: AsyncSession, user_id: UUID) -> None:
    user = await session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    # A student's own traces go with them; authored courses / posts block deletion
    await session.execute(delete(CourseEnrollment).where(CourseEnrollment.user_id == user_id))
    await session.execute(delete(Submission).where(Submission.student_id == user_id))
    await session.delete(user)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise Conflict("User owns records and cannot be deleted; deactivate the account instead")

    logger.info(f"Deleted user {user_id}")
