# app/services/placement_service.py

from typing import Iterable, Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.exceptions import NotFound, ValidationFailed
from app.core.identity import Principal
from app.core.visibility import ensure_exists, placement_filter
from app.models.placement import Placement
from app.models.user import User, UserRole
from app.schemas.placement import PlacementCreate, PlacementSummary, PlacementUpdate


# ------------------------------------------------------------
# CREATE (admin) with identity check against the student profile
# ------------------------------------------------------------
def check_identity(student: User, data: PlacementCreate) -> None:
    mismatched = [
        field
        for field, expected, given in (
            ("name", student.name, data.name),
            ("email", student.email.lower(), str(data.email).lower()),
            ("department", student.department, data.department),
            ("batch_year", student.admission_year, data.batch_year),
        )
        if expected != given
    ]
    if mismatched:
        raise ValidationFailed(
            "Student data mismatch. Please verify details: " + ", ".join(mismatched)
        )


async def create_placement(session: AsyncSession, principal: Principal, data: PlacementCreate) -> Placement:
    result = await session.execute(
        select(User).where(
            (User.student_code == data.student_code) & (User.role == UserRole.Student)
        )
    )
    student = result.scalar_one_or_none()
    if not student:
        raise NotFound("Student not found")

    check_identity(student, data)

    placement = Placement(
        **data.model_dump(),
        created_by=principal.id,
        created_by_role=principal.role,
    )
    placement.email = student.email
    session.add(placement)
    await session.commit()
    await session.refresh(placement)

    logger.info(f"Placement recorded for {placement.student_code} at {placement.company}")
    return placement


# ------------------------------------------------------------
# READS
# ------------------------------------------------------------
async def list_placements(
    session: AsyncSession,
    principal: Principal,
    department: Optional[str] = None,
    batch_year: Optional[int] = None,
    company: Optional[str] = None,
) -> list[Placement]:
    result = await session.execute(
        select(Placement)
        .where(*placement_filter(principal, department, batch_year, company))
        .order_by(Placement.drive_date.desc(), Placement.created_at.desc())
    )
    return list(result.scalars().all())


async def list_student_placements(session: AsyncSession, principal: Principal) -> list[Placement]:
    return await list_placements(session, principal)


# ------------------------------------------------------------
# UPDATE / DELETE (admin)
# ------------------------------------------------------------
async def update_placement(session: AsyncSession, placement_id: UUID, data: PlacementUpdate) -> Placement:
    placement = ensure_exists(await session.get(Placement, placement_id), "Placement")

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(placement, field, value)

    session.add(placement)
    await session.commit()
    await session.refresh(placement)

    logger.info(f"Placement {placement_id} updated: {sorted(changes)}")
    return placement


async def delete_placement(session: AsyncSession, placement_id: UUID) -> None:
    placement = ensure_exists(await session.get(Placement, placement_id), "Placement")
    await session.delete(placement)
    await session.commit()
    logger.info(f"Placement {placement_id} deleted")


# ------------------------------------------------------------
# SUMMARY
# ------------------------------------------------------------
def best_offers(placements: Iterable[Placement]) -> dict[str, Placement]:
    """Highest-package offer per student; earlier records win ties."""
    best: dict[str, Placement] = {}
    for placement in placements:
        current = best.get(placement.student_code)
        if current is None or placement.package > current.package:
            best[placement.student_code] = placement
    return best


def placement_summary(placements: Iterable[Placement]) -> PlacementSummary:
    placements = list(placements)
    offers = best_offers(placements).values()

    packages = [p.package for p in offers]
    average = round(sum(packages) / len(packages), 2) if packages else 0.0
    companies = sorted({p.company for p in placements})

    return PlacementSummary(
        total_placements=len(packages),
        average_package=average,
        companies_visited=len(companies),
        companies=companies,
    )


async def get_summary(
    session: AsyncSession,
    principal: Principal,
    department: Optional[str] = None,
    batch_year: Optional[int] = None,
) -> PlacementSummary:
    placements = await list_placements(session, principal, department, batch_year)
    return placement_summary(placements)
