# app/core/feed.py

"""
Announcement feed targeting.

A feed is the OR of independent branches. Each branch pins the audience and
says, for department and year, whether the tag must equal a value, must be
absent, or is not constrained at all. The same branch list is rendered to
SQL for the feed query and evaluated in Python for single-record checks.

Students get four branches rather than ``(dept = D OR dept absent) AND
(year = Y OR year absent)`` written out once per tag; each branch is a full
conjunction and an unscoped announcement (no department, no year) reaches
every student.
"""

from typing import NamedTuple, Optional, Union

from sqlalchemy import and_, or_, select
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement

from app.core.academic import academic_year
from app.core.identity import Principal
from app.models.announcement import Announcement
from app.models.enums import Audience
from app.models.user import UserRole


class _Marker:
    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return self.name


ABSENT = _Marker("ABSENT")   # tag must be missing (NULL)
ANY = _Marker("ANY")         # tag is not looked at

TagRule = Union[_Marker, str, int]


class Branch(NamedTuple):
    audience: Audience
    department: TagRule = ANY
    year: TagRule = ANY


def _tag_clause(column, rule: TagRule) -> Optional[ColumnElement[bool]]:
    if rule is ANY:
        return None
    if rule is ABSENT:
        return column.is_(None)
    return column == rule


def _tag_matches(value, rule: TagRule) -> bool:
    if rule is ANY:
        return True
    if rule is ABSENT:
        return value is None
    return value == rule


def feed_branches(principal: Principal, current_year: Optional[int] = None) -> list[Branch]:
    branches = [Branch(Audience.All)]

    if principal.role == UserRole.Student:
        department = principal.department
        year = None
        if principal.admission_year is not None:
            year = academic_year(principal.admission_year, current_year)

        branches.append(Branch(Audience.Students, ABSENT, ABSENT))
        if department:
            branches.append(Branch(Audience.Students, department, ABSENT))
        if year is not None:
            branches.append(Branch(Audience.Students, ABSENT, year))
        if department and year is not None:
            branches.append(Branch(Audience.Students, department, year))

    elif principal.role == UserRole.Faculty:
        branches.append(Branch(Audience.Faculty, ABSENT))
        if principal.department:
            branches.append(Branch(Audience.Faculty, principal.department))

    elif principal.role == UserRole.Admin:
        branches.append(Branch(Audience.Admin))

    return branches


def branch_clause(branch: Branch) -> ColumnElement[bool]:
    clauses = [Announcement.audience == branch.audience]
    for column, rule in (
        (Announcement.department, branch.department),
        (Announcement.year, branch.year),
    ):
        clause = _tag_clause(column, rule)
        if clause is not None:
            clauses.append(clause)
    return and_(*clauses)


def branch_matches(branch: Branch, announcement: Announcement) -> bool:
    return (
        announcement.audience == branch.audience
        and _tag_matches(announcement.department, branch.department)
        and _tag_matches(announcement.year, branch.year)
    )


def feed_conditions(principal: Principal, current_year: Optional[int] = None) -> list[ColumnElement[bool]]:
    return [branch_clause(b) for b in feed_branches(principal, current_year)]


def build_feed_query(principal: Principal, current_year: Optional[int] = None) -> Select:
    """Announcements relevant to ``principal``, newest first."""
    return (
        select(Announcement)
        .where(or_(*feed_conditions(principal, current_year)))
        .order_by(Announcement.created_at.desc())
    )


def in_feed(principal: Principal, announcement: Announcement, current_year: Optional[int] = None) -> bool:
    return any(branch_matches(b, announcement) for b in feed_branches(principal, current_year))


def can_read_announcement(
    principal: Principal,
    announcement: Announcement,
    current_year: Optional[int] = None,
) -> bool:
    # Admins read everything; faculty also read what they posted themselves
    if principal.role == UserRole.Admin:
        return True
    if principal.role == UserRole.Faculty and announcement.created_by == principal.id:
        return True
    return in_feed(principal, announcement, current_year)
